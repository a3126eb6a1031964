from typing import Optional

from pydantic import BaseModel, Field


class ModelInfo(BaseModel):
    id: str
    name: str
    provider: str
    input_cost_per_1m: float
    output_cost_per_1m: float
    cached_input_cost_per_1m: Optional[float] = None
    context_window: int

    @property
    def has_cached_pricing(self) -> bool:
        return self.cached_input_cost_per_1m is not None


class ModelsResponse(BaseModel):
    models: list[ModelInfo]


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0


class ChatCompletionResult(BaseModel):
    content: str
    usage: Usage = Field(default_factory=Usage)

from pydantic import BaseModel


class CompressionResult(BaseModel):
    output: str
    output_tokens: int
    original_input_tokens: int
    latency_ms: int = 0

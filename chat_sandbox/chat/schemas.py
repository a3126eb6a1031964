import time
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from chat_sandbox.config import (
    COMPRESSION_AGGRESSIVENESS_DEFAULT,
    COMPRESSION_AGGRESSIVENESS_MAX,
    COMPRESSION_AGGRESSIVENESS_MIN,
    COMPRESSION_FREQUENCY_DEFAULT,
    COMPRESSION_FREQUENCY_MAX,
    COMPRESSION_FREQUENCY_MIN,
    DEFAULT_SYSTEM_PROMPT,
)
from chat_sandbox.llm.schemas import ModelInfo


class RoleEnum(str, Enum):
    system = "system"
    user = "user"
    assistant = "assistant"


class Message(BaseModel):
    role: RoleEnum
    content: str
    is_compressed_history: bool = False

    @model_validator(mode="after")
    def validate_compressed_history_role(self):
        if self.is_compressed_history and self.role != RoleEnum.system:
            raise ValueError("Only a system message can carry the compressed history")
        return self

    def to_api_param(self) -> dict:
        return {"role": self.role.value, "content": self.content}


class DisplayMessage(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    role: RoleEnum
    content: str
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))


def _validate_aggressiveness(v: float) -> float:
    if v < COMPRESSION_AGGRESSIVENESS_MIN or v > COMPRESSION_AGGRESSIVENESS_MAX:
        raise ValueError(
            f"compression_aggressiveness must be between {COMPRESSION_AGGRESSIVENESS_MIN} "
            f"and {COMPRESSION_AGGRESSIVENESS_MAX}"
        )
    # The aggressiveness slider moves in steps of 0.1
    if abs(v * 10 - round(v * 10)) > 1e-9:
        raise ValueError("compression_aggressiveness must be a multiple of 0.1")
    return round(v, 1)


class ChatSettings(BaseModel):
    compression_frequency: int = Field(
        default=COMPRESSION_FREQUENCY_DEFAULT, ge=COMPRESSION_FREQUENCY_MIN, le=COMPRESSION_FREQUENCY_MAX
    )
    compression_aggressiveness: float = COMPRESSION_AGGRESSIVENESS_DEFAULT

    @field_validator("compression_aggressiveness")
    def validate_aggressiveness(cls, v):
        return _validate_aggressiveness(v)


class SettingsPatch(BaseModel):
    compression_frequency: Optional[int] = Field(
        default=None, ge=COMPRESSION_FREQUENCY_MIN, le=COMPRESSION_FREQUENCY_MAX
    )
    compression_aggressiveness: Optional[float] = None

    @field_validator("compression_aggressiveness")
    def validate_aggressiveness(cls, v):
        if v is None:
            return v
        return _validate_aggressiveness(v)


class TokenStats(BaseModel):
    input_tokens: int = 0
    cached_input_tokens: int = 0
    output_tokens: int = 0
    total_compressed_tokens: int = 0
    # Reported as-is: a compaction that expands the text makes this go down
    saved_tokens: int = 0
    cost: Decimal = Decimal("0")


class ContextSeries(BaseModel):
    context_history: list[int] = Field(default_factory=list)
    uncompressed_history: list[int] = Field(default_factory=list)


class CompactionOutcome(BaseModel):
    performed: bool = False
    error: Optional[str] = None
    output_tokens: int = 0
    original_input_tokens: int = 0
    tokens_saved: int = 0
    compression_ratio: float = 0.0
    money_saved: Decimal = Decimal("0")
    latency_ms: int = 0


### --- Request schemas --- ###


class SessionCreateRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: Optional[str] = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    settings: ChatSettings = Field(default_factory=ChatSettings)
    compression_api_key: Optional[str] = None

    @field_validator("system_prompt")
    def validate_system_prompt(cls, v):
        if not v.strip():
            raise ValueError("'system_prompt' must not be empty")
        return v


class MessageRequest(BaseModel):
    content: str


class SystemPromptRequest(BaseModel):
    system_prompt: str
    confirm: bool = False

    @field_validator("system_prompt")
    def validate_system_prompt(cls, v):
        if not v.strip():
            raise ValueError("'system_prompt' must not be empty")
        return v


class VerifyKeyRequest(BaseModel):
    api_key: str


### --- Response schemas --- ###


class SuccessResponse(BaseModel):
    status: str = "success"
    status_message: str = "success"


class StatsResponse(BaseModel):
    stats: TokenStats
    series: ContextSeries
    cache_savings_percent: float
    compression_progress: float
    messages_since_compression: int
    compression_frequency: int


class SessionResponse(SuccessResponse):
    uuid: UUID
    model: ModelInfo
    system_prompt: str
    settings: ChatSettings
    compaction_state: str
    compressed_history: Optional[str]
    messages_since_compression: int
    display_messages: list[DisplayMessage]
    stats: TokenStats
    series: ContextSeries


class TurnResponse(SuccessResponse):
    message: DisplayMessage
    compaction: Optional[CompactionOutcome] = None
    warning: Optional[str] = None
    stats: TokenStats
    messages_since_compression: int


class RawMessagesResponse(SuccessResponse):
    messages: list[Message]


class SimulatedMessageResponse(SuccessResponse):
    content: str


class VerifyKeyResponse(BaseModel):
    valid: bool
    error: Optional[str] = None

from typing import Optional

from pydantic import BaseModel, Field

from chat_sandbox.chat.schemas import DisplayMessage, Message, RoleEnum
from chat_sandbox.config import SEED_GREETING


class ConversationState(BaseModel):
    """
    The conversation as seen by the chat model and by the user.

    `api_messages` holds the user/assistant turns appended since the last compaction; the system prompt
    is kept in `system_prompt` and the summary of everything compacted so far in `compressed_history`.
    `display_messages` is the user-facing transcript and is never rewritten by compaction.
    """

    system_prompt: str
    api_messages: list[Message] = Field(default_factory=list)
    compressed_history: Optional[str] = None
    messages_since_compression: int = 0
    display_messages: list[DisplayMessage] = Field(default_factory=list)

    @classmethod
    def initial(cls, system_prompt: str) -> "ConversationState":
        return cls(
            system_prompt=system_prompt,
            api_messages=[Message(role=RoleEnum.assistant, content=SEED_GREETING)],
            display_messages=[DisplayMessage(id="initial", role=RoleEnum.assistant, content=SEED_GREETING)],
        )

    @property
    def has_compressed_history(self) -> bool:
        return self.compressed_history is not None

    def pending_turns(self) -> list[Message]:
        """User and assistant turns not yet folded into the compressed history."""
        return [m for m in self.api_messages if not m.is_compressed_history and m.role != RoleEnum.system]

    def append_turn(self, message: Message) -> DisplayMessage:
        if message.role == RoleEnum.system:
            raise ValueError("Only user and assistant turns can be appended to the conversation")

        display_message = DisplayMessage(role=message.role, content=message.content)
        self.api_messages.append(message)
        self.display_messages.append(display_message)
        self.messages_since_compression += 1
        return display_message

    def replace_with_summary(self, summary: str):
        """Swap every compacted turn for the new summary in one step."""
        self.compressed_history = summary
        self.messages_since_compression = 0
        self.api_messages = []

from typing import Optional
from uuid import UUID, uuid4

from chat_sandbox.chat.exceptions import ConfirmationRequiredError, EmptyMessageError, SessionBusyError
from chat_sandbox.chat.schemas import (
    ChatSettings,
    Message,
    RawMessagesResponse,
    RoleEnum,
    SessionResponse,
    SettingsPatch,
    StatsResponse,
    TurnResponse,
)
from chat_sandbox.chat.state import ConversationState
from chat_sandbox.compaction.config import COMPRESSION_FAILED_WARNING
from chat_sandbox.compaction.formatter import build_api_payload, build_raw_messages
from chat_sandbox.compaction.service import CompactionController, should_trigger_compaction
from chat_sandbox.compression.client import CompressionClient
from chat_sandbox.llm.client import ChatCompletionClient
from chat_sandbox.llm.schemas import ModelInfo
from chat_sandbox.logs.logs_handler import logger
from chat_sandbox.stats.estimators import estimate_cached_input_tokens
from chat_sandbox.stats.service import StatsAccumulator, cache_savings_percent, compression_progress

DEFAULT_LAST_ASSISTANT_MESSAGE = "Hello! How can I help you today?"


class ChatSession:
    """
    One conversation with a chat model, compacted through the compression provider.

    All state is owned by the session and mutated only by its methods. Turns are processed one at a
    time: the compaction call, when triggered, is awaited before the completion call of the same turn.
    """

    def __init__(
        self,
        model: ModelInfo,
        system_prompt: str,
        settings: Optional[ChatSettings] = None,
        compression_client: Optional[CompressionClient] = None,
        completion_client: Optional[ChatCompletionClient] = None,
        uuid: Optional[UUID] = None,
    ):
        self.uuid = uuid or uuid4()
        self.model = model
        self.settings = settings or ChatSettings()
        self.compression_client = compression_client or CompressionClient()
        self.completion_client = completion_client or ChatCompletionClient()
        self._busy = False
        self.reset(system_prompt)

    def reset(self, system_prompt: str):
        """Start the conversation over: prompt and greeting only, no summary, zeroed stats and series."""
        self.conversation = ConversationState.initial(system_prompt)
        self.stats = StatsAccumulator()
        self.compaction = CompactionController(self.compression_client, self.stats)
        logger.info(f"Session {self.uuid} reset")

    def change_system_prompt(self, system_prompt: str, confirm: bool):
        if not confirm:
            raise ConfirmationRequiredError(
                "Changing the system prompt resets the conversation and its statistics. Confirm to proceed."
            )
        self.reset(system_prompt)

    def update_settings(self, patch: SettingsPatch) -> ChatSettings:
        self.settings = self.settings.model_copy(update=patch.model_dump(exclude_none=True))
        logger.info(
            f"Session {self.uuid} settings: frequency={self.settings.compression_frequency}, "
            f"aggressiveness={self.settings.compression_aggressiveness}"
        )
        return self.settings

    async def send_message(self, content: str) -> TurnResponse:
        """
        Run one turn: append the user message, compact if due, then ask the chat model for a reply.

        A failed compaction only produces a warning. A failed completion propagates, and the user
        message and its turn count stay committed.
        """
        content = content.strip() if content else ""
        if not content:
            raise EmptyMessageError("Message content must not be empty")
        if self._busy:
            raise SessionBusyError(f"Session {self.uuid} is still processing the previous message")

        self._busy = True
        try:
            return await self._run_turn(content)
        finally:
            self._busy = False

    async def _run_turn(self, content: str) -> TurnResponse:
        user_message = Message(role=RoleEnum.user, content=content)
        self.conversation.append_turn(user_message)

        outcome = None
        warning = None
        if should_trigger_compaction(self.conversation, self.settings.compression_frequency):
            outcome = await self.compaction.perform_compaction(
                self.conversation, self.settings.compression_aggressiveness, self.model
            )
            if outcome.error:
                warning = COMPRESSION_FAILED_WARNING

        messages = build_api_payload(self.conversation)
        # A compaction that ran this turn folded the user message into the summary;
        # the model still has to receive it as the last turn
        if messages[-1] != user_message:
            messages.append(user_message)

        response = await self.completion_client.complete(messages, self.model)

        cached_input_tokens = estimate_cached_input_tokens(
            self.conversation.system_prompt, self.conversation.compressed_history, self.stats.completed_turns
        )
        assistant_message = Message(role=RoleEnum.assistant, content=response.content)
        display_message = self.conversation.append_turn(assistant_message)
        self.stats.record_completion(self.model, response.usage, cached_input_tokens, content)

        return TurnResponse(
            message=display_message,
            compaction=outcome,
            warning=warning,
            stats=self.stats.stats,
            messages_since_compression=self.conversation.messages_since_compression,
        )

    async def generate_test_message(self) -> str:
        last_assistant_message = next(
            (m.content for m in reversed(self.conversation.display_messages) if m.role == RoleEnum.assistant),
            DEFAULT_LAST_ASSISTANT_MESSAGE,
        )
        return await self.completion_client.generate_user_message(last_assistant_message, self.model)

    def raw_messages(self) -> RawMessagesResponse:
        return RawMessagesResponse(messages=build_raw_messages(self.conversation))

    def stats_response(self) -> StatsResponse:
        return StatsResponse(
            stats=self.stats.stats,
            series=self.stats.series,
            cache_savings_percent=cache_savings_percent(self.stats.stats, self.model),
            compression_progress=compression_progress(
                self.conversation.messages_since_compression, self.settings.compression_frequency
            ),
            messages_since_compression=self.conversation.messages_since_compression,
            compression_frequency=self.settings.compression_frequency,
        )

    def client_response(self) -> SessionResponse:
        return SessionResponse(
            uuid=self.uuid,
            model=self.model,
            system_prompt=self.conversation.system_prompt,
            settings=self.settings,
            compaction_state=self.compaction.state.value,
            compressed_history=self.conversation.compressed_history,
            messages_since_compression=self.conversation.messages_since_compression,
            display_messages=self.conversation.display_messages,
            stats=self.stats.stats,
            series=self.stats.series,
        )

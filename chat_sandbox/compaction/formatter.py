from chat_sandbox.chat.schemas import Message, RoleEnum
from chat_sandbox.chat.state import ConversationState
from chat_sandbox.compaction.config import COMPRESSED_HISTORY_PREFIX, PROTECT_TAG, ROLE_LABELS


def compressed_history_message(compressed_history: str) -> Message:
    return Message(
        role=RoleEnum.system,
        content=f"{COMPRESSED_HISTORY_PREFIX}{compressed_history}",
        is_compressed_history=True,
    )


def _prefix(state: ConversationState) -> list[Message]:
    messages = [Message(role=RoleEnum.system, content=state.system_prompt)]
    if state.has_compressed_history:
        messages.append(compressed_history_message(state.compressed_history))
    return messages


def build_api_payload(state: ConversationState) -> list[Message]:
    """
    Build the message list sent to the chat model.

    The system prompt always comes first, followed by the compressed history when one exists.
    Before the first compaction every held turn is sent; afterwards only the turns appended
    since the last compaction are.
    """
    messages = _prefix(state)
    recent = state.pending_turns()

    if state.has_compressed_history:
        count = state.messages_since_compression
        recent = recent[len(recent) - count :] if count > 0 else []

    messages.extend(recent)
    return messages


def build_raw_messages(state: ConversationState) -> list[Message]:
    """Every message currently held for the chat model, without selecting the recent tail."""
    return _prefix(state) + state.pending_turns()


def format_turn(message: Message) -> str:
    label = ROLE_LABELS[message.role.value]
    return f"<{PROTECT_TAG}>{label}:</{PROTECT_TAG}> {message.content}"


def build_compaction_text(state: ConversationState, new_messages: list[Message]) -> str:
    """
    Flatten the previous summary and the new turns into the text submitted for compression.

    Turn labels are wrapped in protect tags so the compressor cannot merge or rename them.
    """
    text = ""
    if state.has_compressed_history:
        text += state.compressed_history + "\n\n"

    for message in new_messages:
        if message.is_compressed_history or message.role == RoleEnum.system:
            continue
        text += format_turn(message) + "\n\n"

    return text.rstrip()

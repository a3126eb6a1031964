"""
Rough token estimates used where the providers report no counts.

They stay isolated here so a real tokenizer can replace them without touching the session logic.
"""

from typing import Optional

from chat_sandbox.compaction.config import COMPRESSED_HISTORY_PREFIX

CHARACTERS_PER_TOKEN = 4


def estimate_tokens(text: Optional[str]) -> int:
    """
    Estimate token count using rule of thumb: 4 characters per token, rounded half up.

    Args:
        text: The text to estimate tokens for

    Returns:
        Estimated token count
    """
    if not text:
        return 0
    return (len(text) + CHARACTERS_PER_TOKEN // 2) // CHARACTERS_PER_TOKEN


def estimate_cached_input_tokens(system_prompt: str, compressed_history: Optional[str], completed_turns: int) -> int:
    """
    Estimate the prompt prefix the provider has cached for this request.

    Nothing is cached for the first request of a session. Afterwards the stable prefix, the system
    prompt plus the compressed history message when there is one, is assumed to be cached.
    """
    if completed_turns == 0:
        return 0

    cached = estimate_tokens(system_prompt)
    if compressed_history is not None:
        cached += estimate_tokens(COMPRESSED_HISTORY_PREFIX + compressed_history)
    return cached


def estimate_uncompressed_growth(previous_completion_tokens: int, user_message: str) -> int:
    """Context a turn would have added without compaction: the previous reply plus the new user message."""
    return previous_completion_tokens + estimate_tokens(user_message)

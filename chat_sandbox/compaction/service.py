"""Compaction controller: folds the turns of a conversation into a rolling compressed summary"""

import logging
from enum import Enum
from typing import Optional

from chat_sandbox.chat.schemas import CompactionOutcome
from chat_sandbox.chat.state import ConversationState
from chat_sandbox.compaction.formatter import build_compaction_text
from chat_sandbox.compression.client import CompressionClient
from chat_sandbox.compression.exceptions import CompressionError
from chat_sandbox.llm.schemas import ModelInfo
from chat_sandbox.stats.service import StatsAccumulator, compaction_outcome

logger = logging.getLogger(__name__)


class CompactionState(str, Enum):
    IDLE = "idle"
    COMPACTING = "compacting"


def should_trigger_compaction(state: ConversationState, compression_frequency: int) -> bool:
    """
    Determine if compaction should be triggered based on the turns appended since the last one.

    Args:
        state: The conversation to check
        compression_frequency: Number of appended turns that triggers compaction

    Returns:
        True if compaction should be triggered, False otherwise
    """
    should_compact = state.messages_since_compression >= compression_frequency
    if should_compact:
        logger.info(
            f"{state.messages_since_compression} turns since last compaction, "
            f"triggering compaction (frequency: {compression_frequency})"
        )
    return should_compact


class CompactionController:
    def __init__(self, compression_client: CompressionClient, stats: StatsAccumulator):
        self.compression_client = compression_client
        self.stats = stats
        self.state = CompactionState.IDLE

    async def perform_compaction(
        self, conversation: ConversationState, aggressiveness: float, model: Optional[ModelInfo] = None
    ) -> CompactionOutcome:
        """
        Compress every pending turn, together with the previous summary, into a new summary.

        On success the conversation keeps only the new summary and the turn counter restarts at 0.
        On failure the conversation is left exactly as it was and the outcome carries the error.

        Args:
            conversation: The conversation to compact
            aggressiveness: Compression aggressiveness passed to the provider
            model: Chat model, used to price the tokens saved

        Returns:
            CompactionOutcome describing what happened
        """
        pending = conversation.pending_turns()
        if not pending:
            logger.debug("Nothing to compact")
            return CompactionOutcome(performed=False)

        if self.state == CompactionState.COMPACTING:
            logger.warning("A compaction is already in flight, skipping")
            return CompactionOutcome(performed=False)

        text = build_compaction_text(conversation, pending)

        self.state = CompactionState.COMPACTING
        try:
            result = await self.compression_client.compress(text, aggressiveness)
        except CompressionError as e:
            logger.exception(f"Compaction of {len(pending)} turns failed: {e}")
            return CompactionOutcome(performed=False, error=str(e))
        finally:
            self.state = CompactionState.IDLE

        conversation.replace_with_summary(result.output)
        self.stats.record_compaction(result)

        outcome = compaction_outcome(result, model)
        logger.info(
            f"Compacted {len(pending)} turns: {result.original_input_tokens} -> {result.output_tokens} tokens "
            f"({outcome.compression_ratio:.1f}% reduction) in {result.latency_ms}ms"
        )
        return outcome

import logging
from decimal import Decimal
from typing import Optional

from chat_sandbox.chat.schemas import CompactionOutcome, ContextSeries, TokenStats
from chat_sandbox.compression.schemas import CompressionResult
from chat_sandbox.llm.cost import calculate_cost
from chat_sandbox.llm.schemas import ModelInfo, Usage
from chat_sandbox.stats.estimators import estimate_uncompressed_growth

logger = logging.getLogger(__name__)


class StatsAccumulator:
    """
    Running token and cost totals of one session, plus the context size time series.

    `uncompressed_history` is a counterfactual of how big the context would be with no compaction
    at all, so it keeps growing across compactions.
    """

    def __init__(self):
        self.stats = TokenStats()
        self.series = ContextSeries()
        self.completed_turns = 0
        self._last_completion_tokens = 0

    def record_completion(
        self, model: ModelInfo, usage: Usage, cached_input_tokens: int, user_message: str
    ) -> TokenStats:
        turn_cost = calculate_cost(model, usage.prompt_tokens, usage.completion_tokens, cached_input_tokens)

        self.stats = self.stats.model_copy(
            update={
                "input_tokens": self.stats.input_tokens + usage.prompt_tokens,
                "cached_input_tokens": self.stats.cached_input_tokens + cached_input_tokens,
                "output_tokens": self.stats.output_tokens + usage.completion_tokens,
                "cost": self.stats.cost + turn_cost,
            }
        )

        self.series.context_history.append(usage.prompt_tokens)
        if not self.series.uncompressed_history:
            uncompressed = usage.prompt_tokens
        else:
            growth = estimate_uncompressed_growth(self._last_completion_tokens, user_message)
            uncompressed = self.series.uncompressed_history[-1] + growth
        self.series.uncompressed_history.append(uncompressed)

        self._last_completion_tokens = usage.completion_tokens
        self.completed_turns += 1

        logger.debug(
            f"Turn {self.completed_turns}: {usage.prompt_tokens} prompt tokens, "
            f"{usage.completion_tokens} completion tokens, cost {turn_cost}"
        )
        return self.stats

    def record_compaction(self, result: CompressionResult) -> TokenStats:
        tokens_saved = result.original_input_tokens - result.output_tokens
        self.stats = self.stats.model_copy(
            update={
                "total_compressed_tokens": self.stats.total_compressed_tokens + result.output_tokens,
                "saved_tokens": self.stats.saved_tokens + tokens_saved,
            }
        )
        return self.stats


def compaction_outcome(result: CompressionResult, model: Optional[ModelInfo]) -> CompactionOutcome:
    """Summarise a successful compaction: tokens saved, compression ratio and money saved at the input price."""
    tokens_saved = result.original_input_tokens - result.output_tokens
    compression_ratio = 0.0
    if result.original_input_tokens > 0:
        compression_ratio = (1 - result.output_tokens / result.original_input_tokens) * 100

    money_saved = Decimal("0")
    if model:
        money_saved = calculate_cost(model, input_tokens=tokens_saved, output_tokens=0)

    return CompactionOutcome(
        performed=True,
        output_tokens=result.output_tokens,
        original_input_tokens=result.original_input_tokens,
        tokens_saved=tokens_saved,
        compression_ratio=compression_ratio,
        money_saved=money_saved,
        latency_ms=result.latency_ms,
    )


def cache_savings_percent(stats: TokenStats, model: ModelInfo) -> float:
    if not model.has_cached_pricing or stats.cached_input_tokens <= 0 or stats.input_tokens <= 0:
        return 0.0
    if model.input_cost_per_1m <= 0:
        return 0.0
    discount = 1 - model.cached_input_cost_per_1m / model.input_cost_per_1m
    return stats.cached_input_tokens / stats.input_tokens * discount * 100


def compression_progress(messages_since_compression: int, compression_frequency: int) -> float:
    return min(messages_since_compression / compression_frequency, 1.0) * 100

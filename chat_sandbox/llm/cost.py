from decimal import Decimal

from chat_sandbox.llm.schemas import ModelInfo

TOKENS_PER_PRICE_UNIT = 1_000_000


def _price(cost_per_1m: float, tokens: int) -> Decimal:
    return Decimal(str(cost_per_1m)) * tokens / TOKENS_PER_PRICE_UNIT


def calculate_cost(model: ModelInfo, input_tokens: int, output_tokens: int, cached_input_tokens: int = 0) -> Decimal:
    """
    Monetary cost of one request.

    Cached input tokens are a subset of the input tokens and are billed at the model's cached price
    when it has one, otherwise at the regular input price.
    """
    cached_input_tokens = max(0, min(cached_input_tokens, input_tokens))
    uncached_input_tokens = input_tokens - cached_input_tokens

    cached_cost_per_1m = model.cached_input_cost_per_1m
    if cached_cost_per_1m is None:
        cached_cost_per_1m = model.input_cost_per_1m

    return (
        _price(model.input_cost_per_1m, uncached_input_tokens)
        + _price(cached_cost_per_1m, cached_input_tokens)
        + _price(model.output_cost_per_1m, output_tokens)
    )

from decimal import Decimal

import pytest

from chat_sandbox.llm.cost import calculate_cost

pytestmark = [pytest.mark.unit]


def test_calculate_cost_per_million_tokens(model):
    # 1M input at $1 + 500k output at $2
    assert calculate_cost(model, 1_000_000, 500_000) == Decimal("2")


def test_calculate_cost_zero_tokens(model):
    assert calculate_cost(model, 0, 0) == 0


@pytest.mark.parametrize("input_tokens, output_tokens", [(123, 456), (1, 0), (0, 1), (98765, 4321)])
def test_cost_is_additive(model, input_tokens, output_tokens):
    combined = calculate_cost(model, input_tokens, output_tokens)
    assert combined == calculate_cost(model, input_tokens, 0) + calculate_cost(model, 0, output_tokens)


def test_cached_tokens_use_cached_price(cached_model):
    # 600k uncached at $1, 400k cached at $0.25
    cost = calculate_cost(cached_model, input_tokens=1_000_000, output_tokens=0, cached_input_tokens=400_000)
    assert cost == Decimal("0.7")


def test_cached_tokens_without_cached_price_cost_the_same(model):
    assert calculate_cost(model, 1_000, 10, cached_input_tokens=600) == calculate_cost(model, 1_000, 10)


def test_cached_tokens_are_clamped_to_input_tokens(cached_model):
    assert calculate_cost(cached_model, 100, 0, cached_input_tokens=500) == calculate_cost(
        cached_model, 100, 0, cached_input_tokens=100
    )


def test_catalog_prices():
    from chat_sandbox.llm.catalog import get_model

    nemo = get_model("mistralai/mistral-nemo")
    assert calculate_cost(nemo, 1_000_000, 1_000_000) == Decimal("0.06")

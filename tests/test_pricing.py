"""Tests for the pricing module."""

import pytest

from chronicles.data import APICallUsage, Usage
from chronicles.pricing import (
    FALLBACK_PRICES,
    ModelPricing,
    PriceCache,
    estimate_usage_cost,
    get_model_pricing,
    model_prefix,
    parse_price,
    parse_pricing_table,
)

SAMPLE_TABLE = """\
## Model pricing

Some introductory text.

| Model | Base Input Tokens | 5m Cache Writes | 1h Cache Writes | Cache Hits & Refreshes | Output Tokens |
|-------|-------------------|-----------------|-----------------|----------------------|---------------|
| Claude Haiku 4.5 | $1 / MTok | $1.25 / MTok | $2 / MTok | $0.10 / MTok | $5 / MTok |
| Claude Sonnet 4.5 | $3 / MTok | $3.75 / MTok | $6 / MTok | $0.30 / MTok | $15 / MTok |
| Claude Sonnet 3.7 ([deprecated](/docs/deprecations)) | $3 / MTok | $3.75 / MTok | $6 / MTok | $0.30 / MTok | $15 / MTok |

## Third-party platform pricing

| Model | Price |
|-------|-------|
| Something | $99 |
"""


@pytest.fixture
def sample_prices() -> dict[str, ModelPricing]:
    return {
        "claude-haiku-4-5": ModelPricing(1.0, 5.0, 1.25, 0.10),
        "claude-sonnet-4-5": ModelPricing(3.0, 15.0, 3.75, 0.30),
        "claude-sonnet-4": ModelPricing(2.0, 10.0, 2.5, 0.20),
    }


def test_model_prefix() -> None:
    assert model_prefix("Claude Haiku 4.5") == "claude-haiku-4-5"
    assert model_prefix("Claude Sonnet 3.7 ([deprecated](/docs/x))") == "claude-sonnet-3-7"


def test_parse_price() -> None:
    assert parse_price("$3.75 / MTok") == 3.75
    assert parse_price("$15 / MTok") == 15.0
    assert parse_price("N/A") == 0.0


def test_parse_pricing_table() -> None:
    prices = parse_pricing_table(SAMPLE_TABLE)

    assert set(prices) == {"claude-haiku-4-5", "claude-sonnet-4-5", "claude-sonnet-3-7"}
    haiku = prices["claude-haiku-4-5"]
    assert haiku.input_per_mtok == 1.0
    assert haiku.output_per_mtok == 5.0
    assert haiku.cache_write_per_mtok == 1.25
    assert haiku.cache_read_per_mtok == 0.10


def test_parse_pricing_table_without_section() -> None:
    assert parse_pricing_table("# Nothing here") == {}


def test_get_model_pricing_prefers_longest_prefix(sample_prices: dict[str, ModelPricing]) -> None:
    assert get_model_pricing("claude-sonnet-4-5-20250929", sample_prices).input_per_mtok == 3.0
    assert get_model_pricing("claude-sonnet-4-20250514", sample_prices).input_per_mtok == 2.0


def test_get_model_pricing_unknown_uses_haiku(sample_prices: dict[str, ModelPricing]) -> None:
    assert get_model_pricing("gpt-whatever", sample_prices) == FALLBACK_PRICES["claude-haiku-4-5"]


def test_call_cost_includes_web_searches(sample_prices: dict[str, ModelPricing]) -> None:
    call = APICallUsage(
        model="claude-haiku-4-5-20251001",
        input_tokens=1_000_000,
        output_tokens=100_000,
        cache_creation_input_tokens=1_000_000,
        cache_read_input_tokens=1_000_000,
        web_searches=3,
    )
    # $1 + $0.50 + $1.25 + $0.10 + 3 * $0.01
    assert sample_prices["claude-haiku-4-5"].cost(call) == pytest.approx(2.88)


def test_estimate_usage_cost_mixed(sample_prices: dict[str, ModelPricing]) -> None:
    usage = Usage(
        api_calls=[
            APICallUsage(model="claude-haiku-4-5-20251001", input_tokens=1_000_000),
            APICallUsage(model="claude-sonnet-4-5-20250929", input_tokens=1_000_000),
        ]
    )
    assert estimate_usage_cost(usage, sample_prices) == pytest.approx(4.0)


def test_price_cache_get_sync_raises_without_fetch() -> None:
    cache = PriceCache()
    with pytest.raises(RuntimeError, match="not yet fetched"):
        cache.get_sync()


async def test_price_cache_offline_uses_fallback_and_caches() -> None:
    cache = PriceCache(fetch=False)
    prices = await cache.get()
    assert prices == FALLBACK_PRICES
    assert await cache.get() is prices
    assert cache.get_sync() is prices


def test_price_cache_stamp_usage(sample_prices: dict[str, ModelPricing]) -> None:
    cache = PriceCache()
    cache._prices = sample_prices  # pre-populate to avoid network call

    usage = Usage(api_calls=[APICallUsage(model="claude-haiku-4-5", input_tokens=1_000_000)])
    assert usage.estimated_cost == 0.0

    cache.stamp_usage(usage)
    assert usage.estimated_cost == pytest.approx(1.0)


def test_price_cache_stamp_usage_before_fetch_uses_fallback() -> None:
    cache = PriceCache()
    usage = Usage(api_calls=[APICallUsage(model="claude-sonnet-4-5", output_tokens=1_000_000)])
    cache.stamp_usage(usage)
    assert usage.estimated_cost == pytest.approx(15.0)

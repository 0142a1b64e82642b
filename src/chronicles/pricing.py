"""Cost estimation for Claude usage.

Prices are scraped once from the Anthropic pricing page; a built-in table
is used when the page cannot be fetched or parsed.
"""

import asyncio
import logging
import re
from dataclasses import dataclass

import httpx

from chronicles.data import APICallUsage, Usage

logger = logging.getLogger(__name__)

PRICING_URL = "https://docs.anthropic.com/en/docs/about-claude/pricing"
WEB_SEARCH_PRICE_PER_SEARCH = 10.0 / 1000  # $10 per 1,000 searches
DEFAULT_MODEL_PREFIX = "claude-haiku-4-5"

_PRICE_RE = re.compile(r"\$([0-9]+(?:\.[0-9]+)?)")
_SECTION_RE = re.compile(r"## Model pricing\s*\n(.*?)(?=\n## |\Z)", re.DOTALL)


@dataclass(frozen=True)
class ModelPricing:
    """Per-model pricing in USD per million tokens."""

    input_per_mtok: float
    output_per_mtok: float
    cache_write_per_mtok: float
    cache_read_per_mtok: float

    def cost(self, call: APICallUsage) -> float:
        """Cost in USD of one API call, web searches included."""
        return (
            call.input_tokens * self.input_per_mtok
            + call.output_tokens * self.output_per_mtok
            + call.cache_creation_input_tokens * self.cache_write_per_mtok
            + call.cache_read_input_tokens * self.cache_read_per_mtok
        ) / 1_000_000 + call.web_searches * WEB_SEARCH_PRICE_PER_SEARCH


FALLBACK_PRICES: dict[str, ModelPricing] = {
    "claude-haiku-4-5": ModelPricing(1.0, 5.0, 1.25, 0.10),
    "claude-haiku-3-5": ModelPricing(0.80, 4.0, 1.0, 0.08),
    "claude-sonnet-4-5": ModelPricing(3.0, 15.0, 3.75, 0.30),
    "claude-sonnet-4": ModelPricing(3.0, 15.0, 3.75, 0.30),
    "claude-opus-4-5": ModelPricing(5.0, 25.0, 6.25, 0.50),
    "claude-opus-4-1": ModelPricing(15.0, 75.0, 18.75, 1.50),
}


def model_prefix(display_name: str) -> str:
    """Turn a pricing-table name like 'Claude Haiku 4.5' into 'claude-haiku-4-5'."""
    # Drop trailing annotations such as "([deprecated](...))"
    name = re.sub(r"\s*\(.*\)", "", display_name).strip()
    return "-".join(part.replace(".", "-") for part in name.lower().split())


def parse_price(cell: str) -> float:
    """Parse a cell like '$1.25 / MTok'; 0.0 when no dollar amount is present."""
    match = _PRICE_RE.search(cell)
    return float(match.group(1)) if match else 0.0


def parse_pricing_table(markdown: str) -> dict[str, ModelPricing]:
    """Read the "Model pricing" markdown table.

    Columns: Model | Base Input | 5m Cache Writes | 1h Cache Writes |
    Cache Hits | Output. The 1h cache-write column is ignored.
    """
    section = _SECTION_RE.search(markdown)
    if not section:
        return {}

    prices: dict[str, ModelPricing] = {}
    for line in section.group(1).splitlines():
        cells = [c.strip() for c in line.strip().strip("|").split("|")]
        if len(cells) < 6 or cells[0] in ("", "Model") or set(cells[0]) <= {"-", " "}:
            continue

        pricing = ModelPricing(
            input_per_mtok=parse_price(cells[1]),
            output_per_mtok=parse_price(cells[5]),
            cache_write_per_mtok=parse_price(cells[2]),
            cache_read_per_mtok=parse_price(cells[4]),
        )
        if pricing.input_per_mtok > 0 or pricing.output_per_mtok > 0:
            prices[model_prefix(cells[0])] = pricing
    return prices


async def fetch_model_prices(url: str = PRICING_URL, timeout: float = 10.0) -> dict[str, ModelPricing]:
    """Fetch the live price table, falling back to ``FALLBACK_PRICES``."""
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPError:
        logger.warning("Failed to fetch pricing, using fallback prices", exc_info=True)
        return dict(FALLBACK_PRICES)

    parsed = parse_pricing_table(response.text)
    if not parsed:
        logger.warning("Could not parse pricing table, using fallback prices")
        return dict(FALLBACK_PRICES)
    logger.info("Fetched live pricing for %d models", len(parsed))
    return parsed


def get_model_pricing(model_id: str, prices: dict[str, ModelPricing]) -> ModelPricing:
    """Look up pricing by exact id, then by longest matching prefix.

    E.g. ``'claude-haiku-4-5-20251001'`` matches ``'claude-haiku-4-5'``.
    Unknown models are priced as Haiku 4.5.
    """
    if model_id in prices:
        return prices[model_id]

    matches = [key for key in prices if model_id.startswith(key)]
    if matches:
        return prices[max(matches, key=len)]

    logger.warning("No pricing found for model '%s', using Haiku 4.5 fallback", model_id)
    return FALLBACK_PRICES[DEFAULT_MODEL_PREFIX]


def estimate_usage_cost(usage: Usage, prices: dict[str, ModelPricing]) -> float:
    """Estimated cost in USD of all API calls in ``usage``."""
    return sum(get_model_pricing(call.model, prices).cost(call) for call in usage.api_calls)


class PriceCache:
    """Fetch prices at most once and stamp costs onto usage objects.

    Args:
        url: Pricing page to scrape.
        fetch: If False, never hit the network and use the built-in table.
    """

    def __init__(self, url: str = PRICING_URL, *, fetch: bool = True) -> None:
        self._url = url
        self._fetch = fetch
        self._prices: dict[str, ModelPricing] | None = None
        self._lock = asyncio.Lock()

    async def get(self) -> dict[str, ModelPricing]:
        """Return prices, fetching them on first use."""
        async with self._lock:
            if self._prices is None:
                if self._fetch:
                    self._prices = await fetch_model_prices(self._url)
                else:
                    self._prices = dict(FALLBACK_PRICES)
        return self._prices

    def get_sync(self) -> dict[str, ModelPricing]:
        """Return already-fetched prices.

        Raises:
            RuntimeError: If ``get()`` has not completed yet.
        """
        if self._prices is None:
            raise RuntimeError("Prices not yet fetched; await PriceCache.get() first")
        return self._prices

    def stamp_usage(self, usage: Usage) -> None:
        """Set ``usage.estimated_cost`` from its API calls."""
        prices = self._prices if self._prices is not None else FALLBACK_PRICES
        usage.estimated_cost = estimate_usage_cost(usage, prices)

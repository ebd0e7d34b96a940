"""
Scryfall price enrichment.

Looks up a USD price for every printing in the aggregate, one request at a
time with a fixed pause after each lookup (Scryfall allows ~10 requests per
second). Scryfall is called directly, not through the gateway.

Lookup order per printing:
1. /cards/{scryfall_id}
2. /cards/{set}/{collector_number}
3. skip (no request, price stays None)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from cardtracker.config import PRICE_DELAY, settings
from cardtracker.models.card import UNKNOWN_SET, CardAggregate, Printing
from cardtracker.models.failure import FetchError
from cardtracker.services.aggregator import iter_printings
from cardtracker.services.http_client import fetch_json

logger = logging.getLogger(__name__)

FOIL_PRICE_FIELDS = ("usd_foil", "usd_etched", "usd")
NONFOIL_PRICE_FIELDS = ("usd", "usd_foil", "usd_etched")


@dataclass
class PriceSummary:
    """Outcome counts of a price pass."""

    fetched: int = 0
    total: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def percent(self) -> float:
        """Share of printings that got a price; 0.0 when there are none."""
        if self.total == 0:
            return 0.0
        return self.fetched / self.total * 100.0


def price_lookup_url(printing: Printing, api_base: str | None = None) -> str | None:
    """
    Scryfall card URL for a printing.

    Returns:
        URL, or None if the printing has neither a Scryfall id nor a
        set/collector number pair
    """
    if api_base is None:
        api_base = settings.scryfall_api

    if printing.scryfall_id:
        return f"{api_base}/cards/{quote(printing.scryfall_id, safe='')}"

    if printing.set_code and printing.set_code != UNKNOWN_SET and printing.collector_number:
        set_code = quote(printing.set_code.lower(), safe="")
        number = quote(printing.collector_number, safe="")
        return f"{api_base}/cards/{set_code}/{number}"

    return None


def extract_price(card: Any, is_foil: bool) -> float | None:
    """
    Pick a USD price from a Scryfall card object.

    Foil printings prefer the foil price. Non-foil printings deliberately
    prefer the regular price instead, so a nonfoil copy is not valued at its
    foil price; the foil price is only their fallback. Scryfall prices are
    decimal strings.
    """
    if not isinstance(card, dict):
        return None
    prices = card.get("prices")
    if not isinstance(prices, dict):
        return None

    fields = FOIL_PRICE_FIELDS if is_foil else NONFOIL_PRICE_FIELDS
    for field in fields:
        value = prices.get(field)
        if value in (None, ""):
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return None


async def fetch_price(
    printing: Printing, url: str, client: httpx.AsyncClient | None = None
) -> float | None:
    """
    Fetch the price for one printing.

    Raises:
        FetchError: If the Scryfall request fails
    """
    card = await fetch_json(url, client=client)
    return extract_price(card, printing.is_foil)


async def enrich_prices(
    cards: dict[str, CardAggregate],
    client: httpx.AsyncClient | None = None,
    api_base: str | None = None,
) -> PriceSummary:
    """
    Fill in `price` on every printing, in place.

    Lookup failures are logged and leave the price None; they never abort
    the pass.

    Args:
        cards: Card mapping from the Aggregator
        client: Optional httpx client
        api_base: Scryfall API base. Defaults to settings.scryfall_api

    Returns:
        PriceSummary with fetched/total counts
    """
    summary = PriceSummary()

    for key, aggregate in cards.items():
        for owner, printings in aggregate.owners.items():
            for printing in printings:
                summary.total += 1
                url = price_lookup_url(printing, api_base)
                if url is None:
                    summary.skipped += 1
                    logger.info("No Scryfall id or set/number for %s (%s), skipping", key, owner)
                    continue

                try:
                    printing.price = await fetch_price(printing, url, client=client)
                except FetchError as e:
                    summary.failed += 1
                    printing.price = None
                    logger.warning("Price lookup failed for %s: %s", aggregate.name, e)
                else:
                    if printing.price is not None:
                        summary.fetched += 1

                await asyncio.sleep(PRICE_DELAY)

    logger.info(
        "Prices fetched: %d/%d (%.1f%%)", summary.fetched, summary.total, summary.percent
    )
    return summary


def count_printings(cards: dict[str, CardAggregate]) -> int:
    """Number of printings a price pass would visit."""
    return sum(1 for _ in iter_printings(cards))

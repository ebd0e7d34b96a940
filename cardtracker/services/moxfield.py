"""
Moxfield deck and collection readers.

All requests go through the gateway. Decks are one document; collections are
paged 50 cards at a time, sorted by card name.
"""

import asyncio
import logging

import httpx

from cardtracker.config import COLLECTION_PAGE_SIZE, PAGE_DELAY, settings
from cardtracker.models.card import RawCardEntry
from cardtracker.models.failure import FetchError
from cardtracker.parsers.moxfield import parse_collection_page, parse_deck, total_pages
from cardtracker.services.gateway import fetch_proxied

logger = logging.getLogger(__name__)


def deck_url(deck_id: str) -> str:
    return f"{settings.moxfield_api}/v2/decks/all/{deck_id}"


def collection_page_url(collection_id: str, page: int) -> str:
    return (
        f"{settings.moxfield_api}/v1/collections/search/{collection_id}"
        f"?sortType=cardName&sortDirection=ascending"
        f"&pageNumber={page}&pageSize={COLLECTION_PAGE_SIZE}"
    )


async def read_deck(deck_id: str, client: httpx.AsyncClient | None = None) -> list[RawCardEntry]:
    """
    Fetch a deck and flatten its board sections.

    Args:
        deck_id: Moxfield public deck id
        client: Optional httpx client

    Returns:
        One RawCardEntry per card per section

    Raises:
        FetchError: If the deck document cannot be fetched
    """
    logger.info("GET deck %s", deck_id)
    data = await fetch_proxied(deck_url(deck_id), client=client)
    entries = parse_deck(data)
    logger.info("Deck %s -> %d cards", deck_id, len(entries))
    return entries


async def read_collection(
    collection_id: str, client: httpx.AsyncClient | None = None
) -> list[RawCardEntry]:
    """
    Fetch every page of a collection.

    The page count comes from the first page. A failure on the first page
    raises; a failure on a later page is logged and that page contributes
    nothing.

    Args:
        collection_id: Moxfield public collection id
        client: Optional httpx client

    Returns:
        One RawCardEntry per named collection item

    Raises:
        FetchError: If the first page cannot be fetched
    """
    entries: list[RawCardEntry] = []
    page = 1
    pages = 1

    while page <= pages:
        logger.info("GET collection %s page %d/%d", collection_id, page, pages)
        try:
            data = await fetch_proxied(collection_page_url(collection_id, page), client=client)
        except FetchError as e:
            if page == 1:
                raise
            logger.error("Collection %s page %d failed: %s", collection_id, page, e)
            data = None

        if page == 1:
            pages = total_pages(data)
        entries.extend(parse_collection_page(data))

        page += 1
        if page <= pages:
            await asyncio.sleep(PAGE_DELAY)

    logger.info("Collection %s -> %d cards", collection_id, len(entries))
    return entries

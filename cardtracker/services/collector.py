"""
Source collection.

Walks config.json sources in order, fetches each deck or collection through
the gateway and merges it into an Aggregator. A URL that cannot be classified
or fetched is logged and skipped; it never stops the remaining URLs.
"""

import asyncio
import logging
from collections.abc import Mapping

import httpx

from cardtracker.config import SOURCE_DELAY, resolve_phone
from cardtracker.models.card import ParsedReference, RawCardEntry, SourceKind
from cardtracker.models.failure import FetchError
from cardtracker.models.source import TrackerConfig
from cardtracker.parsers.moxfield_url import classify
from cardtracker.services.aggregator import Aggregator
from cardtracker.services.moxfield import read_collection, read_deck

logger = logging.getLogger(__name__)


async def read_reference(
    ref: ParsedReference, client: httpx.AsyncClient | None = None
) -> list[RawCardEntry]:
    """Dispatch to the deck or collection reader."""
    if ref.kind is SourceKind.DECK:
        return await read_deck(ref.id, client=client)
    return await read_collection(ref.id, client=client)


async def collect_sources(
    config: TrackerConfig,
    aggregator: Aggregator | None = None,
    environ: Mapping[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> Aggregator:
    """
    Fetch and merge every configured source.

    Args:
        config: Loaded tracker configuration
        aggregator: Aggregator to fill; a new one is created if None
        environ: Environment holding phone secrets. Defaults to os.environ
        client: Optional httpx client

    Returns:
        The filled Aggregator
    """
    if aggregator is None:
        aggregator = Aggregator()

    for source in config.sources:
        urls = source.all_urls()
        logger.info("Processing %s (%d urls)", source.owner, len(urls))
        aggregator.register_owner(
            source.owner,
            resolve_phone(source.owner, config.phone_secret_names, environ),
        )

        for url in urls:
            ref = classify(url)
            if ref is None:
                logger.error("Could not parse URL: %s", url)
                continue

            try:
                entries = await read_reference(ref, client=client)
            except FetchError as e:
                logger.error("Failed to fetch %s %s: %s", ref.kind.value, ref.id, e)
            else:
                aggregator.merge(source.owner, entries)

            await asyncio.sleep(SOURCE_DELAY)

    logger.info(
        "Collected %d unique cards from %d owners",
        len(aggregator.cards),
        len(aggregator.owners),
    )
    return aggregator

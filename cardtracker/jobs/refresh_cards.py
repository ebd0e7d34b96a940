"""
Refresh data/cards.json.

Reads config.json, fetches every owner's Moxfield decks and collections,
prices each printing on Scryfall and writes the snapshot. Meant to run on a
schedule (e.g. a nightly CI job); phone numbers arrive as environment secrets.

Usage:
    python -m cardtracker.jobs.refresh_cards --config config.json --output data/cards.json
"""

import argparse
import asyncio
import logging
from pathlib import Path

from cardtracker.config import load_tracker_config, settings
from cardtracker.models.failure import ConfigError
from cardtracker.models.snapshot import Snapshot
from cardtracker.services.collector import collect_sources
from cardtracker.services.pricing import count_printings, enrich_prices
from cardtracker.services.snapshot_writer import write_snapshot

logger = logging.getLogger(__name__)


async def run_refresh(
    config_path: Path | None = None,
    output_path: Path | None = None,
    *,
    fetch_prices: bool | None = None,
) -> Snapshot:
    """
    Run one full refresh.

    Args:
        config_path: config.json location. Defaults to settings.config_path
        output_path: Snapshot location. Defaults to settings.output_path
        fetch_prices: Whether to run the Scryfall pass. Defaults to settings.fetch_prices

    Returns:
        The snapshot that was written

    Raises:
        ConfigError: If the configuration cannot be loaded
    """
    if fetch_prices is None:
        fetch_prices = settings.fetch_prices

    config = load_tracker_config(config_path)
    aggregator = await collect_sources(config)

    if fetch_prices:
        logger.info("Fetching prices for %d printings...", count_printings(aggregator.cards))
        await enrich_prices(aggregator.cards)
    else:
        logger.info("Skipping price lookups")

    snapshot = aggregator.snapshot()
    path = write_snapshot(snapshot, output_path)

    logger.info(
        "Done. %d unique cards, %d owners. Written to %s",
        len(snapshot.cards),
        len(snapshot.owners),
        path,
    )
    return snapshot


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Refresh the card ownership snapshot")
    parser.add_argument(
        "--config",
        type=Path,
        default=settings.config_path,
        help=f"Tracker config file (default: {settings.config_path})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.output_path,
        help=f"Snapshot output file (default: {settings.output_path})",
    )
    parser.add_argument(
        "--skip-prices",
        action="store_true",
        help="Do not look up Scryfall prices",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    fetch_prices = False if args.skip_prices else None
    try:
        asyncio.run(run_refresh(args.config, args.output, fetch_prices=fetch_prices))
    except ConfigError as e:
        logger.error("FATAL: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()

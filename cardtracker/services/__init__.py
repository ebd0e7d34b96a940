from cardtracker.services.aggregator import Aggregator, card_key
from cardtracker.services.collector import collect_sources
from cardtracker.services.gateway import build_gateway_url, fetch_proxied
from cardtracker.services.http_client import fetch_json
from cardtracker.services.moxfield import read_collection, read_deck
from cardtracker.services.pricing import PriceSummary, enrich_prices
from cardtracker.services.snapshot_writer import write_snapshot

__all__ = [
    "Aggregator",
    "PriceSummary",
    "build_gateway_url",
    "card_key",
    "collect_sources",
    "enrich_prices",
    "fetch_json",
    "fetch_proxied",
    "read_collection",
    "read_deck",
    "write_snapshot",
]

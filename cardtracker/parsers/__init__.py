from cardtracker.parsers.moxfield import parse_collection_page, parse_deck, total_pages
from cardtracker.parsers.moxfield_url import classify, reference_url

__all__ = [
    "classify",
    "parse_collection_page",
    "parse_deck",
    "reference_url",
    "total_pages",
]

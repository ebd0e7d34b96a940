"""
Moxfield source URL classifier.

Recognises deck URLs (https://moxfield.com/decks/<id>) and collection URLs
(https://moxfield.com/collection/<id>). Deck is checked first.
"""

import re

from cardtracker.models.card import ParsedReference, SourceKind

MOXFIELD_SITE = "https://moxfield.com"

DECK_PATTERN = re.compile(r"/decks/([A-Za-z0-9_\-]+)")
COLLECTION_PATTERN = re.compile(r"/collection/([A-Za-z0-9_\-]+)")


def classify(url: str) -> ParsedReference | None:
    """
    Determine whether a URL references a deck or a collection.

    Args:
        url: Source URL from config.json

    Returns:
        ParsedReference, or None if the URL matches neither shape
    """
    match = DECK_PATTERN.search(url)
    if match:
        return ParsedReference(kind=SourceKind.DECK, id=match.group(1))

    match = COLLECTION_PATTERN.search(url)
    if match:
        return ParsedReference(kind=SourceKind.COLLECTION, id=match.group(1))

    return None


def reference_url(ref: ParsedReference) -> str:
    """Canonical moxfield.com URL for a reference (inverse of classify)."""
    if ref.kind is SourceKind.DECK:
        return f"{MOXFIELD_SITE}/decks/{ref.id}"
    return f"{MOXFIELD_SITE}/collection/{ref.id}"

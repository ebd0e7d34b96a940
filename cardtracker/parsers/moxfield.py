"""
Moxfield response normalization.

Maps the two upstream response shapes into RawCardEntry lists:

- Deck (GET /v2/decks/all/{id}): one document with board sections, each a
  mapping of card name -> {"quantity": n, "card": {...}}. Newer documents
  nest the same sections under "boards": {"mainboard": {"cards": {...}}}.
- Collection page (GET /v1/collections/search/{id}): {"totalPages": n,
  "data": [{"quantity": n, "card": {...}}, ...]}.

Printing fields are read from the nested "card" object first and fall back
to sibling fields on the entry itself. Both the snake_case and camelCase
spellings Moxfield has used are accepted. Raw upstream dicts never leave this
module.
"""

from typing import Any

from cardtracker.models.card import UNKNOWN_SET, RawCardEntry

DECK_SECTIONS = ("mainboard", "sideboard", "commanders", "considering", "maybeboard")

FOIL_FINISH = "foil"

# Field -> accepted upstream keys, in lookup order
_SET_KEYS = ("set",)
_SET_NAME_KEYS = ("set_name", "setName")
_COLLECTOR_NUMBER_KEYS = ("cn", "collectorNumber", "collector_number")
_SCRYFALL_ID_KEYS = ("scryfall_id", "scryfallId")
_FINISHES_KEYS = ("finishes",)


def _lookup(sources: tuple[dict[str, Any], ...], keys: tuple[str, ...]) -> Any:
    """First non-empty value for any of `keys`, searching `sources` in order."""
    for source in sources:
        for key in keys:
            value = source.get(key)
            if value not in (None, ""):
                return value
    return None


def _quantity(item: dict[str, Any]) -> int:
    qty = item.get("quantity")
    if qty is None:
        return 1
    try:
        return max(int(qty), 0)
    except (TypeError, ValueError):
        return 1


def build_entry(name: str, item: dict[str, Any]) -> RawCardEntry:
    """
    Normalize one upstream card line.

    Args:
        name: Card name (trimmed here)
        item: Deck entry or collection item with an optional nested "card"

    Returns:
        RawCardEntry with defaults filled in
    """
    card = item.get("card")
    sources = (card, item) if isinstance(card, dict) else (item,)

    finishes_raw = _lookup(sources, _FINISHES_KEYS)
    finishes = (
        frozenset(str(f) for f in finishes_raw)
        if isinstance(finishes_raw, list)
        else frozenset()
    )

    set_code = _lookup(sources, _SET_KEYS)
    set_name = _lookup(sources, _SET_NAME_KEYS)
    collector_number = _lookup(sources, _COLLECTOR_NUMBER_KEYS)
    scryfall_id = _lookup(sources, _SCRYFALL_ID_KEYS)

    return RawCardEntry(
        name=name.strip(),
        qty=_quantity(item),
        set_code=str(set_code) if set_code is not None else UNKNOWN_SET,
        set_name=str(set_name) if set_name is not None else "",
        collector_number=str(collector_number) if collector_number is not None else "",
        finishes=finishes,
        is_foil=FOIL_FINISH in finishes,
        scryfall_id=str(scryfall_id) if scryfall_id is not None else "",
    )


def _deck_section(data: dict[str, Any], section: str) -> tuple[dict[str, Any], bool] | None:
    """The section's cards and whether they are keyed by card name."""
    obj = data.get(section)
    if isinstance(obj, dict):
        return obj, True

    # Newer documents key board cards by card id; the name lives on the card
    boards = data.get("boards")
    if isinstance(boards, dict):
        board = boards.get(section)
        if isinstance(board, dict) and isinstance(board.get("cards"), dict):
            return board["cards"], False

    return None


def parse_deck(data: Any) -> list[RawCardEntry]:
    """
    Parse a deck document into raw entries.

    Sections that are missing or not objects are skipped. Cards appearing in
    several sections produce one entry per section.
    """
    entries: list[RawCardEntry] = []
    if not isinstance(data, dict):
        return entries

    for section in DECK_SECTIONS:
        found = _deck_section(data, section)
        if found is None:
            continue
        cards, keyed_by_name = found

        for key, details in cards.items():
            if not isinstance(details, dict):
                details = {}
            name = key
            if not keyed_by_name:
                card = details.get("card")
                name = card.get("name", "") if isinstance(card, dict) else ""
            name = str(name).strip()
            if name:
                entries.append(build_entry(name, details))

    return entries


def parse_collection_page(data: Any) -> list[RawCardEntry]:
    """
    Parse one collection search page into raw entries.

    Items without a card name are dropped. A page whose "data" is not a list
    yields nothing.
    """
    entries: list[RawCardEntry] = []
    if not isinstance(data, dict):
        return entries

    items = data.get("data")
    if not isinstance(items, list):
        return entries

    for item in items:
        if not isinstance(item, dict):
            continue
        card = item.get("card")
        name = card.get("name") if isinstance(card, dict) else None
        if not name or not str(name).strip():
            continue
        entries.append(build_entry(str(name), item))

    return entries


def total_pages(data: Any) -> int:
    """totalPages from a collection page, at least 1."""
    if not isinstance(data, dict):
        return 1
    try:
        return max(int(data.get("totalPages") or 1), 1)
    except (TypeError, ValueError):
        return 1

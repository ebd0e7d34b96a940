"""
Card ownership aggregation.

Folds raw entries from every owner's decks and collections into one mapping
keyed by lowercased card name. Within one owner's holdings of one card,
entries collapse into a single Printing when set and foil status match.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from cardtracker.models.card import CardAggregate, Owner, Printing, RawCardEntry
from cardtracker.models.snapshot import Snapshot


def card_key(name: str) -> str:
    """Case-insensitive lookup key for a card name."""
    return name.strip().lower()


class Aggregator:
    """
    Accumulates owners and cards for one refresh run.

    Attributes:
        owners: Owner records by owner name, in registration order
        cards: CardAggregate by lowercased card name
    """

    def __init__(self) -> None:
        self.owners: dict[str, Owner] = {}
        self.cards: dict[str, CardAggregate] = {}

    def register_owner(self, name: str, phone: str = "") -> Owner:
        """Return the owner record, creating it on first sight."""
        owner = self.owners.get(name)
        if owner is None:
            owner = Owner(name=name, phone=phone)
            self.owners[name] = owner
        return owner

    def merge(self, owner_name: str, entries: list[RawCardEntry]) -> None:
        """
        Merge one fetched source into the aggregate.

        Adds the raw entry count to the owner's card_count, then sums each
        entry into the matching printing or appends a new one.
        """
        owner = self.register_owner(owner_name)
        owner.card_count += len(entries)

        for entry in entries:
            key = card_key(entry.name)
            aggregate = self.cards.get(key)
            if aggregate is None:
                aggregate = CardAggregate(name=entry.name.strip())
                self.cards[key] = aggregate

            printings = aggregate.owners.setdefault(owner_name, [])
            for printing in printings:
                if printing.matches(entry):
                    printing.qty += entry.qty
                    break
            else:
                printings.append(Printing.from_entry(entry))

    def snapshot(self, last_updated: datetime | None = None) -> Snapshot:
        """Build the output document from the current state."""
        if last_updated is None:
            last_updated = datetime.now(UTC)
        return Snapshot(
            last_updated=last_updated,
            owners=list(self.owners.values()),
            cards=self.cards,
        )


def iter_printings(cards: dict[str, CardAggregate]) -> Iterable[Printing]:
    """Every printing in a card mapping, in insertion order."""
    for aggregate in cards.values():
        for printings in aggregate.owners.values():
            yield from printings

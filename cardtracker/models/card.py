from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN_SET = "unknown"


class SourceKind(str, Enum):
    """Kind of Moxfield resource a source URL points at."""

    DECK = "deck"
    COLLECTION = "collection"


@dataclass(frozen=True, slots=True)
class ParsedReference:
    """A classified source URL."""

    kind: SourceKind
    id: str


@dataclass(frozen=True, slots=True)
class RawCardEntry:
    """
    One card line as read from a deck or collection, before merging.

    Attributes:
        name: Card name, trimmed, original casing
        qty: Copies on this line
        set_code: Set code, "unknown" when Moxfield omits it
        set_name: Full set name
        collector_number: Collector number within the set
        finishes: Finishes listed for the printing ("nonfoil", "foil", "etched")
        is_foil: True when finishes contains "foil"
        scryfall_id: Scryfall UUID of the printing
    """

    name: str
    qty: int
    set_code: str = UNKNOWN_SET
    set_name: str = ""
    collector_number: str = ""
    finishes: frozenset[str] = frozenset()
    is_foil: bool = False
    scryfall_id: str = ""


class SnapshotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Printing(SnapshotModel):
    """One owner's holding of one set/foil variant of a card."""

    qty: int
    set_code: str = Field(alias="set")
    set_name: str = ""
    is_foil: bool = False
    collector_number: str = ""
    scryfall_id: str = ""
    price: float | None = None

    def matches(self, entry: RawCardEntry) -> bool:
        """True if the entry is the same printing (same set, same foil status)."""
        return self.set_code == entry.set_code and self.is_foil == entry.is_foil

    @classmethod
    def from_entry(cls, entry: RawCardEntry) -> "Printing":
        return cls(
            qty=entry.qty,
            set_code=entry.set_code,
            set_name=entry.set_name,
            is_foil=entry.is_foil,
            collector_number=entry.collector_number,
            scryfall_id=entry.scryfall_id,
        )


class CardAggregate(SnapshotModel):
    """
    Every owner's printings of one card.

    `name` keeps the casing of whichever source introduced the card first.
    """

    name: str
    owners: dict[str, list[Printing]] = Field(default_factory=dict)


class Owner(SnapshotModel):
    """
    A card owner.

    `card_count` sums raw entry counts across the owner's sources, before
    printings are merged.
    """

    name: str
    phone: str = ""
    card_count: int = 0

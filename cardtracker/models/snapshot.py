from datetime import datetime

from pydantic import Field

from cardtracker.models.card import CardAggregate, Owner, SnapshotModel


class Snapshot(SnapshotModel):
    """The data/cards.json document consumed by the front-end."""

    last_updated: datetime
    owners: list[Owner] = Field(default_factory=list)
    cards: dict[str, CardAggregate] = Field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize with the camelCase keys the front-end reads."""
        return self.model_dump_json(by_alias=True, indent=2)

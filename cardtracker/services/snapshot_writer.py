"""Write the snapshot document the front-end reads."""

from pathlib import Path

from cardtracker.config import settings
from cardtracker.models.snapshot import Snapshot


def write_snapshot(snapshot: Snapshot, output_path: Path | None = None) -> Path:
    """
    Write a snapshot, replacing any previous file.

    Args:
        snapshot: Document to write
        output_path: Destination. Defaults to settings.output_path

    Returns:
        Path written
    """
    if output_path is None:
        output_path = settings.output_path

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(snapshot.to_json(), encoding="utf-8")
    return output_path

"""Track file loader: reads authored checkpoint placements from JSON.

Document layout::

    {
      "name": "oval",
      "checkpoints": [
        {"x": 0.0, "y": 0.0, "radius": 2.0},
        {"x": 10.0, "y": 0.0, "radius": 2.0, "respawn": true}
      ]
    }

``respawn`` is optional and defaults to false.  Checkpoint order in the
file is the racing order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from race_progress.errors import InvalidTrack
from race_progress.track.models import CheckpointPlacement


@dataclass
class TrackDefinition:
    """A named, ordered list of checkpoint placements."""

    name: str
    placements: list[CheckpointPlacement]


def parse_track(data: dict, default_name: str = "unnamed") -> TrackDefinition:
    """Build a :class:`TrackDefinition` from an already-decoded JSON document.

    Raises
    ------
    InvalidTrack
        If a required key is missing or a value has the wrong type.
    """
    try:
        name = str(data.get("name") or default_name)
        placements = [
            CheckpointPlacement(
                position=(float(item["x"]), float(item["y"])),
                capture_radius=float(item["radius"]),
                respawn_here=bool(item.get("respawn", False)),
            )
            for item in data["checkpoints"]
        ]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidTrack(f"Malformed track document: {exc!r}") from exc
    return TrackDefinition(name=name, placements=placements)


def load_track(path: str | Path) -> TrackDefinition:
    """Read and parse the JSON track file at *path*.

    Raises
    ------
    InvalidTrack
        If the file is not valid JSON or is missing fields.
    OSError
        If the file cannot be read.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidTrack(f"{p} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidTrack(f"{p} must contain a JSON object")
    return parse_track(data, default_name=p.stem)

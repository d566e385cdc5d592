"""Procedural checkpoint layouts for demos and tests."""

from __future__ import annotations

import math

from race_progress.errors import InvalidArgument
from race_progress.track.models import CheckpointPlacement


def oval_placements(
    radius_x: float = 50.0,
    radius_y: float = 30.0,
    count: int = 24,
    capture_radius: float = 4.0,
    respawn_every: int = 0,
) -> list[CheckpointPlacement]:
    """Checkpoints evenly spaced (by angle) around one lap of an ellipse.

    The lap is closed: the last checkpoint coincides with the first, so a
    full lap covers the whole perimeter.

    Parameters
    ----------
    radius_x, radius_y:
        Semi-axes along x and y.
    count:
        Number of distinct checkpoints on the lap (the closing checkpoint is
        added on top).
    capture_radius:
        Capture radius applied to every checkpoint.
    respawn_every:
        Flag every N-th checkpoint as a respawn point (0 disables respawn
        checkpoints).
    """
    if count < 2:
        raise InvalidArgument(f"count must be >= 2, got {count}")
    placements: list[CheckpointPlacement] = []
    for i in range(count + 1):
        angle = 2.0 * math.pi * i / count
        respawn = bool(respawn_every) and 0 < i < count and i % respawn_every == 0
        placements.append(
            CheckpointPlacement(
                position=(radius_x * math.cos(angle), radius_y * math.sin(angle)),
                capture_radius=capture_radius,
                respawn_here=respawn,
            )
        )
    return placements

"""Checkpoint graph: distance and reward precomputation for one track.

Given the ordered checkpoint placements of a track, compute for every
checkpoint its distance to the previous one, the accumulated path length and
its normalized share of the total reward.  Reward shares are computed as the
gap between the checkpoint's distance fraction and the reward already
granted, so the accumulated reward of the last checkpoint telescopes to 1.0.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Sequence

from race_progress.errors import DegenerateTrack, InvalidTrack
from race_progress.track.models import Checkpoint, CheckpointPlacement, Point

_logger = logging.getLogger(__name__)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two 2D points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _validate(placement: CheckpointPlacement, index: int) -> None:
    x, y = placement.position
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidTrack(f"Checkpoint {index} has a non-finite position {placement.position!r}")
    radius = placement.capture_radius
    if not math.isfinite(radius) or radius < 0:
        raise InvalidTrack(f"Checkpoint {index} has an invalid capture radius {radius!r}")


class CheckpointGraph:
    """Immutable ordered sequence of :class:`Checkpoint` objects.

    Build with :meth:`from_placements`; the graph is read-only afterwards and
    may be shared by every evaluation within a tick.
    """

    def __init__(self, checkpoints: Sequence[Checkpoint], track_length: float) -> None:
        self._checkpoints = tuple(checkpoints)
        self._track_length = track_length

    @classmethod
    def from_placements(cls, placements: Iterable[CheckpointPlacement]) -> CheckpointGraph:
        """Precompute distances and reward shares for *placements*.

        Raises
        ------
        InvalidTrack
            Fewer than two placements, or a placement with a non-finite
            position or a negative capture radius.
        DegenerateTrack
            The total path length is zero.
        """
        pts: list[CheckpointPlacement] = list(placements)
        if len(pts) < 2:
            raise InvalidTrack(f"A track requires at least 2 checkpoints, got {len(pts)}")
        for idx, placement in enumerate(pts):
            _validate(placement, idx)

        # Pass 1: distances
        to_previous: list[float] = [0.0]
        accumulated: list[float] = [0.0]
        for i in range(1, len(pts)):
            d = distance(pts[i - 1].position, pts[i].position)
            to_previous.append(d)
            accumulated.append(accumulated[-1] + d)

        track_length = accumulated[-1]
        if track_length == 0.0:
            raise DegenerateTrack("All checkpoints coincide; track length is zero")

        # Pass 2: reward shares
        shares: list[float] = [0.0]
        rewards: list[float] = [0.0]
        for i in range(1, len(pts)):
            share = accumulated[i] / track_length - rewards[-1]
            shares.append(share)
            rewards.append(rewards[-1] + share)

        checkpoints = [
            Checkpoint(
                index=i,
                position=(float(p.position[0]), float(p.position[1])),
                capture_radius=float(p.capture_radius),
                respawn_here=bool(p.respawn_here),
                distance_to_previous=to_previous[i],
                accumulated_distance=accumulated[i],
                reward_share=shares[i],
                accumulated_reward=rewards[i],
            )
            for i, p in enumerate(pts)
        ]
        _logger.info(
            "Built checkpoint graph: %d checkpoints, track length %.3f",
            len(checkpoints),
            track_length,
        )
        return cls(checkpoints, track_length)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def track_length(self) -> float:
        """Accumulated distance of the last checkpoint."""
        return self._track_length

    @property
    def checkpoints(self) -> tuple[Checkpoint, ...]:
        return self._checkpoints

    def __len__(self) -> int:
        return len(self._checkpoints)

    def __getitem__(self, index: int) -> Checkpoint:
        return self._checkpoints[index]

    def __iter__(self) -> Iterator[Checkpoint]:
        return iter(self._checkpoints)

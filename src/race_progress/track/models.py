"""Track data structures: authored placements, finalized checkpoints, respawn state."""

from __future__ import annotations

from dataclasses import dataclass

Point = tuple[float, float]

ORIGIN: Point = (0.0, 0.0)


@dataclass(frozen=True)
class CheckpointPlacement:
    """A checkpoint exactly as authored for a track, before any precomputation."""

    position: Point
    """World-space (x, y) centre of the checkpoint."""

    capture_radius: float
    """An agent within this distance of ``position`` captures the checkpoint."""

    respawn_here: bool = False
    """Capturing this checkpoint moves the track's respawn point."""


@dataclass(frozen=True)
class Checkpoint:
    """A finalized checkpoint with precomputed distance and reward fields.

    Instances are built once per track load by
    :meth:`~race_progress.track.graph.CheckpointGraph.from_placements` and
    never mutated afterwards.
    """

    index: int
    """Position in the ordered sequence (0 = start)."""

    position: Point

    capture_radius: float

    respawn_here: bool

    distance_to_previous: float
    """Straight-line distance to checkpoint ``index - 1`` (0 for the start)."""

    accumulated_distance: float
    """Path length from the start through this checkpoint."""

    reward_share: float
    """This checkpoint's share of the total reward of 1.0."""

    accumulated_reward: float
    """Sum of ``reward_share`` from the start through this checkpoint."""


@dataclass
class RespawnState:
    """Where (and from which checkpoint) agents restart on the current track.

    Shared by every agent on the track; the last capture of a checkpoint
    flagged ``respawn_here`` wins.
    """

    position: Point = ORIGIN
    rotation: float = 0.0
    checkpoint_index: int = 1

    @property
    def is_trivial(self) -> bool:
        """True while the spawn position is still the default origin."""
        return self.position == ORIGIN

    def update(self, other: RespawnState) -> None:
        """Copy *other* into this state in place."""
        self.position = other.position
        self.rotation = other.rotation
        self.checkpoint_index = other.checkpoint_index

    def reset(self) -> None:
        """Return to the start checkpoint with the default transform."""
        self.update(RespawnState())

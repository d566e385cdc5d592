"""Progress evaluation: completion score and checkpoint capture for one agent.

The score of an agent whose next checkpoint is ``c`` is the accumulated
reward of checkpoint ``c - 1`` plus a partial share of checkpoint ``c``
that grows linearly as the agent closes in on it.  An agent inside the
capture radius of its next checkpoint captures it and is re-checked against
the following one, so several clustered checkpoints can fall in one call.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from race_progress.track.graph import CheckpointGraph, distance
from race_progress.track.models import Checkpoint, Point, RespawnState

_logger = logging.getLogger(__name__)


@dataclass
class Evaluation:
    """Outcome of a single :meth:`ProgressEvaluator.evaluate` call."""

    score: float
    """Completion score in [0.0, 1.0]."""

    cursor: int
    """Index of the next checkpoint to capture after this evaluation."""

    captured: list[int] = field(default_factory=list)
    """Indices captured during this call, in capture order."""

    respawn: RespawnState | None = None
    """New respawn state if a ``respawn_here`` checkpoint was captured."""


def coerce_point(value: Any) -> Point | None:
    """Return *value* as a finite ``(x, y)`` tuple, or None if it is malformed."""
    try:
        x, y = value
        x, y = float(x), float(y)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return (x, y)


def partial_fraction(checkpoint: Checkpoint, remaining: float) -> float:
    """Fraction of *checkpoint*'s reward share earned at *remaining* distance from it.

    Linear over the segment from the previous checkpoint: 1.0 on the
    checkpoint, 0.0 at (or beyond) one segment length away.
    """
    segment = checkpoint.distance_to_previous
    if segment <= 0.0:
        return 0.0
    return min(1.0, max(0.0, 1.0 - remaining / segment))


class ProgressEvaluator:
    """Compute completion scores against a shared, read-only checkpoint graph.

    The evaluator is stateless apart from the graph: cursor updates and the
    respawn change are returned in the :class:`Evaluation` and applied by the
    caller.

    Parameters
    ----------
    graph:
        The precomputed :class:`CheckpointGraph` of the current track.
    """

    def __init__(self, graph: CheckpointGraph) -> None:
        self._graph = graph

    @property
    def graph(self) -> CheckpointGraph:
        return self._graph

    def evaluate(self, position: Any, rotation: float, cursor: int) -> Evaluation:
        """Score an agent at *position* whose next checkpoint is *cursor*.

        A malformed or non-finite position scores 0.0 and captures nothing.
        """
        n = len(self._graph)
        if cursor >= n:
            return Evaluation(score=1.0, cursor=cursor)

        point = coerce_point(position)
        if point is None:
            _logger.warning("Ignoring malformed agent position %r", position)
            return Evaluation(score=0.0, cursor=cursor)

        result = Evaluation(score=0.0, cursor=max(cursor, 0))
        # Bounded by n: the cursor strictly increases on every capture.
        while result.cursor < n:
            target = self._graph[result.cursor]
            remaining = distance(point, target.position)
            if remaining > target.capture_radius:
                previous_reward = (
                    self._graph[result.cursor - 1].accumulated_reward if result.cursor > 0 else 0.0
                )
                score = previous_reward + target.reward_share * partial_fraction(target, remaining)
                result.score = min(1.0, max(0.0, score))
                return result

            result.captured.append(target.index)
            if target.respawn_here:
                result.respawn = RespawnState(
                    position=point,
                    rotation=rotation,
                    checkpoint_index=target.index + 1,
                )
            result.cursor += 1

        result.score = 1.0
        return result

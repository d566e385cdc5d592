"""RaceEngine: ties the checkpoint graph, roster, evaluator and rank tracker together.

One engine instance owns the state of one track: there is no process-wide
singleton, so several simulations can run side by side.  The host drives it
by calling :meth:`RaceEngine.tick` once per simulation step.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterable

from race_progress.config import EngineConfig
from race_progress.race.agents import AgentFactory, AgentHandle
from race_progress.race.models import AgentEntry, LeaderSnapshot
from race_progress.race.ranking import BestChangedCallback, RankTracker
from race_progress.race.roster import RaceRoster
from race_progress.scoring.evaluator import ProgressEvaluator, coerce_point
from race_progress.track.graph import CheckpointGraph
from race_progress.track.models import CheckpointPlacement, RespawnState

_logger = logging.getLogger(__name__)


def _as_graph(track: CheckpointGraph | Iterable[CheckpointPlacement]) -> CheckpointGraph:
    if isinstance(track, CheckpointGraph):
        return track
    return CheckpointGraph.from_placements(track)


def _start_heading(graph: CheckpointGraph) -> float:
    """Heading (radians) from the start checkpoint towards checkpoint 1."""
    (x0, y0), (x1, y1) = graph[0].position, graph[1].position
    return math.atan2(y1 - y0, x1 - x0)


class RaceEngine:
    """Scores every active agent each tick and tracks the two leading agents.

    Parameters
    ----------
    track:
        A prebuilt :class:`CheckpointGraph` or the raw checkpoint placements
        of the track (built immediately; may raise ``InvalidTrack`` or
        ``DegenerateTrack``).
    factory:
        Creates and destroys agents when the roster is resized.
    config:
        Engine options; defaults to :class:`EngineConfig` defaults.
    subscribers:
        Best-agent change callbacks, called as ``callback(previous, new)``.
    """

    def __init__(
        self,
        track: CheckpointGraph | Iterable[CheckpointPlacement],
        factory: AgentFactory,
        config: EngineConfig | None = None,
        subscribers: Iterable[BestChangedCallback] = (),
    ) -> None:
        self._cfg = config or EngineConfig()
        self._graph = _as_graph(track)
        self._evaluator = ProgressEvaluator(self._graph)
        self._respawn = RespawnState()
        self._roster = RaceRoster(factory, self._respawn, user_control=self._cfg.user_control)
        self._ranks = RankTracker(subscribers)
        self._lock = threading.RLock()
        self._tick_count = 0
        self._leader_score = 0.0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def graph(self) -> CheckpointGraph:
        return self._graph

    @property
    def roster(self) -> RaceRoster:
        return self._roster

    @property
    def ranks(self) -> RankTracker:
        return self._ranks

    @property
    def respawn(self) -> RespawnState:
        """The track's shared respawn state (mutated by captures)."""
        return self._respawn

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def leader_score(self) -> float:
        """Highest score of the most recent evaluation pass (0.0 before any)."""
        return self._leader_score

    def track_length(self) -> float:
        return self._graph.track_length

    def best_agent(self) -> AgentHandle | None:
        best = self._ranks.best
        return best.handle if best is not None else None

    def second_best_agent(self) -> AgentHandle | None:
        second = self._ranks.second_best
        return second.handle if second is not None else None

    def leader(self) -> LeaderSnapshot | None:
        """Transform and score of the best agent, or None if there is none.

        Also None while the best agent reports a malformed position.
        """
        best = self._ranks.best
        if best is None:
            return None
        position = coerce_point(best.handle.get_position())
        if position is None:
            return None
        return LeaderSnapshot(
            handle=best.handle,
            position=position,
            rotation=best.handle.get_rotation(),
            score=best.score,
        )

    def get(self, index: int) -> AgentHandle:
        return self._roster.get(index).handle

    def subscribe(self, callback: BestChangedCallback) -> None:
        """Register a best-agent change callback."""
        self._ranks.subscribe(callback)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Run one evaluation and ranking pass over all enabled agents.

        With ``evaluate_every = k`` only every k-th call does any work.
        """
        with self._lock:
            self._tick_count += 1
            if (self._tick_count - 1) % self._cfg.evaluate_every:
                return

            leader_score = 0.0
            evaluated: list[AgentEntry] = []
            for entry in self._roster:
                # A best-change callback may have removed it earlier in this pass.
                if entry not in self._roster or not entry.handle.is_enabled():
                    continue
                self._evaluate(entry)
                leader_score = max(leader_score, entry.score)
                evaluated.append(entry)
                self._ranks.update(entry)

            self._ranks.settle([e for e in evaluated if e in self._roster])
            self._leader_score = leader_score

    def set_size(self, n: int) -> None:
        """Resize the roster to *n* agents (raises ``InvalidArgument`` if negative)."""
        with self._lock:
            for entry in self._roster.set_size(n):
                self._ranks.forget(entry)

    def stop(self) -> None:
        """Remove every agent from the track."""
        self.set_size(0)

    def restart(self) -> None:
        """Send every agent back to the respawn point and clear the ranks."""
        with self._lock:
            self._roster.restart()
            self._ranks.clear()
            self._leader_score = 0.0

    def remove(self, index: int) -> AgentHandle:
        """Remove the agent at *index* from the roster without destroying it."""
        with self._lock:
            entry = self._roster.remove(index)
            self._ranks.forget(entry)
            return entry.handle

    def load_track(self, track: CheckpointGraph | Iterable[CheckpointPlacement]) -> None:
        """Replace the current track; agents restart from the new start.

        The new graph is built before any state changes, so an invalid
        track leaves the engine untouched.
        """
        graph = _as_graph(track)
        with self._lock:
            self._graph = graph
            self._evaluator = ProgressEvaluator(graph)
            self._respawn.reset()
            self._roster.restart_at(graph[0].position, _start_heading(graph))
            self._ranks.clear()
            self._leader_score = 0.0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _evaluate(self, entry: AgentEntry) -> None:
        handle = entry.handle
        result = self._evaluator.evaluate(handle.get_position(), handle.get_rotation(), entry.cursor)
        entry.cursor = result.cursor
        for _ in result.captured:
            handle.on_checkpoint_captured()
        if result.respawn is not None:
            self._respawn.update(result.respawn)
            _logger.debug(
                "Respawn point moved to %r (checkpoint %d)",
                self._respawn.position,
                self._respawn.checkpoint_index,
            )
        entry.score = result.score

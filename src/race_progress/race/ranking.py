"""Rank tracker: best and second-best agent by completion score.

Ranks persist across ticks and only change when an agent scores strictly
higher than the current holder, so ties go to the agent encountered first
and an agent that stops improving keeps its slot until overtaken.  A best
agent that is overtaken drops to second place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from race_progress.race.agents import AgentHandle, RankMarker
from race_progress.race.models import AgentEntry

_logger = logging.getLogger(__name__)

BestChangedCallback = Callable[[AgentHandle | None, AgentHandle | None], None]


def _handle(entry: AgentEntry | None) -> AgentHandle | None:
    return entry.handle if entry is not None else None


class RankTracker:
    """Maintains the best and second-best :class:`AgentEntry`.

    Parameters
    ----------
    subscribers:
        Callbacks invoked as ``callback(previous_best, new_best)`` (agent
        handles, either may be None) whenever the identity of the best agent
        changes.
    """

    def __init__(self, subscribers: Iterable[BestChangedCallback] = ()) -> None:
        self._subscribers: list[BestChangedCallback] = list(subscribers)
        self._best: AgentEntry | None = None
        self._second: AgentEntry | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def best(self) -> AgentEntry | None:
        return self._best

    @property
    def second_best(self) -> AgentEntry | None:
        return self._second

    @property
    def best_score(self) -> float | None:
        """Last-known score of the best agent, or None when the slot is empty."""
        return self._best.score if self._best is not None else None

    def subscribe(self, callback: BestChangedCallback) -> None:
        """Register *callback* for best-agent changes."""
        self._subscribers.append(callback)

    def update(self, entry: AgentEntry) -> None:
        """Fold *entry*'s freshly computed score into the rank slots."""
        score = entry.score
        if self._best is None or score > self._best.score:
            self._set_best(entry)
        elif (self._second is None or score > self._second.score) and entry is not self._best:
            self._set_second(entry)

    def settle(self, entries: Iterable[AgentEntry] = ()) -> None:
        """Re-rank after a full update pass so the slots hold the top two scores.

        A ranked agent's score can fall during a pass (it backed away from
        its next checkpoint), after earlier agents were already compared
        against its old score.  *entries* are the entries evaluated in the
        pass; the current holders are always candidates and win ties.
        """
        candidates: list[AgentEntry] = []
        for entry in (self._best, self._second, *entries):
            if entry is not None and all(entry is not c for c in candidates):
                candidates.append(entry)
        if not candidates:
            return

        top = max(candidates, key=lambda e: e.score)
        rest = [e for e in candidates if e is not top]
        runner_up = max(rest, key=lambda e: e.score) if rest else None

        self._set_best(top)
        self._set_second(runner_up)

    def clear(self) -> None:
        """Empty both slots."""
        previous = self._best
        for entry in (self._best, self._second):
            if entry is not None:
                entry.handle.set_rank_marker(RankMarker.NONE)
        self._best = None
        self._second = None
        if previous is not None:
            self._emit(previous, None)

    def forget(self, entry: AgentEntry) -> None:
        """Drop *entry* (removed from the roster) from the rank slots.

        A forgotten best agent is replaced by the second-best one.
        """
        if entry is self._second:
            self._set_second(None)
        elif entry is self._best:
            promoted = self._second
            entry.handle.set_rank_marker(RankMarker.NONE)
            self._second = None
            self._best = promoted
            if promoted is not None:
                promoted.handle.set_rank_marker(RankMarker.FIRST)
            self._emit(entry, promoted)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _set_best(self, entry: AgentEntry | None) -> None:
        if entry is self._best:
            return

        previous = self._best
        if previous is not None:
            previous.handle.set_rank_marker(RankMarker.NONE)
        if entry is not None:
            entry.handle.set_rank_marker(RankMarker.FIRST)
        self._best = entry
        self._emit(previous, entry)

        if previous is not None:
            self._set_second(previous)
        elif self._second is entry:
            self._set_second(None)

    def _set_second(self, entry: AgentEntry | None) -> None:
        if entry is self._second:
            return

        old = self._second
        if old is not None and old is not self._best:
            old.handle.set_rank_marker(RankMarker.NONE)
        if entry is not None:
            entry.handle.set_rank_marker(RankMarker.SECOND)
        self._second = entry

    def _emit(self, previous: AgentEntry | None, new: AgentEntry | None) -> None:
        _logger.debug("Best agent changed: %r -> %r", _handle(previous), _handle(new))
        for callback in self._subscribers:
            callback(_handle(previous), _handle(new))

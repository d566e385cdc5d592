"""Race roster: the active agents and their checkpoint cursors.

Agents are added and removed with stack discipline: growing appends new
entries, shrinking pops the most recently added ones first, so the entries
that survive a resize keep their cursors untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from race_progress.errors import InvalidArgument
from race_progress.race.agents import AgentFactory, AgentHandle
from race_progress.race.models import AgentEntry
from race_progress.track.models import Point, RespawnState

_logger = logging.getLogger(__name__)


class RaceRoster:
    """Authoritative list of active agents.

    Parameters
    ----------
    factory:
        Creates agents when the roster grows and destroys them when it shrinks.
    respawn:
        The track's shared :class:`RespawnState`; read for the cursor and the
        transform of new and restarted agents.
    user_control:
        When True the first agent is flagged for outside (manual) control.
    """

    def __init__(
        self,
        factory: AgentFactory,
        respawn: RespawnState,
        user_control: bool = False,
    ) -> None:
        self._factory = factory
        self._respawn = respawn
        self._user_control = user_control
        self._entries: list[AgentEntry] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[AgentEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AgentEntry]:
        return iter(tuple(self._entries))

    def __contains__(self, entry: object) -> bool:
        return any(e is entry for e in self._entries)

    def set_size(self, n: int) -> list[AgentEntry]:
        """Grow or shrink the roster to exactly *n* entries.

        Returns the entries removed by a shrink (empty when growing).

        Raises
        ------
        InvalidArgument
            If *n* is negative.
        """
        if n < 0:
            raise InvalidArgument(f"Roster size may not be negative, got {n}")

        removed: list[AgentEntry] = []
        while len(self._entries) < n:
            handle = self._factory.create()
            self._place_at_spawn(handle)
            self._entries.append(AgentEntry(handle=handle, cursor=self._respawn.checkpoint_index))
        while len(self._entries) > n:
            entry = self._entries.pop()
            self._factory.destroy(entry.handle)
            removed.append(entry)

        if self._user_control and self._entries:
            self._entries[0].handle.set_primary_control(True)

        _logger.debug("Roster resized to %d (%d removed)", n, len(removed))
        return removed

    def restart(self) -> None:
        """Send every agent back to the spawn point and reset its cursor."""
        for entry in self._entries:
            self._place_at_spawn(entry.handle)
        self.reset_cursors(self._respawn.checkpoint_index)

    def restart_at(self, position: Point, rotation: float) -> None:
        """Give every agent a new spawn transform, then restart it there.

        Used when the track changes and the old spawn points no longer apply.
        """
        for entry in self._entries:
            entry.handle.set_spawn(position, rotation)
            entry.handle.restart()
        self.reset_cursors(self._respawn.checkpoint_index)

    def reset_cursors(self, cursor: int) -> None:
        """Point every entry at checkpoint *cursor* and zero its score."""
        for entry in self._entries:
            entry.cursor = cursor
            entry.score = 0.0

    def get(self, index: int) -> AgentEntry:
        """Return the entry at *index* (negative indices count from the end)."""
        return self._entries[index]

    def remove(self, index: int) -> AgentEntry:
        """Remove and return the entry at *index*.

        The agent itself is not destroyed; its owner decides its fate.
        """
        return self._entries.pop(index)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _place_at_spawn(self, handle: AgentHandle) -> None:
        if not self._respawn.is_trivial:
            handle.set_spawn(self._respawn.position, self._respawn.rotation)
        handle.restart()

"""Race bookkeeping data structures."""

from __future__ import annotations

from dataclasses import dataclass

from race_progress.race.agents import AgentHandle
from race_progress.track.models import Point


@dataclass(eq=False)
class AgentEntry:
    """Roster bookkeeping for one active agent.

    Entries compare by identity: two agents with equal cursors and scores are
    still different racers.
    """

    handle: AgentHandle
    """Non-owning reference to the externally owned agent."""

    cursor: int = 1
    """Index of the next checkpoint the agent must reach (0 is the start)."""

    score: float = 0.0
    """Completion score from the agent's most recent evaluation."""


@dataclass(frozen=True)
class LeaderSnapshot:
    """Transform and score of the current best agent, for external mirroring."""

    handle: AgentHandle
    position: Point
    rotation: float
    score: float

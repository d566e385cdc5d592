"""Race roster, rank tracking and the per-tick engine."""

from race_progress.race.agents import (
    AgentFactory,
    AgentHandle,
    RankMarker,
    StubAgent,
    StubAgentFactory,
)
from race_progress.race.engine import RaceEngine
from race_progress.race.models import AgentEntry, LeaderSnapshot
from race_progress.race.ranking import RankTracker
from race_progress.race.roster import RaceRoster

__all__ = [
    "AgentEntry",
    "AgentFactory",
    "AgentHandle",
    "LeaderSnapshot",
    "RaceEngine",
    "RaceRoster",
    "RankMarker",
    "RankTracker",
    "StubAgent",
    "StubAgentFactory",
]

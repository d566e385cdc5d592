"""Agent handle interfaces and in-memory stub agents.

The engine never owns the agents it scores.  It talks to them through
:class:`AgentHandle` and asks an :class:`AgentFactory` to create or destroy
them.  :class:`StubAgent` records every call and is used by the tests and the
demo script.
"""

from __future__ import annotations

import itertools
from enum import Enum
from typing import Any, Protocol

from race_progress.track.models import ORIGIN, Point


class RankMarker(Enum):
    """Presentation marker an agent shows for its rank slot."""

    NONE = "none"
    FIRST = "first"
    SECOND = "second"


class AgentHandle(Protocol):
    """Capabilities the engine needs from an externally owned agent."""

    def get_position(self) -> Point: ...

    def get_rotation(self) -> float: ...

    def is_enabled(self) -> bool: ...

    def on_checkpoint_captured(self) -> None: ...

    def set_rank_marker(self, marker: RankMarker) -> None: ...

    def set_spawn(self, position: Point, rotation: float) -> None: ...

    def restart(self) -> None: ...

    def set_primary_control(self, enabled: bool) -> None: ...


class AgentFactory(Protocol):
    """Creates and destroys agents on behalf of the roster."""

    def create(self) -> AgentHandle: ...

    def destroy(self, handle: AgentHandle) -> None: ...


class StubAgent:
    """Minimal agent with a settable position; records calls for test assertions."""

    _ids = itertools.count(1)

    def __init__(self, position: Any = ORIGIN, rotation: float = 0.0, enabled: bool = True) -> None:
        self.agent_id = next(self._ids)
        self.position = position
        self.rotation = rotation
        self.enabled = enabled
        self.spawn_position: Point = ORIGIN
        self.spawn_rotation: float = 0.0
        self.captures = 0
        self.restarts = 0
        self.marker = RankMarker.NONE
        self.marker_history: list[RankMarker] = []
        self.primary_control = False

    def __repr__(self) -> str:
        return f"StubAgent(id={self.agent_id}, position={self.position!r})"

    def get_position(self) -> Any:
        return self.position

    def get_rotation(self) -> float:
        return self.rotation

    def is_enabled(self) -> bool:
        return self.enabled

    def on_checkpoint_captured(self) -> None:
        self.captures += 1

    def set_rank_marker(self, marker: RankMarker) -> None:
        self.marker = marker
        self.marker_history.append(marker)

    def set_spawn(self, position: Point, rotation: float) -> None:
        self.spawn_position = position
        self.spawn_rotation = rotation

    def restart(self) -> None:
        """Move back to the spawn transform."""
        self.restarts += 1
        self.position = self.spawn_position
        self.rotation = self.spawn_rotation

    def set_primary_control(self, enabled: bool) -> None:
        self.primary_control = enabled


class StubAgentFactory:
    """Creates :class:`StubAgent` instances and remembers destroyed ones."""

    def __init__(self, agent_cls: type[StubAgent] = StubAgent) -> None:
        self._agent_cls = agent_cls
        self.created: list[StubAgent] = []
        self.destroyed: list[StubAgent] = []

    def create(self) -> StubAgent:
        agent = self._agent_cls()
        self.created.append(agent)
        return agent

    def destroy(self, handle: StubAgent) -> None:
        handle.enabled = False
        self.destroyed.append(handle)

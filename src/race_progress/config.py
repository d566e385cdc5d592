"""Engine configuration.

Values are read from the environment by :meth:`EngineConfig.from_env`.  Entry
points call ``dotenv.load_dotenv()`` first so a project-root ``.env`` file
can supply them.

RACE_PROGRESS_USER_CONTROL    "1"/"true"/"yes" flags the first agent for manual control
RACE_PROGRESS_EVALUATE_EVERY  evaluate on every N-th tick() call (default 1)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from race_progress.errors import InvalidArgument

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class EngineConfig:
    """Tunable engine behaviour."""

    user_control: bool = False
    """Flag the first roster entry as the manually controlled agent."""

    evaluate_every: int = 1
    """Only every N-th ``tick()`` call runs an evaluation pass."""

    def __post_init__(self) -> None:
        if self.evaluate_every < 1:
            raise InvalidArgument(f"evaluate_every must be >= 1, got {self.evaluate_every}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        user_control = env.get("RACE_PROGRESS_USER_CONTROL", "").strip().lower() in _TRUTHY
        raw_every = env.get("RACE_PROGRESS_EVALUATE_EVERY", "").strip()
        try:
            evaluate_every = int(raw_every) if raw_every else 1
        except ValueError as exc:
            raise InvalidArgument(
                f"RACE_PROGRESS_EVALUATE_EVERY must be an integer, got {raw_every!r}"
            ) from exc
        return cls(user_control=user_control, evaluate_every=evaluate_every)

"""Headless race demo: drives stub agents around a track and reports the leaders.

Usage:
    python scripts/simulate.py
    python scripts/simulate.py --track tracks/oval.json --agents 8 --ticks 600
    python scripts/simulate.py --respawn-every 6 --seed 7 -v

Engine options can also come from a ``.env`` file (see race_progress.config).
"""

from __future__ import annotations

import argparse
import logging
import math
import random

from dotenv import load_dotenv

load_dotenv()

from race_progress.config import EngineConfig  # noqa: E402
from race_progress.race.agents import StubAgent  # noqa: E402
from race_progress.race.engine import RaceEngine  # noqa: E402
from race_progress.track.loader import load_track  # noqa: E402
from race_progress.track.models import CheckpointPlacement, Point  # noqa: E402
from race_progress.track.shapes import oval_placements  # noqa: E402

_logger = logging.getLogger("simulate")


class DrivingAgent(StubAgent):
    """Stub agent that steers straight at successive checkpoints with a noisy speed."""

    def __init__(self, waypoints: list[Point], speed: float, rng: random.Random) -> None:
        super().__init__(position=waypoints[0])
        self._waypoints = waypoints
        self._speed = speed
        self._rng = rng
        self._target = 1
        self.spawn_position = waypoints[0]

    def restart(self) -> None:
        super().restart()
        self._target = _nearest_ahead(self._waypoints, self.position)

    def step(self, dt: float) -> None:
        if not self.enabled or self._target >= len(self._waypoints):
            return
        tx, ty = self._waypoints[self._target]
        x, y = self.position
        dx, dy = tx - x, ty - y
        dist = math.hypot(dx, dy)
        travel = self._speed * dt * self._rng.uniform(0.6, 1.4)
        if dist <= travel:
            self.position = (tx, ty)
            self._target += 1
            return
        self.rotation = math.atan2(dy, dx)
        self.position = (x + dx / dist * travel, y + dy / dist * travel)


class DrivingAgentFactory:
    def __init__(self, placements: list[CheckpointPlacement], seed: int) -> None:
        self._waypoints = [p.position for p in placements]
        self._rng = random.Random(seed)
        self.agents: list[DrivingAgent] = []

    def create(self) -> DrivingAgent:
        agent = DrivingAgent(self._waypoints, speed=self._rng.uniform(8.0, 14.0), rng=self._rng)
        self.agents.append(agent)
        return agent

    def destroy(self, handle: DrivingAgent) -> None:
        handle.enabled = False
        self.agents.remove(handle)


def _nearest_ahead(waypoints: list[Point], position: Point) -> int:
    best = min(
        range(len(waypoints)),
        key=lambda i: math.hypot(waypoints[i][0] - position[0], waypoints[i][1] - position[1]),
    )
    return min(best + 1, len(waypoints) - 1)


def main() -> None:
    ap = argparse.ArgumentParser(description="Headless checkpoint race demo")
    ap.add_argument("--track", default="", help="JSON track file (default: generated oval)")
    ap.add_argument("--agents", type=int, default=6, help="Number of agents")
    ap.add_argument("--ticks", type=int, default=400, help="Number of simulation ticks")
    ap.add_argument("--dt", type=float, default=0.1, help="Seconds per tick")
    ap.add_argument("--respawn-every", type=int, default=0, help="Oval: respawn flag every N checkpoints")
    ap.add_argument("--seed", type=int, default=0, help="Random seed")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    if args.track:
        definition = load_track(args.track)
        name, placements = definition.name, definition.placements
    else:
        name, placements = "oval", oval_placements(respawn_every=args.respawn_every)

    factory = DrivingAgentFactory(placements, seed=args.seed)
    engine = RaceEngine(placements, factory, config=EngineConfig.from_env())

    def on_best_changed(previous, new) -> None:
        _logger.info("Leader change at tick %d: %r -> %r", engine.tick_count, previous, new)

    engine.subscribe(on_best_changed)
    engine.set_size(args.agents)

    _logger.info("Track %r: %d checkpoints, length %.1f", name, len(engine.graph), engine.track_length())

    for _ in range(args.ticks):
        for agent in factory.agents:
            agent.step(args.dt)
        engine.tick()
        if engine.leader_score >= 1.0:
            break

    leader = engine.leader()
    second = engine.second_best_agent()
    print(f"Ticks run    : {engine.tick_count}")
    print(f"Leader score : {engine.leader_score:.3f}")
    if leader is not None:
        print(f"Leader       : {leader.handle!r} at ({leader.position[0]:.1f}, {leader.position[1]:.1f})")
    print(f"Second       : {second!r}")
    print(f"Respawn at   : checkpoint {engine.respawn.checkpoint_index}")

    engine.stop()


if __name__ == "__main__":
    main()

"""
fishtank module: world/demo.py

Stand-in simulation so the viewer runs on its own:
- animals swim along their rotation with a per-animal speed
- a small random turn each step keeps them wandering
- positions wrap around the unit square
- food touched by an animal respawns somewhere random

There is no brain or evolution here; plug a real engine in through
world.loader for that.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
import random
from typing import List, Optional, Tuple

import config
from world.snapshot import Food, Organism, WorldSnapshot


@dataclass
class Swimmer:
    x: float
    y: float
    rotation: float
    speed: float
    satiation: int = 0


@dataclass
class Pellet:
    x: float
    y: float
    color: str


def random_color(rng: random.Random) -> str:
    return f"rgb({rng.randrange(256)}, {rng.randrange(256)}, {rng.randrange(256)})"


def wrap_unit(v: float) -> float:
    """Arcade-style wrap back into the unit interval."""
    return v % 1.0


class DemoSimulation:
    def __init__(
        self,
        animals: int = config.DEMO_ANIMALS,
        foods: int = config.DEMO_FOODS,
        seed: Optional[int] = None,
        speed_range: Tuple[float, float] = config.DEMO_SPEED_RANGE,
        turn_sigma: float = config.DEMO_TURN_SIGMA,
        eat_radius: float = config.DEMO_EAT_RADIUS,
    ):
        self.rng = random.Random(seed)
        self.speed_range = speed_range
        self.turn_sigma = turn_sigma
        self.eat_radius = eat_radius
        self.age = 0

        self.animals: List[Swimmer] = [
            Swimmer(
                x=self.rng.random(),
                y=self.rng.random(),
                rotation=self.rng.uniform(0.0, 2.0 * math.pi),
                speed=self.rng.uniform(*speed_range),
            )
            for _ in range(animals)
        ]
        self.foods: List[Pellet] = [
            Pellet(x=self.rng.random(), y=self.rng.random(), color=random_color(self.rng))
            for _ in range(foods)
        ]

    def step(self) -> None:
        self._eat()
        self._steer()
        self._move()
        self.age += 1

    def _eat(self) -> None:
        reach2 = self.eat_radius * self.eat_radius
        for a in self.animals:
            for p in self.foods:
                dx = p.x - a.x
                dy = p.y - a.y
                if dx * dx + dy * dy <= reach2:
                    a.satiation += 1
                    p.x = self.rng.random()
                    p.y = self.rng.random()

    def _steer(self) -> None:
        lo, hi = self.speed_range
        for a in self.animals:
            a.rotation = (a.rotation + self.rng.gauss(0.0, self.turn_sigma)) % (2.0 * math.pi)
            a.speed = max(lo, min(hi, a.speed + self.rng.gauss(0.0, (hi - lo) * 0.05)))

    def _move(self) -> None:
        # heading (0, speed) rotated by the animal's rotation
        for a in self.animals:
            a.x = wrap_unit(a.x - math.sin(a.rotation) * a.speed)
            a.y = wrap_unit(a.y + math.cos(a.rotation) * a.speed)

    def world(self) -> WorldSnapshot:
        return WorldSnapshot(
            foods=tuple(Food(x=p.x, y=p.y, color=p.color) for p in self.foods),
            animals=tuple(Organism(x=a.x, y=a.y, rotation=a.rotation) for a in self.animals),
        )

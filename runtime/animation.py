"""
fishtank module: runtime/animation.py

The per-frame loop. Each tick:
1. clear the visible logical region
2. advance the simulation (steps_per_frame times, default 1)
3. read a fresh world snapshot
4. draw every food, then every organism, in snapshot order
5. re-arm for the next display frame

A bad entity is skipped (or its draw error logged) without touching the rest
of the frame. Errors from the simulation itself propagate.
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from enum import Enum
import inspect
import itertools
import logging
from typing import Any, Callable, Optional, Protocol

import config
from render import renderer
from render.coords import map_length, map_position
from render.viewport import ViewportManager
from world.snapshot import Simulation, WorldSnapshot, food_problem, organism_problem, snapshot_from

log = logging.getLogger(__name__)

_token_ids = itertools.count(1)


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[float], None]) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...


class LoopState(Enum):
    IDLE = 0
    RUNNING = 1
    STOPPED = 2


@dataclass(frozen=True)
class LoopToken:
    """Proof of a particular start(); stop() only honours the current one."""
    id: int


@dataclass
class FrameStats:
    tick: int = 0
    foods_drawn: int = 0
    animals_drawn: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def drawn(self) -> int:
        return self.foods_drawn + self.animals_drawn


async def _wait(awaitable):
    return await awaitable


def _settle(value: Any) -> Any:
    # async collaborators finish before anything is drawn
    if inspect.isawaitable(value):
        return asyncio.run(_wait(value))
    return value


class AnimationLoop:
    def __init__(
        self,
        simulation: Simulation,
        viewport: ViewportManager,
        scheduler: FrameScheduler,
        steps_per_frame: int = config.STEPS_PER_FRAME,
        validate: bool = config.VALIDATE_SNAPSHOT,
        draw_food: Callable[..., None] = renderer.draw_food,
        draw_organism: Callable[..., None] = renderer.draw_organism,
    ):
        if steps_per_frame < 0:
            raise ValueError(f"steps_per_frame must be >= 0, got {steps_per_frame}")
        self.simulation = simulation
        self.viewport = viewport
        self.scheduler = scheduler
        self.steps_per_frame = steps_per_frame
        self.validate = validate
        self.draw_food = draw_food
        self.draw_organism = draw_organism

        self.state = LoopState.IDLE
        self.ticks = 0
        self.last_stats: Optional[FrameStats] = None
        self._token: Optional[LoopToken] = None
        self._handle: Optional[int] = None

    @property
    def running(self) -> bool:
        return self.state == LoopState.RUNNING

    def start(self) -> LoopToken:
        if self._token is not None and self.running:
            return self._token
        self._token = LoopToken(id=next(_token_ids))
        self.state = LoopState.RUNNING
        log.info("animation loop started (%d step(s) per frame)", self.steps_per_frame)
        self._arm()
        return self._token

    def stop(self, token: LoopToken) -> bool:
        """Stop the loop started with ``token``. Stale tokens are ignored."""
        if token != self._token or not self.running:
            log.debug("ignoring stop for stale loop token %s", token)
            return False
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None
        self.state = LoopState.STOPPED
        log.info("animation loop stopped after %d tick(s)", self.ticks)
        return True

    def _arm(self) -> None:
        self._handle = self.scheduler.request_frame(self._on_frame)

    def _on_frame(self, timestamp: float) -> None:
        self._handle = None
        if not self.running:
            return
        token = self._token
        try:
            self.tick()
        except BaseException:
            # nothing is queued any more; let start() arm a fresh chain
            if token == self._token:
                self.state = LoopState.STOPPED
            log.error("animation loop halted at tick %d", self.ticks, exc_info=True)
            raise
        # stop() may have been called from inside the tick
        if self.running and token == self._token:
            self._arm()

    def tick(self) -> FrameStats:
        """Advance the simulation and redraw one frame."""
        self.ticks += 1
        stats = FrameStats(tick=self.ticks)

        self.viewport.clear()

        for _ in range(self.steps_per_frame):
            _settle(self.simulation.step())
        world = snapshot_from(_settle(self.simulation.world()))

        for reason in world.dropped:
            log.debug("skipping %s", reason)
        stats.skipped += len(world.dropped)

        self._draw_foods(world, stats)
        self._draw_animals(world, stats)

        self.last_stats = stats
        if config.STATS_LOG_EVERY and self.ticks % config.STATS_LOG_EVERY == 0:
            log.debug(
                "tick %d: %d food, %d animals, %d skipped, %d failed",
                stats.tick, stats.foods_drawn, stats.animals_drawn, stats.skipped, stats.failed,
            )
        return stats

    def _draw_foods(self, world: WorldSnapshot, stats: FrameStats) -> None:
        vp = self.viewport.state
        ctx = self.viewport.context
        radius = map_length(vp, config.FOOD_RADIUS_FACTOR)
        for i, food in enumerate(world.foods):
            try:
                if self.validate:
                    problem = food_problem(food)
                    if problem:
                        log.debug("skipping food #%d: %s", i, problem)
                        stats.skipped += 1
                        continue
                x, y = map_position(vp, food.x, food.y)
                self.draw_food(ctx, x, y, radius, food.color)
            except Exception:
                log.warning("failed to draw food #%d", i, exc_info=True)
                stats.failed += 1
                continue
            stats.foods_drawn += 1

    def _draw_animals(self, world: WorldSnapshot, stats: FrameStats) -> None:
        vp = self.viewport.state
        ctx = self.viewport.context
        size = map_length(vp, config.ORGANISM_SIZE_FACTOR)
        for i, animal in enumerate(world.animals):
            try:
                if self.validate:
                    problem = organism_problem(animal)
                    if problem:
                        log.debug("skipping animal #%d: %s", i, problem)
                        stats.skipped += 1
                        continue
                x, y = map_position(vp, animal.x, animal.y)
                self.draw_organism(ctx, x, y, size, animal.rotation)
            except Exception:
                log.warning("failed to draw animal #%d", i, exc_info=True)
                stats.failed += 1
                continue
            stats.animals_drawn += 1

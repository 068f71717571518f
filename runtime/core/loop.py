"""
Fixed timestep tick loop.

Conversation logic (input forwarding, reveal timing) runs at a fixed
rate no matter how fast frames arrive. Frame time is accumulated and
drained in fixed-size ticks.

Usage:
    loop = TickLoop(config, adapter.update)
    loop.run(lambda: engine.is_active)
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import pygame

from runtime.core.config import DialogueConfig


logger = logging.getLogger(__name__)


class TickLoop:
    """
    Drives a tick callback at a fixed timestep.

    The callback always receives config.fixed_timestep as dt.
    """

    def __init__(
        self,
        config: DialogueConfig | None,
        on_tick: Callable[[float], None],
        target_fps: int = 60,
    ):
        self.config = config or DialogueConfig()
        self.on_tick = on_tick
        self.target_fps = target_fps

        self._accumulator = 0.0
        self._running = False
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def alpha(self) -> float:
        """Fraction of a tick left in the accumulator (0-1)."""
        return self._accumulator / self.config.fixed_timestep

    def advance(self, frame_time: float) -> int:
        """
        Feed elapsed frame time and run any ticks that are due.

        Returns:
            Number of ticks executed
        """
        # Prevent spiral of death
        if frame_time > self.config.max_frame_time:
            frame_time = self.config.max_frame_time

        self._accumulator += frame_time
        step = self.config.fixed_timestep

        ticks = 0
        while self._accumulator >= step:
            self.on_tick(step)
            self._accumulator -= step
            ticks += 1
            self.tick_count += 1

            if ticks >= self.config.max_frame_skip:
                logger.debug("Dropping %.4fs of backlog after %d ticks", self._accumulator, ticks)
                self._accumulator = 0.0
                break

        return ticks

    def run(self, should_continue: Callable[[], bool]) -> None:
        """Run until should_continue() returns False or stop() is called."""
        self._running = True
        clock = pygame.time.Clock()
        current_time = time.perf_counter()

        while self._running and should_continue():
            new_time = time.perf_counter()
            self.advance(new_time - current_time)
            current_time = new_time

            # Cap framerate
            clock.tick(self.target_fps)

        self._running = False

    def stop(self) -> None:
        """Request the loop to exit after the current frame."""
        self._running = False

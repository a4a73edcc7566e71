"""Frame-driven game loop with capped delta time."""
from __future__ import annotations

import time
from typing import Callable

DT_MAX = 0.1


class FrameLoop:
    """Runs exactly one simulation tick per rendered frame.

    The delta time handed to ``update`` is capped at ``max_dt`` so a long
    stall (window dragged, process suspended) cannot produce one huge step.
    """

    def __init__(
        self,
        update: Callable[[float], None],
        render: Callable[[], None],
        process_events: Callable[[], None],
        max_dt: float = DT_MAX,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.update = update
        self.render = render
        self.process_events = process_events
        self.max_dt = max_dt
        self.clock = clock
        self.frames = 0
        self._running = False
        self._last_time: float | None = None

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def step(self) -> float:
        """Run a single frame and return the delta time that was simulated."""

        now = self.clock()
        if self._last_time is None:
            self._last_time = now
        frame_time = max(0.0, now - self._last_time)
        self._last_time = now
        dt = min(self.max_dt, frame_time)
        self.process_events()
        if not self._running:
            return 0.0
        self.update(dt)
        self.render()
        self.frames += 1
        return dt

    def start(self) -> None:
        self._running = True
        self._last_time = self.clock()

    def run(self) -> None:
        self.start()
        while self._running:
            self.step()


__all__ = ["DT_MAX", "FrameLoop"]

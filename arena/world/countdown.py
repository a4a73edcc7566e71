"""Round countdown and scoreboard."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from arena.engine.events import CountdownStarted, EventQueue, RoundStarted
from arena.world.actors import FIGHTER_COLORS

INTERVAL_LENGTH = 0.65
INTERVAL_COUNT = 3
NEUTRAL_FLASH = "#ff4d4d"
FLASH_DECAY = 0.01


class Countdown:
    """Counts ``INTERVAL_COUNT`` intervals, then posts ``RoundStarted``."""

    def __init__(
        self,
        events: EventQueue,
        interval_length: float = INTERVAL_LENGTH,
        interval_count: int = INTERVAL_COUNT,
    ) -> None:
        self.events = events
        self.interval_length = interval_length
        self.interval_count = interval_count
        self.count = 0
        self.running = False
        self.flash_color = NEUTRAL_FLASH
        self.flash_opacity = 1.0
        self._elapsed = 0.0

    def start(self, winner: Optional[int] = None) -> None:
        self.count = self.interval_count
        self.running = True
        self.flash_opacity = 1.0
        self._elapsed = 0.0
        if winner is not None and 0 <= winner < len(FIGHTER_COLORS):
            self.flash_color = FIGHTER_COLORS[winner]
        else:
            self.flash_color = NEUTRAL_FLASH
        self.events.post(CountdownStarted(winner=winner))

    def stop(self) -> None:
        self.running = False
        self.count = 0
        self.events.post(RoundStarted())

    def update(self, dt: float) -> None:
        if not self.running:
            return
        self.flash_opacity = max(self.flash_opacity - FLASH_DECAY, 0.0)
        self._elapsed += dt
        while self.running and self._elapsed >= self.interval_length:
            self._elapsed -= self.interval_length
            if self.count > 1:
                self.count -= 1
            else:
                self.stop()


@dataclass
class Scoreboard:
    scores: List[int] = field(default_factory=lambda: [0, 0])

    def increment(self, winner: int) -> None:
        while len(self.scores) <= winner:
            self.scores.append(0)
        self.scores[winner] += 1

    def leader(self) -> Optional[int]:
        best = max(self.scores)
        leaders = [index for index, score in enumerate(self.scores) if score == best]
        return leaders[0] if len(leaders) == 1 else None


__all__ = ["Countdown", "INTERVAL_COUNT", "INTERVAL_LENGTH", "Scoreboard"]

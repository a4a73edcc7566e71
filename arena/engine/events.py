"""Typed event queue for round flow between arena systems."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional, Union


@dataclass(frozen=True, slots=True)
class RoundFinished:
    """A strike landed; ``winner`` is the fighter index that scored."""

    winner: int


@dataclass(frozen=True, slots=True)
class CountdownStarted:
    winner: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RoundStarted:
    pass


@dataclass(frozen=True, slots=True)
class PauseToggled:
    paused: bool


GameEvent = Union[RoundFinished, CountdownStarted, RoundStarted, PauseToggled]


class EventQueue:
    """FIFO of game events drained once per tick."""

    def __init__(self) -> None:
        self._events: Deque[GameEvent] = deque()
        self.history: List[GameEvent] = []

    def post(self, event: GameEvent) -> None:
        self._events.append(event)
        self.history.append(event)
        if len(self.history) > 256:
            del self.history[: len(self.history) - 256]

    def drain(self) -> Iterator[GameEvent]:
        """Yield queued events, including any posted while draining."""

        while self._events:
            yield self._events.popleft()

    def __len__(self) -> int:
        return len(self._events)


__all__ = [
    "CountdownStarted",
    "EventQueue",
    "GameEvent",
    "PauseToggled",
    "RoundFinished",
    "RoundStarted",
]

"""Global frame counter shared by the simulation and telemetry."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class _FrameClock:
    """Tracks the current simulation frame index."""

    _frame: int = 0

    def advance(self) -> int:
        """Advance the frame counter and return the new value."""

        self._frame += 1
        return self._frame

    def current(self) -> int:
        return self._frame


_frame_clock = _FrameClock()


def advance_frame() -> int:
    """Advance the shared simulation frame index."""

    return _frame_clock.advance()


def current_frame() -> int:
    """Return the current simulation frame index."""

    return _frame_clock.current()


__all__ = ["advance_frame", "current_frame"]

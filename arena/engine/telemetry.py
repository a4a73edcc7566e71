"""Lightweight runtime telemetry for the light-cone solver caches."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from arena.engine.logger import ChannelLogger


@dataclass
class PositionCacheSnapshot:
    frame: int
    hits: int
    misses: int
    duplicates: int
    entities: int
    solves_by_kind: Dict[str, int]

    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total <= 0:
            return 0.0
        return self.hits / total


@dataclass
class PositionCacheTelemetry:
    """Tracks cache efficiency of derived entity positions.

    A duplicate is a second solve of the same derived position for the same
    entity within one frame, which only happens when the entity or the
    observer was written to between reads.
    """

    frame: int = -1
    hits: int = 0
    misses: int = 0
    duplicates: int = 0
    _solved: Dict[Tuple[int, str], int] = field(default_factory=dict)
    _solves_by_kind: Dict[str, int] = field(default_factory=dict)
    _log_accumulator: float = 0.0

    def begin_frame(self, frame: int) -> None:
        if frame != self.frame:
            self.frame = frame
            self.hits = 0
            self.misses = 0
            self.duplicates = 0
            self._solved.clear()
            self._solves_by_kind.clear()

    def record_hit(self, frame: int) -> None:
        self.begin_frame(frame)
        self.hits += 1

    def record_miss(self, frame: int, entity_id: int, kind: str) -> None:
        self.begin_frame(frame)
        self.misses += 1
        key = (entity_id, kind)
        if self._solved.get(key) == frame:
            self.duplicates += 1
        self._solved[key] = frame
        self._solves_by_kind[kind] = self._solves_by_kind.get(kind, 0) + 1

    def advance_time(self, dt: float, logger: ChannelLogger | None = None) -> None:
        self._log_accumulator += dt
        if self._log_accumulator >= 2.5:
            self._log_accumulator = 0.0
            if logger and logger.enabled:
                snapshot = self.snapshot()
                logger.info(
                    "Position cache: hits=%d misses=%d duplicates=%d entities=%d hit_rate=%.2f",
                    snapshot.hits,
                    snapshot.misses,
                    snapshot.duplicates,
                    snapshot.entities,
                    snapshot.hit_rate(),
                )

    def snapshot(self) -> PositionCacheSnapshot:
        return PositionCacheSnapshot(
            frame=self.frame,
            hits=self.hits,
            misses=self.misses,
            duplicates=self.duplicates,
            entities=len({entity_id for entity_id, _ in self._solved}),
            solves_by_kind=dict(self._solves_by_kind),
        )


_position_telemetry = PositionCacheTelemetry()


def record_position_hit(frame: int) -> None:
    _position_telemetry.record_hit(frame)


def record_position_miss(frame: int, entity_id: int, kind: str) -> None:
    _position_telemetry.record_miss(frame, entity_id, kind)


def position_cache_snapshot() -> PositionCacheSnapshot:
    return _position_telemetry.snapshot()


def position_cache_telemetry() -> PositionCacheTelemetry:
    return _position_telemetry


__all__ = [
    "PositionCacheSnapshot",
    "PositionCacheTelemetry",
    "position_cache_snapshot",
    "position_cache_telemetry",
    "record_position_hit",
    "record_position_miss",
]

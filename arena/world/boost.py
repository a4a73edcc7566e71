"""Boost planning: map a dragged screen vector onto a velocity change."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol, TYPE_CHECKING

from arena.engine.logger import ChannelLogger
from arena.math.vectors import MAX_SPEED, Vec2, Vec3, clamp_speed

if TYPE_CHECKING:
    from arena.world.observer import Observer


class BoostCurve(Protocol):
    """Maps a planned boost magnitude onto a coordinate speed below 1."""

    max_speed: float

    def speed(self, magnitude: float) -> float:
        ...


@dataclass
class LinearBoostCurve:
    rate: float = 0.5
    max_speed: float = MAX_SPEED

    def speed(self, magnitude: float) -> float:
        return min(self.max_speed, max(0.0, magnitude) * self.rate)


@dataclass
class ExponentialBoostCurve:
    """Saturating curve; strictly increasing for every finite input."""

    rate: float = 1.0
    max_speed: float = MAX_SPEED

    def speed(self, magnitude: float) -> float:
        return self.max_speed * -math.expm1(-max(0.0, magnitude) * self.rate)


@dataclass
class QuadraticBoostCurve:
    rate: float = 0.25
    max_speed: float = MAX_SPEED

    def speed(self, magnitude: float) -> float:
        magnitude = max(0.0, magnitude)
        return min(self.max_speed, magnitude * magnitude * self.rate)


def make_boost_curve(name: str, max_speed: float = MAX_SPEED) -> BoostCurve:
    curves = {
        "linear": LinearBoostCurve,
        "exponential": ExponentialBoostCurve,
        "quadratic": QuadraticBoostCurve,
    }
    try:
        curve_cls = curves[name]
    except KeyError:
        raise ValueError(f"Unknown boost curve {name!r}") from None
    return curve_cls(max_speed=max_speed)


def screen_to_boost(screen: Vec2, curve: BoostCurve) -> Vec3:
    """Three-velocity for a planned screen-space boost vector."""

    magnitude = screen.mag()
    if magnitude <= 0.0:
        return Vec3.rest()
    direction = screen * (1.0 / magnitude)
    return (direction * curve.speed(magnitude)).vel3()


def compose_boost(velocity: Vec3, boost: Vec3, max_speed: float = MAX_SPEED) -> Vec3:
    """Apply ``boost`` (given in the rest frame of ``velocity``) on top of ``velocity``.

    The result is never a replacement of the current velocity: the boost is
    composed onto it, so equal boosts in a different order end up pointing in
    different directions.
    """

    composed = boost.boost(velocity)
    coordinate = composed.vel2()
    if coordinate.mag() > max_speed:
        return clamp_speed(coordinate, max_speed).vel3()
    return composed


def apply_thrust(
    velocity: Vec3,
    direction: Vec2,
    acceleration: float,
    drag: float,
    dt: float,
    max_speed: float = MAX_SPEED,
) -> Vec3:
    """Velocity after ``dt`` of thrust along ``direction`` (rest-frame, length <= 1).

    Without thrust the spatial part of the three-velocity decays exponentially
    with ``drag``.
    """

    if direction.mag_sq() > 0.0:
        length = direction.mag()
        if length > 1.0:
            direction = direction * (1.0 / length)
        delta = clamp_speed(direction * (acceleration * dt), max_speed)
        return compose_boost(velocity, delta.vel3(), max_speed)
    if drag <= 0.0:
        return velocity
    return (velocity.space() * math.exp(-drag * dt)).space_to_vel3()


class BoostPlanner:
    """Owns the boost curve and applies planned boosts to the observer."""

    def __init__(self, curve: BoostCurve, logger: Optional[ChannelLogger] = None) -> None:
        self.curve = curve
        self.logger = logger

    def plan(self, observer: "Observer", screen: Optional[Vec2]) -> None:
        observer.action.planned_boost = screen

    def preview(self, observer: "Observer") -> Optional[Vec3]:
        """Velocity the observer would have if the current plan were committed."""

        planned = observer.action.planned_boost
        if planned is None:
            return None
        return compose_boost(
            observer.velocity, screen_to_boost(planned, self.curve), self.curve.max_speed
        )

    def commit(self, observer: "Observer") -> bool:
        new_velocity = self.preview(observer)
        observer.action.planned_boost = None
        if new_velocity is None:
            return False
        before = observer.velocity.vel2().mag()
        observer.velocity = new_velocity
        if self.logger and self.logger.enabled:
            self.logger.info(
                "Boost committed: speed %.3f -> %.3f",
                before,
                new_velocity.vel2().mag(),
            )
        return True


__all__ = [
    "BoostCurve",
    "BoostPlanner",
    "ExponentialBoostCurve",
    "LinearBoostCurve",
    "QuadraticBoostCurve",
    "apply_thrust",
    "compose_boost",
    "make_boost_curve",
    "screen_to_boost",
]

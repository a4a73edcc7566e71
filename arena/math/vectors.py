"""Minkowski-space vector types for 2+1 dimensional spacetime.

All velocities use units where the speed of light is 1. A ``Vec2`` is either
a spatial offset or a coordinate velocity; a ``Vec3`` is a spacetime point
``(t, x, y)`` or a three-velocity ``(gamma, gamma * vx, gamma * vy)``.

Relativistic velocity composition is **neither commutative nor
associative**: ``a.boost(b)`` has the same magnitude as ``b.boost(a)`` but
points in a different direction (Thomas rotation), and grouping matters as
well. Callers must pick the order deliberately.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from pygame.math import Vector2

# Highest coordinate speed any velocity composition may produce.
MAX_SPEED = 0.999
# Below this reference speed the Lorentz factor rounds to exactly 1.
BOOST_EPSILON = 1e-9


@dataclass(frozen=True)
class Vec2:
    """Spatial offset or coordinate velocity."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_pygame(cls, vector: Vector2) -> "Vec2":
        return cls(float(vector.x), float(vector.y))

    def to_pygame(self) -> Vector2:
        return Vector2(self.x, self.y)

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scale: float) -> "Vec2":
        return Vec2(self.x * scale, self.y * scale)

    def __rmul__(self, scale: float) -> "Vec2":
        return self.__mul__(scale)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def mag_sq(self) -> float:
        return self.x * self.x + self.y * self.y

    def mag(self) -> float:
        return math.sqrt(self.mag_sq())

    def gamma(self) -> float:
        """Lorentz factor for this coordinate velocity."""

        return 1.0 / math.sqrt(1.0 - self.mag_sq())

    def boost(self, reference: Union["Vec2", "Vec3"]) -> "Vec2":
        """Relativistic velocity sum.

        Returns the overall velocity of an object moving with this velocity
        inside a local frame, measured from a frame in which the local frame
        moves with ``reference``. A ``Vec3`` reference is read as a
        three-velocity.
        """

        if isinstance(reference, Vec3):
            reference = reference.vel2()
        dot = self.dot(reference)
        speed_factor = 1.0 / (1.0 + dot)
        gamma = reference.gamma()
        this_scale = 1.0 / gamma
        if reference.mag() < BOOST_EPSILON:
            reference_scale = 1.0
        else:
            reference_scale = 1.0 + (gamma - 1.0) * dot * this_scale / reference.mag_sq()
        return (self * this_scale + reference * reference_scale) * speed_factor

    def vel3(self) -> "Vec3":
        """Three-velocity equivalent of this coordinate velocity."""

        gamma = self.gamma()
        return Vec3(gamma, gamma * self.x, gamma * self.y)

    def space_to_vel3(self) -> "Vec3":
        """Three-velocity with these spatial components, inferring ``t``."""

        return Vec3(math.sqrt(self.mag_sq() + 1.0), self.x, self.y)

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def is_close(self, other: "Vec2", tolerance: float = 1e-9) -> bool:
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance


@dataclass(frozen=True)
class Vec3:
    """Three-vector in 2+1 Minkowski spacetime with signature (+, -, -)."""

    t: float = 0.0
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def rest(cls) -> "Vec3":
        """Three-velocity of a worldline at rest."""

        return cls(1.0, 0.0, 0.0)

    @classmethod
    def from_velocity(cls, velocity: Vec2, max_speed: float = MAX_SPEED) -> "Vec3":
        """Clamped three-velocity for a coordinate velocity."""

        return clamp_speed(velocity, max_speed).vel3()

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.t + other.t, self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.t - other.t, self.x - other.x, self.y - other.y)

    def __mul__(self, scale: float) -> "Vec3":
        return Vec3(self.t * scale, self.x * scale, self.y * scale)

    def __rmul__(self, scale: float) -> "Vec3":
        return self.__mul__(scale)

    def dot(self, other: "Vec3") -> float:
        """Minkowski inner product; similar spacelike vectors give a negative value."""

        return self.t * other.t - self.x * other.x - self.y * other.y

    def boost(self, reference: Union[Vec2, "Vec3"]) -> "Vec3":
        """Active Lorentz boost.

        Transforms this vector from a local frame into a frame in which the
        local frame moves with ``reference``. Applied to a three-velocity
        this is the relativistic velocity sum, so ``Vec3.rest().boost(v)``
        equals ``v.vel3()`` and ``a.boost(b).boost(b.inv())`` recovers ``a``.
        """

        if isinstance(reference, Vec2):
            reference = reference.vel3()
        this_space = self.space()
        reference_space = reference.space()
        spatial_dot = reference_space.dot(this_space)
        reference_scale = spatial_dot / (reference.t + 1.0) + self.t
        space = this_space + reference_space * reference_scale
        return Vec3(self.t * reference.t + spatial_dot, space.x, space.y)

    def inv(self) -> "Vec3":
        """This vector with the spatial part negated."""

        return Vec3(self.t, -self.x, -self.y)

    def interval(self) -> float:
        """Spacetime interval; positive if timelike, negative if spacelike."""

        return self.t * self.t - self.x * self.x - self.y * self.y

    def vel2(self) -> Vec2:
        """Coordinate velocity of this three-velocity."""

        return Vec2(self.x / self.t, self.y / self.t)

    def space(self) -> Vec2:
        return Vec2(self.x, self.y)

    def is_close(self, other: "Vec3", tolerance: float = 1e-9) -> bool:
        return (
            abs(self.t - other.t) <= tolerance
            and abs(self.x - other.x) <= tolerance
            and abs(self.y - other.y) <= tolerance
        )


def clamp_speed(velocity: Vec2, max_speed: float = MAX_SPEED) -> Vec2:
    """Rescale a coordinate velocity so its magnitude stays below ``max_speed``."""

    speed = velocity.mag()
    if speed <= max_speed:
        return velocity
    return velocity * (max_speed / speed)


__all__ = ["BOOST_EPSILON", "MAX_SPEED", "Vec2", "Vec3", "clamp_speed"]

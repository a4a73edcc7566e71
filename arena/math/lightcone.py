"""Worldline intersections with light cones and planes of simultaneity."""
from __future__ import annotations

import math
from typing import Literal, Optional

from arena.math.vectors import Vec3

ConeSide = Literal["past", "future"]

# Below this 1 - |v|^2 the cone equation is treated as linear.
LIGHTLIKE_EPSILON = 1e-12


def now_intersection(
    line_position: Vec3,
    line_velocity: Vec3,
    now_position: Vec3,
    now_velocity: Optional[Vec3] = None,
) -> Vec3:
    """Point on a worldline simultaneous with ``now_position``.

    Without ``now_velocity`` this is the point where ``t == now_position.t``.
    With it, simultaneity is taken in the frame comoving with
    ``now_velocity``, i.e. on the moving observer's plane of simultaneity.
    """

    rel_position = line_position - now_position
    rel_velocity = line_velocity
    if now_velocity is not None:
        inverse = now_velocity.inv()
        rel_position = rel_position.boost(inverse)
        rel_velocity = rel_velocity.boost(inverse)

    rel_result = rel_position + rel_velocity * (-rel_position.t / rel_velocity.t)
    if now_velocity is not None:
        rel_result = rel_result.boost(now_velocity)
    return now_position + rel_result


def light_cone_intersection(
    line_position: Vec3,
    line_velocity: Vec3,
    cone_position: Vec3,
    which: ConeSide = "past",
) -> Vec3:
    """Point where a worldline crosses the light cone of ``cone_position``.

    With ``tau`` the coordinate time measured from the cone apex, the line is
    ``p0 + v * tau`` and the cone is ``|p|^2 == tau^2``. Expanding gives

        (1 - |v|^2) tau^2 - 2 (p0 . v) tau - |p0|^2 == 0

    whose roots are ``(p0.v +/- sqrt((p0.v)^2 + (1 - |v|^2)|p0|^2)) / (1 - |v|^2)``.
    The ``+`` root lies on the future cone and the ``-`` root on the past cone.
    """

    if which == "future":
        sign = 1.0
    elif which == "past":
        sign = -1.0
    else:
        raise ValueError(f"Unknown light cone side {which!r}")

    line_vel2 = line_velocity.vel2()
    assert line_vel2.mag_sq() < 1.0, "worldline velocity must stay below light speed"

    p0 = (now_intersection(line_position, line_velocity, cone_position) - cone_position).space()
    tau = cone_root(p0.dot(line_vel2), p0.mag_sq(), 1.0 - line_vel2.mag_sq(), sign)
    dt = tau + cone_position.t - line_position.t
    return line_position + line_velocity * (dt / line_velocity.t)


def cone_root(dot: float, distance_sq: float, inv_gamma_sq: float, sign: float) -> float:
    """Root of ``inv_gamma_sq tau^2 - 2 dot tau - distance_sq == 0`` on one cone side.

    ``sign`` is ``+1`` for the future cone and ``-1`` for the past cone. The
    discriminant is clamped at 0. When the ``sign`` root would suffer
    cancellation it is evaluated as ``-distance_sq / (dot - sign * root)``,
    which tends to the linear root ``-distance_sq / (2 dot)`` as the line
    approaches light speed. A (nearly) lightlike line moving away from that
    side never crosses it; the simultaneity point (``tau == 0``) is returned.
    """

    discriminant = max(0.0, dot * dot + inv_gamma_sq * distance_sq)
    root = math.sqrt(discriminant)
    if dot * sign < 0.0:
        return -distance_sq / (dot - sign * root)
    if inv_gamma_sq < LIGHTLIKE_EPSILON:
        return 0.0
    return (dot + sign * root) / inv_gamma_sq


def cone_residual(point: Vec3, cone_position: Vec3) -> float:
    """How far ``point`` is from the light cone of ``cone_position`` (0 when on it)."""

    return (point - cone_position).interval()


__all__ = [
    "ConeSide",
    "cone_residual",
    "cone_root",
    "light_cone_intersection",
    "now_intersection",
]

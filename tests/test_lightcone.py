"""Tests for worldline / light-cone intersections."""
from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from arena.math.lightcone import (
    cone_residual,
    cone_root,
    light_cone_intersection,
    now_intersection,
)
from arena.math.vectors import Vec2, Vec3


def test_worldline_at_rest_meets_past_cone_at_apex_time() -> None:
    result = light_cone_intersection(Vec3(), Vec3.rest(), Vec3(10.0, 0.0, 0.0), "past")
    assert result.is_close(Vec3(10.0, 0.0, 0.0))


def test_offset_worldline_at_rest() -> None:
    cone = Vec3(10.0, 3.0, 4.0)
    past = light_cone_intersection(Vec3(), Vec3.rest(), cone, "past")
    future = light_cone_intersection(Vec3(), Vec3.rest(), cone, "future")
    assert past.is_close(Vec3(5.0, 0.0, 0.0))
    assert future.is_close(Vec3(15.0, 0.0, 0.0))
    assert cone_residual(past, cone) == pytest.approx(0.0, abs=1e-9)
    assert cone_residual(future, cone) == pytest.approx(0.0, abs=1e-9)


def test_moving_worldline_past_cone() -> None:
    line_velocity = Vec2(0.6, 0.0).vel3()
    cone = Vec3(10.0, 5.0, 0.0)
    result = light_cone_intersection(Vec3(), line_velocity, cone, "past")
    assert result.t < cone.t
    assert result.is_close(Vec3(9.375, 5.625, 0.0), 1e-9)
    # Still on the worldline x = 0.6 t.
    assert result.x == pytest.approx(0.6 * result.t)
    assert cone_residual(result, cone) == pytest.approx(0.0, abs=1e-9)


def test_result_does_not_depend_on_reference_point_on_line() -> None:
    velocity = Vec2(-0.3, 0.4).vel3()
    start = Vec3(-2.0, 1.0, 1.0)
    later = start + velocity * 3.0
    cone = Vec3(6.0, -1.0, 2.0)
    first = light_cone_intersection(start, velocity, cone, "past")
    second = light_cone_intersection(later, velocity, cone, "past")
    assert first.is_close(second, 1e-9)


def test_future_cone_lies_after_apex() -> None:
    velocity = Vec2(0.2, -0.5).vel3()
    cone = Vec3(4.0, 1.0, 1.0)
    result = light_cone_intersection(Vec3(), velocity, cone, "future")
    assert result.t > cone.t
    assert cone_residual(result, cone) == pytest.approx(0.0, abs=1e-9)


def test_unknown_cone_side_raises() -> None:
    with pytest.raises(ValueError):
        light_cone_intersection(Vec3(), Vec3.rest(), Vec3(), "sideways")  # type: ignore[arg-type]


def test_now_intersection_in_rest_frame() -> None:
    velocity = Vec2(0.5, 0.0).vel3()
    result = now_intersection(Vec3(), velocity, Vec3(4.0, 0.0, 0.0))
    assert result.t == pytest.approx(4.0)
    assert result.x == pytest.approx(2.0)


def test_now_intersection_for_moving_observer_is_simultaneous_in_its_frame() -> None:
    observer_position = Vec3(3.0, 1.0, 0.0)
    observer_velocity = Vec2(0.5, 0.2).vel3()
    result = now_intersection(Vec3(), Vec3.rest(), observer_position, observer_velocity)
    relative = (result - observer_position).boost(observer_velocity.inv())
    assert relative.t == pytest.approx(0.0, abs=1e-9)
    assert result.x == pytest.approx(0.0)
    assert result.y == pytest.approx(0.0)


def test_cone_apex_on_worldline_is_a_fixed_point() -> None:
    point = Vec3(3.0, 1.0, -2.0)
    velocity = Vec2(0.4, 0.7).vel3()
    assert light_cone_intersection(point, velocity, point, "past").is_close(point)
    assert light_cone_intersection(point, velocity, point, "future").is_close(point)


def _is_finite(point: Vec3) -> bool:
    return all(math.isfinite(component) for component in (point.t, point.x, point.y))


def test_near_lightlike_worldline_stays_finite() -> None:
    speed = math.sqrt(1.0 - 1e-13)
    velocity = Vec2(speed, 0.0).vel3()
    cone = Vec3(0.0, 5.0, 0.0)
    future = light_cone_intersection(Vec3(), velocity, cone, "future")
    past = light_cone_intersection(Vec3(), velocity, cone, "past")
    assert _is_finite(future)
    assert _is_finite(past)
    assert future.t == pytest.approx(2.5)
    assert future.x == pytest.approx(2.5)
    assert cone_residual(future, cone) == pytest.approx(0.0, abs=1e-6)
    # Racing towards the apex at light speed, the line never crossed its past cone.
    assert past.t <= cone.t


def test_near_lightlike_worldline_receding_meets_past_cone() -> None:
    speed = math.sqrt(1.0 - 1e-13)
    velocity = Vec2(-speed, 0.0).vel3()
    cone = Vec3(0.0, 5.0, 0.0)
    past = light_cone_intersection(Vec3(), velocity, cone, "past")
    future = light_cone_intersection(Vec3(), velocity, cone, "future")
    assert past.t == pytest.approx(-2.5)
    assert past.x == pytest.approx(2.5)
    assert cone_residual(past, cone) == pytest.approx(0.0, abs=1e-6)
    assert _is_finite(future)
    assert future.t >= cone.t


def test_tangent_configuration_has_double_root() -> None:
    # Apex on the worldline: the discriminant is exactly zero.
    velocity = Vec2(0.3, -0.2).vel3()
    apex = Vec3(2.0, 0.6, -0.4)
    past = light_cone_intersection(Vec3(), velocity, apex, "past")
    future = light_cone_intersection(Vec3(), velocity, apex, "future")
    assert past.is_close(apex, 1e-9)
    assert future.is_close(apex, 1e-9)


def test_negative_discriminant_is_clamped() -> None:
    # Only reachable when the speed precondition is violated.
    past = cone_root(0.1, 1.0, -0.5, -1.0)
    future = cone_root(0.1, 1.0, -0.5, 1.0)
    assert past == pytest.approx(-10.0)
    assert future == 0.0
    assert math.isfinite(cone_root(-0.1, 1.0, -0.5, -1.0))


def test_cone_root_picks_side() -> None:
    assert cone_root(0.0, 25.0, 1.0, -1.0) == pytest.approx(-5.0)
    assert cone_root(0.0, 25.0, 1.0, 1.0) == pytest.approx(5.0)
    assert cone_root(0.6, 1.0, 0.64, -1.0) == pytest.approx(-0.625)

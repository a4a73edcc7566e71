"""Tests for rectangle obstacles and the overlap test."""
from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest
from pygame.math import Vector2

sys.path.append(str(Path(__file__).resolve().parents[1]))

from arena.world.obstacle import ObstacleRegistry, Rectangle, collide, rotate_rectangle


def test_overlap_points_from_first_to_second_shape() -> None:
    a = Rectangle.from_center(Vector2(0.0, 0.0), 1.0, 1.0)
    b = Rectangle.from_center(Vector2(0.8, 0.0), 1.0, 1.0)
    overlap = collide(a, b)
    assert overlap is not None
    assert overlap.x == pytest.approx(0.2)
    assert overlap.y == pytest.approx(0.0)
    reverse = collide(b, a)
    assert reverse.x == pytest.approx(-0.2)


def test_separated_shapes_do_not_collide() -> None:
    a = Rectangle.from_center(Vector2(0.0, 0.0), 1.0, 1.0)
    b = Rectangle.from_center(Vector2(1.5, 0.0), 1.0, 1.0)
    assert collide(a, b) is None


def test_touching_edges_do_not_collide() -> None:
    a = Rectangle.from_center(Vector2(0.0, 0.0), 1.0, 1.0)
    b = Rectangle.from_center(Vector2(1.0, 0.0), 1.0, 1.0)
    assert collide(a, b) is None


def test_rotation_turns_a_long_box() -> None:
    box = Rectangle.from_center(Vector2(0.0, 0.0), 4.0, 0.5)
    marker = Rectangle.from_center(Vector2(0.0, 1.5), 0.2, 0.2)
    assert collide(box, marker) is None
    turned = rotate_rectangle(box, math.pi / 2)
    assert collide(turned, marker) is not None
    assert turned.center().x == pytest.approx(0.0)


def test_registry_reports_other_solid_obstacles() -> None:
    registry = ObstacleRegistry()
    registry.update("a", Rectangle.from_center(Vector2(0.0, 0.0), 1.0, 1.0))
    registry.update("b", Rectangle.from_center(Vector2(0.5, 0.0), 1.0, 1.0))
    registry.update("ghost", Rectangle.from_center(Vector2(-0.5, 0.0), 1.0, 1.0), solid=False)
    hits = registry.collisions_for("a")
    assert [obstacle.id for obstacle, _ in hits] == ["b"]
    assert len(registry) == 3
    registry.remove("b")
    assert registry.collisions_for("a") == []
    assert registry.collisions_for("missing") == []


def test_registry_update_replaces_shape() -> None:
    registry = ObstacleRegistry()
    first = registry.update("a", Rectangle.from_center(Vector2(0.0, 0.0), 1.0, 1.0))
    second = registry.update("a", Rectangle.from_center(Vector2(3.0, 0.0), 1.0, 1.0))
    assert first is second
    assert registry.get("a").shape.center().x == pytest.approx(3.0)

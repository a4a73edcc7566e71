"""Rectangular obstacles and the polygon overlap test used for collisions."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from pygame.math import Vector2


@dataclass
class Rectangle:
    """Quad with corners in winding order ``a -> b -> c -> d``."""

    a: Vector2
    b: Vector2
    c: Vector2
    d: Vector2

    @classmethod
    def from_center(cls, center: Vector2, width: float, height: float) -> "Rectangle":
        hw = width * 0.5
        hh = height * 0.5
        return cls(
            Vector2(center.x - hw, center.y - hh),
            Vector2(center.x + hw, center.y - hh),
            Vector2(center.x + hw, center.y + hh),
            Vector2(center.x - hw, center.y + hh),
        )

    def corners(self) -> Tuple[Vector2, Vector2, Vector2, Vector2]:
        return (self.a, self.b, self.c, self.d)

    def center(self) -> Vector2:
        return (self.a + self.b + self.c + self.d) / 4.0


def rotate_rectangle(rect: Rectangle, angle: float) -> Rectangle:
    """Rotate ``rect`` by ``angle`` radians about its centre."""

    pivot = rect.center()
    cos = math.cos(angle)
    sin = math.sin(angle)

    def _turn(point: Vector2) -> Vector2:
        rel = point - pivot
        return Vector2(rel.x * cos - rel.y * sin + pivot.x, rel.x * sin + rel.y * cos + pivot.y)

    return Rectangle(*(_turn(corner) for corner in rect.corners()))


def _project(points: Sequence[Vector2], axis: Vector2) -> Tuple[float, float]:
    values = [point.dot(axis) for point in points]
    return min(values), max(values)


def collide(shape_a: Rectangle, shape_b: Rectangle) -> Optional[Vector2]:
    """Separating-axis test for two convex quads.

    Returns the minimum overlap vector, pointing from ``shape_a`` towards
    ``shape_b``; moving ``shape_a`` by its negation separates the shapes.
    Returns ``None`` when the shapes do not overlap.
    """

    points_a = shape_a.corners()
    points_b = shape_b.corners()
    best_depth = math.inf
    best_axis: Optional[Vector2] = None
    for points in (points_a, points_b):
        for index in range(len(points)):
            edge = points[(index + 1) % len(points)] - points[index]
            if edge.length_squared() <= 1e-12:
                continue
            axis = Vector2(-edge.y, edge.x).normalize()
            min_a, max_a = _project(points_a, axis)
            min_b, max_b = _project(points_b, axis)
            depth = min(max_a, max_b) - max(min_a, min_b)
            if depth <= 0.0:
                return None
            if depth < best_depth:
                best_depth = depth
                best_axis = axis
    if best_axis is None:
        return None
    if (shape_b.center() - shape_a.center()).dot(best_axis) < 0.0:
        best_axis = -best_axis
    return best_axis * best_depth


@dataclass
class Obstacle:
    id: str
    shape: Rectangle
    solid: bool = True


class ObstacleRegistry:
    """Shared list of obstacle shapes, one per owner id."""

    def __init__(self) -> None:
        self._obstacles: Dict[str, Obstacle] = {}

    def update(self, owner_id: str, shape: Rectangle, solid: bool = True) -> Obstacle:
        obstacle = self._obstacles.get(owner_id)
        if obstacle is None:
            obstacle = Obstacle(owner_id, shape, solid)
            self._obstacles[owner_id] = obstacle
        else:
            obstacle.shape = shape
            obstacle.solid = solid
        return obstacle

    def remove(self, owner_id: str) -> None:
        self._obstacles.pop(owner_id, None)

    def get(self, owner_id: str) -> Optional[Obstacle]:
        return self._obstacles.get(owner_id)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(list(self._obstacles.values()))

    def __len__(self) -> int:
        return len(self._obstacles)

    def collisions_for(self, owner_id: str) -> List[Tuple[Obstacle, Vector2]]:
        """Overlap vectors between ``owner_id`` and every other solid obstacle."""

        own = self._obstacles.get(owner_id)
        if own is None:
            return []
        hits: List[Tuple[Obstacle, Vector2]] = []
        for other in self._obstacles.values():
            if other.id == owner_id or not other.solid:
                continue
            overlap = collide(own.shape, other.shape)
            if overlap is not None:
                hits.append((other, overlap))
        return hits


__all__ = [
    "Obstacle",
    "ObstacleRegistry",
    "Rectangle",
    "collide",
    "rotate_rectangle",
]

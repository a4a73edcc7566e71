"""Render snapshots of the arena in the observer's rest frame."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from arena.math.vectors import Vec2, Vec3

if TYPE_CHECKING:
    from arena.world.arena import ArenaWorld

PIXELS_PER_UNIT = 50.0


@dataclass
class EntityRenderState:
    """What the debug view needs to draw one entity."""

    id: str
    view_position: Vec3
    velocity: Vec3
    scale: Vec2
    orientation: float = 0.0
    is_observer: bool = False
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ViewProjection:
    """Maps rest-frame coordinates onto screen pixels, observer at the centre."""

    width: int
    height: int
    pixels_per_unit: float = PIXELS_PER_UNIT

    def to_screen(self, point: Vec2) -> Tuple[float, float]:
        # Screen y grows downwards.
        return (
            self.width * 0.5 + point.x * self.pixels_per_unit,
            self.height * 0.5 - point.y * self.pixels_per_unit,
        )

    def to_view(self, pixel: Tuple[float, float]) -> Vec2:
        return Vec2(
            (pixel[0] - self.width * 0.5) / self.pixels_per_unit,
            (self.height * 0.5 - pixel[1]) / self.pixels_per_unit,
        )

    def length(self, units: float) -> float:
        return units * self.pixels_per_unit


@dataclass
class ArenaRenderState:
    entities: List[EntityRenderState]
    camera_mode: str
    scores: List[int]
    countdown: int
    flash_color: str
    flash_opacity: float
    paused: bool
    planned_velocity: Optional[Vec3] = None


def snapshot_world(world: "ArenaWorld") -> ArenaRenderState:
    """Collect render state for every entity, reading only cached positions where possible."""

    observer = world.observer
    states: List[EntityRenderState] = []
    for entity in world.entities:
        states.append(
            EntityRenderState(
                id=entity.id,
                view_position=entity.view_position(),
                velocity=entity.velocity,
                scale=entity.scale,
                orientation=entity.orientation,
                extras=entity.behavior.on_draw(entity),
            )
        )
    observer_extras = observer.behavior.on_draw(observer) if observer.behavior else {}
    states.append(
        EntityRenderState(
            id=observer.id,
            view_position=observer.view_position(),
            velocity=observer.velocity,
            scale=observer.scale,
            orientation=observer.orientation,
            is_observer=True,
            extras=observer_extras,
        )
    )
    countdown = world.countdown
    return ArenaRenderState(
        entities=states,
        camera_mode=observer.camera_mode.value,
        scores=list(world.scoreboard.scores),
        countdown=countdown.count if countdown.running else 0,
        flash_color=countdown.flash_color,
        flash_opacity=countdown.flash_opacity,
        paused=world.paused,
        planned_velocity=world.boost.preview(observer),
    )


__all__ = [
    "ArenaRenderState",
    "EntityRenderState",
    "PIXELS_PER_UNIT",
    "ViewProjection",
    "snapshot_world",
]

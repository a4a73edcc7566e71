"""Top-down pygame debug view of the arena in the observer's rest frame."""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import pygame

from arena.math.vectors import Vec2
from arena.render.state import ArenaRenderState, EntityRenderState, ViewProjection

BACKGROUND = (8, 10, 16)
GRID_COLOR = (24, 30, 42)
TEXT_COLOR = (200, 220, 255)
PLAN_COLOR = (255, 220, 120)
BLOCK_COLOR = (120, 200, 255)
WEAPON_COLOR = (255, 90, 90)


def _rgb(color) -> Tuple[int, int, int]:
    """Accept ``#rrggbb`` strings or 0..1 float triples."""

    if isinstance(color, str):
        return tuple(pygame.Color(color))[:3]  # type: ignore[return-value]
    return tuple(max(0, min(255, int(round(channel * 255)))) for channel in color[:3])  # type: ignore[return-value]


def _box_points(
    projection: ViewProjection,
    center: Vec2,
    size: Vec2,
    angle: float,
) -> list[Tuple[float, float]]:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    half_w = size.x * 0.5
    half_h = size.y * 0.5
    points = []
    for dx, dy in ((-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)):
        corner = Vec2(center.x + dx * cos_a - dy * sin_a, center.y + dx * sin_a + dy * cos_a)
        points.append(projection.to_screen(corner))
    return points


class DebugView:
    """Draws an ``ArenaRenderState`` onto any pygame surface."""

    def __init__(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        self.surface = surface
        self.font = font
        self.projection = ViewProjection(surface.get_width(), surface.get_height())

    def draw(self, state: ArenaRenderState) -> None:
        self.surface.fill(BACKGROUND)
        self._draw_grid()
        for entity in state.entities:
            if "outer_color" in entity.extras:
                self._draw_timer(entity)
            else:
                self._draw_box(entity)
        if state.planned_velocity is not None:
            self._draw_plan(state)
        self._draw_flash(state)
        self._draw_text(state)

    def _draw_grid(self) -> None:
        projection = self.projection
        step = projection.length(1.0)
        if step < 4:
            return
        width, height = self.surface.get_size()
        x = (width * 0.5) % step
        while x < width:
            pygame.draw.line(self.surface, GRID_COLOR, (x, 0), (x, height))
            x += step
        y = (height * 0.5) % step
        while y < height:
            pygame.draw.line(self.surface, GRID_COLOR, (0, y), (width, y))
            y += step

    def _draw_box(self, entity: EntityRenderState) -> None:
        color = _rgb(entity.extras.get("color", (1.0, 1.0, 1.0)))
        center = Vec2(entity.view_position.x, entity.view_position.y)
        points = _box_points(self.projection, center, entity.scale, entity.orientation)
        pygame.draw.polygon(self.surface, color, points, 0 if entity.is_observer else 2)
        if entity.extras.get("blocking"):
            pygame.draw.polygon(self.surface, BLOCK_COLOR, points, 4)
        if entity.extras.get("attacking"):
            facing = Vec2(math.cos(entity.orientation), math.sin(entity.orientation))
            tip = center + facing * (entity.scale.x * 0.5 + 1.5)
            pygame.draw.line(
                self.surface,
                WEAPON_COLOR,
                self.projection.to_screen(center),
                self.projection.to_screen(tip),
                3,
            )

    def _draw_timer(self, entity: EntityRenderState) -> None:
        center = self.projection.to_screen(Vec2(entity.view_position.x, entity.view_position.y))
        radius = max(2, int(self.projection.length(entity.scale.x)))
        pygame.draw.circle(self.surface, _rgb(entity.extras["outer_color"]), center, radius)
        pygame.draw.circle(self.surface, _rgb(entity.extras["inner_color"]), center, max(1, radius // 2))

    def _draw_plan(self, state: ArenaRenderState) -> None:
        velocity = state.planned_velocity.vel2()
        origin = self.projection.to_screen(Vec2())
        # Draw the planned coordinate velocity scaled to a few world units.
        tip = self.projection.to_screen(velocity * 4.0)
        pygame.draw.line(self.surface, PLAN_COLOR, origin, tip, 2)
        pygame.draw.circle(self.surface, PLAN_COLOR, (int(tip[0]), int(tip[1])), 4, 1)

    def _draw_flash(self, state: ArenaRenderState) -> None:
        if state.countdown <= 0 or state.flash_opacity <= 0.0:
            return
        overlay = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        r, g, b = _rgb(state.flash_color)
        overlay.fill((r, g, b, int(96 * state.flash_opacity)))
        self.surface.blit(overlay, (0, 0))

    def _lines(self, state: ArenaRenderState) -> Sequence[str]:
        lines = [
            f"{state.scores[0]} - {state.scores[1]}" if len(state.scores) >= 2 else "",
            f"camera: {state.camera_mode}",
        ]
        if state.countdown > 0:
            lines.append(str(state.countdown))
        if state.paused:
            lines.append("PAUSED")
        return lines

    def _draw_text(self, state: ArenaRenderState) -> None:
        if self.font is None:
            return
        y = 8
        for line in self._lines(state):
            if not line:
                continue
            text = self.font.render(line, True, TEXT_COLOR)
            self.surface.blit(text, (self.surface.get_width() / 2 - text.get_width() / 2, y))
            y += text.get_height() + 4


__all__ = ["DebugView"]

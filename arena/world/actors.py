"""Actor behaviours: fighters, proper-time clocks and walls."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

from pygame.math import Vector2

from arena.engine.events import RoundFinished
from arena.world.entity import EntityBehavior
from arena.world.obstacle import Rectangle, collide, rotate_rectangle

if TYPE_CHECKING:
    from arena.world.arena import ArenaWorld

Color3 = Tuple[float, float, float]

FIGHTER_SIZE = 1.0
FIGHTER_RANGE = 1.5
ATTACK_DURATION = 0.2
BLOCK_DURATION = 0.3
COOLDOWN_DURATION = 0.8
FIGHTER_COLORS: Tuple[str, str] = ("#368dc8", "#d3b447")

TIMER_SIZE = 0.4
INNER_TICK = 1.0
OUTER_TICK = 10.0
INNER_COLORS: Tuple[Color3, ...] = (
    (0.5, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 0.5, 0.0),
    (0.0, 1.0, 1.0),
    (0.0, 0.0, 0.5),
    (1.0, 0.0, 1.0),
)
OUTER_COLORS: Tuple[Color3, ...] = (
    (1.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 1.0, 1.0),
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 1.0),
)

WALL_COLORS: Dict[str, Color3] = {
    "plain": (1.0, 1.0, 1.0),
    "return": (1.0, 0.8, 0.0),
    "reflect": (0.0, 0.8, 1.0),
}


def positive_mod(num: float, denom: float) -> float:
    """``num % denom`` that is non-negative even for negative ``num``."""

    result = num % denom
    # Tiny negative inputs round up to exactly ``denom``.
    return 0.0 if result >= denom else result


def interpolate_color(first: Color3, second: Color3, factor: float) -> Color3:
    return tuple((1.0 - factor) * a + factor * b for a, b in zip(first, second))  # type: ignore[return-value]


def _body_rectangle(entity: Any, width: float, height: float) -> Rectangle:
    rect = Rectangle.from_center(entity.position.space().to_pygame(), width, height)
    if entity.orientation:
        rect = rotate_rectangle(rect, entity.orientation)
    return rect


@dataclass
class FighterState:
    attacking: float = 0.0
    blocking: float = 0.0
    cooldown: float = 0.0

    @property
    def is_attacking(self) -> bool:
        return self.attacking > 0.0

    @property
    def is_blocking(self) -> bool:
        return self.blocking > 0.0

    @property
    def on_cooldown(self) -> bool:
        return self.cooldown > 0.0


class FighterBehavior(EntityBehavior):
    """Melee duelist driven by one slot of the per-tick intents."""

    def __init__(
        self,
        index: int,
        size: float = FIGHTER_SIZE,
        weapon_range: float = FIGHTER_RANGE,
    ) -> None:
        self.index = index
        self.size = size
        self.range = weapon_range
        self.state = FighterState()

    @property
    def opponent_index(self) -> int:
        return 1 - self.index

    def reset(self, entity: Any) -> None:
        self.state = FighterState()

    def obstacle_shape(self, entity: Any) -> Optional[Rectangle]:
        return _body_rectangle(entity, self.size, self.size)

    def weapon_shape(self, entity: Any) -> Rectangle:
        """Blade rectangle reaching ``range`` beyond the front face."""

        facing = Vector2(math.cos(entity.orientation), math.sin(entity.orientation))
        center = entity.position.space().to_pygame() + facing * (self.size + self.range) * 0.5
        rect = Rectangle.from_center(center, self.range, self.size)
        return rotate_rectangle(rect, entity.orientation)

    def on_tick(self, entity: Any, world: "ArenaWorld", dt: float) -> None:
        state = self.state
        state.attacking = max(0.0, state.attacking - dt)
        state.blocking = max(0.0, state.blocking - dt)
        state.cooldown = max(0.0, state.cooldown - dt)
        if not entity.active:
            return
        intent = world.intents.fighters[self.index]
        if intent.attack and not state.on_cooldown:
            state.attacking = ATTACK_DURATION
            state.cooldown = COOLDOWN_DURATION
            self.strike(entity, world)
        elif intent.block and not state.on_cooldown:
            state.blocking = BLOCK_DURATION
            state.cooldown = COOLDOWN_DURATION

    def strike(self, entity: Any, world: "ArenaWorld") -> bool:
        target = world.fighter(self.opponent_index)
        if target is None:
            return False
        target_behavior = target.behavior
        if isinstance(target_behavior, FighterBehavior) and target_behavior.state.is_blocking:
            world.match_log.info("Fighter %d strike blocked", self.index)
            return False
        target_obstacle = world.obstacles.get(target.id)
        if target_obstacle is None:
            return False
        if collide(self.weapon_shape(entity), target_obstacle.shape) is None:
            return False
        world.events.post(RoundFinished(winner=self.index))
        return True

    def on_draw(self, entity: Any) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "color": FIGHTER_COLORS[self.index % len(FIGHTER_COLORS)],
            "attacking": self.state.is_attacking and entity.active,
            "blocking": self.state.is_blocking and entity.active,
        }
        if data["attacking"]:
            data["weapon"] = self.weapon_shape(entity)
        return data


class TimerBehavior(EntityBehavior):
    """Clock whose colours follow the proper time of its own worldline."""

    def colors(self, proper_time: float) -> Tuple[Color3, Color3]:
        """Return ``(outer, inner)`` colours for a proper time."""

        inner = INNER_COLORS[int(positive_mod(proper_time / INNER_TICK, len(INNER_COLORS)))]
        outer_phase = positive_mod(proper_time / OUTER_TICK, len(OUTER_COLORS))
        start = int(outer_phase)
        outer = interpolate_color(
            OUTER_COLORS[start % len(OUTER_COLORS)],
            OUTER_COLORS[(start + 1) % len(OUTER_COLORS)],
            outer_phase - start,
        )
        return outer, inner

    def on_draw(self, entity: Any) -> Dict[str, Any]:
        outer, inner = self.colors(entity.proper_time)
        return {"outer_color": outer, "inner_color": inner}


class WallBehavior(EntityBehavior):
    def __init__(self, kind: str = "plain") -> None:
        if kind not in WALL_COLORS:
            raise ValueError(f"Unknown wall kind {kind!r}")
        self.kind = kind

    def obstacle_shape(self, entity: Any) -> Optional[Rectangle]:
        return _body_rectangle(entity, entity.scale.x, entity.scale.y)

    def on_draw(self, entity: Any) -> Dict[str, Any]:
        return {"color": WALL_COLORS[self.kind]}


__all__ = [
    "FighterBehavior",
    "FighterState",
    "TimerBehavior",
    "WallBehavior",
    "interpolate_color",
    "positive_mod",
]

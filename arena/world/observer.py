"""The observer: the player whose light cone every other entity is solved against."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from arena.math.vectors import MAX_SPEED, Vec2, Vec3
from arena.world.boost import apply_thrust

if TYPE_CHECKING:
    from arena.world.entity import EntityBehavior
    from arena.world.obstacle import ObstacleRegistry

OBSERVER_ID = "player"


class CameraMode(str, Enum):
    """Which derived position places other entities on screen."""

    VISUAL = "visual"
    NOW = "now"
    FUTURE = "future"

    def next(self) -> "CameraMode":
        modes = list(CameraMode)
        return modes[(modes.index(self) + 1) % len(modes)]


@dataclass
class ObserverAction:
    planned_boost: Optional[Vec2] = None


class Observer:
    """Player worldline plus camera settings.

    Every write to ``position``, ``velocity`` or ``camera_mode`` bumps
    ``revision``; entities key their derived-position caches on it.
    """

    def __init__(
        self,
        position: Optional[Vec3] = None,
        velocity: Optional[Vec3] = None,
        camera_mode: CameraMode = CameraMode.VISUAL,
        acceleration: float = 0.6,
        drag: float = 0.8,
        max_speed: float = MAX_SPEED,
        behavior: Optional["EntityBehavior"] = None,
    ) -> None:
        self.id = OBSERVER_ID
        self._position = position or Vec3()
        self._velocity = velocity or Vec3.rest()
        self._camera_mode = CameraMode(camera_mode)
        self.revision = 0
        self.proper_time = 0.0
        self.scale = Vec2(1.0, 1.0)
        self.orientation = 0.0
        self.acceleration = acceleration
        self.drag = drag
        self.max_speed = max_speed
        self.behavior = behavior
        self.active = False
        self.action = ObserverAction()

    @property
    def position(self) -> Vec3:
        return self._position

    @position.setter
    def position(self, value: Vec3) -> None:
        self._position = value
        self.revision += 1

    @property
    def velocity(self) -> Vec3:
        return self._velocity

    @velocity.setter
    def velocity(self, value: Vec3) -> None:
        assert value.vel2().mag_sq() < 1.0, "observer velocity must stay below light speed"
        self._velocity = value
        self.revision += 1

    @property
    def camera_mode(self) -> CameraMode:
        return self._camera_mode

    @camera_mode.setter
    def camera_mode(self, value: CameraMode) -> None:
        value = CameraMode(value)
        if value != self._camera_mode:
            self._camera_mode = value
            self.revision += 1

    def cycle_camera_mode(self) -> CameraMode:
        self.camera_mode = self._camera_mode.next()
        return self._camera_mode

    def integrate(self, dt: float, thrust: Optional[Vec2] = None) -> None:
        """Advance the observer's own worldline by ``dt`` of proper time.

        The observer is always at its own "now", so no cone solve is involved:
        the position moves along the current three-velocity, then thrust (a
        direction in the observer's rest frame) is composed onto the velocity
        for the next interval.
        """

        if dt <= 0.0:
            return
        self.position = self._position + self._velocity * dt
        self.proper_time += dt
        self.velocity = apply_thrust(
            self._velocity,
            thrust or Vec2(),
            self.acceleration,
            self.drag,
            dt,
            self.max_speed,
        )

    def turn_towards(self, view_position: Vec3) -> None:
        """Face a point given in the observer's rest frame."""

        if view_position.x != 0.0 or view_position.y != 0.0:
            self.orientation = math.atan2(view_position.y, view_position.x)

    def reset(self, spatial: Vec2) -> None:
        """Move back to ``spatial`` at rest, keeping the current time."""

        self.position = Vec3(self._position.t, spatial.x, spatial.y)
        self.velocity = Vec3.rest()
        self.action.planned_boost = None

    # The observer sees itself at the origin of its own rest frame.
    def visual_position(self) -> Vec3:
        return self._position

    def now_position(self) -> Vec3:
        return self._position

    def future_position(self) -> Vec3:
        return self._position

    def view_position(self) -> Vec3:
        return Vec3()


__all__ = ["CameraMode", "OBSERVER_ID", "Observer", "ObserverAction"]

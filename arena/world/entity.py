"""Entity kinematic state with lazily solved, cached derived positions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, TYPE_CHECKING

from arena.engine.frame_clock import current_frame
from arena.engine.telemetry import record_position_hit, record_position_miss
from arena.math.lightcone import light_cone_intersection, now_intersection
from arena.math.vectors import Vec2, Vec3
from arena.world.boost import apply_thrust
from arena.world.observer import CameraMode, Observer

if TYPE_CHECKING:
    from arena.world.arena import ArenaWorld
    from arena.world.obstacle import ObstacleRegistry, Rectangle

VISUAL = "visual"
NOW = "now"
FUTURE = "future"
VIEW = "view"


class EntityBehavior:
    """Hooks an actor plugs into the shared entity lifecycle."""

    def on_tick(self, entity: Any, world: "ArenaWorld", dt: float) -> None:
        pass

    def on_draw(self, entity: Any) -> Dict[str, Any]:
        """Extra render data (colours, flags) for the debug view."""

        return {}

    def obstacle_shape(self, entity: Any) -> Optional["Rectangle"]:
        return None

    def reset(self, entity: Any) -> None:
        pass


@dataclass
class DerivedPositionCache:
    """Memoised derived positions keyed by (entity generation, observer revision)."""

    key: Tuple[int, int] = (-1, -1)
    values: Dict[str, Vec3] = field(default_factory=dict)

    def get(
        self,
        key: Tuple[int, int],
        kind: str,
        entity_id: int,
        compute: Callable[[], Vec3],
    ) -> Vec3:
        if key != self.key:
            self.key = key
            self.values.clear()
        frame = current_frame()
        value = self.values.get(kind)
        if value is None:
            value = compute()
            self.values[kind] = value
            record_position_miss(frame, entity_id, kind)
        else:
            record_position_hit(frame)
        return value


class Entity:
    """A worldline seen by the observer.

    ``position`` is where the worldline last crossed the observer's backward
    light cone and ``velocity`` is its three-velocity there. Writing either
    one bumps ``generation``, which invalidates every derived position.
    """

    def __init__(
        self,
        entity_id: str,
        observer: Observer,
        behavior: Optional[EntityBehavior] = None,
        position: Optional[Vec3] = None,
        velocity: Optional[Vec3] = None,
        scale: Optional[Vec2] = None,
    ) -> None:
        self.id = entity_id
        self.observer = observer
        self.behavior = behavior or EntityBehavior()
        self._position = position or Vec3()
        self._velocity = velocity or Vec3.rest()
        self.generation = 0
        self.proper_time = 0.0
        self.scale = scale or Vec2(1.0, 1.0)
        self.orientation = 0.0
        self.active = False
        self._cache = DerivedPositionCache()

    @property
    def position(self) -> Vec3:
        return self._position

    @position.setter
    def position(self, value: Vec3) -> None:
        self._position = value
        self.generation += 1

    @property
    def velocity(self) -> Vec3:
        return self._velocity

    @velocity.setter
    def velocity(self, value: Vec3) -> None:
        assert value.vel2().mag_sq() < 1.0, "entity velocity must stay below light speed"
        self._velocity = value
        self.generation += 1

    def _cached(self, kind: str, compute: Callable[[], Vec3]) -> Vec3:
        key = (self.generation, self.observer.revision)
        return self._cache.get(key, kind, id(self), compute)

    def visual_position(self) -> Vec3:
        """Crossing of the observer's past light cone: where the entity is seen."""

        return self._cached(
            VISUAL,
            lambda: light_cone_intersection(
                self._position, self._velocity, self.observer.position, "past"
            ),
        )

    def now_position(self) -> Vec3:
        """Crossing of the observer's plane of simultaneity."""

        return self._cached(
            NOW,
            lambda: now_intersection(
                self._position,
                self._velocity,
                self.observer.position,
                self.observer.velocity,
            ),
        )

    def future_position(self) -> Vec3:
        """Crossing of the observer's future light cone."""

        return self._cached(
            FUTURE,
            lambda: light_cone_intersection(
                self._position, self._velocity, self.observer.position, "future"
            ),
        )

    def selected_position(self) -> Vec3:
        mode = self.observer.camera_mode
        if mode == CameraMode.NOW:
            return self.now_position()
        if mode == CameraMode.FUTURE:
            return self.future_position()
        return self.visual_position()

    def view_position(self) -> Vec3:
        """Selected derived position in the observer's rest frame."""

        def _compute() -> Vec3:
            relative = self.selected_position() - self.observer.position
            return relative.boost(self.observer.velocity.inv())

        return self._cached(VIEW, _compute)

    def integrate(self, obstacles: Optional["ObstacleRegistry"] = None) -> None:
        """Advance the worldline to the observer's current backward light cone."""

        old = self._position
        new = light_cone_intersection(old, self._velocity, self.observer.position, "past")
        self.proper_time += (new.t - old.t) / self._velocity.t
        self.position = new
        if obstacles is not None:
            self.refresh_obstacle(obstacles)

    def thrust(self, direction: Vec2, acceleration: float, drag: float, dt: float) -> None:
        self.velocity = apply_thrust(
            self._velocity, direction, acceleration, drag, dt, self.observer.max_speed
        )

    def refresh_obstacle(self, obstacles: "ObstacleRegistry") -> None:
        shape = self.behavior.obstacle_shape(self)
        if shape is not None:
            obstacles.update(self.id, shape)

    def place_on_light_cone(self, spatial: Vec2) -> None:
        """Put the entity at rest at ``spatial``, on the observer's past light cone."""

        observer_position = self.observer.position
        distance = (spatial - observer_position.space()).mag()
        self.position = Vec3(observer_position.t - distance, spatial.x, spatial.y)
        self.velocity = Vec3.rest()


__all__ = ["DerivedPositionCache", "Entity", "EntityBehavior"]

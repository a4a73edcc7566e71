"""Arena simulation container: runs one relativistic tick per frame."""
from __future__ import annotations

import math
from typing import Iterable, List, Optional

from pygame.math import Vector2

from arena.engine.events import (
    CountdownStarted,
    EventQueue,
    PauseToggled,
    RoundFinished,
    RoundStarted,
)
from arena.engine.frame_clock import advance_frame
from arena.engine.input import FrameIntents
from arena.engine.logger import ChannelLogger, GameLogger
from arena.engine.telemetry import position_cache_telemetry
from arena.math.vectors import MAX_SPEED, Vec2, Vec3
from arena.world.actors import FighterBehavior, TimerBehavior, WallBehavior
from arena.world.boost import BoostCurve, BoostPlanner, ExponentialBoostCurve, compose_boost
from arena.world.countdown import Countdown, Scoreboard
from arena.world.entity import Entity
from arena.world.observer import CameraMode, Observer
from arena.world.obstacle import ObstacleRegistry

ARENA_WIDTH = 24.0
ARENA_HEIGHT = 14.0
WALL_THICKNESS = 0.5
FIGHTER_STARTS = (Vec2(-6.0, 0.0), Vec2(6.0, 0.0))
TIMER_POSITIONS = (
    Vec2(-9.0, 5.0),
    Vec2(9.0, 5.0),
    Vec2(-9.0, -5.0),
    Vec2(9.0, -5.0),
)
FIGHTER_ACCELERATION = 0.6
FIGHTER_DRAG = 0.8
COLLISION_IMPULSE_SCALE = 0.5
COLLISION_FRICTION = 0.8
OPPONENT_ID = "opponent"


def collision_velocity(velocity: Vec3, overlap: Vector2, max_speed: float = MAX_SPEED) -> Vec3:
    """Velocity after bouncing off an obstacle that overlaps by ``overlap``."""

    impulse = Vec2.from_pygame(-overlap) * COLLISION_IMPULSE_SCALE
    composed = compose_boost(velocity, Vec3.from_velocity(impulse, max_speed), max_speed)
    return Vec3.from_velocity(composed.vel2() * COLLISION_FRICTION, max_speed)


class ArenaWorld:
    """Owns the observer, every other entity and the shared obstacle list.

    ``tick`` integrates the observer strictly before any entity, so every
    derived position read during the tick is solved against the observer's
    updated light cone.
    """

    def __init__(
        self,
        logger: GameLogger,
        boost_curve: Optional[BoostCurve] = None,
        max_speed: float = MAX_SPEED,
        camera_mode: CameraMode = CameraMode.VISUAL,
    ) -> None:
        self.logger = logger
        self.max_speed = max_speed
        self.events = EventQueue()
        self.obstacles = ObstacleRegistry()
        self.observer = Observer(
            camera_mode=camera_mode,
            acceleration=FIGHTER_ACCELERATION,
            drag=FIGHTER_DRAG,
            max_speed=max_speed,
            behavior=FighterBehavior(0),
        )
        self.entities: List[Entity] = []
        self.intents = FrameIntents()
        self.boost = BoostPlanner(
            boost_curve or ExponentialBoostCurve(max_speed=max_speed),
            logger.channel("boost"),
        )
        self.countdown = Countdown(self.events)
        self.scoreboard = Scoreboard()
        self.paused = False
        self.round_live = False
        self.frame = 0

    @property
    def match_log(self) -> ChannelLogger:
        return self.logger.channel("match")

    def add_entity(self, entity: Entity) -> Entity:
        self.entities.append(entity)
        entity.refresh_obstacle(self.obstacles)
        return entity

    def remove_entity(self, entity_id: str) -> None:
        self.entities = [entity for entity in self.entities if entity.id != entity_id]
        self.obstacles.remove(entity_id)

    def entity(self, entity_id: str) -> Optional[Entity]:
        return next((entity for entity in self.entities if entity.id == entity_id), None)

    def fighter(self, index: int):
        """Observer for index 0, otherwise the entity running that fighter slot."""

        if index == 0:
            return self.observer
        for entity in self.entities:
            behavior = entity.behavior
            if isinstance(behavior, FighterBehavior) and behavior.index == index:
                return entity
        return None

    def fighters(self) -> Iterable:
        fighters = [self.observer]
        fighters.extend(
            entity for entity in self.entities if isinstance(entity.behavior, FighterBehavior)
        )
        return fighters

    def populate_default(self) -> None:
        """Two fighters, four clocks and the boundary walls."""

        self.observer.reset(FIGHTER_STARTS[0])
        self._refresh_observer_obstacle()

        opponent = Entity(OPPONENT_ID, self.observer, FighterBehavior(1))
        opponent.place_on_light_cone(FIGHTER_STARTS[1])
        self.add_entity(opponent)

        for index, spot in enumerate(TIMER_POSITIONS):
            timer = Entity(f"timer{index}", self.observer, TimerBehavior(), scale=Vec2(0.4, 0.4))
            timer.place_on_light_cone(spot)
            self.add_entity(timer)

        half_w = ARENA_WIDTH * 0.5
        half_h = ARENA_HEIGHT * 0.5
        walls = (
            ("wall_left", "reflect", Vec2(-half_w, 0.0), Vec2(WALL_THICKNESS, ARENA_HEIGHT)),
            ("wall_right", "reflect", Vec2(half_w, 0.0), Vec2(WALL_THICKNESS, ARENA_HEIGHT)),
            ("wall_top", "return", Vec2(0.0, half_h), Vec2(ARENA_WIDTH, WALL_THICKNESS)),
            ("wall_bottom", "return", Vec2(0.0, -half_h), Vec2(ARENA_WIDTH, WALL_THICKNESS)),
        )
        for wall_id, kind, spot, size in walls:
            wall = Entity(wall_id, self.observer, WallBehavior(kind), scale=size)
            wall.place_on_light_cone(spot)
            self.add_entity(wall)

    def start_match(self) -> None:
        self._set_fighters_active(False)
        self.countdown.start(None)

    def tick(self, dt: float, intents: Optional[FrameIntents] = None) -> None:
        self.frame = advance_frame()
        if intents is None:
            intents = self.intents.held()
        self.intents = intents
        physics_log = self.logger.channel("physics")

        if intents.toggle_pause:
            self.paused = not self.paused
            self.events.post(PauseToggled(self.paused))
            self.match_log.info("Paused" if self.paused else "Resumed")
        if intents.cycle_camera:
            mode = self.observer.cycle_camera_mode()
            physics_log.info("Camera mode: %s", mode.value)
        if self.paused or dt <= 0.0:
            self._process_events()
            return

        self._apply_boost_plan(intents)

        thrust = intents.fighters[0].move if self.observer.active else None
        self.observer.integrate(dt, thrust)
        self._refresh_observer_obstacle()

        for entity in self.entities:
            behavior = entity.behavior
            if isinstance(behavior, FighterBehavior):
                move = intents.fighters[behavior.index].move if entity.active else Vec2()
                entity.thrust(move, FIGHTER_ACCELERATION, FIGHTER_DRAG, dt)
            entity.integrate(self.obstacles)

        self._turn_fighters()
        self._resolve_collisions()

        if self.observer.behavior is not None:
            self.observer.behavior.on_tick(self.observer, self, dt)
        for entity in self.entities:
            entity.behavior.on_tick(entity, self, dt)

        self.countdown.update(dt)
        self._process_events()
        position_cache_telemetry().advance_time(dt, self.logger.channel("solver"))

    def _apply_boost_plan(self, intents: FrameIntents) -> None:
        if intents.planned_boost is not None:
            self.boost.plan(self.observer, intents.planned_boost)
        if intents.commit_boost:
            self.boost.commit(self.observer)

    def _refresh_observer_obstacle(self) -> None:
        behavior = self.observer.behavior
        if behavior is None:
            return
        shape = behavior.obstacle_shape(self.observer)
        if shape is not None:
            self.obstacles.update(self.observer.id, shape)

    def _turn_fighters(self) -> None:
        opponent = self.fighter(1)
        if opponent is None:
            return
        view = opponent.view_position()
        self.observer.turn_towards(view)
        # Entity orientation is camera-relative: face the observer at the view origin.
        if view.x != 0.0 or view.y != 0.0:
            opponent.orientation = math.atan2(-view.y, -view.x)
        self._refresh_observer_obstacle()
        opponent.refresh_obstacle(self.obstacles)

    def _resolve_collisions(self) -> None:
        collision_log = self.logger.channel("collision")
        for mover in self.fighters():
            hits = self.obstacles.collisions_for(mover.id)
            for other, overlap in hits:
                mover.velocity = collision_velocity(mover.velocity, overlap, self.max_speed)
                if collision_log.enabled:
                    collision_log.debug(
                        "Collision %s-%s overlap=(%.3f, %.3f)",
                        mover.id,
                        other.id,
                        overlap.x,
                        overlap.y,
                    )

    def _set_fighters_active(self, active: bool) -> None:
        self.round_live = active
        for index, fighter in enumerate(self.fighters()):
            if fighter is self.observer:
                fighter.reset(FIGHTER_STARTS[0])
            else:
                fighter.place_on_light_cone(FIGHTER_STARTS[min(index, len(FIGHTER_STARTS) - 1)])
            fighter.behavior.reset(fighter)
            fighter.active = active
        self._refresh_observer_obstacle()
        for entity in self.entities:
            entity.refresh_obstacle(self.obstacles)

    def _process_events(self) -> None:
        for event in self.events.drain():
            if isinstance(event, RoundFinished):
                if not self.round_live:
                    continue
                self.scoreboard.increment(event.winner)
                self.match_log.info(
                    "Fighter %d scores (%s), leader=%s",
                    event.winner,
                    " - ".join(str(score) for score in self.scoreboard.scores),
                    self.scoreboard.leader(),
                )
                self._set_fighters_active(False)
                self.countdown.start(event.winner)
            elif isinstance(event, RoundStarted):
                self._set_fighters_active(True)
                self.match_log.info("Round started")
            elif isinstance(event, CountdownStarted):
                self.match_log.debug("Countdown started winner=%s", event.winner)


__all__ = [
    "ARENA_HEIGHT",
    "ARENA_WIDTH",
    "ArenaWorld",
    "FIGHTER_STARTS",
    "OPPONENT_ID",
    "collision_velocity",
]

"""Tests for the arena tick: observer ordering, collisions and round flow."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pygame.math import Vector2

sys.path.append(str(Path(__file__).resolve().parents[1]))

from arena.engine.events import PauseToggled
from arena.engine.input import FighterIntent, FrameIntents
from arena.engine.logger import quiet_logger
from arena.math.lightcone import cone_residual
from arena.math.vectors import Vec2, Vec3
from arena.world.arena import FIGHTER_STARTS, ArenaWorld, collision_velocity
from arena.world.observer import CameraMode


def _world() -> ArenaWorld:
    world = ArenaWorld(quiet_logger())
    world.populate_default()
    world.start_match()
    return world


def _start_round(world: ArenaWorld) -> None:
    for _ in range(25):
        world.tick(0.1)
        if world.round_live:
            return
    raise AssertionError("round never started")


def test_default_layout() -> None:
    world = _world()
    ids = {entity.id for entity in world.entities}
    assert "opponent" in ids
    assert {"wall_left", "wall_right", "wall_top", "wall_bottom"} <= ids
    assert sum(1 for entity_id in ids if entity_id.startswith("timer")) == 4
    assert world.fighter(0) is world.observer
    assert world.fighter(1).id == "opponent"
    assert world.fighter(2) is None
    assert world.countdown.running
    assert not world.observer.active


def test_entities_stay_on_observer_past_cone_after_tick() -> None:
    world = _world()
    intents = FrameIntents(fighters=[FighterIntent(move=Vec2(1.0, 0.0)), FighterIntent()])
    for _ in range(5):
        world.tick(0.05, intents)
    observer_position = world.observer.position
    for entity in world.entities:
        assert cone_residual(entity.position, observer_position) == pytest.approx(0.0, abs=1e-9)
        assert entity.position.t <= observer_position.t


def test_round_starts_after_countdown() -> None:
    world = _world()
    _start_round(world)
    assert world.observer.active
    assert world.fighter(1).active
    assert world.observer.position.space() == FIGHTER_STARTS[0]


def test_observer_moves_when_thrusting() -> None:
    world = _world()
    _start_round(world)
    intents = FrameIntents(fighters=[FighterIntent(move=Vec2(0.0, 1.0)), FighterIntent()])
    for _ in range(10):
        world.tick(0.1, intents)
    assert world.observer.velocity.vel2().y > 0.0
    assert world.observer.position.y > FIGHTER_STARTS[0].y


def test_strike_scores_and_restarts_countdown() -> None:
    world = _world()
    _start_round(world)
    observer = world.observer
    opponent = world.fighter(1)
    opponent.place_on_light_cone(Vec2(observer.position.x + 1.5, observer.position.y))
    opponent.refresh_obstacle(world.obstacles)

    attack = FrameIntents(fighters=[FighterIntent(attack=True), FighterIntent()])
    world.tick(0.016, attack)

    assert world.scoreboard.scores == [1, 0]
    assert not world.round_live
    assert not observer.active
    assert world.countdown.running
    assert world.countdown.flash_color == "#368dc8"
    assert opponent.position.space() == FIGHTER_STARTS[1]


def test_blocked_strike_does_not_score() -> None:
    world = _world()
    _start_round(world)
    observer = world.observer
    opponent = world.fighter(1)
    opponent.place_on_light_cone(Vec2(observer.position.x + 1.5, observer.position.y))
    opponent.refresh_obstacle(world.obstacles)

    world.tick(0.016, FrameIntents(fighters=[FighterIntent(), FighterIntent(block=True)]))
    world.tick(0.016, FrameIntents(fighters=[FighterIntent(attack=True), FighterIntent()]))
    assert world.scoreboard.scores == [0, 0]
    assert world.round_live


def test_pause_freezes_simulation() -> None:
    world = _world()
    world.tick(0.1, FrameIntents(toggle_pause=True))
    assert world.paused
    assert isinstance(world.events.history[-1], PauseToggled)
    position = world.observer.position
    world.tick(0.1, FrameIntents())
    assert world.observer.position is position
    world.tick(0.1, FrameIntents(toggle_pause=True))
    assert not world.paused


def test_cycle_camera_changes_view() -> None:
    world = _world()
    world.tick(0.016, FrameIntents(cycle_camera=True))
    assert world.observer.camera_mode is CameraMode.NOW


def test_committed_boost_changes_observer_velocity() -> None:
    world = _world()
    world.tick(0.016, FrameIntents(planned_boost=Vec2(1.0, 0.0), commit_boost=True))
    assert world.observer.velocity.vel2().x > 0.3
    assert world.observer.action.planned_boost is None


def test_collision_pushes_velocity_away_from_overlap() -> None:
    velocity = collision_velocity(Vec3.rest(), Vector2(0.2, 0.0))
    assert velocity.vel2().x < 0.0
    assert velocity.vel2().mag() < 1.0


def test_collision_respects_speed_limit() -> None:
    fast = Vec2(0.29, 0.0).vel3()
    velocity = collision_velocity(fast, Vector2(-40.0, 0.0), max_speed=0.3)
    assert velocity.vel2().x > 0.0
    assert velocity.vel2().mag() <= 0.3 + 1e-9


def test_fighters_bounce_apart() -> None:
    world = _world()
    _start_round(world)
    observer = world.observer
    opponent = world.fighter(1)
    opponent.place_on_light_cone(Vec2(observer.position.x + 0.8, observer.position.y))
    opponent.refresh_obstacle(world.obstacles)
    world.tick(0.016, FrameIntents())
    assert observer.velocity.vel2().x < 0.0
    assert opponent.velocity.vel2().x > 0.0


def test_bare_tick_does_not_repeat_one_shot_input() -> None:
    world = _world()
    world.tick(0.016, FrameIntents(planned_boost=Vec2(1.0, 0.0), commit_boost=True))
    committed = world.observer.velocity.vel2().x
    world.tick(0.016)
    world.tick(0.016)
    assert world.observer.velocity.vel2().x <= committed
    assert world.observer.action.planned_boost is None

    world.tick(0.016, FrameIntents(cycle_camera=True))
    world.tick(0.016)
    world.tick(0.016)
    assert world.observer.camera_mode is CameraMode.NOW

    world.tick(0.016, FrameIntents(toggle_pause=True))
    world.tick(0.016)
    assert world.paused


def test_bare_tick_keeps_held_movement() -> None:
    world = _world()
    _start_round(world)
    world.tick(0.1, FrameIntents(fighters=[FighterIntent(move=Vec2(0.0, 1.0), attack=True), FighterIntent()]))
    assert world.intents.fighters[0].attack
    world.tick(0.1)
    assert world.intents.fighters[0].move == Vec2(0.0, 1.0)
    assert not world.intents.fighters[0].attack
    assert world.observer.velocity.vel2().y > 0.0

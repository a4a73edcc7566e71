"""Tests for render snapshots, the debug view and the arena scene."""
from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from arena.engine.input import FrameIntents
from arena.engine.logger import quiet_logger
from arena.engine.scene import SceneManager
from arena.engine.settings import GameSettings
from arena.math.vectors import Vec2
from arena.render.debug_view import DebugView
from arena.render.state import ViewProjection, snapshot_world
from arena.ui.arena_scene import ArenaScene
from arena.world.arena import ArenaWorld


def _running_world() -> ArenaWorld:
    world = ArenaWorld(quiet_logger())
    world.populate_default()
    world.start_match()
    for _ in range(25):
        world.tick(0.1)
        if world.round_live:
            break
    return world


def test_projection_centres_observer() -> None:
    projection = ViewProjection(200, 100, pixels_per_unit=10.0)
    assert projection.to_screen(Vec2()) == (100.0, 50.0)
    assert projection.to_screen(Vec2(1.0, 1.0)) == (110.0, 40.0)
    assert projection.to_view((110.0, 40.0)) == Vec2(1.0, 1.0)


def test_snapshot_lists_every_entity_plus_observer() -> None:
    world = _running_world()
    state = snapshot_world(world)
    assert len(state.entities) == len(world.entities) + 1
    observer_state = state.entities[-1]
    assert observer_state.is_observer
    assert observer_state.view_position.x == 0.0
    opponent_state = next(entity for entity in state.entities if entity.id == "opponent")
    assert opponent_state.view_position.x == pytest.approx(12.0)
    assert state.scores == [0, 0]
    assert state.countdown == 0


def test_snapshot_reuses_cached_positions() -> None:
    world = _running_world()
    opponent = world.fighter(1)
    before = opponent.view_position()
    state = snapshot_world(world)
    opponent_state = next(entity for entity in state.entities if entity.id == "opponent")
    assert opponent_state.view_position is before


def test_debug_view_draws_observer_at_centre() -> None:
    world = _running_world()
    surface = pygame.Surface((320, 240))
    view = DebugView(surface)
    view.draw(snapshot_world(world))
    assert tuple(surface.get_at((160, 120)))[:3] == (54, 141, 200)


def test_debug_view_draws_countdown_flash_and_plan() -> None:
    world = ArenaWorld(quiet_logger())
    world.populate_default()
    world.start_match()
    world.tick(0.016, FrameIntents(planned_boost=Vec2(1.0, 0.0)))
    state = snapshot_world(world)
    assert state.countdown == 3
    assert state.planned_velocity is not None
    surface = pygame.Surface((320, 240))
    DebugView(surface).draw(state)
    assert tuple(surface.get_at((0, 0)))[:3] != (8, 10, 16)


def test_arena_scene_runs_headless() -> None:
    manager = SceneManager()
    manager.register("arena", ArenaScene)
    scene = manager.activate("arena", logger=quiet_logger(), settings=GameSettings(boost_curve="linear"))
    assert manager.active_name == "arena"
    assert scene.world is not None
    manager.update(0.016)
    surface = pygame.Surface((320, 240))
    manager.render(surface)
    assert scene.view is not None


def test_unknown_scene_raises() -> None:
    with pytest.raises(KeyError):
        SceneManager().activate("title")

"""The duel scene: feeds input into the arena world and draws it."""
from __future__ import annotations

from typing import Optional

import pygame

from arena.engine.input import InputMapper
from arena.engine.logger import GameLogger, quiet_logger
from arena.engine.scene import Scene
from arena.engine.settings import GameSettings
from arena.render.debug_view import DebugView
from arena.render.state import snapshot_world
from arena.world.arena import ArenaWorld
from arena.world.boost import make_boost_curve
from arena.world.observer import CameraMode


class ArenaScene(Scene):
    def __init__(self, manager) -> None:
        super().__init__(manager)
        self.world: Optional[ArenaWorld] = None
        self.input: Optional[InputMapper] = None
        self.view: Optional[DebugView] = None
        self.font: Optional[pygame.font.Font] = None

    def on_enter(self, **kwargs) -> None:
        logger: GameLogger = kwargs.get("logger") or quiet_logger()
        settings: GameSettings = kwargs.get("settings") or GameSettings()
        self.input = kwargs.get("input") or InputMapper()
        self.font = kwargs.get("font")
        try:
            camera_mode = CameraMode(settings.camera_mode)
        except ValueError:
            logger.channel("physics").warning(
                "Unknown camera mode %r, using visual", settings.camera_mode
            )
            camera_mode = CameraMode.VISUAL
        self.world = ArenaWorld(
            logger,
            boost_curve=make_boost_curve(settings.boost_curve, settings.max_speed),
            max_speed=settings.max_speed,
            camera_mode=camera_mode,
        )
        self.world.populate_default()
        self.world.start_match()
        logger.channel("match").info("Arena ready, curve=%s", settings.boost_curve)

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.input is not None:
            self.input.handle_event(event)

    def update(self, dt: float) -> None:
        if self.world is None or self.input is None:
            return
        intents = self.input.intents()
        if intents.quit:
            pygame.event.post(pygame.event.Event(pygame.QUIT))
            return
        self.world.tick(dt, intents)

    def render(self, surface: pygame.Surface) -> None:
        if self.world is None:
            return
        if self.view is None or self.view.surface is not surface:
            self.view = DebugView(surface, self.font)
        self.view.draw(snapshot_world(self.world))


__all__ = ["ArenaScene"]

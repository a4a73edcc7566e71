"""Entry point for the relativistic arena prototype."""
from __future__ import annotations

from pathlib import Path

import pygame

from arena.engine.input import InputBindings, InputMapper
from arena.engine.logger import init_logger
from arena.engine.loop import FrameLoop
from arena.engine.scene import SceneManager
from arena.engine.settings import GameSettings
from arena.ui.arena_scene import ArenaScene


SETTINGS_PATH = Path("settings.json")


def load_settings(path: Path = SETTINGS_PATH) -> GameSettings:
    return GameSettings.load(path)


def main() -> None:
    settings = load_settings()
    logger = init_logger(SETTINGS_PATH)
    pygame.init()
    pygame.joystick.init()
    joysticks = [pygame.joystick.Joystick(index) for index in range(pygame.joystick.get_count())]

    screen = pygame.display.set_mode(settings.resolution)
    pygame.display.set_caption("Light Cone Arena")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas", 24)

    input_mapper = InputMapper(InputBindings.load(SETTINGS_PATH))

    manager = SceneManager()
    manager.register("arena", ArenaScene)
    manager.set_context(input=input_mapper, logger=logger, settings=settings, font=font)
    manager.activate("arena")

    def process_events() -> None:
        input_mapper.begin_frame()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                loop.stop()
                return
            manager.handle_event(event)

    def update(dt: float) -> None:
        manager.update(dt)

    def render() -> None:
        manager.render(screen)
        pygame.display.flip()
        clock.tick(settings.max_fps)

    loop = FrameLoop(update, render, process_events, max_dt=settings.max_dt)

    try:
        loop.run()
    finally:
        for joystick in joysticks:
            joystick.quit()
        pygame.quit()
        print("\nUsage: WASD / arrows move, Space / Enter attack, LShift / RCtrl block, drag RMB to plan a boost, C cycle camera, P pause, Esc quit.")


if __name__ == "__main__":
    main()

"""Input mapping from pygame events to per-tick intents."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pygame

from arena.math.vectors import Vec2

FIGHTER_COUNT = 2

DEFAULT_BINDINGS = {
    "p0_left": ["K_a"],
    "p0_right": ["K_d"],
    "p0_up": ["K_w"],
    "p0_down": ["K_s"],
    "p0_attack": ["K_SPACE"],
    "p0_block": ["K_LSHIFT"],
    "p1_left": ["K_LEFT"],
    "p1_right": ["K_RIGHT"],
    "p1_up": ["K_UP"],
    "p1_down": ["K_DOWN"],
    "p1_attack": ["K_RETURN"],
    "p1_block": ["K_RCTRL"],
    "cycle_camera": ["K_c"],
    "pause": ["K_p"],
    "quit": ["K_ESCAPE"],
    "plan_boost": ["BUTTON_RIGHT"],
}

MOUSE_BUTTONS = {
    "BUTTON_LEFT": 1,
    "BUTTON_MIDDLE": 2,
    "BUTTON_RIGHT": 3,
}

GAMEPAD_BUTTONS = {
    "attack": 0,
    "block": 1,
}

STICK_DEADZONE = 0.15
# Screen pixels of drag that make up one unit of planned boost.
BOOST_DRAG_SCALE = 200.0


@dataclass
class FighterIntent:
    """What one fighter wants to do this tick."""

    move: Vec2 = field(default_factory=Vec2)
    attack: bool = False
    block: bool = False


@dataclass
class FrameIntents:
    fighters: List[FighterIntent] = field(
        default_factory=lambda: [FighterIntent() for _ in range(FIGHTER_COUNT)]
    )
    cycle_camera: bool = False
    toggle_pause: bool = False
    quit: bool = False
    planned_boost: Optional[Vec2] = None
    commit_boost: bool = False

    def held(self) -> "FrameIntents":
        """Copy keeping only continuous input; one-shot presses are dropped."""

        return FrameIntents(
            fighters=[FighterIntent(move=fighter.move) for fighter in self.fighters],
            planned_boost=None if self.commit_boost else self.planned_boost,
        )


@dataclass
class InputBindings:
    """Runtime structure representing current bindings."""

    actions: Dict[str, list[str]] = field(default_factory=lambda: DEFAULT_BINDINGS.copy())

    @classmethod
    def load(cls, path: Path) -> "InputBindings":
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return cls()
        actions = DEFAULT_BINDINGS.copy()
        actions.update({k: list(v) for k, v in data.get("bindings", {}).items()})
        return cls(actions=actions)

    def key_codes(self) -> Dict[int, List[str]]:
        """Map pygame key constants to the actions bound to them."""

        codes: Dict[int, List[str]] = {}
        for action, names in self.actions.items():
            for name in names:
                code = getattr(pygame, name, None) if name.startswith("K_") else None
                if isinstance(code, int):
                    codes.setdefault(code, []).append(action)
        return codes

    def mouse_actions(self, button: int) -> List[str]:
        actions = []
        for action, names in self.actions.items():
            for name in names:
                if MOUSE_BUTTONS.get(name) == button:
                    actions.append(action)
        return actions


class InputMapper:
    """Turns raw pygame events into intent structs consumed by the world."""

    def __init__(self, bindings: Optional[InputBindings] = None) -> None:
        self.bindings = bindings or InputBindings()
        self._key_codes = self.bindings.key_codes()
        self.held: Dict[str, bool] = {action: False for action in self.bindings.actions}
        self.pressed: Dict[str, bool] = {action: False for action in self.bindings.actions}
        self.sticks: Dict[int, Vec2] = {}
        self.gamepad_pressed: Dict[Tuple[int, str], bool] = {}
        self._drag_origin: Optional[Tuple[float, float]] = None
        self._drag_current: Optional[Tuple[float, float]] = None
        self._boost_released = False

    def begin_frame(self) -> None:
        for action in self.pressed:
            self.pressed[action] = False
        self.gamepad_pressed.clear()
        self._boost_released = False

    def _set_action(self, action: str, down: bool) -> None:
        if down and not self.held.get(action, False):
            self.pressed[action] = True
        self.held[action] = down

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type in (pygame.KEYDOWN, pygame.KEYUP):
            for action in self._key_codes.get(event.key, []):
                self._set_action(action, event.type == pygame.KEYDOWN)
            return
        if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            actions = self.bindings.mouse_actions(event.button)
            if "plan_boost" in actions:
                if event.type == pygame.MOUSEBUTTONDOWN:
                    self._drag_origin = tuple(event.pos)
                    self._drag_current = tuple(event.pos)
                elif self._drag_origin is not None:
                    self._drag_current = tuple(event.pos)
                    self._boost_released = True
            for action in actions:
                self._set_action(action, event.type == pygame.MOUSEBUTTONDOWN)
            return
        if event.type == pygame.MOUSEMOTION:
            if self._drag_origin is not None:
                self._drag_current = tuple(event.pos)
            return
        if event.type == pygame.JOYAXISMOTION:
            pad = getattr(event, "instance_id", getattr(event, "joy", 0))
            if event.axis in (0, 1):
                stick = self.sticks.get(pad, Vec2())
                value = float(event.value)
                if abs(value) < STICK_DEADZONE:
                    value = 0.0
                # Screen y grows downwards, world y grows upwards.
                if event.axis == 0:
                    stick = Vec2(value, stick.y)
                else:
                    stick = Vec2(stick.x, -value)
                self.sticks[pad] = stick
            return
        if event.type == pygame.JOYBUTTONDOWN:
            pad = getattr(event, "instance_id", getattr(event, "joy", 0))
            for name, index in GAMEPAD_BUTTONS.items():
                if event.button == index:
                    self.gamepad_pressed[(pad, name)] = True

    def planned_boost(self) -> Optional[Vec2]:
        """Drag vector in boost units, or ``None`` when no drag is active."""

        if self._drag_origin is None or self._drag_current is None:
            return None
        dx = self._drag_current[0] - self._drag_origin[0]
        dy = self._drag_current[1] - self._drag_origin[1]
        return Vec2(dx / BOOST_DRAG_SCALE, -dy / BOOST_DRAG_SCALE)

    def _fighter_intent(self, index: int) -> FighterIntent:
        prefix = f"p{index}_"
        x = float(self.held.get(prefix + "right", False)) - float(self.held.get(prefix + "left", False))
        y = float(self.held.get(prefix + "up", False)) - float(self.held.get(prefix + "down", False))
        stick = self.sticks.get(index)
        if stick is not None and stick.mag_sq() > 0.0:
            x, y = stick.x, stick.y
        return FighterIntent(
            move=Vec2(x, y),
            attack=self.pressed.get(prefix + "attack", False)
            or self.gamepad_pressed.get((index, "attack"), False),
            block=self.pressed.get(prefix + "block", False)
            or self.gamepad_pressed.get((index, "block"), False),
        )

    def intents(self) -> FrameIntents:
        intents = FrameIntents(
            fighters=[self._fighter_intent(index) for index in range(FIGHTER_COUNT)],
            cycle_camera=self.pressed.get("cycle_camera", False),
            toggle_pause=self.pressed.get("pause", False),
            quit=self.pressed.get("quit", False),
            planned_boost=self.planned_boost(),
            commit_boost=self._boost_released,
        )
        if self._boost_released:
            self._drag_origin = None
            self._drag_current = None
        return intents


__all__ = [
    "DEFAULT_BINDINGS",
    "FighterIntent",
    "FrameIntents",
    "InputBindings",
    "InputMapper",
]

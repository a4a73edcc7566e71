"""Runtime settings loaded from settings.json."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

from arena.engine.loop import DT_MAX
from arena.math.vectors import MAX_SPEED

BOOST_CURVES = ("linear", "exponential", "quadratic")


@dataclass
class GameSettings:
    resolution: Tuple[int, int] = (1280, 720)
    max_fps: int = 60
    max_dt: float = DT_MAX
    max_speed: float = MAX_SPEED
    boost_curve: str = "exponential"
    camera_mode: str = "visual"
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSettings":
        defaults = cls()
        resolution = data.get("resolution", list(defaults.resolution))
        try:
            width, height = (int(resolution[0]), int(resolution[1]))
        except (TypeError, ValueError, IndexError):
            width, height = defaults.resolution
        boost_curve = str(data.get("boostCurve", defaults.boost_curve)).lower()
        if boost_curve not in BOOST_CURVES:
            boost_curve = defaults.boost_curve
        max_speed = float(data.get("maxSpeed", defaults.max_speed))
        if not 0.0 < max_speed < 1.0:
            max_speed = defaults.max_speed
        return cls(
            resolution=(width, height),
            max_fps=int(data.get("maxFps", defaults.max_fps)),
            max_dt=max(0.0, float(data.get("maxDt", defaults.max_dt))),
            max_speed=max_speed,
            boost_curve=boost_curve,
            camera_mode=str(data.get("cameraMode", defaults.camera_mode)).lower(),
            raw=dict(data),
        )

    @classmethod
    def load(cls, path: Path) -> "GameSettings":
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)


__all__ = ["BOOST_CURVES", "GameSettings"]

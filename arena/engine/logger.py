"""Arena logging utilities with channel toggles."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

# physics: camera and integration, solver: position-cache summaries,
# boost: committed boosts, collision: overlaps, match: rounds and scores.
DEFAULT_CHANNELS = {
    "physics": True,
    "solver": False,
    "boost": True,
    "collision": True,
    "match": True,
}


def _read_settings(settings_path: Path) -> Dict[str, Any]:
    if not settings_path.exists():
        return {}
    try:
        data = json.loads(settings_path.read_text())
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class LoggerConfig:
    """Level and channel switches read from ``logLevel`` / ``logChannels``."""

    level: int = logging.INFO
    channels: Optional[Dict[str, bool]] = None

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        data = _read_settings(settings_path)
        level = getattr(logging, str(data.get("logLevel", "INFO")).upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        overrides = data.get("logChannels", {})
        if isinstance(overrides, dict):
            channels.update({name: bool(enabled) for name, enabled in overrides.items()})
        return cls(level=level, channels=channels)


class ChannelLogger:
    """Forwards to ``arena.<channel>`` only while the channel is enabled."""

    def __init__(self, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def debug(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.warning(msg, *args, **kwargs)


class GameLogger:
    """Central logging registry for the arena."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(
            level=config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
        logging.getLogger("arena").setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {
            name: ChannelLogger(logging.getLogger(f"arena.{name}"), bool(enabled))
            for name, enabled in (config.channels or DEFAULT_CHANNELS).items()
        }

    def channel(self, name: str) -> ChannelLogger:
        # Channels missing from the settings stay silent.
        if name not in self._channels:
            self._channels[name] = ChannelLogger(logging.getLogger(f"arena.{name}"), False)
        return self._channels[name]


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    """Initialise a logger from settings.json."""

    return GameLogger(LoggerConfig.from_settings(settings_path or Path("settings.json")))


def quiet_logger() -> GameLogger:
    """Logger with every channel disabled, for headless runs and tests."""

    channels = {name: False for name in DEFAULT_CHANNELS}
    return GameLogger(LoggerConfig(level=logging.CRITICAL, channels=channels))


__all__ = [
    "ChannelLogger",
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "init_logger",
    "quiet_logger",
]

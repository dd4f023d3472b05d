"""Run logging with per-system channel toggles.

Each progression system logs through its own channel (``upgrades``,
``weapons``, ``pickups``, ``content``, ``session``). Channels are switched on
and off from the ``logChannels`` block of settings.json; a channel nobody
configured stays silent.
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from vanguard.engine.settings import load_settings

DEFAULT_CHANNELS = {
    "upgrades": True,
    "weapons": True,
    "pickups": False,
    "content": True,
    "session": True,
}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class LoggerConfig:
    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=DEFAULT_CHANNELS.copy)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        level_name = str(data.get("logLevel", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        overrides = data.get("logChannels", {})
        if isinstance(overrides, dict):
            channels.update({str(name): bool(enabled) for name, enabled in overrides.items()})
        return cls(level=level, channels=channels)

    @classmethod
    def from_settings(cls, settings_path: Optional[Path] = None) -> "LoggerConfig":
        return cls.from_dict(load_settings(settings_path))


class ChannelLogger:
    """Forwards to a stdlib logger while its channel is enabled."""

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._name = name
        self.enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    def debug(self, msg: str, *args, **kwargs) -> None:
        if self.enabled:
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        if self.enabled:
            self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        if self.enabled:
            self._logger.warning(msg, *args, **kwargs)


class GameLogger:
    """Channel registry for one run."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(level=config.level, format=LOG_FORMAT, stream=sys.stdout)
        logging.getLogger("vanguard").setLevel(config.level)
        self._config = config
        self._channels: Dict[str, ChannelLogger] = {}

    def channel(self, name: str) -> ChannelLogger:
        channel = self._channels.get(name)
        if channel is None:
            channel = ChannelLogger(
                name,
                logging.getLogger(f"vanguard.{name}"),
                self._config.channels.get(name, False),
            )
            self._channels[name] = channel
        return channel

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled


def quiet_logger() -> GameLogger:
    """Logger with every channel switched off, for tests."""

    channels = {name: False for name in DEFAULT_CHANNELS}
    return GameLogger(LoggerConfig(level=logging.CRITICAL, channels=channels))


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    return GameLogger(LoggerConfig.from_settings(settings_path))


__all__ = [
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "ChannelLogger",
    "init_logger",
    "quiet_logger",
]

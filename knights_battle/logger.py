"""Channel logging for the engine.

Every subsystem logs under ``knights_battle.<channel>``. A channel can be
switched off from settings.json without touching the level of the others;
channels nobody configured fall back to DEFAULT_CHANNELS, and names that
are not listed there start switched off.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Optional, TextIO

from .settings import DEFAULT_CHANNELS, GameSettings

ROOT_LOGGER = "knights_battle"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ChannelLogger(logging.LoggerAdapter):
    """Logger adapter that drops every record while its channel is off."""

    def __init__(self, name: str, enabled: bool = True) -> None:
        super().__init__(logging.getLogger(f"{ROOT_LOGGER}.{name}"), {"channel": name})
        self.enabled = enabled

    def isEnabledFor(self, level: int) -> bool:
        return self.enabled and self.logger.isEnabledFor(level)


def get_channel(name: str) -> ChannelLogger:
    """Always-on channel for code running without a GameLogger."""
    return ChannelLogger(name)


class GameLogger:
    """Owns the channel switches and the package's log handler."""

    _handler: Optional[logging.Handler] = None

    def __init__(self, settings: GameSettings, stream: Optional[TextIO] = None) -> None:
        self.switches: Dict[str, bool] = {**DEFAULT_CHANNELS, **settings.log_channels}
        self._channels: Dict[str, ChannelLogger] = {}

        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(settings.log_level)
        # One handler per process; a second GameLogger replaces the first one's
        if GameLogger._handler is not None:
            root.removeHandler(GameLogger._handler)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        GameLogger._handler = handler

    def channel(self, name: str) -> ChannelLogger:
        if name not in self._channels:
            self._channels[name] = ChannelLogger(name, self.switches.get(name, False))
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.switches[name] = enabled
        self.channel(name).enabled = enabled


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    """Build a GameLogger from settings.json (defaults when it is missing)."""
    return GameLogger(GameSettings.from_settings(settings_path or Path("settings.json")))


__all__ = ["ChannelLogger", "GameLogger", "get_channel", "init_logger"]

"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/HIITTimer/settings.json

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.engine import (
    Configuration,
    DEFAULT_MOVE_TIME,
    DEFAULT_REST_TIME,
    DEFAULT_REPETITIONS,
)

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "HIITTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── workout ───────────────────────────────────────────────────────
    move_time: int = DEFAULT_MOVE_TIME     # seconds
    rest_time: int = DEFAULT_REST_TIME
    repetitions: int = DEFAULT_REPETITIONS

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── window ────────────────────────────────────────────────────────
    window_width: int = 420
    window_height: int = 720

    def configuration(self) -> Configuration:
        """The workout shape, with bad stored values clamped to >= 1."""
        return Configuration.coerced(
            self.move_time, self.rest_time, self.repetitions,
        )

    def update_configuration(self, config: Configuration) -> None:
        self.move_time = config.move_time
        self.rest_time = config.rest_time
        self.repetitions = config.repetitions


def _coerce_field(name: str, value, default):
    """Return *value* as the type of *default*, or *default* if it won't fit."""
    if isinstance(value, bool) or isinstance(default, bool):
        if type(value) is type(default):
            return value
    elif isinstance(value, (int, float, str)):
        try:
            return int(value)
        except (ValueError, OverflowError):
            pass
    logger.warning("Ignoring bad value for setting %r: %r", name, value)
    return default


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            defaults = Settings()
            # Only use keys that exist in the dataclass
            values = {
                f.name: _coerce_field(f.name, data[f.name], getattr(defaults, f.name))
                for f in fields(Settings)
                if f.name in data
            }
            return Settings(**values)
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )

"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/QuestTimer/settings.json

Only preferences live here.  Timer and task state is in-memory and is
never written to disk.

Usage::

    settings = load_settings()
    settings.ambient_volume = 40
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .timer.engine import TimerMode

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "QuestTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    pomodoro_duration: int = 25 * 60       # seconds
    break_duration: int = 5 * 60
    quickwin_duration: int = 2 * 60
    custom_duration: int = 25 * 60
    dragon_duration: int = 25 * 60
    treasure_duration: int = 2 * 60
    rearm_delay_ms: int = 3000             # celebration before re-arming

    # ── audio ─────────────────────────────────────────────────────────
    ambient_sound: str = "none"
    ambient_volume: int = 50               # 0-100

    # ── adventurer profile ────────────────────────────────────────────
    adventurer_name: str = "Adventurer"
    companion_name: str = "Spark"
    companion_personality: str = "encouraging"

    # ── misc ──────────────────────────────────────────────────────────
    log_level: str = "INFO"
    window_width: int = 480
    window_height: int = 760

    def durations(self) -> dict[TimerMode, int]:
        """Per-mode durations for :class:`TimerEngine`."""
        return {
            TimerMode.POMODORO: self.pomodoro_duration,
            TimerMode.BREAK: self.break_duration,
            TimerMode.QUICKWIN: self.quickwin_duration,
            TimerMode.CUSTOM: self.custom_duration,
            TimerMode.DRAGON_SLAYING: self.dragon_duration,
            TimerMode.TREASURE_HUNT: self.treasure_duration,
        }


_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _acceptable(name: str, value) -> bool:
    if name.endswith("_duration") or name.startswith("window_"):
        return value > 0
    if name == "rearm_delay_ms":
        return value >= 0
    if name == "ambient_volume":
        return 0 <= value <= 100
    if name == "log_level":
        return value.upper() in _LOG_LEVELS
    return True


def _validated(settings: Settings) -> Settings:
    """Replace values of the wrong type or out of range with defaults."""
    defaults = Settings()
    for f in fields(Settings):
        value = getattr(settings, f.name)
        default = getattr(defaults, f.name)
        # bool is an int subclass; compare exact types
        if type(value) is not type(default) or not _acceptable(f.name, value):
            logger.warning(
                "Ignoring invalid setting %s=%r; using %r", f.name, value, default,
            )
            setattr(settings, f.name, default)
    return settings


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return _validated(Settings(**filtered))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )

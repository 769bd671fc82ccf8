"""Timer package."""

from .engine import (
    TimerEngine,
    TimerMode,
    TimerState,
    SessionCompleted,
    DEFAULT_DURATIONS,
    REARM_DELAY_MS,
    USER_TIMED_MODES,
    checked_duration,
    format_clock,
)
from .ticker import TickSource, TICK_INTERVAL_MS

__all__ = [
    "TimerEngine",
    "TimerMode",
    "TimerState",
    "SessionCompleted",
    "DEFAULT_DURATIONS",
    "REARM_DELAY_MS",
    "USER_TIMED_MODES",
    "checked_duration",
    "format_clock",
    "TickSource",
    "TICK_INTERVAL_MS",
]

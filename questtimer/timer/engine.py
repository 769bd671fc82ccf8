"""Countdown state machine for QuestTimer.

States
------
IDLE        Clock loaded, not counting.
RUNNING     Counting down, one second per ``tick()``.
PAUSED      Frozen, resumable with ``start()``.
COMPLETED   Reached zero.  Stays here until re-armed, reset or switched.

Transitions
-----------
IDLE | PAUSED → RUNNING          (start)
RUNNING → PAUSED                 (pause)
RUNNING → COMPLETED              (tick reaches 0)
COMPLETED → IDLE                 (re-arm after the grace delay)
Any → IDLE                       (reset / switch_mode)

Mode chaining
-------------
When a session completes, pomodoro re-arms into a break and a break
re-arms into a pomodoro.  Every other mode re-arms into itself and leaves
the next step to the controller.

The engine never owns the one-second interval.  Something outside
(``TickSource`` in the app, a plain loop in tests) calls ``tick()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..errors import InvalidDuration, InvalidTransition

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(Enum):
    POMODORO = "pomodoro"
    BREAK = "break"
    QUICKWIN = "quickwin"
    CUSTOM = "custom"
    DRAGON_SLAYING = "dragon-slaying"
    TREASURE_HUNT = "treasure-hunt"


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_DURATIONS: dict[TimerMode, int] = {
    TimerMode.POMODORO: 25 * 60,
    TimerMode.BREAK: 5 * 60,
    TimerMode.QUICKWIN: 2 * 60,
    TimerMode.CUSTOM: 25 * 60,
    TimerMode.DRAGON_SLAYING: 25 * 60,
    TimerMode.TREASURE_HUNT: 2 * 60,
}

REARM_DELAY_MS = 3000  # celebration grace period before re-arming

# Modes whose duration is picked by the user at switch time.  The last
# picked value is remembered so reset() restores it.
USER_TIMED_MODES = frozenset({
    TimerMode.CUSTOM,
    TimerMode.DRAGON_SLAYING,
    TimerMode.TREASURE_HUNT,
})

_CHAINED_MODES: dict[TimerMode, TimerMode] = {
    TimerMode.POMODORO: TimerMode.BREAK,
    TimerMode.BREAK: TimerMode.POMODORO,
}


def format_clock(seconds: int) -> str:
    """Render seconds as ``MM:SS``."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class SessionCompleted:
    """Payload of :attr:`TimerEngine.session_completed`."""

    mode: TimerMode
    duration_seconds: int
    cycles: int


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based countdown engine with work/break chaining.

    Signals
    -------
    remaining_changed(remaining_seconds: int)
        Emitted whenever the clock value changes.
    state_changed(new_state: TimerState)
        Emitted on every state transition.
    mode_changed(new_mode: TimerMode)
        Emitted when the mode changes (explicitly or by chaining).
    session_completed(event: SessionCompleted)
        Emitted once when a running session reaches zero, before any
        chaining happens.
    """

    remaining_changed = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    mode_changed = pyqtSignal(object)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        durations: dict[TimerMode, int] | None = None,
        rearm_delay_ms: int = REARM_DELAY_MS,
    ) -> None:
        super().__init__(parent)

        # ── configuration ─────────────────────────────────────────────
        self._durations: dict[TimerMode, int] = dict(DEFAULT_DURATIONS)
        for mode, seconds in (durations or {}).items():
            self._durations[mode] = checked_duration(seconds)
        self._rearm_delay_ms: int = max(0, rearm_delay_ms)

        # ── session state ─────────────────────────────────────────────
        self._mode: TimerMode = TimerMode.POMODORO
        self._state: TimerState = TimerState.IDLE
        self._total: int = self._durations[self._mode]
        self._remaining: int = self._total
        self._cycles: int = 0

        # ── grace period before re-arming ─────────────────────────────
        self._rearm_timer = QTimer(self)
        self._rearm_timer.setSingleShot(True)
        self._rearm_timer.timeout.connect(self._rearm)
        self._rearm_pending: bool = False

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def total_duration(self) -> int:
        """Length of the current session in seconds."""
        return self._total

    @property
    def cycles(self) -> int:
        """Completed pomodoro sessions since the engine was created."""
        return self._cycles

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the current session."""
        if self._total <= 0:
            return 0.0
        elapsed = self._total - self._remaining
        return max(0.0, min(1.0, elapsed / self._total))

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def formatted_remaining(self) -> str:
        return format_clock(self._remaining)

    @property
    def rearm_pending(self) -> bool:
        """True between completion and the delayed re-arm."""
        return self._rearm_pending

    @property
    def rearm_delay_ms(self) -> int:
        return self._rearm_delay_ms

    @rearm_delay_ms.setter
    def rearm_delay_ms(self, value: int) -> None:
        self._rearm_delay_ms = max(0, value)

    def duration_for(self, mode: TimerMode) -> int:
        return self._durations[mode]

    def set_duration(self, mode: TimerMode, seconds: int) -> None:
        """Override the default duration for *mode*.

        Reloads the clock when idle in that mode.
        """
        self._durations[mode] = checked_duration(seconds)
        if self._state == TimerState.IDLE and self._mode == mode:
            self._load_clock(self._durations[mode])

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start or resume counting down."""
        if self._state == TimerState.COMPLETED:
            raise InvalidTransition(
                "session is completed; reset or switch mode first"
            )
        if self._state == TimerState.RUNNING:
            return
        self._set_state(TimerState.RUNNING)

    def pause(self) -> None:
        """Freeze the clock.  Only meaningful while running."""
        if self._state != TimerState.RUNNING:
            return
        self._set_state(TimerState.PAUSED)

    def tick(self) -> None:
        """Advance the clock by one second.  No-op unless running."""
        if self._state != TimerState.RUNNING:
            return
        if self._remaining > 0:
            self._remaining -= 1
            self.remaining_changed.emit(self._remaining)
        if self._remaining == 0:
            self._finish_session()

    def reset(self) -> None:
        """Reload the current mode's duration and go back to IDLE."""
        self._cancel_rearm()
        self._load_clock(self._durations[self._mode])
        self._set_state(TimerState.IDLE)

    def switch_mode(self, mode: TimerMode, duration: int | None = None) -> None:
        """Load *mode* with *duration* seconds (or its default), IDLE.

        Switching away from a dragon or treasure session does not touch
        the ledger; that is the controller's job.
        """
        if duration is not None:
            duration = checked_duration(duration)
            if mode in USER_TIMED_MODES:
                self._durations[mode] = duration
        else:
            duration = self._durations[mode]

        self._cancel_rearm()
        if mode != self._mode:
            self._mode = mode
            self.mode_changed.emit(mode)
        self._load_clock(duration)
        self._set_state(TimerState.IDLE)
        logger.debug("Switched to %s (%ds)", mode.value, duration)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _finish_session(self) -> None:
        completed_mode = self._mode
        if completed_mode == TimerMode.POMODORO:
            self._cycles += 1

        self._set_state(TimerState.COMPLETED)
        logger.info(
            "%s session completed (%ds, cycles=%d)",
            completed_mode.value, self._total, self._cycles,
        )
        self.session_completed.emit(SessionCompleted(
            mode=completed_mode,
            duration_seconds=self._total,
            cycles=self._cycles,
        ))

        # A slot may already have moved us on (reset / switch_mode).
        if self._state != TimerState.COMPLETED:
            return

        self._rearm_pending = True
        if self._rearm_delay_ms == 0:
            self._rearm()
        else:
            self._rearm_timer.start(self._rearm_delay_ms)

    def _rearm(self) -> None:
        if not self._rearm_pending:
            return
        self._rearm_pending = False
        next_mode = _CHAINED_MODES.get(self._mode)
        if next_mode is not None:
            self.switch_mode(next_mode)
        else:
            # Same mode, same length as the session that just finished.
            self._load_clock(self._total)
            self._set_state(TimerState.IDLE)

    def _cancel_rearm(self) -> None:
        self._rearm_timer.stop()
        self._rearm_pending = False

    def _load_clock(self, seconds: int) -> None:
        self._total = seconds
        self._remaining = seconds
        self.remaining_changed.emit(seconds)

    def _set_state(self, new_state: TimerState) -> None:
        if new_state != self._state:
            logger.debug("%s → %s", self._state.value, new_state.value)
        self._state = new_state
        self.state_changed.emit(new_state)


def checked_duration(seconds: int) -> int:
    """Whole seconds, at least one."""
    try:
        whole = int(seconds)
    except (TypeError, ValueError):
        raise InvalidDuration(f"duration must be a number, got {seconds!r}") from None
    if whole <= 0:
        raise InvalidDuration(f"duration must be positive, got {seconds}")
    return whole

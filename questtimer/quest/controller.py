"""Orchestrates the timer engine and the task ledger.

The engine and the ledger never call each other.  Every user action that
touches both goes through here, in a fixed order: ledger first, then the
engine.  Rejected actions raise :class:`~questtimer.errors.QuestError`
before anything has changed.
"""

from __future__ import annotations

import functools
import logging
import random

from PyQt6.QtCore import QObject, pyqtSignal

from ..errors import InvalidState, QuestError
from ..settings import Settings
from ..timer.engine import (
    SessionCompleted, TimerEngine, TimerMode, TimerState, checked_duration,
)
from ..timer.ticker import TickSource
from .ledger import Dragon, TaskLedger, Treasure
from .messages import PersonalityMessenger, completion_caption
from .snapshot import QuestSnapshot, take_snapshot

logger = logging.getLogger(__name__)


def _rejections_logged(method):
    """Log a rejected action at WARNING and let the error propagate."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except QuestError as exc:
            logger.warning("%s rejected: %s", method.__name__, exc)
            raise

    return wrapper


class QuestController(QObject):
    """The single entry point the presentation layer talks to.

    Signals
    -------
    message(text: str)
        Companion speech (start of a session, start of a break).
    celebrated(headline: str, caption: str)
        A session or task finished; show the celebration overlay.
    changed()
        Anything visible changed; re-read :meth:`snapshot`.
    """

    message = pyqtSignal(str)
    celebrated = pyqtSignal(str, str)
    changed = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        drive_ticks: bool = True,
    ) -> None:
        super().__init__(parent)
        settings = settings or Settings()

        self._personality: str = settings.companion_personality
        self._engine = TimerEngine(
            self,
            durations=settings.durations(),
            rearm_delay_ms=settings.rearm_delay_ms,
        )
        self._ledger = TaskLedger(self)
        self._messenger = PersonalityMessenger(
            settings.adventurer_name, settings.companion_name, rng=rng,
        )
        self._ticker: TickSource | None = (
            TickSource(self._engine, self) if drive_ticks else None
        )

        self._engine.session_completed.connect(self._on_session_completed)
        self._engine.state_changed.connect(self._emit_changed)
        self._engine.remaining_changed.connect(self._emit_changed)
        self._engine.mode_changed.connect(self._on_mode_changed)
        self._engine.mode_changed.connect(self._emit_changed)
        self._ledger.changed.connect(self._emit_changed)

    # ══════════════════════════════════════════════════════════════════
    #  COLLABORATORS / PROFILE
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def ledger(self) -> TaskLedger:
        return self._ledger

    @property
    def messenger(self) -> PersonalityMessenger:
        return self._messenger

    @property
    def tick_source(self) -> TickSource | None:
        return self._ticker

    @property
    def adventurer_name(self) -> str:
        return self._messenger.adventurer_name

    @property
    def companion_name(self) -> str:
        return self._messenger.companion_name

    @property
    def companion_personality(self) -> str:
        return self._personality

    def rename(self, adventurer_name: str, companion_name: str) -> None:
        self._messenger.rename(adventurer_name.strip(), companion_name.strip())
        self.changed.emit()

    def snapshot(self) -> QuestSnapshot:
        return take_snapshot(self._engine, self._ledger)

    def shutdown(self) -> None:
        """Stop driving the clock.  State is left as it is."""
        if self._ticker is not None:
            self._ticker.detach()
            self._ticker = None

    # ══════════════════════════════════════════════════════════════════
    #  TIMER
    # ══════════════════════════════════════════════════════════════════

    @_rejections_logged
    def start(self) -> None:
        fresh = self._engine.state == TimerState.IDLE
        self._engine.start()
        if fresh:
            self.message.emit(self._speak("start"))

    def pause(self) -> None:
        self._engine.pause()

    def toggle(self) -> None:
        """Start/pause button."""
        if self._engine.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._engine.reset()

    @_rejections_logged
    def switch_mode(self, mode: TimerMode, duration: int | None = None) -> None:
        self._engine.switch_mode(mode, duration)

    # ══════════════════════════════════════════════════════════════════
    #  DRAGON
    # ══════════════════════════════════════════════════════════════════

    @_rejections_logged
    def set_dragon(self, description: str) -> None:
        self._ledger.set_dragon_description(description)

    @_rejections_logged
    def begin_dragon_hunt(self, duration_seconds: int | None = None) -> None:
        if duration_seconds is None:
            duration_seconds = self._engine.duration_for(TimerMode.DRAGON_SLAYING)
        self._ledger.start_dragon_hunt(duration_seconds)
        self._engine.switch_mode(TimerMode.DRAGON_SLAYING, duration_seconds)

    @_rejections_logged
    def slay_dragon(self) -> Dragon:
        dragon = self._ledger.complete_dragon()
        self._engine.switch_mode(TimerMode.POMODORO)
        self.celebrated.emit(self._speak("complete"), "Dragon slain!")
        return dragon

    @_rejections_logged
    def retreat_from_dragon(self) -> None:
        self._ledger.retreat_dragon()
        self._engine.switch_mode(TimerMode.POMODORO)

    def new_dragon_hunt(self) -> None:
        if self._ledger.dragon.is_active:
            self._engine.switch_mode(TimerMode.POMODORO)
        self._ledger.new_dragon_hunt()

    # ══════════════════════════════════════════════════════════════════
    #  TREASURES
    # ══════════════════════════════════════════════════════════════════

    @_rejections_logged
    def add_treasure(self, name: str) -> Treasure:
        return self._ledger.add_treasure(name)

    @_rejections_logged
    def rename_treasure(self, treasure_id: str, new_name: str) -> Treasure:
        return self._ledger.rename_treasure(treasure_id, new_name)

    @_rejections_logged
    def delete_treasure(self, treasure_id: str) -> None:
        if self._ledger.delete_treasure(treasure_id):
            self._engine.switch_mode(TimerMode.POMODORO)

    @_rejections_logged
    def begin_treasure_hunt(
        self, treasure_id: str, duration_seconds: int | None = None,
    ) -> Treasure:
        if duration_seconds is None:
            duration_seconds = self._engine.duration_for(TimerMode.TREASURE_HUNT)
        checked_duration(duration_seconds)
        treasure = self._ledger.select_active_treasure(treasure_id)
        self._engine.switch_mode(TimerMode.TREASURE_HUNT, duration_seconds)
        return treasure

    @_rejections_logged
    def switch_treasure(self, treasure_id: str) -> Treasure:
        """Retarget the hunt without touching the clock."""
        if self._engine.mode != TimerMode.TREASURE_HUNT:
            raise InvalidState("no treasure hunt in progress")
        return self._ledger.select_active_treasure(treasure_id)

    @_rejections_logged
    def collect_treasure(self) -> Treasure:
        treasure = self._ledger.complete_active_treasure()
        self._engine.switch_mode(TimerMode.POMODORO)
        self.celebrated.emit(self._speak("complete"), "Treasure collected!")
        return treasure

    def abandon_treasure_hunt(self) -> None:
        self._ledger.clear_active_treasure()
        self._engine.switch_mode(TimerMode.POMODORO)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _speak(self, context: str) -> str:
        return self._messenger.message(self._personality, context)

    def _on_session_completed(self, event: SessionCompleted) -> None:
        self._ledger.record_session(event.mode)
        self.celebrated.emit(self._speak("complete"), completion_caption(event.mode))
        if event.mode == TimerMode.POMODORO:
            self.message.emit(self._speak("break"))

    def _on_mode_changed(self, mode: TimerMode) -> None:
        # A dragon is only active during a battle and a treasure only
        # during its hunt, whichever way the engine left that mode.
        if mode != TimerMode.DRAGON_SLAYING and self._ledger.dragon.is_active:
            logger.info("Left the dragon battle; retreating")
            self._ledger.retreat_dragon()
        if mode != TimerMode.TREASURE_HUNT and self._ledger.active_treasure is not None:
            logger.info("Left the treasure hunt; clearing the target")
            self._ledger.clear_active_treasure()

    def _emit_changed(self, *_args) -> None:
        self.changed.emit()

"""One-second tick source that drives a :class:`TimerEngine`.

The engine only reacts to ``tick()``; this object owns the wall-clock
interval.  It listens to ``state_changed`` and runs its ``QTimer`` only
while the engine is RUNNING, so a paused or completed engine costs
nothing.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer

from .engine import TimerEngine, TimerState

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class TickSource(QObject):
    """Fires ``engine.tick()`` once per interval while the engine runs."""

    def __init__(
        self,
        engine: TimerEngine,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._engine: TimerEngine | None = engine

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

        engine.state_changed.connect(self._on_state_changed)
        self._on_state_changed(engine.state)

    @property
    def active(self) -> bool:
        """True while the underlying ``QTimer`` is running."""
        return self._qt_timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._qt_timer.interval()

    def detach(self) -> None:
        """Stop ticking and drop the engine subscription.

        The engine keeps whatever state it had; the clock just stops.
        """
        self._qt_timer.stop()
        if self._engine is not None:
            self._engine.state_changed.disconnect(self._on_state_changed)
            self._engine = None
            logger.debug("Tick source detached")

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_state_changed(self, state: TimerState) -> None:
        if state == TimerState.RUNNING:
            if not self._qt_timer.isActive():
                self._qt_timer.start()
        else:
            self._qt_timer.stop()

    def _on_timeout(self) -> None:
        if self._engine is not None:
            self._engine.tick()

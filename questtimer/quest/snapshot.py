"""Read-only view model handed to the rendering layer."""

from __future__ import annotations

from dataclasses import dataclass

from ..timer.engine import TimerEngine, TimerMode, TimerState, format_clock
from .ledger import Dragon, TaskLedger, Treasure


@dataclass(frozen=True)
class QuestSnapshot:
    mode: TimerMode
    state: TimerState
    clock: str
    progress: float
    cycles: int
    dragon: Dragon
    active_treasures: tuple[Treasure, ...]
    completed_treasures: tuple[Treasure, ...]
    active_treasure: Treasure | None

    @property
    def treasures_collected(self) -> int:
        return len(self.completed_treasures)

    @property
    def dragon_status(self) -> str:
        return "Slain" if self.dragon.is_completed else "Lurking"


def take_snapshot(engine: TimerEngine, ledger: TaskLedger) -> QuestSnapshot:
    return QuestSnapshot(
        mode=engine.mode,
        state=engine.state,
        clock=format_clock(engine.remaining),
        progress=engine.progress,
        cycles=engine.cycles,
        dragon=ledger.dragon,
        active_treasures=tuple(ledger.active_treasures),
        completed_treasures=tuple(ledger.completed_treasures),
        active_treasure=ledger.active_treasure,
    )

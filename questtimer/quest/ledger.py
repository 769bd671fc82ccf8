"""Dragon and Treasure bookkeeping.

Dragon of the Day
-----------------
A single high-priority task.  Blank until the user names it; once slain
it is locked until ``new_dragon_hunt()`` clears it.

Treasures
---------
Quick-win tasks kept in insertion order.  Each one is either active
(not completed) or completed, never both.  At most one treasure is the
current hunt target; the ledger stores only its id.

Both entity types are frozen dataclasses.  Every mutation builds a new
value and swaps it in with a single assignment, so a reader never sees
a treasure whose session count went up but whose completed flag did not.

The ledger never touches the timer.  ``QuestController`` pairs each
ledger call with the matching engine call.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace

from PyQt6.QtCore import QObject, pyqtSignal

from ..errors import EmptyInput, InvalidState, NotFound
from ..timer.engine import TimerMode, checked_duration

logger = logging.getLogger(__name__)


# ── entities ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Dragon:
    description: str = ""
    sessions_spent: int = 0
    is_active: bool = False
    is_completed: bool = False

    @property
    def is_defined(self) -> bool:
        return bool(self.description)


@dataclass(frozen=True)
class Treasure:
    id: str
    name: str
    sessions_spent: int = 0
    is_completed: bool = False


def _new_treasure_id() -> str:
    return uuid.uuid4().hex


def _clean(text: str, what: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise EmptyInput(f"{what} must not be blank")
    return cleaned


# ── ledger ────────────────────────────────────────────────────────────────


class TaskLedger(QObject):
    """Owns the dragon and the treasure list.

    Signals
    -------
    changed()
        Emitted after every successful mutation.
    """

    changed = pyqtSignal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._dragon = Dragon()
        self._treasures: list[Treasure] = []
        self._active_treasure_id: str | None = None

    # ══════════════════════════════════════════════════════════════════
    #  DRAGON
    # ══════════════════════════════════════════════════════════════════

    @property
    def dragon(self) -> Dragon:
        return self._dragon

    def set_dragon_description(self, text: str) -> None:
        description = _clean(text, "dragon description")
        if self._dragon.is_completed:
            raise InvalidState("the dragon is already slain")
        self._dragon = replace(self._dragon, description=description)
        self.changed.emit()

    def start_dragon_hunt(self, duration_seconds: int) -> None:
        """Mark the dragon active.  The caller switches the engine."""
        checked_duration(duration_seconds)
        if not self._dragon.is_defined:
            raise EmptyInput("name the dragon before hunting it")
        if self._dragon.is_completed:
            raise InvalidState("the dragon is already slain")
        self._dragon = replace(self._dragon, is_active=True)
        logger.info("Dragon hunt started: %s", self._dragon.description)
        self.changed.emit()

    def complete_dragon(self) -> Dragon:
        if not self._dragon.is_active:
            raise InvalidState("no dragon hunt in progress")
        self._dragon = replace(self._dragon, is_active=False, is_completed=True)
        logger.info(
            "Dragon slain after %d session(s)", self._dragon.sessions_spent,
        )
        self.changed.emit()
        return self._dragon

    def retreat_dragon(self) -> None:
        """Leave the hunt without slaying the dragon."""
        if not self._dragon.is_active:
            raise InvalidState("no dragon hunt in progress")
        self._dragon = replace(self._dragon, is_active=False)
        self.changed.emit()

    def new_dragon_hunt(self) -> None:
        """Forget the current dragon entirely."""
        self._dragon = Dragon()
        self.changed.emit()

    # ══════════════════════════════════════════════════════════════════
    #  TREASURES
    # ══════════════════════════════════════════════════════════════════

    @property
    def treasures(self) -> list[Treasure]:
        return list(self._treasures)

    @property
    def active_treasures(self) -> list[Treasure]:
        return [t for t in self._treasures if not t.is_completed]

    @property
    def completed_treasures(self) -> list[Treasure]:
        return [t for t in self._treasures if t.is_completed]

    @property
    def active_treasure(self) -> Treasure | None:
        """The current hunt target, if any."""
        if self._active_treasure_id is None:
            return None
        return self._find(self._active_treasure_id)

    def get_treasure(self, treasure_id: str) -> Treasure:
        found = self._find(treasure_id)
        if found is None:
            raise NotFound(f"no treasure with id {treasure_id!r}")
        return found

    def add_treasure(self, name: str) -> Treasure:
        treasure = Treasure(id=_new_treasure_id(), name=_clean(name, "treasure name"))
        self._treasures.append(treasure)
        logger.debug("Treasure added: %s", treasure.name)
        self.changed.emit()
        return treasure

    def rename_treasure(self, treasure_id: str, new_name: str) -> Treasure:
        treasure = self.get_treasure(treasure_id)
        if treasure.is_completed:
            raise InvalidState("collected treasures cannot be renamed")
        renamed = replace(treasure, name=_clean(new_name, "treasure name"))
        self._swap(renamed)
        self.changed.emit()
        return renamed

    def delete_treasure(self, treasure_id: str) -> bool:
        """Remove a treasure.  Returns True if it was the hunt target."""
        treasure = self.get_treasure(treasure_id)
        self._treasures = [t for t in self._treasures if t.id != treasure.id]
        was_active = self._active_treasure_id == treasure.id
        if was_active:
            self._active_treasure_id = None
        self.changed.emit()
        return was_active

    def select_active_treasure(self, treasure_id: str) -> Treasure:
        treasure = self.get_treasure(treasure_id)
        if treasure.is_completed:
            raise InvalidState("that treasure is already collected")
        self._active_treasure_id = treasure.id
        self.changed.emit()
        return treasure

    def clear_active_treasure(self) -> None:
        if self._active_treasure_id is None:
            return
        self._active_treasure_id = None
        self.changed.emit()

    def complete_active_treasure(self) -> Treasure:
        """Count the session, mark collected and clear the hunt target."""
        treasure = self.active_treasure
        if treasure is None:
            raise InvalidState("no treasure hunt in progress")
        collected = replace(
            treasure,
            sessions_spent=treasure.sessions_spent + 1,
            is_completed=True,
        )
        self._swap(collected)
        self._active_treasure_id = None
        logger.info("Treasure collected: %s", collected.name)
        self.changed.emit()
        return collected

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE EVENTS
    # ══════════════════════════════════════════════════════════════════

    def record_session(self, mode: TimerMode) -> None:
        """React to a finished timer session of *mode*."""
        if mode == TimerMode.DRAGON_SLAYING and self._dragon.is_active:
            self._dragon = replace(
                self._dragon, sessions_spent=self._dragon.sessions_spent + 1,
            )
            self.changed.emit()

    # ── internal ──────────────────────────────────────────────────────

    def _find(self, treasure_id: str) -> Treasure | None:
        for treasure in self._treasures:
            if treasure.id == treasure_id:
                return treasure
        return None

    def _swap(self, updated: Treasure) -> None:
        self._treasures = [
            updated if t.id == updated.id else t for t in self._treasures
        ]

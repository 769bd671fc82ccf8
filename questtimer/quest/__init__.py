"""Quest package: tasks, companion messages and orchestration."""

from .ledger import TaskLedger, Dragon, Treasure
from .messages import (
    PersonalityMessenger,
    PERSONALITIES,
    CONTEXTS,
    TEMPLATES,
    FALLBACK_TEMPLATE,
    completion_caption,
)
from .snapshot import QuestSnapshot, take_snapshot
from .controller import QuestController

__all__ = [
    "TaskLedger",
    "Dragon",
    "Treasure",
    "PersonalityMessenger",
    "PERSONALITIES",
    "CONTEXTS",
    "TEMPLATES",
    "FALLBACK_TEMPLATE",
    "completion_caption",
    "QuestSnapshot",
    "take_snapshot",
    "QuestController",
]

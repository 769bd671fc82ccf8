"""UI package."""

from .window import QuestWindow, MODE_LABELS

__all__ = ["QuestWindow", "MODE_LABELS"]

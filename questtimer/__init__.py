"""QuestTimer: a gamified Pomodoro timer with dragons and treasures."""

__version__ = "0.1.0"

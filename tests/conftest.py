"""Shared pytest fixtures for QuestTimer tests."""

import os
import random
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from questtimer.quest.controller import QuestController  # noqa: E402
from questtimer.quest.ledger import TaskLedger  # noqa: E402
from questtimer.settings import Settings  # noqa: E402
from questtimer.timer.engine import TimerEngine  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def engine(qapp):
    """Fresh TimerEngine that re-arms immediately after completion."""
    return TimerEngine(parent=None, rearm_delay_ms=0)


@pytest.fixture
def engine_delayed(qapp):
    """Fresh TimerEngine with the default celebration delay."""
    return TimerEngine(parent=None)


@pytest.fixture
def ledger(qapp):
    return TaskLedger(parent=None)


@pytest.fixture
def settings():
    return Settings(
        adventurer_name="Ada",
        companion_name="Pip",
        companion_personality="playful",
        rearm_delay_ms=0,
    )


@pytest.fixture
def controller(qapp, settings):
    """Controller with a seeded RNG and no wall-clock ticking."""
    return QuestController(
        parent=None,
        settings=settings,
        rng=random.Random(7),
        drive_ticks=False,
    )

"""Tests for the QuestTimer countdown engine.

Covers: state transitions, ticking, progress, pomodoro/break chaining,
the celebration grace period, mode switching with explicit durations,
rejected transitions and the TickSource driver.
"""

import pytest

from questtimer.errors import InvalidDuration, InvalidTransition
from questtimer.timer.engine import (
    TimerEngine, TimerMode, TimerState, SessionCompleted,
    DEFAULT_DURATIONS, format_clock,
)
from questtimer.timer.ticker import TickSource

from helpers import SignalCollector, complete_session, run_ticks


# ═══════════════════════════════════════════════════════════════════════════
#  STATE TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStateTransitions:

    def test_initial_state_is_idle_pomodoro(self, engine):
        assert engine.state == TimerState.IDLE
        assert engine.mode == TimerMode.POMODORO
        assert engine.remaining == 25 * 60
        assert engine.total_duration == 25 * 60
        assert engine.cycles == 0

    def test_start_transitions_to_running(self, engine):
        engine.start()
        assert engine.state == TimerState.RUNNING
        assert engine.is_running is True

    def test_pause_transitions_to_paused(self, engine):
        engine.start()
        engine.pause()
        assert engine.state == TimerState.PAUSED
        assert engine.is_running is False

    def test_start_resumes_from_paused(self, engine):
        engine.start()
        engine.tick()
        engine.pause()
        engine.start()
        assert engine.state == TimerState.RUNNING
        assert engine.remaining == 25 * 60 - 1

    def test_start_is_noop_when_running(self, engine):
        c = SignalCollector()
        engine.start()
        engine.state_changed.connect(c)
        engine.start()
        assert engine.state == TimerState.RUNNING
        assert len(c) == 0

    def test_pause_is_noop_when_idle(self, engine):
        engine.pause()
        assert engine.state == TimerState.IDLE

    def test_pause_is_noop_when_paused(self, engine):
        engine.start()
        engine.pause()
        engine.pause()
        assert engine.state == TimerState.PAUSED

    def test_start_on_completed_is_rejected(self, engine_delayed):
        engine_delayed.start()
        complete_session(engine_delayed)
        assert engine_delayed.state == TimerState.COMPLETED
        with pytest.raises(InvalidTransition):
            engine_delayed.start()
        assert engine_delayed.state == TimerState.COMPLETED

    def test_reset_from_any_state(self, engine):
        engine.start()
        run_ticks(engine, 30)
        engine.reset()
        assert engine.state == TimerState.IDLE
        assert engine.remaining == engine.total_duration == 25 * 60

        engine.start()
        engine.pause()
        engine.reset()
        assert engine.state == TimerState.IDLE

    def test_reset_after_completion_rearms(self, engine_delayed):
        complete_session(engine_delayed)
        engine_delayed.reset()
        assert engine_delayed.state == TimerState.IDLE
        engine_delayed.start()
        assert engine_delayed.state == TimerState.RUNNING

    def test_state_changed_signal_fires_on_transitions(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)

        engine.start()
        assert c.last == TimerState.RUNNING
        engine.pause()
        assert c.last == TimerState.PAUSED
        engine.reset()
        assert c.last == TimerState.IDLE


# ═══════════════════════════════════════════════════════════════════════════
#  TICK / COUNTDOWN
# ═══════════════════════════════════════════════════════════════════════════


class TestCountdown:

    def test_tick_decrements_remaining(self, engine):
        engine.start()
        engine.tick()
        assert engine.remaining == 25 * 60 - 1

    def test_remaining_changed_signal(self, engine):
        c = SignalCollector()
        engine.remaining_changed.connect(c)
        engine.start()
        engine.tick()
        assert c.last == engine.remaining

    @pytest.mark.parametrize("state_setup", ["idle", "paused", "completed"])
    def test_tick_outside_running_changes_nothing(self, engine_delayed, state_setup):
        eng = engine_delayed
        if state_setup == "paused":
            eng.start()
            eng.tick()
            eng.pause()
        elif state_setup == "completed":
            complete_session(eng)
        before = eng.remaining
        run_ticks(eng, 5)
        assert eng.remaining == before

    @pytest.mark.parametrize("n", [1, 2, 7, 60])
    def test_n_ticks_complete_an_n_second_session(self, engine_delayed, n):
        engine_delayed.switch_mode(TimerMode.CUSTOM, n)
        engine_delayed.start()
        run_ticks(engine_delayed, n)
        assert engine_delayed.remaining == 0
        assert engine_delayed.state == TimerState.COMPLETED

    def test_progress_starts_at_zero(self, engine):
        assert engine.progress == 0.0

    def test_progress_at_halfway(self, engine):
        engine.switch_mode(TimerMode.CUSTOM, 100)
        engine.start()
        run_ticks(engine, 50)
        assert engine.progress == pytest.approx(0.5)

    def test_progress_is_monotonic_and_bounded(self, engine_delayed):
        engine_delayed.switch_mode(TimerMode.QUICKWIN, 30)
        engine_delayed.start()
        seen = [engine_delayed.progress]
        for _ in range(30):
            engine_delayed.tick()
            seen.append(engine_delayed.progress)
        assert seen == sorted(seen)
        assert all(0.0 <= p <= 1.0 for p in seen)
        assert seen[-1] == 1.0

    def test_formatted_remaining(self, engine):
        assert engine.formatted_remaining == "25:00"
        engine.start()
        engine.tick()
        assert engine.formatted_remaining == "24:59"

    def test_format_clock(self):
        assert format_clock(0) == "00:00"
        assert format_clock(65) == "01:05"
        assert format_clock(3600) == "60:00"
        assert format_clock(-3) == "00:00"


# ═══════════════════════════════════════════════════════════════════════════
#  COMPLETION + CHAINING
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_full_pomodoro_scenario(self, engine):
        c = SignalCollector()
        engine.session_completed.connect(c)

        engine.start()
        run_ticks(engine, 1500)

        assert len(c) == 1
        assert isinstance(c.last, SessionCompleted)
        assert c.last.mode == TimerMode.POMODORO
        assert engine.cycles == 1
        assert engine.mode == TimerMode.BREAK
        assert engine.state == TimerState.IDLE
        assert engine.remaining == 300

    def test_break_chains_back_to_pomodoro(self, engine):
        complete_session(engine)
        assert engine.mode == TimerMode.BREAK
        complete_session(engine)
        assert engine.mode == TimerMode.POMODORO
        assert engine.remaining == 25 * 60
        assert engine.state == TimerState.IDLE

    def test_break_does_not_count_a_cycle(self, engine):
        complete_session(engine)
        complete_session(engine)
        assert engine.cycles == 1

    def test_cycles_accumulate_across_mode_switches(self, engine):
        complete_session(engine)
        engine.switch_mode(TimerMode.POMODORO)
        complete_session(engine)
        engine.switch_mode(TimerMode.QUICKWIN)
        complete_session(engine)
        assert engine.cycles == 2

    @pytest.mark.parametrize("mode", [
        TimerMode.QUICKWIN,
        TimerMode.CUSTOM,
        TimerMode.DRAGON_SLAYING,
        TimerMode.TREASURE_HUNT,
    ])
    def test_other_modes_rearm_in_place(self, engine, mode):
        engine.switch_mode(mode, 90)
        complete_session(engine)
        assert engine.mode == mode
        assert engine.state == TimerState.IDLE
        assert engine.remaining == 90
        assert engine.cycles == 0

    def test_completed_state_is_emitted_before_rearm(self, engine):
        c = SignalCollector()
        engine.state_changed.connect(c)
        complete_session(engine)
        assert TimerState.COMPLETED in c.items
        assert c.last == TimerState.IDLE

    def test_session_completed_payload(self, engine):
        c = SignalCollector()
        engine.session_completed.connect(c)
        engine.switch_mode(TimerMode.CUSTOM, 42)
        complete_session(engine)
        assert c.last.mode == TimerMode.CUSTOM
        assert c.last.duration_seconds == 42
        assert c.last.cycles == 0


class TestGracePeriod:

    def test_stays_completed_until_rearm(self, engine_delayed):
        complete_session(engine_delayed)
        assert engine_delayed.state == TimerState.COMPLETED
        assert engine_delayed.mode == TimerMode.POMODORO
        assert engine_delayed.remaining == 0
        assert engine_delayed.rearm_pending is True

    def test_rearm_after_delay_switches_to_break(self, engine_delayed):
        complete_session(engine_delayed)
        engine_delayed._rearm()
        assert engine_delayed.mode == TimerMode.BREAK
        assert engine_delayed.state == TimerState.IDLE
        assert engine_delayed.remaining == 300
        assert engine_delayed.rearm_pending is False

    def test_switch_mode_cancels_pending_rearm(self, engine_delayed):
        complete_session(engine_delayed)
        engine_delayed.switch_mode(TimerMode.QUICKWIN)
        engine_delayed._rearm()  # late timer must not clobber the choice
        assert engine_delayed.mode == TimerMode.QUICKWIN
        assert engine_delayed.state == TimerState.IDLE

    def test_reset_cancels_pending_rearm(self, engine_delayed):
        complete_session(engine_delayed)
        engine_delayed.reset()
        engine_delayed._rearm()
        assert engine_delayed.mode == TimerMode.POMODORO
        assert engine_delayed.remaining == 25 * 60

    def test_slot_can_take_over_on_completion(self, engine_delayed):
        """A completion slot that switches mode wins over chaining."""
        engine_delayed.session_completed.connect(
            lambda _event: engine_delayed.switch_mode(TimerMode.QUICKWIN)
        )
        complete_session(engine_delayed)
        assert engine_delayed.mode == TimerMode.QUICKWIN
        assert engine_delayed.rearm_pending is False

    def test_delay_is_configurable(self, engine_delayed):
        engine_delayed.rearm_delay_ms = 0
        complete_session(engine_delayed)
        assert engine_delayed.mode == TimerMode.BREAK


# ═══════════════════════════════════════════════════════════════════════════
#  MODE SWITCHING / CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


class TestModeSwitching:

    def test_switch_then_reset_pomodoro(self, engine):
        engine.start()
        run_ticks(engine, 10)
        engine.switch_mode(TimerMode.POMODORO)
        engine.reset()
        assert engine.remaining == engine.total_duration == 25 * 60
        assert engine.state == TimerState.IDLE

    @pytest.mark.parametrize("mode", list(TimerMode))
    def test_default_durations(self, engine, mode):
        engine.switch_mode(mode)
        assert engine.remaining == DEFAULT_DURATIONS[mode]

    def test_switch_while_running_goes_idle(self, engine):
        engine.start()
        engine.switch_mode(TimerMode.BREAK)
        assert engine.state == TimerState.IDLE
        assert engine.remaining == 300

    def test_explicit_duration_used(self, engine):
        engine.switch_mode(TimerMode.TREASURE_HUNT, 120)
        assert engine.remaining == engine.total_duration == 120

    def test_explicit_duration_remembered_for_user_timed_modes(self, engine):
        engine.switch_mode(TimerMode.DRAGON_SLAYING, 45 * 60)
        engine.start()
        engine.tick()
        engine.reset()
        assert engine.remaining == 45 * 60
        assert engine.duration_for(TimerMode.DRAGON_SLAYING) == 45 * 60

    def test_explicit_duration_not_remembered_for_pomodoro(self, engine):
        engine.switch_mode(TimerMode.POMODORO, 10)
        assert engine.remaining == 10
        engine.reset()
        assert engine.remaining == 25 * 60

    @pytest.mark.parametrize("bad", [0, -1, -300, 0.5, "ten"])
    def test_non_positive_duration_rejected(self, engine, bad):
        engine.start()
        with pytest.raises(InvalidDuration):
            engine.switch_mode(TimerMode.CUSTOM, bad)
        # nothing changed
        assert engine.mode == TimerMode.POMODORO
        assert engine.state == TimerState.RUNNING

    def test_fractional_duration_truncated_to_whole_seconds(self, engine):
        engine.switch_mode(TimerMode.CUSTOM, 90.7)
        assert engine.total_duration == 90
        assert engine.remaining == 90

    def test_set_duration_rejects_sub_second(self, engine):
        with pytest.raises(InvalidDuration):
            engine.set_duration(TimerMode.BREAK, 0.9)
        assert engine.duration_for(TimerMode.BREAK) == 5 * 60

    def test_mode_changed_signal(self, engine):
        c = SignalCollector()
        engine.mode_changed.connect(c)
        engine.switch_mode(TimerMode.QUICKWIN)
        assert c.last == TimerMode.QUICKWIN
        complete_session(engine)
        assert len(c) == 1  # quickwin re-arms in place

    def test_set_duration_reloads_idle_clock(self, engine):
        engine.set_duration(TimerMode.POMODORO, 30 * 60)
        assert engine.remaining == 30 * 60

    def test_set_duration_leaves_running_clock(self, engine):
        engine.start()
        engine.set_duration(TimerMode.POMODORO, 30 * 60)
        assert engine.remaining == 25 * 60
        assert engine.duration_for(TimerMode.POMODORO) == 30 * 60

    def test_set_duration_rejects_zero(self, engine):
        with pytest.raises(InvalidDuration):
            engine.set_duration(TimerMode.BREAK, 0)

    def test_constructor_durations(self, qapp):
        eng = TimerEngine(durations={TimerMode.POMODORO: 50 * 60})
        assert eng.remaining == 50 * 60
        assert eng.duration_for(TimerMode.BREAK) == 5 * 60

    def test_constructor_rejects_bad_duration(self, qapp):
        with pytest.raises(InvalidDuration):
            TimerEngine(durations={TimerMode.BREAK: 0})


# ═══════════════════════════════════════════════════════════════════════════
#  TICK SOURCE
# ═══════════════════════════════════════════════════════════════════════════


class TestTickSource:

    def test_inactive_while_idle(self, engine):
        ticker = TickSource(engine)
        assert ticker.active is False
        assert ticker.interval_ms == 1000

    def test_follows_engine_state(self, engine):
        ticker = TickSource(engine)
        engine.start()
        assert ticker.active is True
        engine.pause()
        assert ticker.active is False
        engine.start()
        assert ticker.active is True
        engine.reset()
        assert ticker.active is False

    def test_timeout_ticks_engine(self, engine):
        ticker = TickSource(engine)
        engine.start()
        ticker._on_timeout()
        assert engine.remaining == 25 * 60 - 1

    def test_stops_on_completion(self, engine):
        ticker = TickSource(engine)
        engine.switch_mode(TimerMode.QUICKWIN, 1)
        engine.start()
        ticker._on_timeout()
        assert ticker.active is False

    def test_detach_leaves_state_intact(self, engine):
        ticker = TickSource(engine)
        engine.start()
        ticker._on_timeout()
        ticker.detach()
        assert ticker.active is False
        assert engine.state == TimerState.RUNNING
        assert engine.remaining == 25 * 60 - 1
        ticker._on_timeout()  # no engine any more
        assert engine.remaining == 25 * 60 - 1

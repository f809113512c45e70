"""Tests for the timer engine state machine."""

from __future__ import annotations

import pytest

from productivity_tracker.timer.engine import (
    CountDirection,
    SessionMode,
    TimerEngine,
    TimerPhase,
    format_seconds,
)


class TestFreeform:
    @pytest.mark.parametrize("ticks", [0, 1, 125, 3600])
    def test_stop_returns_ticks_elapsed(self, engine, scheduler, ticks):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(ticks)

        assert engine.stop() == ticks
        assert engine.time == 0

    def test_counts_up_without_bound(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(5000)

        assert engine.time == 5000
        assert engine.is_running
        assert engine.phase.direction == CountDirection.UP
        assert engine.phase.total_duration == 0

    def test_start_after_pause_resumes_stopwatch(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(10)
        engine.pause()

        engine.start(SessionMode.FREEFORM)
        scheduler.advance(5)

        assert engine.time == 15

    def test_start_after_stop_begins_at_zero(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(10)
        engine.stop()

        engine.start(SessionMode.FREEFORM)

        assert engine.time == 0

    def test_freeform_does_not_inherit_countdown_value(self, engine, scheduler):
        engine.start(SessionMode.FOCUS)
        scheduler.advance(100)
        engine.pause()

        engine.start(SessionMode.FREEFORM)

        assert engine.time == 0


class TestCountdown:
    def test_focus_counts_down_from_focus_duration(self, engine, scheduler):
        engine.start(SessionMode.FOCUS)
        assert engine.time == 1500

        scheduler.advance(100)

        assert engine.time == 1400
        assert engine.phase == TimerPhase.counting(CountDirection.DOWN, 1400, 1500)

    def test_break_counts_down_from_break_duration(self, engine, scheduler):
        engine.start(SessionMode.BREAK)
        scheduler.advance(1)

        assert engine.time == 299

    def test_end_of_period_fires_once_and_stops(self, engine, scheduler):
        ended = []
        engine.on_period_end = ended.append

        engine.start(SessionMode.BREAK)
        scheduler.advance(300)

        assert ended == [SessionMode.BREAK]
        assert engine.time == 0
        assert not engine.is_running
        assert scheduler.live_handles == []

        scheduler.advance(10)

        assert ended == [SessionMode.BREAK]
        assert engine.time == 0

    def test_mode_is_kept_until_stop(self, engine, scheduler):
        engine.start(SessionMode.BREAK)
        scheduler.advance(300)

        assert engine.mode == SessionMode.BREAK

        engine.stop()
        assert engine.mode == SessionMode.FREEFORM
        assert engine.phase.is_idle

    def test_no_notification_before_zero(self, engine, scheduler):
        ended = []
        engine.on_period_end = ended.append

        engine.start(SessionMode.FOCUS)
        scheduler.advance(1499)

        assert ended == []
        assert engine.time == 1

    def test_restart_from_callback_gets_fresh_handle(self, engine, scheduler):
        engine.on_period_end = lambda mode: engine.start(SessionMode.BREAK)

        engine.start(SessionMode.FOCUS)
        scheduler.advance(1500)

        assert engine.mode == SessionMode.BREAK
        assert engine.time == 300
        assert len(scheduler.live_handles) == 1

        scheduler.advance(1)
        assert engine.time == 299

    def test_callback_error_is_logged_not_raised(self, engine, scheduler, caplog):
        def boom(mode):
            raise RuntimeError("boom")

        engine.on_period_end = boom
        engine.start(SessionMode.BREAK)
        scheduler.advance(300)

        assert "boom" in caplog.text
        assert not engine.is_running


class TestSingleTickSource:
    def test_restart_cancels_previous_ticks(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(3)

        engine.start(SessionMode.FOCUS)
        scheduler.advance(1)

        assert engine.time == 1499
        assert len(scheduler.live_handles) == 1

    def test_repeated_start_never_double_counts(self, engine, scheduler):
        for _ in range(5):
            engine.start(SessionMode.FREEFORM)

        scheduler.advance(1)

        assert engine.time == 1
        assert len(scheduler.live_handles) == 1

    def test_stop_cancels_ticks(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        engine.stop()

        scheduler.advance(10)

        assert engine.time == 0
        assert scheduler.live_handles == []


class TestPauseResume:
    def test_pause_retains_value(self, engine, scheduler):
        engine.start(SessionMode.FOCUS)
        scheduler.advance(60)
        engine.pause()
        scheduler.advance(60)

        assert engine.time == 1440
        assert not engine.is_running

    def test_pause_is_idempotent(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(2)
        engine.pause()
        engine.pause()

        assert engine.time == 2
        assert not engine.is_running

    def test_resume_continues_countdown(self, engine, scheduler):
        engine.start(SessionMode.FOCUS)
        scheduler.advance(60)
        engine.pause()
        engine.resume()
        scheduler.advance(40)

        assert engine.time == 1400
        assert engine.is_running

    def test_resume_when_idle_is_noop(self, engine, scheduler):
        engine.resume()

        assert not engine.is_running
        assert scheduler.handles == []

    def test_resume_after_period_end_is_noop(self, engine, scheduler):
        ended = []
        engine.on_period_end = ended.append
        engine.start(SessionMode.BREAK)
        scheduler.advance(300)

        engine.resume()
        scheduler.advance(5)

        assert ended == [SessionMode.BREAK]
        assert not engine.is_running

    def test_stop_while_paused_returns_retained_value(self, engine, scheduler):
        engine.start(SessionMode.FREEFORM)
        scheduler.advance(42)
        engine.pause()

        assert engine.stop() == 42


def test_on_tick_receives_state_copies(engine, scheduler):
    seen = []
    engine.on_tick = lambda state: seen.append(state.time)

    engine.start(SessionMode.FREEFORM)
    scheduler.advance(3)

    assert seen == [1, 2, 3]


def test_state_is_a_copy(engine, scheduler):
    engine.start(SessionMode.FREEFORM)
    state = engine.state
    state.is_running = False

    assert engine.is_running


def test_custom_durations():
    engine = TimerEngine(focus_seconds=10, break_seconds=3, scheduler=None)

    assert engine.duration_for(SessionMode.FOCUS) == 10
    assert engine.duration_for(SessionMode.BREAK) == 3
    assert engine.duration_for(SessionMode.FREEFORM) == 0


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "00:00"), (59, "00:59"), (125, "02:05"), (1500, "25:00"), (3725, "1:02:05")],
)
def test_format_seconds(seconds, expected):
    assert format_seconds(seconds) == expected

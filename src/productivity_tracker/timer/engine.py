"""Timer engine: a single stopwatch/countdown clock with a one-second tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from productivity_tracker.timer.ticker import AsyncioTickScheduler, TickHandle, TickScheduler

logger = logging.getLogger(__name__)

DEFAULT_FOCUS_SECONDS = 25 * 60
DEFAULT_BREAK_SECONDS = 5 * 60


class SessionMode(str, Enum):
    """Mode chosen when the timer is started."""
    FREEFORM = "freeform"
    FOCUS = "focus"
    BREAK = "break"


class CountDirection(Enum):
    """Which way the clock moves on each tick."""
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class TimerPhase:
    """Either idle, or counting in one direction.

    ``value`` is elapsed seconds when counting up and remaining seconds when
    counting down. ``total_duration`` is 0 for unbounded runs.
    """
    direction: CountDirection | None = None
    value: int = 0
    total_duration: int = 0

    @classmethod
    def counting(cls, direction: CountDirection, value: int, total_duration: int = 0) -> TimerPhase:
        return cls(direction=direction, value=value, total_duration=total_duration)

    @property
    def is_idle(self) -> bool:
        return self.direction is None


@dataclass
class EngineState:
    """Snapshot of the engine's runtime state."""
    phase: TimerPhase = field(default_factory=TimerPhase)
    mode: SessionMode = SessionMode.FREEFORM
    is_running: bool = False

    @property
    def time(self) -> int:
        return self.phase.value


def format_seconds(seconds: int) -> str:
    """Format seconds as MM:SS, or H:MM:SS from one hour up."""
    hours, remainder = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class TimerEngine:
    """Owns exactly one clock and at most one live tick handle.

    Usage:
        engine = TimerEngine()
        engine.on_period_end = lambda mode: print(f"{mode.value} finished")

        engine.start(SessionMode.FOCUS)   # counts down from 25:00
        engine.pause()
        engine.resume()
        elapsed = engine.stop()           # returns value, resets to idle

    All methods are synchronous and must be called from the thread running
    the scheduler's event loop.
    """

    def __init__(
        self,
        focus_seconds: int = DEFAULT_FOCUS_SECONDS,
        break_seconds: int = DEFAULT_BREAK_SECONDS,
        tick_interval: float = 1.0,
        scheduler: TickScheduler | None = None,
    ):
        self.focus_seconds = focus_seconds
        self.break_seconds = break_seconds
        self.tick_interval = tick_interval
        self._scheduler = scheduler or AsyncioTickScheduler()
        self._state = EngineState()
        self._handle: TickHandle | None = None

        # Callbacks
        self.on_tick: Callable[[EngineState], None] | None = None
        self.on_period_end: Callable[[SessionMode], None] | None = None

    @property
    def state(self) -> EngineState:
        """Get current engine state (read-only copy)."""
        return EngineState(
            phase=self._state.phase,
            mode=self._state.mode,
            is_running=self._state.is_running,
        )

    @property
    def phase(self) -> TimerPhase:
        return self._state.phase

    @property
    def time(self) -> int:
        return self._state.phase.value

    @property
    def mode(self) -> SessionMode:
        return self._state.mode

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def time_display(self) -> str:
        return format_seconds(self.time)

    def duration_for(self, mode: SessionMode) -> int:
        """Fixed countdown length for a bounded mode, 0 for freeform."""
        if mode == SessionMode.FOCUS:
            return self.focus_seconds
        if mode == SessionMode.BREAK:
            return self.break_seconds
        return 0

    def start(self, mode: SessionMode) -> None:
        """Start (or restart) the clock in the given mode."""
        self._cancel_ticks()

        if mode == SessionMode.FREEFORM:
            current = self._state.phase
            carried = (
                current.value
                if self._state.mode == SessionMode.FREEFORM and current.direction == CountDirection.UP
                else 0
            )
            phase = TimerPhase.counting(CountDirection.UP, carried)
        else:
            duration = self.duration_for(mode)
            phase = TimerPhase.counting(CountDirection.DOWN, duration, duration)

        self._state = EngineState(phase=phase, mode=mode, is_running=True)
        self._schedule_ticks()

        logger.info(f"Timer started: {mode.value} at {self.time_display}")

    def pause(self) -> None:
        """Stop ticking but keep the current value."""
        if not self._state.is_running:
            return

        self._cancel_ticks()
        self._state.is_running = False

        logger.info(f"Timer paused: {self._state.mode.value} at {self.time_display}")

    def resume(self) -> None:
        """Continue a paused run from its retained value."""
        phase = self._state.phase
        if self._state.is_running or phase.is_idle:
            return
        if phase.direction == CountDirection.DOWN and phase.value <= 0:
            return

        self._state.is_running = True
        self._schedule_ticks()

        logger.info(f"Timer resumed: {self._state.mode.value} at {self.time_display}")

    def stop(self) -> int:
        """Stop the clock and reset it to idle.

        Returns:
            The elapsed (count-up) or remaining (count-down) seconds as of
            the call. This is the caller's only chance to read it.
        """
        self._cancel_ticks()
        value = self._state.phase.value
        mode = self._state.mode

        self._state = EngineState()

        logger.info(f"Timer stopped: {mode.value} with {value}s on the clock")
        return value

    def _schedule_ticks(self) -> None:
        self._handle = self._scheduler.schedule(self.tick_interval, self._tick)

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        """Advance the clock by one second."""
        if not self._state.is_running:
            return

        phase = self._state.phase
        if phase.direction == CountDirection.UP:
            self._state.phase = TimerPhase.counting(CountDirection.UP, phase.value + 1)
            self._notify_tick()
            return

        remaining = phase.value - 1
        if remaining > 0:
            self._state.phase = TimerPhase.counting(CountDirection.DOWN, remaining, phase.total_duration)
            self._notify_tick()
            return

        # Period complete
        self._cancel_ticks()
        self._state.is_running = False
        self._state.phase = TimerPhase.counting(CountDirection.DOWN, 0, phase.total_duration)
        self._notify_tick()

        completed = self._state.mode
        logger.info(f"Timer period complete: {completed.value}")

        if self.on_period_end:
            try:
                self.on_period_end(completed)
            except Exception as e:
                logger.error(f"Error in on_period_end callback: {e}")

    def _notify_tick(self) -> None:
        if self.on_tick:
            try:
                self.on_tick(self.state)
            except Exception as e:
                logger.error(f"Error in on_tick callback: {e}")

"""Timer engine and tick sources."""

from productivity_tracker.timer.engine import (
    CountDirection,
    EngineState,
    SessionMode,
    TimerEngine,
    TimerPhase,
    format_seconds,
)
from productivity_tracker.timer.ticker import AsyncioTickScheduler, TickHandle, TickScheduler

__all__ = [
    "CountDirection",
    "EngineState",
    "SessionMode",
    "TimerEngine",
    "TimerPhase",
    "format_seconds",
    "AsyncioTickScheduler",
    "TickHandle",
    "TickScheduler",
]

"""Personal time tracking with stopwatch and Pomodoro timers."""

__version__ = "0.1.0"

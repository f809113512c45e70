"""Error types surfaced to the user by the session orchestrator."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for recoverable tracker errors."""


class EntryValidationError(TrackerError):
    """A freeform session was stopped without a task name or category."""

    def __init__(self, message: str, discarded_seconds: int = 0):
        super().__init__(message)
        self.discarded_seconds = discarded_seconds


class EmptyLogError(TrackerError):
    """A report or export was requested with no logged sessions."""


class CollaboratorError(TrackerError):
    """The summarizer or exporter failed or returned malformed data."""


class RequestInFlightError(TrackerError):
    """A report or export call for the same action is still outstanding."""

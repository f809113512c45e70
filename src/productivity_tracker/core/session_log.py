"""In-memory, append-only log of completed sessions."""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


def _new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class LogEntry:
    """One committed, immutable record of a tracked interval."""

    task_name: str
    category: str
    duration: int  # seconds
    timestamp: datetime = field(default_factory=_now)
    id: str = field(default_factory=_new_entry_id)

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(f"Log entry duration must be positive, got {self.duration}")

    def to_report_dict(self) -> dict[str, Any]:
        """Shape sent to the summarizer."""
        return {
            "taskName": self.task_name,
            "category": self.category,
            "durationInSeconds": self.duration,
        }

    def to_export_dict(self) -> dict[str, Any]:
        """Shape sent to the exporter."""
        return {
            **self.to_report_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


class SessionLog:
    """Ordered sequence of log entries. Entries are never removed or changed."""

    def __init__(self, entries: list[LogEntry] | None = None):
        self._entries: list[LogEntry] = list(entries or [])

    def append(self, entry: LogEntry) -> LogEntry:
        """Append an entry and return it."""
        self._entries.append(entry)
        logger.info(
            f"Logged session: {entry.task_name} [{entry.category}] {entry.duration}s "
            f"({len(self._entries)} in log)"
        )
        return entry

    def snapshot(self) -> tuple[LogEntry, ...]:
        """Frozen copy of the log as of now."""
        return tuple(self._entries)

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return self.snapshot()

    @property
    def total_seconds(self) -> int:
        return sum(entry.duration for entry in self._entries)

    def seconds_by_category(self) -> dict[str, int]:
        """Accumulated seconds per category, in first-seen order."""
        totals: dict[str, int] = defaultdict(int)
        for entry in self._entries:
            totals[entry.category] += entry.duration
        return dict(totals)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.snapshot())

    def __bool__(self) -> bool:
        return bool(self._entries)

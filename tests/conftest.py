"""Shared test fixtures.

Timers are driven by a manual tick scheduler so tests can advance time
deterministically without sleeping.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Sequence

import pytest

from productivity_tracker.ai.schemas import ProductivityReport, SheetRow
from productivity_tracker.core.config import Config, ExportConfig, SummarizationConfig
from productivity_tracker.core.orchestrator import SessionOrchestrator
from productivity_tracker.core.session_log import LogEntry
from productivity_tracker.timer.engine import TimerEngine


# ---------------------------------------------------------------------------
# Manual tick source
# ---------------------------------------------------------------------------


class ManualTickHandle:
    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualTickScheduler:
    """Fires ticks only when the test calls ``advance``."""

    def __init__(self):
        self.handles: list[ManualTickHandle] = []

    def schedule(self, interval: float, callback: Callable[[], None]) -> ManualTickHandle:
        handle = ManualTickHandle(interval, callback)
        self.handles.append(handle)
        return handle

    @property
    def live_handles(self) -> list[ManualTickHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ticks: int = 1) -> None:
        """Deliver ``ticks`` rounds; handles created mid-round start next round."""
        for _ in range(ticks):
            for handle in self.live_handles:
                if not handle.cancelled:
                    handle.callback()


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeSummarizer:
    def __init__(self, report: ProductivityReport | None = None, error: Exception | None = None):
        self.report = report or ProductivityReport(
            total_hours=0, total_minutes=2, top_category="Docs", summary="Nice work."
        )
        self.error = error
        self.calls: list[tuple[LogEntry, ...]] = []

    async def summarize(self, entries: Sequence[LogEntry]) -> ProductivityReport:
        self.calls.append(tuple(entries))
        if self.error:
            raise self.error
        return self.report


class FakeExporter:
    def __init__(self, rows: list[SheetRow] | None = None, error: Exception | None = None):
        self.rows = rows
        self.error = error
        self.calls: list[tuple[LogEntry, ...]] = []

    async def export(self, entries: Sequence[LogEntry]) -> list[SheetRow]:
        self.calls.append(tuple(entries))
        if self.error:
            raise self.error
        if self.rows is not None:
            return self.rows
        return [
            SheetRow(
                task_name=e.task_name,
                category=e.category,
                duration_in_minutes=round(e.duration / 60, 2),
                date=e.timestamp.strftime("%Y-%m-%d"),
                time=e.timestamp.strftime("%H:%M:%S"),
            )
            for e in entries
        ]


FIXED_NOW = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture()
def engine(scheduler) -> TimerEngine:
    return TimerEngine(focus_seconds=1500, break_seconds=300, scheduler=scheduler)


@pytest.fixture()
def config(tmp_path) -> Config:
    return Config(
        config_dir=tmp_path / "config",
        log_dir=tmp_path / "logs",
        summarization=SummarizationConfig(provider="local"),
        export=ExportConfig(output_dir=tmp_path),
    )


@pytest.fixture()
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture()
def exporter() -> FakeExporter:
    return FakeExporter()


@pytest.fixture()
def orchestrator(config, scheduler, summarizer, exporter) -> SessionOrchestrator:
    return SessionOrchestrator(
        config=config,
        summarizer=summarizer,
        exporter=exporter,
        scheduler=scheduler,
        clock=lambda: FIXED_NOW,
    )

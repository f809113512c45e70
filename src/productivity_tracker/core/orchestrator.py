"""Session orchestrator turning timer events into logged sessions."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from productivity_tracker.core.config import Config, get_config
from productivity_tracker.core.session_log import LogEntry, SessionLog
from productivity_tracker.errors import (
    CollaboratorError,
    EmptyLogError,
    EntryValidationError,
    RequestInFlightError,
)
from productivity_tracker.export.csv_writer import write_csv
from productivity_tracker.timer.engine import SessionMode, TimerEngine, format_seconds
from productivity_tracker.timer.ticker import TickScheduler

if TYPE_CHECKING:
    from productivity_tracker.ai.collaborators import Exporter, Summarizer
    from productivity_tracker.ai.schemas import ProductivityReport, SheetRow

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


class SessionOrchestrator:
    """Coordinates the timer engine, the session log and the collaborators.

    The orchestrator commands the engine and reacts to its end-of-period
    notification: a finished focus period is logged and chained into a
    break, a finished break is not logged. Freeform runs are logged on an
    explicit stop once the task name and category are filled in.

    Usage:
        orchestrator = SessionOrchestrator()
        orchestrator.task_name = "Write docs"
        orchestrator.category = "Docs"

        orchestrator.start()              # freeform stopwatch
        entry = orchestrator.stop()       # LogEntry, or None

        orchestrator.start(pomodoro=True) # focus, then break automatically

        report = await orchestrator.generate_report()
        path = await orchestrator.export_csv(Path("log.csv"))
    """

    def __init__(
        self,
        config: Config | None = None,
        engine: TimerEngine | None = None,
        summarizer: Summarizer | None = None,
        exporter: Exporter | None = None,
        log: SessionLog | None = None,
        scheduler: TickScheduler | None = None,
        clock: Callable[[], datetime] = _now,
    ):
        self.config = config or get_config()
        self.engine = engine or TimerEngine(
            focus_seconds=self.config.timer.focus_seconds,
            break_seconds=self.config.timer.break_seconds,
            tick_interval=self.config.timer.tick_interval,
            scheduler=scheduler,
        )
        self.engine.on_period_end = self._on_period_end
        self.log = log if log is not None else SessionLog()
        self._summarizer = summarizer
        self._exporter = exporter
        self._clock = clock

        # User inputs for the next entry
        self.task_name = ""
        self.category = ""

        # One outstanding collaborator call per action
        self._report_in_flight = False
        self._export_in_flight = False

        # Presentation hooks
        self.on_entry_logged: Callable[[LogEntry], None] | None = None
        self.on_period_end: Callable[[SessionMode], None] | None = None

    @property
    def time(self) -> int:
        return self.engine.time

    @property
    def mode(self) -> SessionMode:
        return self.engine.mode

    @property
    def is_running(self) -> bool:
        return self.engine.is_running

    @property
    def report_in_flight(self) -> bool:
        return self._report_in_flight

    @property
    def export_in_flight(self) -> bool:
        return self._export_in_flight

    # ------------------------------------------------------------------
    # Timer commands
    # ------------------------------------------------------------------

    def start(self, pomodoro: bool = False) -> None:
        """Start a focus period when ``pomodoro``, otherwise the stopwatch."""
        self.engine.start(SessionMode.FOCUS if pomodoro else SessionMode.FREEFORM)

    def start_break(self) -> None:
        """Start a break period by hand."""
        self.engine.start(SessionMode.BREAK)

    def pause(self) -> None:
        self.engine.pause()

    def resume(self) -> None:
        self.engine.resume()

    def stop(self) -> LogEntry | None:
        """Stop the timer and log a freeform run.

        The clock is stopped before the inputs are validated, so a failed
        validation loses the measured time.

        Returns:
            The new LogEntry, or None when nothing was logged.

        Raises:
            EntryValidationError: Freeform time was measured but the task name or
                category is blank.
        """
        mode = self.engine.mode
        elapsed = self.engine.stop()

        if mode != SessionMode.FREEFORM:
            if elapsed:
                logger.info(f"Discarded unfinished {mode.value} period ({format_seconds(elapsed)} left)")
            return None

        if elapsed <= 0:
            return None

        if not self.task_name.strip() or not self.category.strip():
            logger.warning(f"Freeform run of {elapsed}s discarded: task name or category missing")
            raise EntryValidationError(
                f"Task Name and Category are required to log an entry. "
                f"The {format_seconds(elapsed)} just tracked was not saved.",
                discarded_seconds=elapsed,
            )

        entry = self._commit(self.task_name, self.category, elapsed)
        self.task_name = ""
        self.category = ""
        return entry

    def _on_period_end(self, mode: SessionMode) -> None:
        """Handle the engine's end-of-period notification."""
        if mode == SessionMode.FOCUS:
            self._commit(
                self.task_name.strip() or self.config.session.default_task_name,
                self.category.strip() or self.config.session.default_category,
                self.engine.focus_seconds,
            )
            logger.info("Focus period complete, starting break")
            self.engine.start(SessionMode.BREAK)
        elif mode == SessionMode.BREAK:
            logger.info("Break complete")

        if self.on_period_end:
            try:
                self.on_period_end(mode)
            except Exception as e:
                logger.error(f"Error in on_period_end callback: {e}")

    def _commit(self, task_name: str, category: str, duration: int) -> LogEntry:
        entry = self.log.append(LogEntry(
            task_name=task_name,
            category=category,
            duration=duration,
            timestamp=self._clock(),
        ))

        if self.on_entry_logged:
            try:
                self.on_entry_logged(entry)
            except Exception as e:
                logger.error(f"Error in on_entry_logged callback: {e}")

        return entry

    # ------------------------------------------------------------------
    # Report and export
    # ------------------------------------------------------------------

    def _resolve_collaborators(self) -> tuple[Summarizer, Exporter]:
        if self._summarizer is None or self._exporter is None:
            from productivity_tracker.ai.collaborators import get_collaborators

            summarizer, exporter = get_collaborators(self.config)
            self._summarizer = self._summarizer or summarizer
            self._exporter = self._exporter or exporter
        return self._summarizer, self._exporter

    async def generate_report(self) -> ProductivityReport:
        """Ask the summarizer for a report on a snapshot of the log.

        Raises:
            EmptyLogError: Nothing has been logged yet.
            RequestInFlightError: A report is already being generated.
            CollaboratorError: The summarizer failed or returned bad data.
        """
        if not self.log:
            raise EmptyLogError("There are no tasks logged to generate a report.")
        if self._report_in_flight:
            raise RequestInFlightError("A report is already being generated.")

        self._report_in_flight = True
        try:
            entries = self.log.snapshot()
            summarizer, _ = self._resolve_collaborators()
            logger.info(f"Generating report for {len(entries)} sessions")
            return await summarizer.summarize(entries)
        except Exception as e:
            logger.error(f"Report generation failed: {e}")
            raise CollaboratorError(
                "Failed to generate AI report. Please check your API key and try again."
            ) from e
        finally:
            self._report_in_flight = False

    async def export_rows(self) -> list[SheetRow]:
        """Ask the exporter for one spreadsheet row per logged session.

        Raises:
            EmptyLogError: Nothing has been logged yet.
            RequestInFlightError: An export is already running.
            CollaboratorError: The exporter failed or returned bad data.
        """
        if not self.log:
            raise EmptyLogError("There are no tasks logged to download.")
        if self._export_in_flight:
            raise RequestInFlightError("An export is already being prepared.")

        self._export_in_flight = True
        try:
            entries = self.log.snapshot()
            _, exporter = self._resolve_collaborators()
            logger.info(f"Exporting {len(entries)} sessions")
            return await exporter.export(entries)
        except Exception as e:
            logger.error(f"Export failed: {e}")
            raise CollaboratorError("Failed to generate spreadsheet data. Please try again.") from e
        finally:
            self._export_in_flight = False

    async def export_csv(self, path: Path | None = None) -> Path:
        """Export the log and write it as CSV.

        Returns:
            The path written.
        """
        rows = await self.export_rows()
        return write_csv(rows, path or self.config.export_path)

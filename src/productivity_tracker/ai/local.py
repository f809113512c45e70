"""Deterministic, offline summarizer and exporter."""

from __future__ import annotations

from typing import Sequence

from productivity_tracker.ai.schemas import ProductivityReport, SheetRow
from productivity_tracker.core.session_log import LogEntry, SessionLog


def _format_span(hours: int, minutes: int) -> str:
    parts = []
    if hours:
        parts.append(f"{hours} hour{'s' if hours != 1 else ''}")
    if minutes or not hours:
        parts.append(f"{minutes} minute{'s' if minutes != 1 else ''}")
    return " and ".join(parts)


class LocalSummarizer:
    """Computes the report locally instead of asking a model."""

    async def summarize(self, entries: Sequence[LogEntry]) -> ProductivityReport:
        log = SessionLog(list(entries))
        hours, remainder = divmod(log.total_seconds, 3600)
        minutes = remainder // 60

        by_category = log.seconds_by_category()

        # max() keeps the first-seen category on ties
        top_category = max(by_category, key=by_category.__getitem__) if by_category else ""

        count = len(log)
        summary = (
            f"You logged {_format_span(hours, minutes)} across {count} "
            f"session{'s' if count != 1 else ''}, with most of it on {top_category}. Keep it up!"
        )

        return ProductivityReport(
            total_hours=hours,
            total_minutes=minutes,
            top_category=top_category,
            summary=summary,
        )


class LocalExporter:
    """Formats each entry into a spreadsheet row in the timestamp's own zone."""

    async def export(self, entries: Sequence[LogEntry]) -> list[SheetRow]:
        rows = []
        for entry in entries:
            stamp = entry.timestamp
            rows.append(SheetRow(
                task_name=entry.task_name,
                category=entry.category,
                duration_in_minutes=round(entry.duration / 60, 2),
                date=stamp.strftime("%Y-%m-%d"),
                time=stamp.strftime("%H:%M:%S"),
            ))
        return rows

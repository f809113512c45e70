"""CSV rendering of exported spreadsheet rows."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from productivity_tracker.ai.schemas import SheetRow

logger = logging.getLogger(__name__)

HEADERS = ["Task Name", "Category", "Duration (Minutes)", "Date", "Time"]
DEFAULT_FILENAME = "productivity_log.csv"


def format_cell(value: Any) -> str:
    """Render a cell value; integral floats drop their trailing ``.0``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_csv(rows: Sequence[SheetRow]) -> str:
    """Render rows as CSV text.

    The header row is written bare; every data cell is quoted, with inner
    double quotes doubled.
    """
    buffer = io.StringIO()
    buffer.write(",".join(HEADERS) + "\n")

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow([
            format_cell(row.task_name),
            format_cell(row.category),
            format_cell(row.duration_in_minutes),
            format_cell(row.date),
            format_cell(row.time),
        ])

    return buffer.getvalue()


def write_csv(rows: Sequence[SheetRow], path: Path) -> Path:
    """Write rows to ``path`` (a directory gets the default file name)."""
    path = Path(path)
    if path.is_dir():
        path = path / DEFAULT_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)

    path.write_text(render_csv(rows), encoding="utf-8")

    logger.info(f"Exported {len(rows)} rows to {path}")
    return path

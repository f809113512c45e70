"""Pydantic schemas for summarizer and exporter responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductivityReport(BaseModel):
    """Aggregate report over a list of logged sessions."""

    model_config = ConfigDict(populate_by_name=True)

    total_hours: int = Field(
        alias="totalHours", ge=0, description="Total hours tracked, rounded down"
    )
    total_minutes: int = Field(
        alias="totalMinutes", ge=0, le=59, description="Remaining minutes after whole hours"
    )
    top_category: str = Field(
        alias="topCategory", description="Category with the highest cumulative duration"
    )
    summary: str = Field(description="Brief, encouraging one-sentence summary")


class SheetRow(BaseModel):
    """One normalized export row per logged session."""

    model_config = ConfigDict(populate_by_name=True)

    task_name: str = Field(alias="taskName")
    category: str
    duration_in_minutes: float = Field(
        alias="durationInMinutes", ge=0, description="Duration rounded to two decimals"
    )
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$", description="Format: YYYY-MM-DD")
    time: str = Field(pattern=r"^\d{2}:\d{2}:\d{2}$", description="Format: HH:MM:SS")


class SheetExport(BaseModel):
    """Arguments of the ``create_spreadsheet`` tool call."""

    tasks: list[SheetRow]

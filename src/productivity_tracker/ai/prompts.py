"""Prompt templates for Claude report and export calls."""

from __future__ import annotations

import json
from typing import Any

# System prompt for the productivity report
REPORT_SYSTEM_PROMPT = """You are a productivity analysis assistant. You receive a list of tracked work sessions and produce a short aggregate report.

Always respond with valid JSON matching the requested schema."""


REPORT_PROMPT = """Analyze the following list of tasks and their durations provided in a JSON array.

Data:
{tasks_json}

Based on this data, provide a summary.
Calculate the total time tracked in hours and minutes.
Identify the category where the most time was spent.
Provide a brief, one-sentence, encouraging summary statement about the user's productivity.

Respond with a JSON object containing:
{{
  "totalHours": integer - total hours tracked, rounded down to the nearest whole number,
  "totalMinutes": integer 0-59 - the remaining minutes after calculating total hours,
  "topCategory": "string - the category with the highest cumulative duration",
  "summary": "string - a brief, encouraging summary statement"
}}"""


# System prompt for spreadsheet export
EXPORT_SYSTEM_PROMPT = """You are a data processing assistant. You normalize tracked work sessions into spreadsheet rows and always answer by calling the provided tool."""


EXPORT_PROMPT = """Process the following list of tasks and their metadata.
For each task, convert the duration from seconds to minutes (rounded to two decimal places).
Format the timestamp into separate date (YYYY-MM-DD) and time (HH:MM:SS) strings from the ISO 8601 timestamp.
Then, call the 'create_spreadsheet' tool with the processed data, keeping the original order.

Task Data:
{tasks_json}"""


CREATE_SPREADSHEET_TOOL: dict[str, Any] = {
    "name": "create_spreadsheet",
    "description": "Creates a spreadsheet from a list of formatted task data.",
    "input_schema": {
        "type": "object",
        "properties": {
            "tasks": {
                "type": "array",
                "description": "A list of tasks to be included in the spreadsheet.",
                "items": {
                    "type": "object",
                    "properties": {
                        "taskName": {"type": "string"},
                        "category": {"type": "string"},
                        "durationInMinutes": {"type": "number"},
                        "date": {"type": "string", "description": "Format: YYYY-MM-DD"},
                        "time": {"type": "string", "description": "Format: HH:MM:SS"},
                    },
                    "required": ["taskName", "category", "durationInMinutes", "date", "time"],
                },
            },
        },
        "required": ["tasks"],
    },
}


def format_report_prompt(tasks: list[dict[str, Any]]) -> str:
    """Format the report prompt for a list of ``{taskName, category, durationInSeconds}``."""
    return REPORT_PROMPT.format(tasks_json=json.dumps(tasks))


def format_export_prompt(tasks: list[dict[str, Any]]) -> str:
    """Format the export prompt; each task also carries an ISO ``timestamp``."""
    return EXPORT_PROMPT.format(tasks_json=json.dumps(tasks))

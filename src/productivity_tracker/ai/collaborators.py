"""Summarizer/exporter interfaces and the factory that picks an implementation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, Sequence

from productivity_tracker.ai.schemas import ProductivityReport, SheetRow
from productivity_tracker.core.session_log import LogEntry

if TYPE_CHECKING:
    from productivity_tracker.core.config import Config

logger = logging.getLogger(__name__)


class Summarizer(Protocol):
    """Turns a list of sessions into an aggregate report."""

    async def summarize(self, entries: Sequence[LogEntry]) -> ProductivityReport: ...


class Exporter(Protocol):
    """Turns a list of sessions into one spreadsheet row each."""

    async def export(self, entries: Sequence[LogEntry]) -> list[SheetRow]: ...


def _build_claude_client(config: Config):
    from productivity_tracker.ai.claude_client import ClaudeClient

    return ClaudeClient(
        api_key=config.claude_api_key,
        model=config.summarization.model,
        max_tokens=config.summarization.max_tokens,
        max_retries=config.summarization.max_retries,
    )


def get_collaborators(config: Config | None = None) -> tuple[Summarizer, Exporter]:
    """Build the summarizer and exporter selected by ``summarization.provider``."""
    if config is None:
        from productivity_tracker.core.config import get_config

        config = get_config()

    provider = config.summarization.provider
    if provider == "local":
        from productivity_tracker.ai.local import LocalExporter, LocalSummarizer

        logger.info("Using local summarizer and exporter")
        return LocalSummarizer(), LocalExporter()

    client = _build_claude_client(config)
    logger.info(f"Using Claude summarizer and exporter ({config.summarization.model})")
    return client, client

"""Report and export collaborators, Claude-backed or local."""

from productivity_tracker.ai.collaborators import Exporter, Summarizer, get_collaborators
from productivity_tracker.ai.local import LocalExporter, LocalSummarizer
from productivity_tracker.ai.schemas import ProductivityReport, SheetExport, SheetRow

__all__ = [
    "Exporter",
    "Summarizer",
    "get_collaborators",
    "LocalExporter",
    "LocalSummarizer",
    "ProductivityReport",
    "SheetExport",
    "SheetRow",
]

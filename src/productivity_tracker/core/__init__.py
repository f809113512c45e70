"""Session orchestration, configuration and the session log."""

from productivity_tracker.core.config import Config, get_config
from productivity_tracker.core.orchestrator import SessionOrchestrator
from productivity_tracker.core.session_log import LogEntry, SessionLog

__all__ = ["Config", "get_config", "SessionOrchestrator", "LogEntry", "SessionLog"]

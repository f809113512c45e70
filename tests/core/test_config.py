"""Tests for configuration loading and saving."""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from productivity_tracker.core.config import Config


def test_defaults():
    config = Config()

    assert config.timer.focus_seconds == 1500
    assert config.timer.break_seconds == 300
    assert config.session.default_task_name == "Pomodoro Session"
    assert config.session.default_category == "Uncategorized"
    assert config.export.filename == "productivity_log.csv"
    assert config.summarization.provider == "claude"


def test_load_missing_file_uses_defaults(tmp_path):
    config = Config.load(tmp_path / "missing.yaml")

    assert config.timer.focus_seconds == 1500


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({
        "timer": {"focus_seconds": 3000, "break_seconds": 600},
        "summarization": {"provider": "local"},
    }))

    config = Config.load(path)

    assert config.timer.focus_seconds == 3000
    assert config.timer.break_seconds == 600
    assert config.summarization.provider == "local"


def test_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("PRODUCTIVITY_TRACKER_TIMER__FOCUS_SECONDS", "900")
    monkeypatch.setenv("PRODUCTIVITY_TRACKER_LOG_LEVEL", "DEBUG")

    config = Config.load(tmp_path / "missing.yaml")

    assert config.timer.focus_seconds == 900
    assert config.log_level == "DEBUG"


def test_env_beats_yaml(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({
        "timer": {"focus_seconds": 3000, "break_seconds": 600},
        "log_level": "WARNING",
    }))
    monkeypatch.setenv("PRODUCTIVITY_TRACKER_TIMER__FOCUS_SECONDS", "900")
    monkeypatch.setenv("PRODUCTIVITY_TRACKER_LOG_LEVEL", "DEBUG")

    config = Config.load(path)

    assert config.timer.focus_seconds == 900
    assert config.log_level == "DEBUG"
    # Keys the environment leaves alone still come from the file
    assert config.timer.break_seconds == 600


def test_explicit_arguments_beat_env(monkeypatch):
    monkeypatch.setenv("PRODUCTIVITY_TRACKER_LOG_LEVEL", "DEBUG")

    assert Config(log_level="ERROR").log_level == "ERROR"


def test_invalid_provider_rejected():
    with pytest.raises(ValidationError):
        Config(summarization={"provider": "gemini"})


def test_save_round_trip_excludes_api_key(tmp_path):
    path = tmp_path / "saved.yaml"
    config = Config(claude_api_key="secret", timer={"focus_seconds": 1200})

    config.save(path)
    saved = yaml.safe_load(path.read_text())

    assert "claude_api_key" not in saved
    assert saved["timer"]["focus_seconds"] == 1200
    assert Config.load(path).timer.focus_seconds == 1200


def test_export_path(tmp_path):
    config = Config(export={"output_dir": tmp_path, "filename": "log.csv"})

    assert config.export_path == tmp_path / "log.csv"

"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

import os
from contextvars import ContextVar
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# YAML file read by the settings source during Config.load()
_yaml_file: ContextVar[Path | None] = ContextVar("_yaml_file", default=None)


class TimerConfig(BaseModel):
    """Timer durations and tick cadence."""

    focus_seconds: int = Field(default=25 * 60, ge=1, description="Length of a focus period")
    break_seconds: int = Field(default=5 * 60, ge=1, description="Length of a break period")
    tick_interval: float = Field(default=1.0, gt=0, description="Seconds between ticks")


class SessionConfig(BaseModel):
    """Labels used when a focus period ends without user input."""

    default_task_name: str = Field(default="Pomodoro Session")
    default_category: str = Field(default="Uncategorized")


class SummarizationConfig(BaseModel):
    """Report and export collaborator configuration."""

    provider: str = Field(default="claude", pattern="^(claude|local)$")
    model: str = Field(default="claude-haiku-4-5-20251001")
    max_tokens: int = Field(default=1024)
    max_retries: int = Field(default=1, ge=1, description="API attempts per call")


class ExportConfig(BaseModel):
    """CSV export configuration."""

    output_dir: Path = Field(default_factory=Path.cwd)
    filename: str = Field(default="productivity_log.csv")


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PRODUCTIVITY_TRACKER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config/productivity-tracker"
    )
    log_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local/state/productivity-tracker"
    )

    # Log level
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # API Keys (from environment)
    claude_api_key: str | None = Field(default=None, description="Claude API key")

    # Sub-configurations
    timer: TimerConfig = Field(default_factory=TimerConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    summarization: SummarizationConfig = Field(default_factory=SummarizationConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        yaml_file = _yaml_file.get()
        if yaml_file is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file))
        return tuple(sources)

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    @property
    def export_path(self) -> Path:
        """Default destination for CSV exports."""
        return self.export.output_dir / self.export.filename

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        """
        config_path = config_path or Path.home() / ".config/productivity-tracker/config.yaml"

        token = _yaml_file.set(config_path)
        try:
            return cls()
        finally:
            _yaml_file.reset(token)

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Exclude sensitive data
        data = self.model_dump(
            mode="json",
            exclude={"claude_api_key"},
            exclude_none=True,
        )

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        os.chmod(config_path, 0o600)


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()

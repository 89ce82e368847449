"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import timedelta
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import SuggestionPolicy


class SuggestionConfig(BaseModel):
    """Settings for generating alternative start times."""
    workday_start_hour: int = 9
    workday_end_hour: int = 17
    slot_granularity_minutes: int = 30
    search_horizon_days: int = 7
    max_suggestions: int = 3

    @field_validator("workday_start_hour", "workday_end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("slot_granularity_minutes", "search_horizon_days", "max_suggestions")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "SuggestionConfig":
        """Ensure the configured window opens before it closes."""
        if self.workday_end_hour <= self.workday_start_hour:
            raise ValueError("workday_end_hour must be later than workday_start_hour")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)
    events_file: Optional[Path] = None
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the zone name is known to pendulum."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def to_policy(self) -> SuggestionPolicy:
        """Build the domain suggestion policy from these settings."""
        suggestions = self.suggestions
        return SuggestionPolicy(
            workday_start_hour=suggestions.workday_start_hour,
            workday_end_hour=suggestions.workday_end_hour,
            slot_granularity_minutes=suggestions.slot_granularity_minutes,
            search_horizon=timedelta(days=suggestions.search_horizon_days),
            max_suggestions=suggestions.max_suggestions,
            timezone=self.timezone,
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative event files are resolved against the config file's folder.
        if config.events_file is not None and not config.events_file.is_absolute():
            config = config.model_copy(
                update={"events_file": config_path.parent / config.events_file}
            )
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_file: Optional[Path] = None) -> AppConfig:
    """
    Load an explicit config file, or the default one if it exists.

    A missing explicit file is an error; a missing default file means
    built-in defaults.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()

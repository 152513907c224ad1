"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, field_validator

from .domain.calendar import UNKNOWN_RESOURCE_LABEL


class AppConfig(BaseModel):
    """Application configuration."""
    data_file: Path = Path("bookings.json")
    unknown_resource_label: str = UNKNOWN_RESOURCE_LABEL
    timezone: str = "UTC"
    default_window_days: int = 30
    log_level: str = "WARNING"

    @field_validator("default_window_days")
    @classmethod
    def validate_window_days(cls, value: int) -> int:
        """Ensure the default calendar window covers at least one day."""
        if value < 0:
            raise ValueError("default_window_days must not be negative")
        return value

    @field_validator("unknown_resource_label")
    @classmethod
    def validate_unknown_label(cls, value: str) -> str:
        """Ensure the fallback label is not blank."""
        if not value.strip():
            raise ValueError("unknown_resource_label must not be empty")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Ensure the log level is one the logging module knows."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: '{value}'")
        return level

    def resolve_data_file(self, base_dir: Path) -> Path:
        """Resolve a relative data file path against the config directory."""
        if self.data_file.is_absolute():
            return self.data_file
        return base_dir / self.data_file

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

        return cls(**data)


def get_default_config_path() -> Path:
    """
    Return config.yaml from the working directory, falling back to the one
    next to the installed package.
    """
    candidates = [Path.cwd() / "config.yaml", Path(__file__).parent.parent / "config.yaml"]
    return next((path for path in candidates if path.exists()), candidates[0])

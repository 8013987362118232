"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class GridConfig(BaseModel):
    """Calendar grid shown in day and week views."""
    start_hour: int = 8
    end_hour: int = 18
    stride_minutes: int = 30

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("stride_minutes")
    @classmethod
    def validate_stride(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("stride_minutes must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "GridConfig":
        """Ensure the grid opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self

    def get_start_time(self) -> time:
        return time(hour=self.start_hour, minute=0)

    def get_end_time(self) -> time:
        return time(hour=self.end_hour, minute=0)


class DefaultsConfig(BaseModel):
    """Default settings for availability queries."""
    slot_duration_minutes: int = 30

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration_minutes must be greater than zero")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    data_file: Path = Path("schedule.json")
    timezone: str = "UTC"
    grid: GridConfig = Field(default_factory=GridConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    strict_ingestion: bool = False

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's
        directory.

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
        if not config.data_file.is_absolute():
            config = config.model_copy(
                update={"data_file": (config_path.parent / config.data_file).resolve()}
            )
        return config


def get_default_config_path(start_dir: Optional[Path] = None) -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = start_dir or Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

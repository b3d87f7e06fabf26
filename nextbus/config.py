"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import Dict

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.models import DayType
from .domain.phrases import CollectiveDayPolicy, OnTheHourStyle


class TimetableConfig(BaseModel):
    """Where the per-day-type CSV files live."""
    directory: Path | None = None  # None: use the timetables bundled with the package
    weekday: str = "weekday.csv"
    saturday: str = "saturday.csv"
    sunday: str = "sunday.csv"
    cache: bool = False

    def filenames(self) -> Dict[DayType, str]:
        return {
            DayType.WEEKDAY: self.weekday,
            DayType.SATURDAY: self.saturday,
            DayType.SUNDAY: self.sunday,
        }


class PhraseConfig(BaseModel):
    """Spoken-language policies."""
    collective_days: CollectiveDayPolicy = CollectiveDayPolicy.AMBIGUOUS
    on_the_hour: OnTheHourStyle = OnTheHourStyle.OMIT_MINUTES


class StorageConfig(BaseModel):
    """S3 location of assets served through signed URLs."""
    region: str | None = Field(default_factory=lambda: os.environ.get("S3_PERSISTENCE_REGION"))
    bucket: str | None = Field(default_factory=lambda: os.environ.get("S3_PERSISTENCE_BUCKET"))
    expires_seconds: int = 60

    @field_validator("expires_seconds")
    @classmethod
    def validate_expiry(cls, value: int) -> int:
        """Ensure signed URLs live for a positive amount of time."""
        if value <= 0:
            raise ValueError("expires_seconds must be greater than zero")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    timetables: TimetableConfig = Field(default_factory=TimetableConfig)
    phrases: PhraseConfig = Field(default_factory=PhraseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

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

    @classmethod
    def load(cls, config_path: Path | None = None) -> "AppConfig":
        """
        Load an explicit config file, or the default one when it exists.

        Without an explicit path and without a default config.yaml the
        built-in defaults are used.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of nextbus/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

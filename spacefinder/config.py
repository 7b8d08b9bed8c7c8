"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import BusinessHours, TimeOfDay


class BusinessHoursConfig(BaseModel):
    """Daily booking window, applied to every workspace."""
    open: str = "07:00"
    close: str = "22:00"

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        TimeOfDay.parse(value)
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "BusinessHoursConfig":
        """Ensure the configured window opens before it closes."""
        if TimeOfDay.parse(self.close) <= TimeOfDay.parse(self.open):
            raise ValueError("close must be later than open")
        return self

    def to_business_hours(self) -> BusinessHours:
        return BusinessHours(open=TimeOfDay.parse(self.open), close=TimeOfDay.parse(self.close))


class SourceConfig(BaseModel):
    """Where workspaces and reservations are read from."""
    kind: Literal["json", "api"] = "json"
    data_file: Optional[Path] = None  # json: defaults to the bundled sample data
    base_url: str = ""
    api_token: str = ""
    timeout_seconds: float = 30.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_api_settings(self) -> "SourceConfig":
        """The API source needs somewhere to connect to."""
        if self.kind == "api" and not self.base_url:
            raise ValueError("base_url is required when source kind is 'api'")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)

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

        # Relative data files are resolved against the config file's directory
        data_file = config.source.data_file
        if data_file is not None and not data_file.is_absolute():
            config.source.data_file = (config_path.parent / data_file).resolve()

        return config

    @classmethod
    def load_or_default(cls, config_path: Optional[Path]) -> "AppConfig":
        """
        Load an explicit config file, or fall back to defaults when no file
        was given and none exists at the default location.
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
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path

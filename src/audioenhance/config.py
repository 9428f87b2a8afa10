"""Configuration management for audioenhance."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_REFERENCE = re.compile(r"\$\{([^}]+)\}")


def _expand_env_reference(match: re.Match) -> str:
    name = match.group(1)
    if name not in os.environ:
        raise ValueError(f"Configuration references unset environment variable '{name}'")
    return os.environ[name]


class ToolsConfig(BaseModel):
    """External tool locations."""

    ffmpeg: str = Field(default="ffmpeg", description="ffmpeg executable")
    ffprobe: str = Field(default="ffprobe", description="ffprobe executable")


class NamingConfig(BaseModel):
    """Output and side-car file naming."""

    input_extension: str = Field(
        default=".mkv", description="Extension stripped from the input path"
    )
    output_suffix: str = Field(
        default="_enhanced", description="Suffix appended to the output file stem"
    )
    sidecar_suffix: str = Field(
        default="_enhanced", description="Suffix appended to side-car file stems"
    )
    sidecar_extension: str = Field(
        default=".opus", description="Extension of enhanced side-car files"
    )

    @field_validator("input_extension", "sidecar_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Validate extensions start with a dot."""
        if not v.startswith("."):
            raise ValueError("Extension must start with '.'")
        return v


class ProcessingConfig(BaseModel):
    """Processing configuration."""

    timeout_seconds: Optional[int] = Field(
        default=None, description="Per-invocation tool timeout (None waits forever)"
    )

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[int]) -> Optional[int]:
        """Validate timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    tools: ToolsConfig = Field(default_factory=ToolsConfig, description="External tools")
    naming: NamingConfig = Field(default_factory=NamingConfig, description="File naming")
    processing: ProcessingConfig = Field(
        default_factory=ProcessingConfig, description="Processing configuration"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        # Substitute environment variables
        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Expand ${NAME} references in every string of a loaded YAML tree.

        Raises:
            ValueError: If a referenced variable is not set
        """
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        if isinstance(obj, str):
            return ENV_REFERENCE.sub(_expand_env_reference, obj)
        return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config.from_defaults()

    return Config.from_yaml(path)

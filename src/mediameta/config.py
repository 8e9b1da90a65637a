"""Configuration management for mediameta."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class FFprobeConfig(BaseModel):
    """ffprobe invocation settings."""

    path: str = Field(default="ffprobe", description="ffprobe executable name or path")
    timeout_seconds: int = Field(default=30, description="Timeout for a single ffprobe run")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("ffprobe timeout must be positive")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="warning", description="Log level")
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


class DefaultsConfig(BaseModel):
    """Options switched on for every file, in addition to command-line flags."""

    checksum: bool = Field(default=False, description="Include SHA-256 digest")
    tags: bool = Field(default=False, description="Include non-boring metadata tags")
    all_tags: bool = Field(default=False, description="Include all metadata tags")
    scan: bool = Field(default=False, description="Decode frames to determine scan type")


class Config(BaseModel):
    """Main configuration model."""

    ffprobe: FFprobeConfig = Field(default_factory=FFprobeConfig, description="ffprobe settings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    defaults: DefaultsConfig = Field(
        default_factory=DefaultsConfig, description="Default output options"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load a YAML file; an empty file gives the defaults.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If a referenced environment variable is unset or a
                value fails validation
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f) or {}

        return cls(**_expand_env(raw_config))

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()


def load_config(path: Optional[str | Path] = None) -> Config:
    """Configuration from path, or the built-in defaults when path is None."""
    if path is None:
        return Config.from_defaults()

    return Config.from_yaml(path)


_ENV_REFERENCE = re.compile(r"\$\{([^}]+)\}")


def _expand_env(value: Any) -> Any:
    """Replace ${NAME} in every string of a parsed YAML tree."""
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_lookup_env, value)
    return value


def _lookup_env(match: re.Match) -> str:
    name = match.group(1)
    if name not in os.environ:
        raise ValueError(f"Environment variable '{name}' not found (referenced in configuration)")
    return os.environ[name]

"""Configuration management for cytubegen."""

import os
import re
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class ManifestConfig(BaseModel):
    """Manifest generation configuration."""

    url_prefix: str = Field(
        default="", description="Prefix prepended verbatim to every output file name"
    )
    preferred_language: Optional[str] = Field(
        default=None, description="Preferred language code for the default audio track"
    )
    quality_policy: Literal["snap", "strict"] = Field(
        default="snap",
        description="How to handle coded heights outside the accepted quality tiers",
    )

    @field_validator("preferred_language")
    @classmethod
    def validate_preferred_language(cls, v: Optional[str]) -> Optional[str]:
        """Validate preferred language fits a probe language tag."""
        if v is None or v == "":
            return None
        if len(v) > 4:
            raise ValueError("Preferred language must be at most 4 characters")
        return v


class ToolsConfig(BaseModel):
    """External tool configuration."""

    ffprobe: str = Field(default="ffprobe", description="ffprobe executable")
    ffmpeg: str = Field(default="ffmpeg", description="ffmpeg executable")
    probe_timeout_seconds: int = Field(default=30, description="ffprobe timeout")
    transcode_timeout_seconds: Optional[int] = Field(
        default=None, description="ffmpeg timeout (no limit when unset)"
    )


class ExecutionConfig(BaseModel):
    """Execution configuration."""

    dry_run: bool = Field(default=False, description="Plan and write manifest only")
    overwrite: bool = Field(default=False, description="Overwrite existing outputs")
    manifest_name: str = Field(default="manifest.json", description="Manifest file name")


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

    manifest: ManifestConfig = Field(
        default_factory=ManifestConfig, description="Manifest configuration"
    )
    tools: ToolsConfig = Field(default_factory=ToolsConfig, description="External tools")
    execution: ExecutionConfig = Field(
        default_factory=ExecutionConfig, description="Execution configuration"
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

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively substitute environment variables in configuration.

        Replaces ${VAR_NAME} with os.environ['VAR_NAME'].
        """
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
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

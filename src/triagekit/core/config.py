"""YAML configuration for analysis runs.

Example::

    analyzers:
      - suspicious_process
      - network_anomaly
      - persistence_anomaly
    ioc_file: iocs.txt
    hostname: mac-lab-01
    timeline_limit: 500
"""

from pathlib import Path
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from triagekit.analysis.pipeline import BUILTIN_ANALYZERS, DEFAULT_ORDER
from triagekit.core.errors import ConfigError
from triagekit.models.error import ErrorCode


class TriageConfig(BaseModel):
    """Settings for a triage analysis run."""

    analyzers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ORDER),
        description="Built-in analyzers in execution order",
    )

    ioc_file: Path | None = Field(
        default=None,
        description="Indicator list appended after the built-in analyzers",
    )

    hostname: str | None = Field(
        default=None,
        description="Hostname applied to artifacts that lack one",
    )

    timeline_limit: int | None = Field(
        default=None,
        ge=1,
        description="Maximum timeline entries to display",
    )

    model_config = {"extra": "forbid"}

    @field_validator("analyzers")
    @classmethod
    def validate_analyzers(cls, v: list[str]) -> list[str]:
        """Only built-in analyzer names, each at most once."""
        unknown = [name for name in v if name not in BUILTIN_ANALYZERS]
        if unknown:
            raise ValueError(
                f"unknown analyzers {unknown}; available: {list(BUILTIN_ANALYZERS)}"
            )
        if len(set(v)) != len(v):
            raise ValueError("analyzers must not repeat")
        return v


def load_config(path: str | Path | None = None) -> TriageConfig:
    """Load configuration from a YAML file.

    Args:
        path: Config file; defaults are returned when None

    Returns:
        Validated TriageConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is None:
        return TriageConfig()

    path = Path(path)
    if not path.is_file():
        raise ConfigError(
            ErrorCode.CONFIG_NOT_FOUND,
            f"Config file not found: {path}",
            path=str(path),
        )

    try:
        with open(path, encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(
            ErrorCode.VALIDATION_ERROR,
            f"Cannot read config {path}: {e}",
            path=str(path),
        ) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(
            ErrorCode.VALIDATION_ERROR,
            f"Config {path} must be a mapping",
            path=str(path),
        )

    bad_keys = [key for key in raw if not isinstance(key, str)]
    if bad_keys:
        raise ConfigError(
            ErrorCode.VALIDATION_ERROR,
            f"Config {path} has non-string keys: {bad_keys}",
            path=str(path),
        )

    try:
        config = TriageConfig.model_validate(raw)
    except pydantic.ValidationError as e:
        raise ConfigError(
            ErrorCode.VALIDATION_ERROR,
            f"Invalid config {path}: {e.errors()[0]['msg']}",
            path=str(path),
        ) from e

    # Relative IOC paths resolve against the config file's directory
    if config.ioc_file is not None and not config.ioc_file.is_absolute():
        config.ioc_file = path.parent / config.ioc_file
    return config

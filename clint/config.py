"""
Configuration: which rules run, their options, report format and issue thresholds.

Settings come from a `.clint.toml` file (flat keys) or the `[tool.clint]`
table of `pyproject.toml`:

    [tool.clint]
    rules = ["use-after-free", "long-line"]
    report_type = "html"
    jobs = 4

    [tool.clint.severity_thresholds]
    major = 5

    [tool.clint.rule_configurations.long-line]
    max_length = 120
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from clint.findings.models import Severity
from clint.rules.catalog import all_rule_ids

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".clint.toml", "pyproject.toml")

DEFAULT_IGNORE_DIRS: frozenset[str] = frozenset(
    {
        "build",
        "dist",
        "out",
        "obj",
        "node_modules",
        "vendor",
        "third_party",
        ".git",
        ".svn",
        ".hg",
        ".venv",
        "venv",
        "__pycache__",
    }
)


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class Config(BaseModel):
    """Scanner configuration. Every field has a default so an empty file is valid."""

    model_config = ConfigDict(extra="forbid")

    rules: list[str] = Field(default_factory=all_rule_ids)
    report_type: str = "text"
    rule_configurations: dict[str, dict[str, Any]] = Field(default_factory=dict)
    severity_thresholds: dict[str, int] = Field(default_factory=dict)
    jobs: Optional[int] = Field(None, ge=1)
    include_headers: bool = False
    ignore_dirs: set[str] = Field(default_factory=lambda: set(DEFAULT_IGNORE_DIRS))

    @field_validator("severity_thresholds")
    @classmethod
    def _known_severities(cls, value: dict[str, int]) -> dict[str, int]:
        normalized: dict[str, int] = {}
        for key, limit in value.items():
            severity = Severity.from_key(key)
            if severity is None:
                choices = ", ".join(s.value for s in Severity)
                raise ValueError(f"unknown severity {key!r} (expected one of: {choices})")
            if limit < 0:
                raise ValueError(f"threshold for {severity.value} must not be negative")
            normalized[severity.value] = limit
        return normalized


def get_default_config() -> Config:
    """Every catalog rule enabled, text report, built-in thresholds."""
    return Config()


def find_config_file(start: Path) -> Optional[Path]:
    """
    Walk up from start looking for .clint.toml, or a pyproject.toml with [tool.clint].
    """
    current = start.resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / ".clint.toml"
        if candidate.is_file():
            return candidate
        pyproject = directory / "pyproject.toml"
        if pyproject.is_file():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except (OSError, tomllib.TOMLDecodeError):
                continue
            if "clint" in data.get("tool", {}):
                return pyproject
    return None


def load_config(path: Path) -> Config:
    """Read and validate a configuration file. Raises ConfigError on any problem."""
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("clint", {})
        if not data:
            logger.warning("No [tool.clint] section found in %s, using defaults", path)

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e
    logger.info("Loaded configuration from %s", path)
    return config

#!/usr/bin/env python3
"""
Skill Lint - Common Module

Shared infrastructure for the skill linter.
This module contains:
- Type definitions (Level, ValidationResult, ValidationReport)
- Exit codes and default thresholds
- Configuration loading (YAML threshold overrides)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

# =============================================================================
# Type Definitions
# =============================================================================

# Result levels
# - ERROR: required property violated, fails validation
# - WARNING: style/completeness suggestion, never fails validation
# - PASSED: check passed, shown in verbose mode
Level = Literal["ERROR", "WARNING", "PASSED"]

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # No errors (warnings allowed)
EXIT_FAILED = 1  # Errors found, or fatal startup condition

# =============================================================================
# Thresholds
# =============================================================================

MIN_DESCRIPTION_LENGTH = 20
MIN_BODY_LENGTH = 100

# Environment variable naming a YAML config file (used when --config is absent)
CONFIG_ENV_VAR = "SKILL_LINT_CONFIG"

# Terminal markers
MARKERS = {
    "PASSED": "✅",
    "ERROR": "❌",
    "WARNING": "⚠️ ",
}

# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Single validation check result.

    Attributes:
        level: ERROR, WARNING or PASSED
        message: Human-readable description of the result
    """

    level: Level
    message: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"level": self.level, "message": self.message}


@dataclass
class ValidationReport:
    """Ordered collection of check results for one skill file.

    Results are only ever appended, so the order of ``errors`` and
    ``warnings`` is the order the checks ran in.
    """

    skill_path: str = ""
    results: list[ValidationResult] = field(default_factory=list)

    def add(self, level: Level, message: str) -> None:
        """Add a validation result."""
        self.results.append(ValidationResult(level, message))

    def passed(self, message: str) -> None:
        """Add a passed check."""
        self.add("PASSED", message)

    def warning(self, message: str) -> None:
        """Add a warning - always reported, never blocks validation."""
        self.add("WARNING", message)

    def error(self, message: str) -> None:
        """Add an error."""
        self.add("ERROR", message)

    @property
    def errors(self) -> list[str]:
        """Error messages in check order."""
        return [r.message for r in self.results if r.level == "ERROR"]

    @property
    def warnings(self) -> list[str]:
        """Warning messages in check order."""
        return [r.message for r in self.results if r.level == "WARNING"]

    @property
    def passed_checks(self) -> list[str]:
        """Passed-check messages in check order."""
        return [r.message for r in self.results if r.level == "PASSED"]

    @property
    def is_valid(self) -> bool:
        """True when no ERROR results exist. Warnings never fail validation."""
        return not any(r.level == "ERROR" for r in self.results)

    @property
    def exit_code(self) -> int:
        """EXIT_OK when valid, EXIT_FAILED otherwise."""
        return EXIT_OK if self.is_valid else EXIT_FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        errors = self.errors
        warnings = self.warnings
        return {
            "skill_path": self.skill_path,
            "valid": self.is_valid,
            "exit_code": self.exit_code,
            "counts": {"errors": len(errors), "warnings": len(warnings)},
            "errors": errors,
            "warnings": warnings,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string.

        Args:
            indent: JSON indentation level (default 2)

        Returns:
            JSON string representation of the report
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# =============================================================================
# Fatal Startup Errors
# =============================================================================


class SkillFileError(Exception):
    """Raised when the skill file is missing, unreadable, or not UTF-8.

    The message is the exact line printed to stderr.
    """


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ValueError):
    """Raised when a config file cannot be read or holds invalid values."""


@dataclass(frozen=True)
class LintConfig:
    """Tunable thresholds for the length checks."""

    min_description_length: int = MIN_DESCRIPTION_LENGTH
    min_body_length: int = MIN_BODY_LENGTH


CONFIG_KEYS = ("min_description_length", "min_body_length")


def load_config(config_path: Path) -> LintConfig:
    """Load threshold overrides from a YAML file.

    Args:
        config_path: Path to the YAML config file

    Returns:
        LintConfig with defaults for every key the file does not set

    Raises:
        ConfigError: If the file is missing, is not valid YAML, is not a
            mapping, or holds unknown keys or invalid values
    """
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"{config_path} is not valid YAML: {e}") from e

    if raw is None:
        return LintConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping, got {type(raw).__name__}")

    unknown = sorted(str(k) for k in raw if k not in CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"unknown key(s) in {config_path}: {', '.join(unknown)}")

    for key, value in raw.items():
        # bool is an int subclass; reject it explicitly
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ConfigError(f"'{key}' must be a non-negative integer, got {value!r}")

    return LintConfig(**raw)


def resolve_config(config_arg: str | None) -> LintConfig:
    """Pick the config file from --config, then SKILL_LINT_CONFIG, else defaults."""
    path = config_arg or os.environ.get(CONFIG_ENV_VAR, "").strip()
    if not path:
        return LintConfig()
    return load_config(Path(path))

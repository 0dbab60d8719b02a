#!/usr/bin/env python3
"""Tests for the validate_skill.py command-line interface."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from validate_skill import main

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "validate_skill.py"

RUNNING_AS_ROOT = hasattr(os, "geteuid") and os.geteuid() == 0

GOOD_SKILL = """---
name: log-parser
description: Parses application logs into records. Use when logs need triage.
license: Apache-2.0
---

## When to use

Reach for this skill whenever raw log files need to be summarised.

## Steps

1. Read the log file.
2. Group lines by request id.

## Example

```bash
parse-logs app.log
```

Done when each request has a summary line.
"""

WARNING_ONLY_SKILL = """---
name: log-parser
description: Parses logs
---

Reads a log file and prints a short summary of every request it finds, grouped by request id and status, then exits.
"""


def run_validator(*args: str, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    """Run validate_skill.py with given args and return result."""
    cmd = [sys.executable, str(SCRIPT_PATH)] + list(args)
    run_env = {k: v for k, v in os.environ.items() if k != "SKILL_LINT_CONFIG"}
    if env:
        run_env.update(env)
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30, env=run_env, encoding="utf-8")


@pytest.fixture
def good_skill(tmp_path: Path) -> Path:
    path = tmp_path / "SKILL.md"
    path.write_text(GOOD_SKILL, encoding="utf-8")
    return path


class TestUsage:
    """Tests for argument handling."""

    def test_no_arguments_prints_usage(self) -> None:
        """Missing path prints usage on stdout and exits 1."""
        result = run_validator()
        assert result.returncode == 1
        assert result.stdout.strip() == "Usage: validate_skill.py path/to/SKILL.md"

    def test_usage_in_process(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        out = capsys.readouterr().out.strip()
        assert out.startswith("Usage: ")
        assert out.endswith(" path/to/SKILL.md")

    def test_help_flag(self) -> None:
        """--help prints usage information and exits 0."""
        result = run_validator("--help")
        assert result.returncode == 0
        assert "SKILL.md" in result.stdout

    def test_unknown_flag_exits_nonzero(self) -> None:
        result = run_validator("--unknown-flag-xyz")
        assert result.returncode != 0


class TestFileErrors:
    """Tests for fatal startup conditions."""

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.md"
        result = run_validator(str(missing))
        assert result.returncode == 1
        assert result.stderr.strip() == f"File not found: {missing}"
        assert result.stdout == ""

    def test_directory_without_skill_md(self, tmp_path: Path) -> None:
        result = run_validator(str(tmp_path))
        assert result.returncode == 1
        assert "File not found:" in result.stderr

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "SKILL.md"
        path.write_bytes(b"---\nname: \xff\xfe\n---\n")
        result = run_validator(str(path))
        assert result.returncode == 1
        assert "File is not valid UTF-8:" in result.stderr

    @pytest.mark.skipif(RUNNING_AS_ROOT, reason="root can read mode-000 files")
    def test_unreadable_file(self, good_skill: Path) -> None:
        """An existing file that cannot be opened is reported as not found, without a traceback."""
        good_skill.chmod(0)
        try:
            result = run_validator(str(good_skill))
        finally:
            good_skill.chmod(0o644)
        assert result.returncode == 1
        assert result.stderr.strip() == f"File not found: {good_skill}"
        assert "Traceback" not in result.stderr
        assert result.stdout == ""


class TestExitCodes:
    def test_clean_skill_passes(self, good_skill: Path) -> None:
        result = run_validator(str(good_skill))
        assert result.returncode == 0
        assert f"Validating: {good_skill}" in result.stdout
        assert "Skill passes all checks!" in result.stdout

    def test_warnings_do_not_fail(self, tmp_path: Path) -> None:
        path = tmp_path / "SKILL.md"
        path.write_text(WARNING_ONLY_SKILL, encoding="utf-8")
        result = run_validator(str(path))
        assert result.returncode == 0
        assert "Warnings (consider fixing):" in result.stdout
        assert "Errors (must fix):" not in result.stdout

    def test_errors_fail(self, tmp_path: Path) -> None:
        path = tmp_path / "SKILL.md"
        path.write_text("# Title\n", encoding="utf-8")
        result = run_validator(str(path))
        assert result.returncode == 1
        assert "   - Missing YAML frontmatter (---...---)" in result.stdout

    def test_directory_argument_validates_skill_md(self, good_skill: Path) -> None:
        result = run_validator(str(good_skill.parent))
        assert result.returncode == 0
        assert f"Validating: {good_skill}" in result.stdout

    def test_verbose_lists_passed_checks(self, good_skill: Path) -> None:
        result = run_validator(str(good_skill), "--verbose")
        assert result.returncode == 0
        assert "Passed checks:" in result.stdout


class TestJsonOutput:
    def test_json_mirrors_report(self, tmp_path: Path) -> None:
        path = tmp_path / "SKILL.md"
        path.write_text("---\nname: My Skill\n---\nToo short.\n", encoding="utf-8")
        result = run_validator(str(path), "--json")
        assert result.returncode == 1
        data = json.loads(result.stdout)
        assert data["skill_path"] == str(path)
        assert data["valid"] is False
        assert data["exit_code"] == 1
        assert data["errors"][:2] == ["Name must be lowercase", "Name must use hyphens instead of spaces"]
        assert data["counts"] == {"errors": len(data["errors"]), "warnings": len(data["warnings"])}
        assert data["warnings"][0] == "Consider adding a license field"

    def test_json_clean_skill(self, good_skill: Path) -> None:
        result = run_validator(str(good_skill), "--json")
        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["valid"] is True
        assert data["errors"] == []
        assert data["warnings"] == []


class TestConfig:
    """Tests for --config and SKILL_LINT_CONFIG."""

    def test_config_flag_raises_body_threshold(self, good_skill: Path, tmp_path: Path) -> None:
        config = tmp_path / "lint.yaml"
        config.write_text("min_body_length: 5000\n", encoding="utf-8")
        result = run_validator(str(good_skill), "--config", str(config))
        assert result.returncode == 1
        assert "Skill body is too short - add detailed instructions" in result.stdout

    def test_env_var_config(self, good_skill: Path, tmp_path: Path) -> None:
        config = tmp_path / "lint.yaml"
        config.write_text("min_body_length: 5000\n", encoding="utf-8")
        result = run_validator(str(good_skill), env={"SKILL_LINT_CONFIG": str(config)})
        assert result.returncode == 1

    def test_flag_overrides_env_var(self, good_skill: Path, tmp_path: Path) -> None:
        strict = tmp_path / "strict.yaml"
        strict.write_text("min_body_length: 5000\n", encoding="utf-8")
        lenient = tmp_path / "lenient.yaml"
        lenient.write_text("min_body_length: 10\n", encoding="utf-8")
        result = run_validator(str(good_skill), "--config", str(lenient), env={"SKILL_LINT_CONFIG": str(strict)})
        assert result.returncode == 0

    def test_malformed_config_fails_before_validation(self, good_skill: Path, tmp_path: Path) -> None:
        config = tmp_path / "lint.yaml"
        config.write_text("min_body_length: [\n", encoding="utf-8")
        result = run_validator(str(good_skill), "--config", str(config))
        assert result.returncode == 1
        assert result.stderr.startswith("Invalid config:")
        assert "Validating:" not in result.stdout

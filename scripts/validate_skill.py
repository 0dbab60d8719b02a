#!/usr/bin/env python3
"""
Skill Lint - Skill Validator

Lint-checks a single SKILL.md file (frontmatter block plus markdown body)
for required metadata and recommended structure.

Usage:
    uv run python scripts/validate_skill.py path/to/SKILL.md
    uv run python scripts/validate_skill.py path/to/skill/ --verbose
    uv run python scripts/validate_skill.py path/to/SKILL.md --json
    uv run python scripts/validate_skill.py path/to/SKILL.md --config lint.yaml

Exit codes:
    0 - No errors (warnings never fail validation)
    1 - Errors found, or the file/config could not be loaded
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from skill_lint_common import (
    EXIT_FAILED,
    EXIT_OK,
    MARKERS,
    ConfigError,
    LintConfig,
    SkillFileError,
    ValidationReport,
    resolve_config,
)

# Frontmatter is only pattern-matched, never parsed as YAML
FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
# Block stripped from the front of the document to obtain the body
FRONTMATTER_BLOCK_RE = re.compile(r"^---.*?---", re.DOTALL)

# (pattern, section name) - searched anywhere in the body
RECOMMENDED_SECTIONS = [
    (re.compile(r"#+.*(?:when.*use|use.*when)", re.IGNORECASE), "When to Use section"),
    (re.compile(r"#+.*(?:process|steps)", re.IGNORECASE), "Process/Steps section"),
    (re.compile(r"#+.*example", re.IGNORECASE), "Examples section"),
]

NUMBERED_STEP_RE = re.compile(r"^[0-9]+\.", re.MULTILINE)
CODE_FENCE = "```"

TRIGGER_PHRASES = ("use this when", "use when")
SUCCESS_KEYWORDS = ("success", "complete", "done")

SKILL_FILENAME = "SKILL.md"


def extract_frontmatter(content: str) -> str | None:
    """Return the text between the leading --- delimiters, or None."""
    match = FRONTMATTER_RE.match(content)
    return match.group(1) if match else None


def extract_body(content: str) -> str:
    """Return the document with its leading --- block removed, trimmed."""
    return FRONTMATTER_BLOCK_RE.sub("", content, count=1).strip()


def extract_field(frontmatter: str, key: str) -> str | None:
    """Return the trimmed rest-of-line value after ``key:``.

    Returns None when the key is followed by nothing but whitespace.
    """
    match = re.search(rf"{re.escape(key)}:\s*(.+)", frontmatter)
    return match.group(1).strip() if match else None


def validate_name_field(frontmatter: str, report: ValidationReport) -> None:
    """Validate the 'name' frontmatter field."""
    if "name:" not in frontmatter:
        report.error("Missing required field: name")
        return

    name = extract_field(frontmatter, "name")
    if name is None:
        return

    ok = True
    if name != name.lower():
        report.error("Name must be lowercase")
        ok = False
    if " " in name:
        report.error("Name must use hyphens instead of spaces")
        ok = False

    if ok:
        report.passed(f"Name field valid: {name}")


def validate_description_field(frontmatter: str, report: ValidationReport, config: LintConfig) -> None:
    """Validate the 'description' frontmatter field.

    The length and trigger-phrase warnings are independent; both may fire.
    """
    if "description:" not in frontmatter:
        report.error("Missing required field: description")
        return

    desc = extract_field(frontmatter, "description")
    if desc is None:
        return

    if len(desc) < config.min_description_length:
        report.warning("Description is very short - consider being more specific")

    lowered = desc.lower()
    if not any(phrase in lowered for phrase in TRIGGER_PHRASES):
        report.warning('Description should include trigger conditions (e.g., "Use this when...")')
    else:
        report.passed("Description includes trigger conditions")


def validate_license_field(frontmatter: str, report: ValidationReport) -> None:
    """Validate the 'license' frontmatter field (recommended, never required)."""
    if "license:" not in frontmatter:
        report.warning("Consider adding a license field")
        return

    report.passed("License field present")


def validate_body_length(body: str, report: ValidationReport, config: LintConfig) -> None:
    if len(body) < config.min_body_length:
        report.error("Skill body is too short - add detailed instructions")
        return

    report.passed(f"Skill body length OK ({len(body)} chars)")


def validate_sections(body: str, report: ValidationReport) -> None:
    """Check the body for the recommended headings."""
    for pattern, section_name in RECOMMENDED_SECTIONS:
        if pattern.search(body):
            report.passed(f"Found: {section_name}")
        else:
            report.warning(f"Consider adding: {section_name}")


def validate_numbered_steps(body: str, report: ValidationReport) -> None:
    if not NUMBERED_STEP_RE.search(body):
        report.warning("Consider using numbered steps for processes")
        return

    report.passed("Numbered steps present")


def validate_code_examples(body: str, report: ValidationReport) -> None:
    if CODE_FENCE not in body:
        report.warning("Consider adding code examples in fenced code blocks")
        return

    report.passed("Fenced code block present")


def validate_success_criteria(body: str, report: ValidationReport) -> None:
    lowered = body.lower()
    if not any(keyword in lowered for keyword in SUCCESS_KEYWORDS):
        report.warning("Consider adding success criteria to define when the task is complete")
        return

    report.passed("Success criteria present")


def validate_content(content: str, config: LintConfig | None = None, skill_path: str = "") -> ValidationReport:
    """Run every check against a skill document.

    Checks always run to completion; field checks are skipped only when
    the document has no frontmatter.

    Args:
        content: Full text of the skill file
        config: Threshold overrides (defaults when None)
        skill_path: Path recorded on the report

    Returns:
        ValidationReport with results in check order
    """
    config = config or LintConfig()
    report = ValidationReport(skill_path=skill_path)

    frontmatter = extract_frontmatter(content)
    if frontmatter is None:
        report.error("Missing YAML frontmatter (---...---)")
    else:
        report.passed("Frontmatter found")
        validate_name_field(frontmatter, report)
        validate_description_field(frontmatter, report, config)
        validate_license_field(frontmatter, report)

    body = extract_body(content)
    validate_body_length(body, report, config)
    validate_sections(body, report)
    validate_numbered_steps(body, report)
    validate_code_examples(body, report)
    validate_success_criteria(body, report)

    return report


def resolve_skill_file(path: Path) -> Path | None:
    """Map a CLI path argument to the file to validate.

    A directory resolves to the SKILL.md inside it. Returns None when no
    such file exists.
    """
    if path.is_dir():
        path = path / SKILL_FILENAME
    if not path.is_file():
        return None
    return path


def print_results(report: ValidationReport, verbose: bool = False) -> None:
    """Print validation results in human-readable format."""
    print(f"\nValidating: {report.skill_path}\n")

    errors = report.errors
    warnings = report.warnings

    if not errors and not warnings:
        print(f"{MARKERS['PASSED']} Skill passes all checks!\n")
    else:
        if errors:
            print(f"{MARKERS['ERROR']} Errors (must fix):")
            for message in errors:
                print(f"   - {message}")
            print()

        if warnings:
            print(f"{MARKERS['WARNING']} Warnings (consider fixing):")
            for message in warnings:
                print(f"   - {message}")
            print()

    if verbose and report.passed_checks:
        print("Passed checks:")
        for message in report.passed_checks:
            print(f"   - {message}")
        print()


def print_json(report: ValidationReport) -> None:
    """Print validation results as JSON."""
    print(report.to_json())


def load_skill_file(path: Path) -> tuple[Path, str]:
    """Locate and decode the skill file named by a CLI path argument.

    Returns:
        Tuple of (resolved SKILL.md path, decoded content)

    Raises:
        SkillFileError: If the file is missing, unreadable, or not UTF-8
    """
    try:
        skill_file = resolve_skill_file(path)
        if skill_file is None:
            raise SkillFileError(f"File not found: {path}")
        data = skill_file.read_bytes()
    except OSError as e:
        raise SkillFileError(f"File not found: {path}") from e

    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SkillFileError(f"File is not valid UTF-8: {skill_file}") from e

    return skill_file, content


def validate_file(
    path: Path,
    config: LintConfig | None = None,
    verbose: bool = False,
    as_json: bool = False,
) -> bool:
    """Validate one skill file and print its report.

    Args:
        path: SKILL.md path, or a directory containing one
        config: Threshold overrides (defaults when None)
        verbose: Also list passed checks in the text report
        as_json: Print the JSON report instead of the text report

    Returns:
        True when no errors were found

    Raises:
        SkillFileError: If the file cannot be loaded
    """
    skill_file, content = load_skill_file(path)
    report = validate_content(content, config, skill_path=str(skill_file))

    if as_json:
        print_json(report)
    else:
        print_results(report, verbose)

    return report.is_valid


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Lint-check a SKILL.md file for required fields and structure")
    parser.add_argument("skill_path", nargs="?", help="Path to SKILL.md (or a directory containing one)")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Also list the checks that passed",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--config", help="YAML file overriding length thresholds (default: $SKILL_LINT_CONFIG)")
    args = parser.parse_args(argv)

    if args.skill_path is None:
        print(f"Usage: {parser.prog} path/to/SKILL.md")
        return EXIT_FAILED

    try:
        config = resolve_config(args.config)
    except ConfigError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return EXIT_FAILED

    try:
        is_valid = validate_file(Path(args.skill_path), config, verbose=args.verbose, as_json=args.json)
    except SkillFileError as e:
        print(e, file=sys.stderr)
        return EXIT_FAILED

    return EXIT_OK if is_valid else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())

"""
metadata/validator.py: JSON Schema validation for form definition YAML files.

Usage:
    from trustvalidator.metadata.validator import validate_forms_dir, validate_yaml_file

    issues = validate_forms_dir(Path("forms"))
    for issue in issues:
        print(issue)

Schema validation only checks document structure. Semantic problems the
schema cannot express (unregistered predicates, invalid regular expressions,
duplicate field names) are reported by loading the file.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from trustvalidator.metadata.loader import resolve_form

logger = logging.getLogger(__name__)

_SCHEMAS_DIR = Path(__file__).parent / "schemas"
FORM_SCHEMA = "form.schema.json"


@dataclass
class ValidationIssue:
    """A single validation finding for a form YAML file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "fields[0]/rules"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


def _load_schema(name: str) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def validate_yaml_file(yaml_path: Path) -> list[ValidationIssue]:
    """
    Validate a single form YAML file.

    Args:
        yaml_path: Path to the YAML file to validate.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    # 1. Parse YAML
    try:
        with yaml_path.open() as fh:
            doc = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if doc is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    # 2. Structural validation
    validator = Draft202012Validator(_load_schema(FORM_SCHEMA))
    issues = [
        ValidationIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=lambda e: list(e.path))
    ]
    if issues:
        return issues

    # 3. Semantic validation (rule values, predicates, duplicates)
    try:
        form = resolve_form(doc)
        for field_def in form.fields:
            field_def.rule_set()
    except ValueError as exc:
        issues.append(ValidationIssue(file=yaml_path, message=str(exc)))
        return issues

    for field_def in form.fields:
        if not field_def.rules:
            issues.append(
                ValidationIssue(
                    file=yaml_path,
                    message=f"Field '{field_def.name}' declares no rules",
                    path=f"fields/{field_def.name}",
                    severity="warning",
                )
            )

    return issues


def validate_forms_dir(
    forms_dir: Path,
    *,
    strict: bool = False,
) -> list[ValidationIssue]:
    """
    Validate all ``*.yaml`` form definitions under *forms_dir*.

    Args:
        forms_dir: Directory containing form YAML files.
        strict:    If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`ValidationIssue` objects across all files.
        Empty list means all files are valid.
    """
    if not forms_dir.is_dir():
        return [
            ValidationIssue(
                file=forms_dir,
                message=f"Forms directory does not exist: {forms_dir}",
            )
        ]

    all_issues: list[ValidationIssue] = []
    for yaml_file in sorted(forms_dir.glob("*.yaml")):
        file_issues = validate_yaml_file(yaml_file)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)

    logger.debug("Validated %s: %d issue(s)", forms_dir, len(all_issues))
    return all_issues

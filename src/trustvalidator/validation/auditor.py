"""Conflict auditor.

Inspects a newly registered rule set against the field's markup and native
constraints, and reports structural warnings:
- duplicate-constraint: a declared rule and a same-purpose native constraint
  govern the same field (redundant when equal, conflicting otherwise)
- missing-label: the field has no associated label
- missing-error-slot: the field has no place to render error text

Warnings are advisory and never affect validation results.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from trustvalidator.providers import StructuralProbe, ValueProvider
from trustvalidator.validation.types import (
    RuleSet,
    StructuralWarning,
    WarningKind,
)

logger = logging.getLogger(__name__)

# Declared rule -> native constraint attribute with the same purpose
NATIVE_EQUIVALENTS: dict[str, str] = {
    "required": "required",
    "minLength": "minlength",
    "maxLength": "maxlength",
    "pattern": "pattern",
    "min": "min",
    "max": "max",
}


class ConflictAuditor:
    """Runs the structural checks for a field at registration time."""

    def audit(
        self,
        field_name: str,
        rules: RuleSet,
        probe: StructuralProbe,
        values: ValueProvider,
    ) -> list[StructuralWarning]:
        """Audit a field's declared rules.

        Args:
            field_name: The registered field
            rules: Its declared rules
            probe: Structural collaborator (native constraints, label, error slot)
            values: Value collaborator used to locate the field

        Returns:
            Warnings in check order. A field that cannot be located is not audited.
        """
        handle = values.lookup(field_name)
        if handle is None:
            logger.debug("Skipping audit of '%s': field not found", field_name)
            return []

        warnings = self._duplicate_constraints(
            field_name, rules, probe.native_constraints(handle)
        )

        if not probe.has_label(handle):
            warnings.append(
                StructuralWarning(
                    field=field_name,
                    kind=WarningKind.MISSING_LABEL,
                    detail="no label is associated with the field",
                )
            )

        if not probe.has_error_slot(handle):
            warnings.append(
                StructuralWarning(
                    field=field_name,
                    kind=WarningKind.MISSING_ERROR_SLOT,
                    detail="no element is designated to display its errors",
                )
            )

        return warnings

    def _duplicate_constraints(
        self,
        field_name: str,
        rules: RuleSet,
        native: Mapping[str, Any],
    ) -> list[StructuralWarning]:
        warnings = []
        for rule_name, attribute in NATIVE_EQUIVALENTS.items():
            declared = rules.get(rule_name)
            present = native.get(attribute)
            # 0 is a real bound; only None and required=false mean absent
            if declared is None or present is None or present is False:
                continue
            if rule_name == "required" and declared.value is False:
                continue

            declared_value = _comparable(declared.value)
            native_value = _comparable(native[attribute])
            if declared_value == native_value:
                detail = (
                    f"rule '{rule_name}' duplicates the native '{attribute}' "
                    f"constraint ({native_value!r})"
                )
            else:
                detail = (
                    f"rule '{rule_name}' ({declared_value!r}) conflicts with the "
                    f"native '{attribute}' constraint ({native_value!r})"
                )
            warnings.append(
                StructuralWarning(
                    field=field_name,
                    kind=WarningKind.DUPLICATE_CONSTRAINT,
                    detail=detail,
                )
            )
        return warnings


def _comparable(value: Any) -> Any:
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value

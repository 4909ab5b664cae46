"""Message resolution for violations.

Resolution order for a violated rule:
1. The message carried by the rule specification ({value, message})
2. The engine-level override table (native flags only)
3. The hardcoded default

Custom predicate messages bypass resolution and are used verbatim.
Messages may contain {value} (the rule threshold) and {field} placeholders.
"""

import re
from collections.abc import Mapping
from typing import Any

from trustvalidator.validation.types import NATIVE_FLAG_NAMES, Threshold, Violation

DEFAULT_MESSAGES: dict[str, str] = {
    # Native flags
    "valueMissing": "This field is required",
    "patternMismatch": "Value does not match the required format",
    "tooShort": "Value is too short",
    "tooLong": "Value is too long",
    "rangeOverflow": "Value is too large",
    "rangeUnderflow": "Value is too small",
    # Declared rules
    "required": "This field is required",
    "minLength": "Must be at least {value} characters",
    "maxLength": "Must be at most {value} characters",
    "pattern": "Invalid format",
    "min": "Must be at least {value}",
    "max": "Must be at most {value}",
    "arrayMin": "Select at least {value} option(s)",
    "arrayMax": "Select at most {value} option(s)",
    "custom": "Invalid value",
}


class MessageResolver:
    """Turns violations into user-facing strings.

    Attributes:
        overrides: Partial override table for native-flag messages
    """

    # Pattern: {value} or {field}
    PATTERN = re.compile(r"\{(?P<name>value|field)\}")

    def __init__(self, overrides: Mapping[str, str] | None = None):
        self.overrides = dict(overrides or {})

    def resolve(
        self,
        rule_name: str,
        rule_spec: Threshold | None,
        default_message: str,
        override_table: Mapping[str, str] | None = None,
    ) -> str:
        """Pick the message for a violated rule (uninterpolated).

        Args:
            rule_name: Rule or native flag name
            rule_spec: The violated rule specification, if any
            default_message: Hardcoded fallback
            override_table: Engine-level overrides (consulted for native flags)

        Returns:
            The message template
        """
        if rule_spec is not None and rule_spec.message:
            return rule_spec.message
        if (
            override_table
            and rule_name in NATIVE_FLAG_NAMES
            and rule_name in override_table
        ):
            return override_table[rule_name]
        return default_message

    def render(self, violation: Violation, field_name: str = "") -> str:
        """Render a violation to its final message."""
        if violation.message is not None:
            return violation.message

        template = self.resolve(
            violation.rule,
            violation.threshold,
            DEFAULT_MESSAGES.get(violation.rule, DEFAULT_MESSAGES["custom"]),
            self.overrides,
        )
        return self.interpolate(template, violation.threshold, field_name)

    def interpolate(
        self,
        template: str,
        threshold: Threshold | None,
        field_name: str = "",
    ) -> str:
        def replace(match: re.Match) -> str:
            if match.group("name") == "field":
                return field_name
            if threshold is None:
                return ""
            return _format_threshold(threshold.value)

        return self.PATTERN.sub(replace, template)


def _format_threshold(value: Any) -> str:
    if isinstance(value, re.Pattern):
        return value.pattern
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

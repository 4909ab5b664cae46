"""Core types for the TrustValidator validation engine.

This module defines the data model shared by every component:
- Threshold: a rule trigger with an optional override message
- RuleSet: the declared rules for one field
- NativeFlag: platform-reported validity flags, in reporting order
- Violation: a single failing rule
- FieldValidationResult / FormValidationResult: verdicts returned to callers
- StructuralWarning: advisory diagnostics from the conflict auditor
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from trustvalidator.validation.predicates import Predicate, PredicateRegistry


class NativeFlag(Enum):
    """Native validity flags, declared in the order their errors are reported."""

    VALUE_MISSING = "valueMissing"
    PATTERN_MISMATCH = "patternMismatch"
    TOO_SHORT = "tooShort"
    TOO_LONG = "tooLong"
    RANGE_OVERFLOW = "rangeOverflow"
    RANGE_UNDERFLOW = "rangeUnderflow"


NATIVE_FLAG_NAMES = tuple(flag.value for flag in NativeFlag)


class WarningKind(Enum):
    """Kinds of structural warning emitted at registration time."""

    DUPLICATE_CONSTRAINT = "duplicate-constraint"
    MISSING_LABEL = "missing-label"
    MISSING_ERROR_SLOT = "missing-error-slot"


@dataclass(frozen=True)
class Threshold:
    """A rule trigger, optionally carrying its own error message.

    Attributes:
        value: The compared value (bool for required, number for bounds,
            compiled pattern for pattern)
        message: Override message for this rule, or None to use the default
    """

    value: Any
    message: str | None = None

    @classmethod
    def coerce(cls, raw: Any) -> "Threshold":
        """Build a Threshold from a bare value or a {value, message} mapping."""
        if isinstance(raw, Threshold):
            return raw
        if isinstance(raw, dict):
            if "value" not in raw:
                raise ValueError(
                    f"Rule specification {raw!r} must have a 'value' key"
                )
            unknown = set(raw) - {"value", "message"}
            if unknown:
                raise ValueError(
                    f"Unknown keys in rule specification: {', '.join(sorted(unknown))}"
                )
            return cls(value=raw["value"], message=raw.get("message"))
        return cls(value=raw)


# Rule names by the value shape they apply to
TEXT_RULES = ("required", "minLength", "maxLength", "pattern", "custom")
NUMBER_RULES = ("required", "min", "max", "custom")
SET_RULES = ("required", "arrayMin", "arrayMax", "custom")

# camelCase rule name -> RuleSet attribute
_RULE_ATTRIBUTES = {
    "required": "required",
    "minLength": "min_length",
    "maxLength": "max_length",
    "pattern": "pattern",
    "min": "min",
    "max": "max",
    "arrayMin": "array_min",
    "arrayMax": "array_max",
    "custom": "custom",
}

RULE_NAMES = tuple(_RULE_ATTRIBUTES)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class RuleSet:
    """The rules declared for a single field.

    A rule left as None is not declared and is skipped. Any other value,
    including a zero bound, is a real constraint.
    """

    required: Threshold | None = None
    min_length: Threshold | None = None
    max_length: Threshold | None = None
    pattern: Threshold | None = None
    min: Threshold | None = None
    max: Threshold | None = None
    array_min: Threshold | None = None
    array_max: Threshold | None = None
    custom: Predicate | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleSet":
        """Create a RuleSet from a declaration such as {"required": True, "minLength": 3}.

        Raises:
            ValueError: For unknown rule names or malformed specifications
        """
        unknown = [name for name in data if name not in _RULE_ATTRIBUTES]
        if unknown:
            raise ValueError(
                f"Unknown rule(s): {', '.join(unknown)}. "
                "Available rules: " + ", ".join(RULE_NAMES)
            )

        kwargs: dict[str, Any] = {}
        for name, raw in data.items():
            if raw is None:
                continue
            attr = _RULE_ATTRIBUTES[name]
            if name == "custom":
                kwargs[attr] = _resolve_predicate(raw)
                continue

            threshold = Threshold.coerce(raw)
            if name == "required":
                if not isinstance(threshold.value, bool):
                    raise ValueError(
                        f"Rule 'required' expects a boolean, got {threshold.value!r}"
                    )
            elif name == "pattern":
                threshold = Threshold(
                    value=_compile_pattern(threshold.value),
                    message=threshold.message,
                )
            elif not _is_number(threshold.value):
                raise ValueError(
                    f"Rule '{name}' expects a number, got {threshold.value!r}"
                )
            kwargs[attr] = threshold

        return cls(**kwargs)

    def get(self, name: str) -> Any:
        """Get a declared rule by its camelCase name, or None."""
        return getattr(self, _RULE_ATTRIBUTES[name])

    def declared(self) -> list[str]:
        """List the camelCase names of the declared rules."""
        return [name for name in RULE_NAMES if self.get(name) is not None]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name in self.declared():
            spec = self.get(name)
            if name == "custom":
                result[name] = getattr(spec, "__name__", repr(spec))
                continue
            value = spec.value.pattern if name == "pattern" else spec.value
            if spec.message is None:
                result[name] = value
            else:
                result[name] = {"value": value, "message": spec.message}
        return result


def _compile_pattern(value: Any) -> re.Pattern:
    if isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        try:
            return re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid pattern {value!r}: {e}") from e
    raise ValueError(f"Rule 'pattern' expects a regular expression, got {value!r}")


def _resolve_predicate(raw: Any) -> Predicate:
    if isinstance(raw, str):
        return PredicateRegistry.get(raw)
    if callable(raw):
        return raw
    raise ValueError(f"Rule 'custom' expects a callable or predicate name, got {raw!r}")


@dataclass(frozen=True)
class Violation:
    """A single rule failing for a given value.

    Attributes:
        rule: Rule name ("minLength") or native flag name ("valueMissing")
        native: True if reported by the native validity provider
        threshold: The violated rule specification (None for native and custom)
        message: Final message for custom predicates; None means "resolve it"
    """

    rule: str
    native: bool = False
    threshold: Threshold | None = None
    message: str | None = None


@dataclass
class FieldValidationResult:
    """Verdict for one field.

    Attributes:
        valid: True iff errors is empty
        errors: Native-flag messages followed by declared-rule messages
        native_flags: The known native flags reported for the field
        custom_errors: Messages produced by declared rules
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    native_flags: dict[str, bool] = field(default_factory=dict)
    custom_errors: list[str] = field(default_factory=list)

    @classmethod
    def not_found(cls, field_name: str) -> "FieldValidationResult":
        message = f"Field '{field_name}' not found"
        return cls(valid=False, errors=[message], custom_errors=[message])

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "nativeFlags": dict(self.native_flags),
            "customErrors": list(self.custom_errors),
        }


@dataclass
class FormValidationResult:
    """Verdict for a whole form: valid is the AND over all field results."""

    valid: bool
    fields: dict[str, FieldValidationResult] = field(default_factory=dict)

    @property
    def errors(self) -> dict[str, list[str]]:
        """Error messages of the invalid fields, keyed by field name."""
        return {
            name: result.errors
            for name, result in self.fields.items()
            if not result.valid
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "fields": {name: r.to_dict() for name, r in self.fields.items()},
        }


@dataclass(frozen=True)
class StructuralWarning:
    """Advisory diagnostic about form markup or rule redundancy."""

    field: str
    kind: WarningKind
    detail: str

    @property
    def message(self) -> str:
        return f"Field '{self.field}': {self.detail}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "kind": self.kind.value,
            "detail": self.detail,
            "message": self.message,
        }


WarningSink = Callable[[StructuralWarning], None]

"""Rule evaluator.

Produces the ordered violations for one field:
1. One violation per true native flag, in NativeFlag order
2. Declared rules for the value's shape, in a fixed order:
   - text:   required -> minLength -> maxLength -> pattern -> custom
   - number: required -> min -> max -> custom
   - set:    required -> arrayMin -> arrayMax -> custom

Bounds are inclusive. A declared rule is evaluated even when its trigger is
zero; only undeclared rules are skipped. Exceptions raised by custom
predicates are not caught.
"""

import logging
from collections.abc import Mapping
from typing import Any

from trustvalidator.validation.predicates import Predicate
from trustvalidator.validation.types import (
    NATIVE_FLAG_NAMES,
    NativeFlag,
    RuleSet,
    Threshold,
    Violation,
)
from trustvalidator.validation.values import (
    NormalizedValue,
    NumberValue,
    SetValue,
    TextValue,
)

logger = logging.getLogger(__name__)


def evaluate(
    rules: RuleSet,
    value: NormalizedValue,
    native_snapshot: Mapping[str, bool] | None = None,
) -> list[Violation]:
    """Evaluate a rule set against a normalized value.

    Args:
        rules: Declared rules for the field
        value: The field's normalized value
        native_snapshot: Native validity flags for the field (flag name -> bool)

    Returns:
        Violations in reporting order. Empty list means valid.
    """
    violations = native_violations(native_snapshot or {})

    if isinstance(value, TextValue):
        violations.extend(_evaluate_text(rules, value))
    elif isinstance(value, NumberValue):
        violations.extend(_evaluate_number(rules, value))
    elif isinstance(value, SetValue):
        violations.extend(_evaluate_set(rules, value))
    else:
        raise TypeError(f"Unsupported value type: {type(value).__name__}")

    return violations


def native_violations(snapshot: Mapping[str, bool]) -> list[Violation]:
    """One violation per true native flag, in fixed flag order."""
    unknown = [name for name in snapshot if name not in NATIVE_FLAG_NAMES]
    if unknown:
        logger.debug("Ignoring unknown native flags: %s", ", ".join(unknown))

    return [
        Violation(rule=flag.value, native=True)
        for flag in NativeFlag
        if snapshot.get(flag.value)
    ]


def _is_required(threshold: Threshold | None) -> bool:
    return threshold is not None and threshold.value is True


def _evaluate_text(rules: RuleSet, value: TextValue) -> list[Violation]:
    violations = []
    text = value.text
    length = len(text)

    if _is_required(rules.required) and text == "":
        violations.append(Violation("required", threshold=rules.required))

    if rules.min_length is not None and length < rules.min_length.value:
        violations.append(Violation("minLength", threshold=rules.min_length))

    if rules.max_length is not None and length > rules.max_length.value:
        violations.append(Violation("maxLength", threshold=rules.max_length))

    if rules.pattern is not None and not rules.pattern.value.search(text):
        violations.append(Violation("pattern", threshold=rules.pattern))

    if rules.custom is not None:
        violations.extend(_run_custom(rules.custom, text))

    return violations


def _evaluate_number(rules: RuleSet, value: NumberValue) -> list[Violation]:
    violations = []

    if _is_required(rules.required) and value.is_missing:
        violations.append(Violation("required", threshold=rules.required))

    # Bounds have nothing to compare against when the input is empty
    if not value.is_missing:
        number = value.number
        if rules.min is not None and number < rules.min.value:
            violations.append(Violation("min", threshold=rules.min))
        if rules.max is not None and number > rules.max.value:
            violations.append(Violation("max", threshold=rules.max))

    if rules.custom is not None:
        violations.extend(_run_custom(rules.custom, value.number))

    return violations


def _evaluate_set(rules: RuleSet, value: SetValue) -> list[Violation]:
    violations = []
    count = len(value.items)

    if _is_required(rules.required) and count == 0:
        violations.append(Violation("required", threshold=rules.required))

    if rules.array_min is not None and count < rules.array_min.value:
        violations.append(Violation("arrayMin", threshold=rules.array_min))

    if rules.array_max is not None and count > rules.array_max.value:
        violations.append(Violation("arrayMax", threshold=rules.array_max))

    if rules.custom is not None:
        violations.extend(_run_custom(rules.custom, list(value.items)))

    return violations


def _run_custom(fn: Predicate, value: Any) -> list[Violation]:
    """Run a custom predicate: True passes, a string is the message used verbatim."""
    result = fn(value)
    if result is True:
        return []
    if isinstance(result, str):
        return [Violation("custom", message=result)]
    # Any other return value fails with the default custom message
    return [Violation("custom")]

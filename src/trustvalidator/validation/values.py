"""Value abstraction: normalize a field's current state into a tagged value.

Values are resolved fresh on every evaluation; the underlying source may
change between calls.
"""

import math
import re
from dataclasses import dataclass

from trustvalidator.providers import FieldShape, ValueProvider


@dataclass(frozen=True)
class TextValue:
    text: str


@dataclass(frozen=True)
class NumberValue:
    """A numeric input. number is None when the raw value is empty or unparseable."""

    number: float | None

    @property
    def is_missing(self) -> bool:
        return self.number is None or math.isnan(self.number)


@dataclass(frozen=True)
class SetValue:
    """Selected options of a checkbox group, in UI traversal order."""

    items: tuple[str, ...] = ()


NormalizedValue = TextValue | NumberValue | SetValue


# Decimal or exponent notation, as a number input accepts it
NUMBER_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_number(raw: str) -> float | None:
    """Parse a raw numeric input; empty or unparseable input yields None, not zero.

    Python-only spellings such as "inf", "nan" or "1_000" are unparseable.
    """
    raw = raw.strip()
    if not NUMBER_PATTERN.fullmatch(raw):
        return None
    number = float(raw)
    if not math.isfinite(number):
        # Overflow, e.g. "1e400"
        return None
    return number


def resolve_value(provider: ValueProvider, field_name: str) -> NormalizedValue | None:
    """Resolve a field's current value.

    Args:
        provider: The value collaborator
        field_name: Name of the field to read

    Returns:
        The normalized value, or None if the provider cannot locate the field
    """
    handle = provider.lookup(field_name)
    if handle is None:
        return None

    shape = provider.shape(handle)
    if shape == FieldShape.CHECKBOX_GROUP:
        return SetValue(tuple(provider.selected_values(field_name)))
    if shape == FieldShape.NUMBER:
        return NumberValue(parse_number(provider.raw_value(handle)))
    return TextValue(provider.raw_value(handle).strip())

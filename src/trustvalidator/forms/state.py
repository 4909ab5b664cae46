"""In-memory form state.

FormState holds the current values of a form built from a FormDefinition and
implements every collaborator protocol the engine consumes:
- ValueProvider: field lookup, shape and raw values
- NativeValidityProvider: browser-style constraint validation flags
- StructuralProbe: native constraints, label and error slot presence

It backs the CLI, the HTTP API and server-side re-validation of submitted
forms, where no browser is available to report validity.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from trustvalidator.metadata.loader import FieldDefinition, FormDefinition
from trustvalidator.providers import FieldShape
from trustvalidator.validation.types import NativeFlag
from trustvalidator.validation.values import parse_number

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class FormState:
    """Current values of a form's fields.

    Example:
        state = FormState.from_definition(form)
        state.set_value("username", "John")
        state.set_value("options", ["a", "c"])
    """

    def __init__(self, fields: Iterable[FieldDefinition]):
        self._fields: dict[str, FieldDefinition] = {}
        self._text: dict[str, str] = {}
        self._selected: dict[str, list[str]] = {}
        self._native_overrides: dict[str, dict[str, bool]] = {}
        self._listeners: list[ChangeListener] = []

        for field_def in fields:
            self._fields[field_def.name] = field_def
            if field_def.type == FieldShape.CHECKBOX_GROUP:
                self._selected[field_def.name] = []
            else:
                self._text[field_def.name] = ""
            if field_def.value is not None:
                self._store(field_def, field_def.value)

    @classmethod
    def from_definition(cls, form: FormDefinition) -> "FormState":
        return cls(form.fields)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_value(self, name: str, value: Any) -> None:
        """Set a field's value and notify change listeners.

        Text and number fields take a string (other values are converted with
        str(), None clears the field); checkbox groups take the selected values.

        Raises:
            KeyError: If the form has no such field
        """
        self._store(self._require(name), value)
        self._changed(name)

    def update(self, values: Mapping[str, Any]) -> None:
        """Set several fields at once (unknown names raise KeyError)."""
        for name, value in values.items():
            self.set_value(name, value)

    def check(self, name: str, option: str, checked: bool = True) -> None:
        """Check or uncheck one option of a checkbox group."""
        field_def = self._require(name)
        if field_def.type != FieldShape.CHECKBOX_GROUP:
            raise ValueError(f"Field '{name}' is not a checkbox group")

        selected = [v for v in self._selected[name] if v != option]
        if checked:
            selected.append(option)
        self._store(field_def, selected)
        self._changed(name)

    def set_native_flags(self, name: str, flags: Mapping[str, bool]) -> None:
        """Force native flags for a field, as reported by a real client."""
        self._require(name)
        self._native_overrides[name] = {k: bool(v) for k, v in flags.items()}

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Call listener(field_name) after every value change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _store(self, field_def: FieldDefinition, value: Any) -> None:
        if field_def.type == FieldShape.CHECKBOX_GROUP:
            if isinstance(value, str):
                value = [value]
            chosen = {str(v) for v in value or []}
            if field_def.options:
                # Keep UI order for declared options
                self._selected[field_def.name] = [
                    o for o in field_def.options if o in chosen
                ]
            else:
                self._selected[field_def.name] = list(dict.fromkeys(str(v) for v in value or []))
        else:
            self._text[field_def.name] = "" if value is None else str(value)

    def _changed(self, name: str) -> None:
        for listener in list(self._listeners):
            listener(name)

    def _require(self, name: str) -> FieldDefinition:
        if name not in self._fields:
            raise KeyError(f"Form has no field '{name}'")
        return self._fields[name]

    # -------------------------------------------------------------------------
    # ValueProvider
    # -------------------------------------------------------------------------

    def lookup(self, name: str) -> FieldDefinition | None:
        return self._fields.get(name)

    def shape(self, handle: FieldDefinition) -> FieldShape:
        return handle.type

    def raw_value(self, handle: FieldDefinition) -> str:
        if handle.type == FieldShape.CHECKBOX_GROUP:
            return ",".join(self._selected[handle.name])
        return self._text[handle.name]

    def selected_values(self, group_name: str) -> list[str]:
        return list(self._selected.get(group_name, []))

    # -------------------------------------------------------------------------
    # NativeValidityProvider
    # -------------------------------------------------------------------------

    def snapshot(self, handle: FieldDefinition) -> dict[str, bool]:
        """Native flags computed from the field's constraints, then overrides."""
        flags = self._constraint_flags(handle)
        flags.update(self._native_overrides.get(handle.name, {}))
        return flags

    def _constraint_flags(self, handle: FieldDefinition) -> dict[str, bool]:
        native = handle.native
        flags = {flag.value: False for flag in NativeFlag}

        if handle.type == FieldShape.CHECKBOX_GROUP:
            if native.get("required"):
                flags[NativeFlag.VALUE_MISSING.value] = not self._selected[handle.name]
            return flags

        raw = self._text[handle.name]
        if native.get("required") and raw == "":
            flags[NativeFlag.VALUE_MISSING.value] = True

        # Remaining constraints only apply to non-empty values
        if raw == "":
            return flags

        if handle.type == FieldShape.NUMBER:
            number = parse_number(raw)
            if number is not None:
                if native.get("min") is not None and number < native["min"]:
                    flags[NativeFlag.RANGE_UNDERFLOW.value] = True
                if native.get("max") is not None and number > native["max"]:
                    flags[NativeFlag.RANGE_OVERFLOW.value] = True
            return flags

        if native.get("pattern") and not _matches_native_pattern(native["pattern"], raw):
            flags[NativeFlag.PATTERN_MISMATCH.value] = True
        if native.get("minlength") is not None and len(raw) < native["minlength"]:
            flags[NativeFlag.TOO_SHORT.value] = True
        if native.get("maxlength") is not None and len(raw) > native["maxlength"]:
            flags[NativeFlag.TOO_LONG.value] = True
        return flags

    # -------------------------------------------------------------------------
    # StructuralProbe
    # -------------------------------------------------------------------------

    def native_constraints(self, handle: FieldDefinition) -> dict[str, Any]:
        return dict(handle.native)

    def has_label(self, handle: FieldDefinition) -> bool:
        return bool(handle.label)

    def has_error_slot(self, handle: FieldDefinition) -> bool:
        return handle.error_slot


def _matches_native_pattern(pattern: str, value: str) -> bool:
    """Native patterns must match the whole value."""
    try:
        return re.fullmatch(f"(?:{pattern})", value) is not None
    except re.error:
        # Browsers ignore invalid pattern attributes
        logger.debug("Ignoring invalid native pattern %r", pattern)
        return True

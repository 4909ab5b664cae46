"""Collaborator protocols consumed by the validation engine.

The engine never touches a page or a request directly. It reads field
state through these protocols, which an embedding layer implements (see
trustvalidator.forms.state.FormState for the in-memory implementation).
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class FieldShape(Enum):
    """How the collaborator reports a field's input kind."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX_GROUP = "checkbox-group"


@runtime_checkable
class ValueProvider(Protocol):
    """Locates fields and reads their raw state."""

    def lookup(self, name: str) -> Any | None:
        """Return an opaque handle for the field, or None if it does not exist."""
        ...

    def shape(self, handle: Any) -> FieldShape:
        ...

    def raw_value(self, handle: Any) -> str:
        ...

    def selected_values(self, group_name: str) -> Sequence[str]:
        """Currently selected option values, in UI traversal order."""
        ...


@runtime_checkable
class NativeValidityProvider(Protocol):
    """Reports the platform's own validity flags for a field."""

    def snapshot(self, handle: Any) -> Mapping[str, bool]:
        ...


@runtime_checkable
class StructuralProbe(Protocol):
    """Answers structural questions used by the conflict auditor."""

    def native_constraints(self, handle: Any) -> Mapping[str, Any]:
        """Native constraint attributes present on the field (e.g. {"minlength": 3})."""
        ...

    def has_label(self, handle: Any) -> bool:
        ...

    def has_error_slot(self, handle: Any) -> bool:
        ...

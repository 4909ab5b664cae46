"""Declarative form definitions (YAML) and their schema validation."""

from trustvalidator.metadata.loader import (
    FieldDefinition,
    FormDefinition,
    FormLoader,
    load_form_file,
    resolve_form,
)

__all__ = [
    "FieldDefinition",
    "FormDefinition",
    "FormLoader",
    "load_form_file",
    "resolve_form",
]

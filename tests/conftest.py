"""Shared fixtures for TrustValidator tests."""

from pathlib import Path

import pytest

from trustvalidator.forms import FormState
from trustvalidator.metadata.loader import FieldDefinition
from trustvalidator.providers import FieldShape
from trustvalidator.validation import PredicateRegistry, register_builtin_predicates

REPO_ROOT = Path(__file__).resolve().parents[1]
FORMS_DIR = REPO_ROOT / "forms"


@pytest.fixture(autouse=True)
def setup_predicates():
    """Register built-in predicates before each test."""
    PredicateRegistry.clear()
    register_builtin_predicates()
    yield
    PredicateRegistry.clear()


def make_field(
    name: str,
    field_type: str = "text",
    label: str | None = "Label",
    error_slot: bool = True,
    native: dict | None = None,
    options: list[str] | None = None,
    value=None,
) -> FieldDefinition:
    """Helper to create a FieldDefinition for testing."""
    return FieldDefinition(
        name=name,
        type=FieldShape(field_type),
        label=label,
        error_slot=error_slot,
        native=native or {},
        options=options or [],
        value=value,
    )


def make_state(*fields: FieldDefinition) -> FormState:
    return FormState(fields)

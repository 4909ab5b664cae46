"""Load form definitions from YAML files."""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any
import yaml

from trustvalidator.config import EngineConfig
from trustvalidator.providers import FieldShape
from trustvalidator.validation.types import RuleSet

# Native constraint attributes understood by FormState
NATIVE_ATTRIBUTES = ("required", "minlength", "maxlength", "pattern", "min", "max")


@dataclass
class FieldDefinition:
    name: str
    type: FieldShape = FieldShape.TEXT
    label: str | None = None
    error_slot: bool = True
    native: dict[str, Any] = field(default_factory=dict)
    rules: dict[str, Any] = field(default_factory=dict)
    options: list[str] = field(default_factory=list)  # checkbox-group values, in UI order
    value: Any = None  # initial value: str, or list of selected options

    def rule_set(self) -> RuleSet:
        """Build the declared RuleSet (resolves named custom predicates)."""
        return RuleSet.from_dict(self.rules)


@dataclass
class FormDefinition:
    name: str
    fields: list[FieldDefinition]
    options: EngineConfig = field(default_factory=EngineConfig)
    description: str = ""

    def get_field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


class FormLoader:
    """Loads form definitions from YAML files."""

    def __init__(self, forms_path: Path):
        self.forms_path = forms_path
        self.forms: dict[str, FormDefinition] = {}

    def load_all(self) -> None:
        """Load every *.yaml form under forms_path."""
        if not self.forms_path.exists():
            return

        for yaml_file in sorted(self.forms_path.glob("*.yaml")):
            form = load_form_file(yaml_file)
            if form.name in self.forms:
                raise ValueError(
                    f"Duplicate form '{form.name}' defined in {yaml_file}"
                )
            self.forms[form.name] = form

    def get_form(self, name: str) -> FormDefinition | None:
        return self.forms.get(name)

    def list_forms(self) -> list[str]:
        return sorted(self.forms.keys())


def load_form_file(path: Path) -> FormDefinition:
    """Load a single form definition.

    Raises:
        ValueError: If the file is not a form definition
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    if not data or "form" not in data:
        raise ValueError(f"{path} is not a form definition (missing 'form' key)")
    return resolve_form(data)


def resolve_form(data: dict[str, Any]) -> FormDefinition:
    """Convert a parsed form document into a FormDefinition."""
    fields = [_resolve_field(f) for f in data.get("fields", [])]

    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise ValueError(f"Form '{data['form']}' declares field '{f.name}' twice")
        seen.add(f.name)

    return FormDefinition(
        name=data["form"],
        fields=fields,
        options=EngineConfig.from_dict(data.get("options")),
        description=data.get("description", ""),
    )


def _resolve_field(data: dict[str, Any]) -> FieldDefinition:
    try:
        shape = FieldShape(data.get("type", "text"))
    except ValueError:
        raise ValueError(
            f"Field '{data.get('name')}' has unknown type '{data.get('type')}'. "
            "Expected one of: " + ", ".join(s.value for s in FieldShape)
        ) from None

    native = dict(data.get("native") or {})
    unknown = [k for k in native if k not in NATIVE_ATTRIBUTES]
    if unknown:
        raise ValueError(
            f"Field '{data['name']}' has unknown native constraint(s): {', '.join(unknown)}"
        )

    return FieldDefinition(
        name=data["name"],
        type=shape,
        label=data.get("label"),
        error_slot=data.get("errorSlot", True),
        native=native,
        rules=dict(data.get("rules") or {}),
        options=[str(o) for o in data.get("options", [])],
        value=data.get("value"),
    )

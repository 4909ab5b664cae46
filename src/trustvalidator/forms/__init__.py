"""In-memory forms: state, validator wiring and live re-validation."""

from trustvalidator.config import EngineConfig
from trustvalidator.forms.binding import bind_live_validation
from trustvalidator.forms.state import FormState
from trustvalidator.metadata.loader import FormDefinition
from trustvalidator.validation.engine import FormValidator
from trustvalidator.validation.types import WarningSink


def build_validator(
    form: FormDefinition,
    state: FormState | None = None,
    config: EngineConfig | None = None,
    sinks: list[WarningSink] | None = None,
) -> tuple[FormValidator, FormState]:
    """Create a validator for a form definition.

    Every field that declares rules is registered, in declaration order.
    Sinks are subscribed before registration so they receive the audit.

    Args:
        form: The form definition
        state: Existing state to validate (a fresh one is created if omitted)
        config: Engine options (defaults to the form's own options)
        sinks: Warning sinks to subscribe

    Returns:
        (validator, state)
    """
    state = state or FormState.from_definition(form)
    validator = FormValidator(
        state, native=state, probe=state, config=config or form.options
    )
    for sink in sinks or []:
        validator.subscribe(sink)

    for field_def in form.fields:
        if field_def.rules:
            validator.register(field_def.name, field_def.rule_set())

    return validator, state


__all__ = [
    "FormState",
    "bind_live_validation",
    "build_validator",
]

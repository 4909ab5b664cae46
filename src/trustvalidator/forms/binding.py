"""Live re-validation wiring for FormState.

When a validator is configured with auto_bind_events, the embedding layer
re-validates a field every time its value changes, the way the browser
integration listens for input events.
"""

import logging
from collections.abc import Callable

from trustvalidator.forms.state import FormState
from trustvalidator.validation.engine import FormValidator
from trustvalidator.validation.types import FieldValidationResult

logger = logging.getLogger(__name__)

FieldCallback = Callable[[str, FieldValidationResult], None]


def bind_live_validation(
    validator: FormValidator,
    state: FormState,
    callback: FieldCallback,
) -> Callable[[], None]:
    """Re-validate registered fields on change and report each result.

    Does nothing unless validator.config.auto_bind_events is set. Changes to
    fields without registered rules are ignored.

    Args:
        validator: The validator to run
        state: Form state whose changes trigger validation
        callback: Receives (field_name, result) after each change

    Returns:
        A function that removes the binding
    """
    if not validator.config.auto_bind_events:
        logger.debug("auto_bind_events disabled, not binding live validation")
        return lambda: None

    def on_change(field_name: str) -> None:
        if field_name not in validator.registry:
            return
        callback(field_name, validator.validate_one(field_name))

    return state.on_change(on_change)

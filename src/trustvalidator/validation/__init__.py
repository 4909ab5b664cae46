"""TrustValidator validation engine.

Components:
- RuleRegistry: declared rule sets per field
- resolve_value: normalizes field state into text, number or set values
- evaluate: produces ordered violations for one field
- MessageResolver: rule message -> override table -> default
- ConflictAuditor: structural warnings at registration time
- FormValidator: aggregates per-field results into a form verdict

Usage:
    from trustvalidator.validation import FormValidator, predicate

    @predicate("hasSymbol")
    def has_symbol(value):
        return any(not c.isalnum() for c in value) or "Needs a symbol"

    validator = FormValidator(state, native=state, probe=state)
    validator.register("password", {"required": True, "custom": "hasSymbol"})
    result = validator.validate()
"""

from trustvalidator.validation.auditor import ConflictAuditor
from trustvalidator.validation.builtins import register_builtin_predicates
from trustvalidator.validation.engine import FormValidator
from trustvalidator.validation.evaluator import evaluate
from trustvalidator.validation.messages import DEFAULT_MESSAGES, MessageResolver
from trustvalidator.validation.predicates import PredicateRegistry, predicate
from trustvalidator.validation.registry import RuleRegistry
from trustvalidator.validation.types import (
    NATIVE_FLAG_NAMES,
    FieldValidationResult,
    FormValidationResult,
    NativeFlag,
    RuleSet,
    StructuralWarning,
    Threshold,
    Violation,
    WarningKind,
    WarningSink,
)
from trustvalidator.validation.values import (
    NormalizedValue,
    NumberValue,
    SetValue,
    TextValue,
    resolve_value,
)

__all__ = [
    # Types
    "FieldValidationResult",
    "FormValidationResult",
    "NATIVE_FLAG_NAMES",
    "NativeFlag",
    "RuleSet",
    "StructuralWarning",
    "Threshold",
    "Violation",
    "WarningKind",
    "WarningSink",
    # Values
    "NormalizedValue",
    "NumberValue",
    "SetValue",
    "TextValue",
    "resolve_value",
    # Engine
    "ConflictAuditor",
    "DEFAULT_MESSAGES",
    "FormValidator",
    "MessageResolver",
    "RuleRegistry",
    "evaluate",
    # Predicates
    "PredicateRegistry",
    "predicate",
    "register_builtin_predicates",
]

"""Form validator: the engine facade and result aggregator.

Lifecycle:
1. register() stores a field's rules and runs the conflict auditor once
2. validate() resolves every registered field's value, evaluates its rules
   together with the native validity snapshot, renders messages and folds
   the per-field verdicts into one form verdict
3. validate_one() does the same for a single field (per-keystroke checks)
"""

import logging
from collections.abc import Mapping
from typing import Any

from trustvalidator.config import EngineConfig
from trustvalidator.providers import (
    NativeValidityProvider,
    StructuralProbe,
    ValueProvider,
)
from trustvalidator.validation.auditor import ConflictAuditor
from trustvalidator.validation.evaluator import evaluate
from trustvalidator.validation.messages import MessageResolver
from trustvalidator.validation.registry import RuleRegistry
from trustvalidator.validation.types import (
    NATIVE_FLAG_NAMES,
    FieldValidationResult,
    FormValidationResult,
    RuleSet,
    StructuralWarning,
    WarningSink,
)
from trustvalidator.validation.values import NormalizedValue, resolve_value

logger = logging.getLogger(__name__)


class FormValidator:
    """Validates registered fields against their declared rules.

    Example:
        validator = FormValidator(state, native=state, probe=state)
        validator.subscribe(lambda w: print(w.message))
        validator.register("username", {"required": True, "minLength": 3})

        result = validator.validate()
        if not result.valid:
            print(result.errors)
    """

    def __init__(
        self,
        values: ValueProvider,
        native: NativeValidityProvider | None = None,
        probe: StructuralProbe | None = None,
        config: EngineConfig | None = None,
    ):
        self.values = values
        self.native = native
        self.probe = probe
        self.config = config or EngineConfig()
        self.registry = RuleRegistry()
        self.resolver = MessageResolver(self.config.messages)
        self.auditor = ConflictAuditor()
        self._sinks: list[WarningSink] = []

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def subscribe(self, sink: WarningSink) -> None:
        """Receive structural warnings emitted by later registrations."""
        self._sinks.append(sink)

    def unsubscribe(self, sink: WarningSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def register(
        self,
        field_name: str,
        rules: RuleSet | Mapping[str, Any],
    ) -> list[StructuralWarning]:
        """Register (or replace) a field's rules and audit them.

        Args:
            field_name: Field to validate
            rules: A RuleSet or a declaration dict such as {"required": True}

        Returns:
            The structural warnings delivered to subscribers (may be empty)

        Raises:
            ValueError: If the rule declaration is invalid
        """
        if not isinstance(rules, RuleSet):
            rules = RuleSet.from_dict(dict(rules))

        self.registry.register(field_name, rules)
        logger.debug("Registered rules for '%s': %s", field_name, rules.declared())

        if self.config.suppress_warnings or self.probe is None:
            return []

        warnings = self.auditor.audit(field_name, rules, self.probe, self.values)
        for warning in warnings:
            self._notify(warning)
        return warnings

    # Name used by front-end integrations
    add_field = register

    def get(self, field_name: str) -> RuleSet | None:
        return self.registry.get(field_name)

    def _notify(self, warning: StructuralWarning) -> None:
        logger.warning("Structural warning [%s]: %s", warning.kind.value, warning.message)
        for sink in list(self._sinks):
            try:
                sink(warning)
            except Exception as e:
                # Sinks are fire-and-forget
                logger.error("Warning sink %r failed: %s", sink, e)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> FormValidationResult:
        """Validate every registered field, in registration order."""
        entries = self.registry.items()

        # Snapshot all values before evaluating anything
        snapshots = [
            (name, rules, resolve_value(self.values, name), self._native_snapshot(name))
            for name, rules in entries
        ]

        fields: dict[str, FieldValidationResult] = {}
        for name, rules, value, native in snapshots:
            fields[name] = self._build_result(name, rules, value, native)

        return FormValidationResult(
            valid=all(result.valid for result in fields.values()),
            fields=fields,
        )

    validate_all = validate

    def validate_one(self, field_name: str) -> FieldValidationResult:
        """Validate a single registered field.

        Raises:
            KeyError: If no rules are registered for the field
        """
        rules = self.registry.get(field_name)
        if rules is None:
            raise KeyError(f"No rules registered for field '{field_name}'")

        value = resolve_value(self.values, field_name)
        return self._build_result(
            field_name, rules, value, self._native_snapshot(field_name)
        )

    def _native_snapshot(self, field_name: str) -> dict[str, bool]:
        if self.native is None:
            return {}
        handle = self.values.lookup(field_name)
        if handle is None:
            return {}
        return dict(self.native.snapshot(handle))

    def _build_result(
        self,
        field_name: str,
        rules: RuleSet,
        value: NormalizedValue | None,
        native: dict[str, bool],
    ) -> FieldValidationResult:
        if value is None:
            return FieldValidationResult.not_found(field_name)

        native_errors: list[str] = []
        custom_errors: list[str] = []
        for violation in evaluate(rules, value, native):
            message = self.resolver.render(violation, field_name)
            if violation.native:
                native_errors.append(message)
            else:
                custom_errors.append(message)

        errors = native_errors + custom_errors
        return FieldValidationResult(
            valid=not errors,
            errors=errors,
            native_flags={
                name: bool(native[name]) for name in NATIVE_FLAG_NAMES if name in native
            },
            custom_errors=custom_errors,
        )

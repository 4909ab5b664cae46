"""Rule registry for TrustValidator.

Stores the declared rule set of each field for the lifetime of a validator.
"""

import threading
from collections.abc import Iterator

from trustvalidator.validation.types import RuleSet


class RuleRegistry:
    """Per-field rule sets, in registration order.

    The last registration for a name wins; a re-registered field keeps its
    original position. Registration is serialized by a lock so a validator
    may be shared between threads; reads take no lock.

    Example:
        registry = RuleRegistry()
        registry.register("username", RuleSet.from_dict({"required": True}))
        registry.get("username")
    """

    def __init__(self) -> None:
        self._rules: dict[str, RuleSet] = {}
        self._lock = threading.Lock()

    def register(self, field_name: str, rules: RuleSet) -> None:
        """Register (or replace) the rule set for a field."""
        with self._lock:
            self._rules[field_name] = rules

    def get(self, field_name: str) -> RuleSet | None:
        return self._rules.get(field_name)

    def names(self) -> list[str]:
        """Registered field names, in registration order."""
        return list(self._rules)

    def items(self) -> list[tuple[str, RuleSet]]:
        return list(self._rules.items())

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._rules)

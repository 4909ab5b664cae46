"""Named custom predicates.

Rule declarations loaded from YAML or JSON cannot carry a function, so a
`custom` rule names a predicate instead. Predicates are registered at
startup, either with PredicateRegistry.register() or the @predicate
decorator, and looked up when a RuleSet is built.
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# (value) -> True | error message
Predicate = Callable[[Any], "bool | str"]


class PredicateRegistry:
    """Process-wide table of custom rule predicates, keyed by name.

    A name is bound once. Registering the same function again is harmless
    (built-ins are registered by every entry point); binding a name to a
    different function is an error, so a rule never runs a stale predicate.
    """

    _predicates: dict[str, Predicate] = {}

    @classmethod
    def register(cls, name: str, fn: Predicate) -> None:
        """Bind a predicate to a name.

        Raises:
            ValueError: If fn is not callable, or name is bound to another function
        """
        if not callable(fn):
            raise ValueError(f"Predicate '{name}' must be callable, got {fn!r}")

        bound = cls._predicates.get(name)
        if bound is fn:
            return
        if bound is not None:
            raise ValueError(
                f"Predicate '{name}' is already bound to "
                f"{getattr(bound, '__qualname__', repr(bound))}"
            )
        cls._predicates[name] = fn
        logger.debug("Registered predicate '%s'", name)

    @classmethod
    def get(cls, name: str) -> Predicate:
        """Look up a predicate.

        Raises:
            ValueError: If nothing is registered under name
        """
        try:
            return cls._predicates[name]
        except KeyError:
            known = ", ".join(sorted(cls._predicates)) or "none"
            raise ValueError(
                f"Predicate '{name}' is not registered (registered: {known})"
            ) from None

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._predicates

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._predicates)

    @classmethod
    def clear(cls) -> None:
        """Forget every predicate (tests)."""
        cls._predicates.clear()


def predicate(name: str) -> Callable[[Predicate], Predicate]:
    """Register the decorated function under name.

    Usage:
        @predicate("endsWithCom")
        def ends_with_com(value: str) -> bool | str:
            return value.endswith(".com") or "Email must end with .com"
    """

    def decorator(fn: Predicate) -> Predicate:
        PredicateRegistry.register(name, fn)
        return fn

    return decorator

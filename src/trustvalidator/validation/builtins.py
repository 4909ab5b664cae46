"""Built-in custom rule predicates.

Registered by register_builtin_predicates() so form definitions can
reference them by name, e.g. ``custom: hasUppercase``.
"""

import re

from trustvalidator.validation.predicates import PredicateRegistry

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


def has_uppercase(value: str) -> bool | str:
    return any(c.isupper() for c in value) or "Must contain at least one uppercase letter"


def has_lowercase(value: str) -> bool | str:
    return any(c.islower() for c in value) or "Must contain at least one lowercase letter"


def has_digit(value: str) -> bool | str:
    return any(c.isdigit() for c in value) or "Must contain at least one digit"


def no_whitespace(value: str) -> bool | str:
    return not any(c.isspace() for c in value) or "Must not contain spaces"


def email(value: str) -> bool | str:
    """Empty values pass; combine with required to reject them."""
    if value == "" or EMAIL_PATTERN.match(value):
        return True
    return "Must be a valid email address"


def register_builtin_predicates() -> None:
    """Register all built-in predicates. Idempotent."""
    PredicateRegistry.register("hasUppercase", has_uppercase)
    PredicateRegistry.register("hasLowercase", has_lowercase)
    PredicateRegistry.register("hasDigit", has_digit)
    PredicateRegistry.register("noWhitespace", no_whitespace)
    PredicateRegistry.register("email", email)

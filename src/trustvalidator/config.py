"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

_TRUE_VALUES = ("1", "true", "yes", "on")

# camelCase option name (as written in form definitions) -> attribute
_OPTION_NAMES = {
    "suppressWarnings": "suppress_warnings",
    "suppress_warnings": "suppress_warnings",
    "messages": "messages",
    "autoBindEvents": "auto_bind_events",
    "auto_bind_events": "auto_bind_events",
}


@dataclass
class EngineConfig:
    """Options recognized by a FormValidator.

    Attributes:
        suppress_warnings: Disable the conflict auditor entirely
        messages: Partial override table for native-flag messages
        auto_bind_events: Ask the embedding layer to re-validate fields on
            value change (the engine itself never binds anything)
    """

    suppress_warnings: bool = False
    messages: dict[str, str] = field(default_factory=dict)
    auto_bind_events: bool = False

    def __post_init__(self) -> None:
        from trustvalidator.validation.types import NATIVE_FLAG_NAMES

        unknown = [key for key in self.messages if key not in NATIVE_FLAG_NAMES]
        if unknown:
            raise ValueError(
                f"Unknown message override(s): {', '.join(unknown)}. "
                "Overrides apply to native flags: " + ", ".join(NATIVE_FLAG_NAMES)
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> EngineConfig:
        """Create config from an options dict (camelCase or snake_case keys)."""
        kwargs: dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key not in _OPTION_NAMES:
                raise ValueError(f"Unknown option: {key}")
            kwargs[_OPTION_NAMES[key]] = value
        if "messages" in kwargs:
            kwargs["messages"] = dict(kwargs["messages"] or {})
        return cls(**kwargs)

    @classmethod
    def from_env(cls, base: EngineConfig | None = None) -> EngineConfig:
        """Apply environment overrides on top of base (or the defaults).

        Reads:
        - TRUSTVALIDATOR_SUPPRESS_WARNINGS
        - TRUSTVALIDATOR_AUTO_BIND_EVENTS
        """
        base = base or cls()
        config = cls(
            suppress_warnings=base.suppress_warnings,
            messages=dict(base.messages),
            auto_bind_events=base.auto_bind_events,
        )

        suppress = os.environ.get("TRUSTVALIDATOR_SUPPRESS_WARNINGS")
        if suppress is not None:
            config.suppress_warnings = suppress.strip().lower() in _TRUE_VALUES

        auto_bind = os.environ.get("TRUSTVALIDATOR_AUTO_BIND_EVENTS")
        if auto_bind is not None:
            config.auto_bind_events = auto_bind.strip().lower() in _TRUE_VALUES

        return config

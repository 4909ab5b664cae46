"""Tests for EngineConfig."""

import pytest

from trustvalidator.config import EngineConfig


class TestFromDict:
    def test_defaults(self):
        config = EngineConfig.from_dict(None)
        assert config.suppress_warnings is False
        assert config.messages == {}
        assert config.auto_bind_events is False

    def test_camel_case_options(self):
        config = EngineConfig.from_dict(
            {
                "suppressWarnings": True,
                "autoBindEvents": True,
                "messages": {"valueMissing": "Required!"},
            }
        )
        assert config.suppress_warnings is True
        assert config.auto_bind_events is True
        assert config.messages == {"valueMissing": "Required!"}

    def test_snake_case_options(self):
        config = EngineConfig.from_dict({"suppress_warnings": True})
        assert config.suppress_warnings is True

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown option"):
            EngineConfig.from_dict({"strict": True})

    def test_message_for_declared_rule_is_rejected(self):
        with pytest.raises(ValueError, match="minLength"):
            EngineConfig(messages={"minLength": "x"})


class TestFromEnv:
    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TRUSTVALIDATOR_SUPPRESS_WARNINGS", "yes")
        monkeypatch.setenv("TRUSTVALIDATOR_AUTO_BIND_EVENTS", "0")

        base = EngineConfig(auto_bind_events=True, messages={"tooLong": "Long"})
        config = EngineConfig.from_env(base)

        assert config.suppress_warnings is True
        assert config.auto_bind_events is False
        assert config.messages == {"tooLong": "Long"}
        assert base.suppress_warnings is False

    def test_unset_env_keeps_base(self, monkeypatch):
        monkeypatch.delenv("TRUSTVALIDATOR_SUPPRESS_WARNINGS", raising=False)
        monkeypatch.delenv("TRUSTVALIDATOR_AUTO_BIND_EVENTS", raising=False)

        config = EngineConfig.from_env(EngineConfig(suppress_warnings=True))
        assert config.suppress_warnings is True
        assert config.auto_bind_events is False

"""Tests for value resolution, FormState and live validation binding."""

import pytest

from conftest import make_field, make_state
from trustvalidator.config import EngineConfig
from trustvalidator.forms import bind_live_validation
from trustvalidator.providers import (
    NativeValidityProvider,
    StructuralProbe,
    ValueProvider,
)
from trustvalidator.validation import (
    FormValidator,
    NumberValue,
    SetValue,
    TextValue,
    resolve_value,
)
from trustvalidator.validation.values import parse_number


# =============================================================================
# Value Abstraction
# =============================================================================


class TestResolveValue:
    def test_text_is_trimmed(self):
        state = make_state(make_field("name", value="  John "))
        assert resolve_value(state, "name") == TextValue("John")

    @pytest.mark.parametrize(
        "raw,expected",
        [("42", 42.0), (" 3.5 ", 3.5), ("-1", -1.0), ("", None), ("abc", None), ("  ", None)],
    )
    def test_number(self, raw, expected):
        state = make_state(make_field("age", "number", value=raw))
        assert resolve_value(state, "age") == NumberValue(expected)

    def test_empty_group_is_empty_set(self):
        state = make_state(make_field("opts", "checkbox-group", options=["a", "b"]))
        assert resolve_value(state, "opts") == SetValue(())

    def test_group_keeps_ui_order(self):
        state = make_state(make_field("opts", "checkbox-group", options=["a", "b", "c"]))
        state.set_value("opts", ["c", "a"])
        assert resolve_value(state, "opts") == SetValue(("a", "c"))

    def test_missing_field(self):
        assert resolve_value(make_state(), "ghost") is None

    def test_nan_is_missing(self):
        assert NumberValue(parse_number("nan")).is_missing

    @pytest.mark.parametrize(
        "raw", ["inf", "-Infinity", "nan", "1_000", "1e400", "0x10", ".", "1e", "١٢"]
    )
    def test_non_decimal_spellings_are_absent(self, raw):
        assert parse_number(raw) is None

    @pytest.mark.parametrize(
        "raw,expected", [("1e3", 1000.0), ("+2", 2.0), (".5", 0.5), ("5.", 5.0), ("-1.5E-1", -0.15)]
    )
    def test_decimal_and_exponent(self, raw, expected):
        assert parse_number(raw) == expected

    def test_required_fails_on_infinity(self):
        state = make_state(make_field("age", "number", value="inf"))
        validator = FormValidator(state)
        validator.register("age", {"required": True, "max": 10})
        assert validator.validate_one("age").errors == ["This field is required"]


# =============================================================================
# FormState
# =============================================================================


class TestFormState:
    def test_implements_protocols(self):
        state = make_state()
        assert isinstance(state, ValueProvider)
        assert isinstance(state, NativeValidityProvider)
        assert isinstance(state, StructuralProbe)

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            make_state().set_value("ghost", "x")

    def test_set_none_clears(self):
        state = make_state(make_field("a", value="x"))
        state.set_value("a", None)
        assert state.raw_value(state.lookup("a")) == ""

    def test_check_and_uncheck(self):
        state = make_state(make_field("opts", "checkbox-group", options=["a", "b"]))
        state.check("opts", "b")
        state.check("opts", "a")
        assert state.selected_values("opts") == ["a", "b"]
        state.check("opts", "a", checked=False)
        assert state.selected_values("opts") == ["b"]

    def test_check_requires_group(self):
        state = make_state(make_field("a"))
        with pytest.raises(ValueError):
            state.check("a", "x")

    def test_group_without_declared_options_keeps_selection_order(self):
        state = make_state(make_field("tags", "checkbox-group"))
        state.set_value("tags", ["z", "y", "z"])
        assert state.selected_values("tags") == ["z", "y"]

    def test_change_listener(self):
        state = make_state(make_field("a"))
        changed = []
        remove = state.on_change(changed.append)

        state.set_value("a", "1")
        remove()
        state.set_value("a", "2")
        assert changed == ["a"]


class TestNativeFlags:
    def flags(self, field, value):
        state = make_state(field)
        state.set_value(field.name, value)
        return {k for k, v in state.snapshot(state.lookup(field.name)).items() if v}

    def test_value_missing(self):
        assert self.flags(make_field("a", native={"required": True}), "") == {"valueMissing"}

    def test_value_missing_group(self):
        field = make_field("g", "checkbox-group", options=["x"], native={"required": True})
        assert self.flags(field, []) == {"valueMissing"}
        assert self.flags(field, ["x"]) == set()

    def test_pattern_is_anchored(self):
        field = make_field("a", native={"pattern": r"\d+"})
        assert self.flags(field, "12a") == {"patternMismatch"}
        assert self.flags(field, "123") == set()

    def test_length(self):
        field = make_field("a", native={"minlength": 2, "maxlength": 4})
        assert self.flags(field, "a") == {"tooShort"}
        assert self.flags(field, "abcde") == {"tooLong"}
        assert self.flags(field, "abc") == set()

    def test_empty_value_only_checks_required(self):
        field = make_field("a", native={"minlength": 2, "pattern": "x"})
        assert self.flags(field, "") == set()

    def test_range(self):
        field = make_field("n", "number", native={"min": 0, "max": 10})
        assert self.flags(field, "-1") == {"rangeUnderflow"}
        assert self.flags(field, "11") == {"rangeOverflow"}
        assert self.flags(field, "10") == set()

    def test_overrides(self):
        state = make_state(make_field("a"))
        state.set_native_flags("a", {"tooLong": True})
        assert state.snapshot(state.lookup("a"))["tooLong"] is True


# =============================================================================
# Live Validation Binding
# =============================================================================


class TestLiveValidation:
    def make(self, auto_bind: bool):
        state = make_state(make_field("username"), make_field("notes"))
        validator = FormValidator(
            state, native=state, config=EngineConfig(auto_bind_events=auto_bind)
        )
        validator.register("username", {"required": True, "minLength": 3})
        return validator, state

    def test_revalidates_on_change(self):
        validator, state = self.make(auto_bind=True)
        results = []
        bind_live_validation(validator, state, lambda name, r: results.append((name, r.valid)))

        state.set_value("username", "Jo")
        state.set_value("username", "John")
        assert results == [("username", False), ("username", True)]

    def test_ignores_fields_without_rules(self):
        validator, state = self.make(auto_bind=True)
        results = []
        bind_live_validation(validator, state, lambda name, r: results.append(name))

        state.set_value("notes", "hello")
        assert results == []

    def test_disabled(self):
        validator, state = self.make(auto_bind=False)
        results = []
        unbind = bind_live_validation(validator, state, lambda name, r: results.append(name))

        state.set_value("username", "John")
        unbind()
        assert results == []

    def test_unbind(self):
        validator, state = self.make(auto_bind=True)
        results = []
        unbind = bind_live_validation(validator, state, lambda name, r: results.append(name))

        unbind()
        state.set_value("username", "John")
        assert results == []

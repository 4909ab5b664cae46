"""Tests for the rule evaluator."""

import itertools
import re

import pytest

from trustvalidator.validation.evaluator import evaluate, native_violations
from trustvalidator.validation.types import RuleSet
from trustvalidator.validation.values import NumberValue, SetValue, TextValue


def rules(**declared) -> RuleSet:
    return RuleSet.from_dict(declared)


def rule_names(violations) -> list[str]:
    return [v.rule for v in violations]


# =============================================================================
# Text Rules
# =============================================================================


class TestTextRules:
    def test_no_rules_is_valid(self):
        assert evaluate(RuleSet(), TextValue("anything")) == []

    def test_required_empty(self):
        assert rule_names(evaluate(rules(required=True), TextValue(""))) == ["required"]

    def test_required_false_is_disabled(self):
        assert evaluate(rules(required=False), TextValue("")) == []

    def test_required_filled(self):
        assert evaluate(rules(required=True), TextValue("John")) == []

    @pytest.mark.parametrize("threshold", [0, 1, 3, 10])
    def test_min_length_is_inclusive(self, threshold):
        ruleset = rules(minLength=threshold)
        assert evaluate(ruleset, TextValue("x" * threshold)) == []
        if threshold > 0:
            assert rule_names(
                evaluate(ruleset, TextValue("x" * (threshold - 1)))
            ) == ["minLength"]

    @pytest.mark.parametrize("threshold", [0, 1, 5])
    def test_max_length_is_inclusive(self, threshold):
        ruleset = rules(maxLength=threshold)
        assert evaluate(ruleset, TextValue("x" * threshold)) == []
        assert rule_names(
            evaluate(ruleset, TextValue("x" * (threshold + 1)))
        ) == ["maxLength"]

    def test_max_length_zero_is_a_real_constraint(self):
        assert rule_names(evaluate(rules(maxLength=0), TextValue("a"))) == ["maxLength"]

    def test_pattern_string(self):
        ruleset = rules(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
        assert rule_names(evaluate(ruleset, TextValue("wrong-email"))) == ["pattern"]
        assert evaluate(ruleset, TextValue("test@example.com")) == []

    def test_pattern_is_searched_not_anchored(self):
        ruleset = rules(pattern=re.compile(r"\d"))
        assert evaluate(ruleset, TextValue("abc1def")) == []

    def test_pattern_with_message(self):
        violations = evaluate(
            rules(pattern={"value": r"^\d+$", "message": "Digits only"}),
            TextValue("abc"),
        )
        assert violations[0].threshold.message == "Digits only"

    def test_min_and_max_length_scenario(self):
        ruleset = rules(minLength=3, maxLength=5)
        assert rule_names(evaluate(ruleset, TextValue("ab"))) == ["minLength"]
        assert evaluate(ruleset, TextValue("abcd")) == []
        assert rule_names(evaluate(ruleset, TextValue("abcdef"))) == ["maxLength"]

    def test_number_rules_are_skipped_for_text(self):
        assert evaluate(rules(min=5, arrayMin=2), TextValue("a")) == []


# =============================================================================
# Number Rules
# =============================================================================


class TestNumberRules:
    def test_required_absent(self):
        assert rule_names(evaluate(rules(required=True), NumberValue(None))) == ["required"]

    def test_required_nan(self):
        assert rule_names(
            evaluate(rules(required=True), NumberValue(float("nan")))
        ) == ["required"]

    def test_required_zero_is_present(self):
        assert evaluate(rules(required=True), NumberValue(0.0)) == []

    @pytest.mark.parametrize(
        "value,valid",
        [(10, False), (17.5, False), (18, True), (50, True), (99, True), (99.01, False), (120, False)],
    )
    def test_min_max_bounds_inclusive(self, value, valid):
        violations = evaluate(rules(min=18, max=99), NumberValue(float(value)))
        assert (violations == []) is valid

    def test_min_zero_is_a_real_constraint(self):
        assert rule_names(evaluate(rules(min=0), NumberValue(-1.0))) == ["min"]
        assert evaluate(rules(min=0), NumberValue(0.0)) == []

    def test_bounds_skipped_when_absent(self):
        assert evaluate(rules(min=18, max=99), NumberValue(None)) == []

    def test_custom_receives_number(self):
        seen = []

        def check(value):
            seen.append(value)
            return True

        evaluate(rules(custom=check), NumberValue(42.0))
        assert seen == [42.0]

    def test_text_rules_are_skipped_for_numbers(self):
        assert evaluate(rules(minLength=10, pattern=r"^x$"), NumberValue(1.0)) == []


# =============================================================================
# Set Rules
# =============================================================================


class TestSetRules:
    @pytest.mark.parametrize("size", [0, 1, 2, 5])
    def test_required_iff_empty(self, size):
        value = SetValue(tuple(str(i) for i in range(size)))
        violations = evaluate(rules(required=True), value)
        assert (rule_names(violations) == ["required"]) is (size == 0)
        assert (violations == []) is (size > 0)

    @pytest.mark.parametrize("selected,valid", [(1, False), (2, True), (3, False)])
    def test_array_min_max(self, selected, valid):
        value = SetValue(("a", "b", "c")[:selected])
        assert (evaluate(rules(arrayMin=2, arrayMax=2), value) == []) is valid

    def test_array_min_empty_selection(self):
        assert rule_names(evaluate(rules(arrayMin=1), SetValue(()))) == ["arrayMin"]

    def test_custom_receives_list(self):
        violations = evaluate(
            rules(custom=lambda items: "a" in items or "Pick a"),
            SetValue(("b",)),
        )
        assert violations[0].message == "Pick a"


# =============================================================================
# Custom Predicates
# =============================================================================


class TestCustomPredicate:
    def uppercase(self, value):
        return bool(re.search(r"[A-Z]", value)) or "needs uppercase"

    def test_returns_message_verbatim(self):
        violations = evaluate(rules(custom=self.uppercase), TextValue("abc"))
        assert len(violations) == 1
        assert violations[0].rule == "custom"
        assert violations[0].message == "needs uppercase"

    def test_true_passes(self):
        assert evaluate(rules(custom=self.uppercase), TextValue("Abc")) == []

    @pytest.mark.parametrize("result", ["", "x", "Some message"])
    def test_any_string_is_used_exactly(self, result):
        violations = evaluate(rules(custom=lambda v: result), TextValue("v"))
        assert [v.message for v in violations] == [result]

    def test_false_uses_default_message(self):
        violations = evaluate(rules(custom=lambda v: False), TextValue("v"))
        assert violations[0].rule == "custom"
        assert violations[0].message is None

    def test_exception_propagates(self):
        def broken(value):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            evaluate(rules(custom=broken), TextValue("v"))

    def test_named_predicate(self):
        violations = evaluate(rules(custom="hasUppercase"), TextValue("abc"))
        assert violations[0].message == "Must contain at least one uppercase letter"


# =============================================================================
# Ordering
# =============================================================================


TEXT_DECLARATION = {
    "custom": lambda v: "custom failed",
    "pattern": r"^\d+$",
    "maxLength": 0,
    "minLength": 5,
    "required": True,
}


class TestOrdering:
    @pytest.mark.parametrize(
        "order", list(itertools.permutations(TEXT_DECLARATION))[:24]
    )
    def test_declaration_order_does_not_matter(self, order):
        ruleset = RuleSet.from_dict({name: TEXT_DECLARATION[name] for name in order})
        # "" fails required, minLength and pattern; maxLength 0 passes
        assert rule_names(evaluate(ruleset, TextValue(""))) == [
            "required",
            "minLength",
            "pattern",
            "custom",
        ]

    def test_number_order(self):
        ruleset = rules(custom=lambda v: "no", max=1, min=5, required=True)
        assert rule_names(evaluate(ruleset, NumberValue(3.0))) == ["min", "max", "custom"]

    def test_native_flags_precede_declared_rules(self):
        violations = evaluate(
            rules(required=True),
            TextValue(""),
            {"tooShort": True, "valueMissing": True},
        )
        assert rule_names(violations) == ["valueMissing", "tooShort", "required"]
        assert [v.native for v in violations] == [True, True, False]

    def test_native_flag_order_is_fixed(self):
        snapshot = {
            "rangeUnderflow": True,
            "rangeOverflow": True,
            "tooLong": True,
            "tooShort": True,
            "patternMismatch": True,
            "valueMissing": True,
        }
        assert rule_names(native_violations(snapshot)) == [
            "valueMissing",
            "patternMismatch",
            "tooShort",
            "tooLong",
            "rangeOverflow",
            "rangeUnderflow",
        ]

    def test_false_and_unknown_flags_are_ignored(self):
        assert native_violations({"valueMissing": False, "badInput": True}) == []

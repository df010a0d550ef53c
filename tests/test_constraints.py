"""
Tests for the constraint tester.
"""

import re

import pytest

from fieldguard.core.errors import ErrorCode, RangeTypeError
from fieldguard.validation import FieldRule


def rule(**options):
    return FieldRule.parse(options, field="test")


class TestConstraintOrder:
    """Constraints run in a fixed order and stop at the first failure."""

    def test_no_constraints(self, tester):
        check = tester.evaluate(rule(), "anything")
        assert check.passed is None
        assert check.code is None
        assert tester.test(rule(), "anything") is None

    def test_all_pass_reports_last_constraint(self, tester):
        check = tester.evaluate(rule(type="int", match=[25], range="18-65"), "25")
        assert check.passed is True
        assert check.constraint == "range"

    def test_first_failure_stops_evaluation(self, tester):
        calls = []

        def spy(value):
            calls.append(value)
            return True

        # regex would fail too, but evaluation stops at length
        check = tester.evaluate(rule(match=spy, length="1-2", regex="/x/"), "abc")
        assert check.passed is False
        assert check.constraint == "length"
        assert calls == ["abc"]

    def test_match_runs_before_range(self, tester):
        check = tester.evaluate(rule(type="int", match=[1, 2], range="5-10"), "7")
        assert check.passed is False
        assert check.constraint == "match"
        assert check.code == ErrorCode.E2005_CONSTRAINT_VIOLATION


class TestMatch:
    """Tests for match literals, patterns and callables."""

    def test_int_literal_compares_as_int(self, tester):
        assert tester.test(rule(type="int", match=[666]), "666")
        assert tester.test(rule(type="int", match=[666]), "0666")

    def test_string_literals(self, tester):
        assert tester.test(rule(match=["a", "b"]), "b")
        assert not tester.test(rule(match=["a", "b"]), "c")

    def test_delimited_pattern(self, tester):
        assert tester.test(rule(match="/^\\d{2}$/"), "42")
        assert not tester.test(rule(match="/^\\d{2}$/"), "421")

    def test_compiled_pattern(self, tester):
        assert tester.test(rule(match=re.compile(r"^a")), "abc")

    def test_callable(self, tester):
        assert tester.test(rule(match=lambda v: v.startswith("a")), "abc")
        assert not tester.test(rule(match=lambda v: v.startswith("a")), "xyz")

    def test_mixed_list(self, tester):
        checks = rule(type="int", match=[666, "/^\\d{2}$/"])
        assert tester.test(checks, "666")
        assert tester.test(checks, "19")
        assert not tester.test(checks, "100")


class TestLengthRegexRange:
    """Tests for length, regex and range."""

    def test_length_counts_characters(self, tester):
        assert tester.test(rule(length="1-3"), "héé")
        check = tester.evaluate(rule(length="1-3"), "abcd")
        assert check.passed is False
        assert check.code == ErrorCode.E2003_OUT_OF_RANGE

    def test_exact_length(self, tester):
        assert tester.test(rule(length=2), "ab")
        assert not tester.test(rule(length=2), "abc")

    def test_regex(self, tester):
        assert tester.test(rule(regex="/^[a-z]+$/"), "abc")
        check = tester.evaluate(rule(regex="/^[a-z]+$/"), "ABC")
        assert check.passed is False
        assert check.code == ErrorCode.E2002_INVALID_FORMAT

    def test_regex_modifiers(self, tester):
        assert tester.test(rule(regex="/^abc$/i"), "ABC")
        assert not tester.test(rule(regex="/^abc$/"), "ABC")

    def test_bare_regex(self, tester):
        assert tester.test(rule(regex=r"^\d+$"), "123")

    def test_range_int_and_float(self, tester):
        assert tester.test(rule(type="int", range="18-65"), "25")
        assert not tester.test(rule(type="int", range="18-65"), "15")
        assert tester.test(rule(type="float", range="1-1.23"), "1.2")

    def test_range_on_text_type_is_schema_fault(self, tester):
        with pytest.raises(RangeTypeError):
            tester.evaluate(rule(range="1-5"), "3")

"""
Tests for input filters.
"""

import pytest

from fieldguard.core.errors import ErrorCode, UnknownFilterError


class TestBuiltinFilters:
    """Tests for the built-in transforms."""

    def test_trim(self, filters):
        assert filters.apply("trim", "  Bob \n") == "Bob"

    def test_strip_html(self, filters):
        assert filters.apply("strip-html", "<b>hi</b><!-- note -->") == "hi"
        assert filters.apply("strip-html", "a < b") == "a < b"

    def test_case(self, filters):
        assert filters.apply("lowercase", "ABC") == "abc"
        assert filters.apply("uppercase", "abc") == "ABC"

    def test_strip_non_digits(self, filters):
        assert filters.apply("strip-non-digits", "+1 (555) 010") == "1555010"

    def test_normalize_whitespace(self, filters):
        assert filters.apply("normalize-whitespace", " a   b \n c ") == "a b c"

    def test_numbers_are_filtered_as_text(self, filters):
        assert filters.apply("trim", 5) == "5"

    def test_none_passes_through(self, filters):
        assert filters.apply("trim", None) is None


class TestFilterRegistry:
    """Tests for lookup and extension."""

    def test_unknown_filter_is_schema_fault(self, filters):
        with pytest.raises(UnknownFilterError, match="Missing filter nope") as exc:
            filters.require("nope")
        assert exc.value.code == ErrorCode.E7002_UNKNOWN_FILTER

    def test_callable_entry_passes_through(self, filters):
        def reverse(value):
            return value[::-1]

        assert filters.require(reverse) is reverse
        assert filters.apply(reverse, "abc") == "cba"

    def test_register(self, filters):
        filters.register("slug", lambda v: v.replace(" ", "-"))
        assert filters.has("slug")
        assert filters.apply("slug", "a b") == "a-b"

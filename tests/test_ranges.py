"""
Tests for range expressions.
"""

import pytest

from fieldguard.core.errors import InvalidRangeFormat, InvalidRangeOrder
from fieldguard.validation import RangeSpec, in_range, parse_range


class TestParseRange:
    """Tests for parsing range text."""

    def test_closed(self):
        assert parse_range("2-10") == RangeSpec(start=2, end=10)

    def test_open_ends(self):
        assert parse_range("-9") == RangeSpec(end=9)
        assert parse_range("10-") == RangeSpec(start=10)

    def test_exact(self):
        assert parse_range("11") == RangeSpec(start=11, exact=True)

    def test_decimal_bounds(self):
        spec = parse_range("1-1.23")
        assert spec.start == 1
        assert spec.end == 1.23

    def test_order_violation(self):
        with pytest.raises(InvalidRangeOrder):
            parse_range("10-5")

    @pytest.mark.parametrize("text", ["abc", "-", "", "1-2-3", "a-5"])
    def test_malformed(self, text):
        with pytest.raises(InvalidRangeFormat):
            parse_range(text)

    def test_non_text_is_malformed(self):
        with pytest.raises(InvalidRangeFormat):
            parse_range(5)

    def test_parsed_spec_passes_through(self):
        spec = RangeSpec(start=1, end=2)
        assert parse_range(spec) is spec


class TestInRange:
    """Tests for membership."""

    def test_lower_bound_only(self):
        assert in_range("10-", 10)
        assert in_range("10-", 1000)
        assert not in_range("10-", 9)

    def test_upper_bound_only(self):
        assert in_range("-9", 0)
        assert in_range("-9", 9)
        assert not in_range("-9", 10)

    def test_exact(self):
        assert in_range("11", 11)
        assert in_range("11", "11")
        assert not in_range("11", 12)

    def test_inclusive_bounds(self):
        assert in_range("18-65", "18")
        assert in_range("18-65", "65")
        assert not in_range("18-65", "66")

    def test_float_kind(self):
        assert in_range("1-1.23", "1.23", "float")
        assert not in_range("1-1.23", "1.24", "float")

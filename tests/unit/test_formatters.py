# Path: tests/unit/test_formatters.py
"""
Unit Tests for fsgen/utils/formatters.py

Tests digit grouping styles, unit scaling and rounding.
"""

import pytest

from fsgen.model.company import FormattingSettings
from fsgen.utils.formatters import format_amount, format_inr, get_unit_label


class TestGrouping:
    """Test number styles."""

    def test_indian(self):
        """Last three digits, then pairs."""
        assert format_inr(12345678, "full-number") == "1,23,45,678"

    def test_international(self):
        """Groups of three."""
        assert format_inr(12345678, "full-number", number_style="international") == "12,345,678"

    def test_none(self):
        """No separators."""
        assert format_inr(12345678, "full-number", number_style="none") == "12345678"

    def test_custom(self):
        """Custom pattern: first group, then the last size repeated."""
        assert format_inr(12345678, "full-number", number_style="custom", custom_number_grouping="4") == "1234,5678"
        assert format_inr(12345678, "full-number", number_style="custom",
                          custom_number_grouping="3,2") == "1,23,45,678"

    def test_short_numbers_unchanged(self):
        """Numbers within the first group get no separator."""
        assert format_inr(999, "full-number") == "999"

    def test_negative(self):
        """Sign goes in front of the grouped digits."""
        assert format_inr(-1234567, "full-number") == "-12,34,567"


class TestUnitsAndRounding:
    """Test scaling and decimals."""

    def test_lakhs_with_decimals(self):
        """12,345,678 is 123.46 lakhs at two decimals."""
        assert format_inr(12345678, "lakhs", 2) == "123.46"

    def test_crores(self):
        """Crores scale by ten million."""
        assert format_inr(250_000_000, "crores") == "25"

    def test_half_up(self):
        """Halves round away from zero."""
        assert format_inr(2.5, "full-number") == "3"
        assert format_inr(0.125, "full-number", 2) == "0.13"

    def test_negative_rounding_to_zero(self):
        """A small negative amount rounds to plain 0."""
        assert format_inr(-0.4, "full-number") == "0"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), None, "abc"])
    def test_degenerate_values(self, value):
        """Non-finite and non-numeric input display as 0."""
        assert format_inr(value, "full-number") == "0"

    def test_very_large_amount(self):
        """Amounts beyond 28 significant digits still format."""
        assert format_inr(1e30, "international", 2) == "1" + ",000" * 10 + ".00"
        assert format_inr(-1e30, "full-number", 0, number_style="none") == "-1" + "0" * 30


class TestHelpers:
    """Test format_amount and unit labels."""

    def test_format_amount_uses_settings(self):
        """Company formatting drives the output."""
        fmt = FormattingSettings(unit_of_measurement="thousands", decimal_points=1, number_style="international")
        assert format_amount(12_345_678, fmt) == "12,345.7"

    def test_unit_labels(self):
        """Known units have labels; unknown ones fall back to full number."""
        assert get_unit_label("lakhs") == "₹ (Lakhs)"
        assert get_unit_label("millions") == "₹ (Full Number)"

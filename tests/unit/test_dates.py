"""
Unit tests for date formatting (sheet_codec.transforms.dates).

The serial-date window is a heuristic; these tests pin its exact edges,
including the known false positive for ordinary numbers in range.
"""

import pytest

from sheet_codec.transforms.dates import format_iso_date, is_numeric, try_format_as_date


class TestTryFormatAsDate:
    """Tests for try_format_as_date()."""

    def test_serial_date(self):
        assert try_format_as_date("44200") == "04.01.2021"

    def test_fractional_serial_ignores_time(self):
        assert try_format_as_date("44200.75") == "04.01.2021"

    def test_first_day_after_phantom_leap_day(self):
        """Serial 61 is 1 March 1900 in spreadsheet tools."""
        assert try_format_as_date("61") == "01.03.1900"

    def test_below_window_unchanged(self):
        assert try_format_as_date("5") == "5"

    def test_window_bounds_are_exclusive(self):
        assert try_format_as_date("59") == "59"
        assert try_format_as_date("60000") == "60000"
        assert try_format_as_date("59.5") != "59.5"
        assert try_format_as_date("59999") != "59999"

    def test_non_numeric_unchanged(self):
        assert try_format_as_date("abc") == "abc"
        assert try_format_as_date("") == ""

    def test_ordinary_number_in_window_is_misread(self):
        """Known false positive: an amount of 100 renders as a 1900 date."""
        assert try_format_as_date("100") == "09.04.1900"

    @pytest.mark.parametrize("text", ["nan", "inf", "-inf", "1_000", "-44200"])
    def test_special_values_unchanged(self, text):
        assert try_format_as_date(text) == text


class TestFormatIsoDate:
    """Tests for format_iso_date()."""

    def test_plain_date(self):
        assert format_iso_date("2021-01-04") == "04.01.2021"

    def test_datetime_keeps_date_part(self):
        assert format_iso_date("2021-01-04T13:45:00") == "04.01.2021"

    def test_surrounding_whitespace(self):
        assert format_iso_date(" 2021-01-04 ") == "04.01.2021"

    @pytest.mark.parametrize("text", ["04.01.2021", "2021-13-01", "2021-01-04T", "", "soon"])
    def test_unparseable_unchanged(self, text):
        assert format_iso_date(text) == text


class TestIsNumeric:
    """Tests for is_numeric()."""

    @pytest.mark.parametrize("text", ["0", "-1.5", "1e3", "44200"])
    def test_numbers(self, text):
        assert is_numeric(text)

    @pytest.mark.parametrize("text", ["", "abc", "nan", "1_0", "12a"])
    def test_non_numbers(self, text):
        assert not is_numeric(text)

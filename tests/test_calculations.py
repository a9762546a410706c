#!/usr/bin/env python3
"""Tests for calculation helper functions."""
from datetime import date

import pytest

from fleet import DueBands, DueStatus, DueUnit, ValidationError, calc_due_usage, calc_due_date, check_status
from fleet.calculations import days_between, parse_iso_date


class TestCalcDueUsage:
    """Tests for calc_due_usage helper function."""

    def test_with_history(self):
        """last + interval when done before."""
        assert calc_due_usage(12000, 100) == 12100

    def test_without_history(self):
        """interval itself when never done."""
        assert calc_due_usage(None, 500) == 500

    def test_no_interval(self):
        """None when no interval defined."""
        assert calc_due_usage(12000, None) is None
        assert calc_due_usage(None, None) is None


class TestCalcDueDate:
    """Tests for calc_due_date helper function."""

    def test_days(self):
        assert calc_due_date(date(2025, 1, 15), days=30) == date(2025, 2, 14)

    def test_years(self):
        assert calc_due_date(date(2024, 2, 29), years=1) == date(2025, 2, 28)

    def test_years_short_one_day(self):
        """One year less one day validity."""
        result = calc_due_date(date(2025, 1, 20), years=1, short_one_day=True)
        assert result == date(2026, 1, 19)

    def test_months(self):
        assert calc_due_date(date(2025, 1, 31), months=1) == date(2025, 2, 28)

    def test_without_last_date(self):
        """None when never done (no date anchor)."""
        assert calc_due_date(None, days=365) is None

    def test_no_interval(self):
        assert calc_due_date(date(2025, 1, 15)) is None


class TestDaysBetween:
    """Tests for days_between."""

    def test_forward_and_backward(self):
        assert days_between(date(2025, 1, 1), date(2025, 1, 11)) == 10
        assert days_between(date(2025, 1, 11), date(2025, 1, 1)) == -10


class TestCheckStatus:
    """Tests for check_status helper function."""

    def test_overdue(self):
        """OVERDUE when remaining < 0."""
        assert check_status(-1, 10) == DueStatus.OVERDUE
        assert check_status(-0.1, 10) == DueStatus.OVERDUE

    def test_due(self):
        """DUE exactly at the threshold."""
        assert check_status(0, 10) == DueStatus.DUE

    def test_due_soon(self):
        """DUE_SOON inside the band."""
        assert check_status(8, 10) == DueStatus.DUE_SOON
        assert check_status(10, 10) == DueStatus.DUE_SOON

    def test_ok(self):
        assert check_status(10.1, 10) == DueStatus.OK
        assert check_status(50, 10) == DueStatus.OK


class TestDueBands:
    """Tests for DueBands."""

    def test_defaults(self):
        bands = DueBands()
        assert bands.for_unit(DueUnit.HOURS) == 10
        assert bands.for_unit(DueUnit.CYCLES) == 10
        assert bands.for_unit(DueUnit.DAYS) == 7

    def test_custom(self):
        bands = DueBands(hours=25, cycles=5, days=30)
        assert bands.for_unit(DueUnit.HOURS) == 25
        assert bands.for_unit(DueUnit.CYCLES) == 5
        assert bands.for_unit(DueUnit.DAYS) == 30


class TestParseIsoDate:
    """Tests for parse_iso_date helper function."""

    def test_valid(self):
        assert parse_iso_date("2025-08-22") == date(2025, 8, 22)

    @pytest.mark.parametrize("value", ["yesterday", "01/09/2025", "20250822", "2025-02-30", "", None])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            parse_iso_date(value)

    def test_message_names_field(self):
        with pytest.raises(ValidationError, match="compliance date"):
            parse_iso_date("yesterday", "compliance date")

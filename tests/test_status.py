#!/usr/bin/env python3
"""Tests for DueStatus and DueUnit enums."""

from fleet import DueStatus, DueUnit, worst_status


class TestDueStatus:
    """Tests for DueStatus ordering."""

    def test_urgency_ordering(self):
        """Lower value = more urgent."""
        assert DueStatus.OVERDUE.value < DueStatus.DUE.value
        assert DueStatus.DUE.value < DueStatus.DUE_SOON.value
        assert DueStatus.DUE_SOON.value < DueStatus.OK.value


class TestWorstStatus:
    """Tests for worst_status aggregation."""

    def test_picks_most_urgent(self):
        assert worst_status(DueStatus.OK, DueStatus.OVERDUE) == DueStatus.OVERDUE
        assert worst_status(DueStatus.DUE_SOON, DueStatus.DUE) == DueStatus.DUE

    def test_empty_is_ok(self):
        assert worst_status() == DueStatus.OK


class TestDueUnit:
    """Tests for DueUnit."""

    def test_abbrev(self):
        assert DueUnit.HOURS.abbrev == "H"
        assert DueUnit.CYCLES.abbrev == "C"
        assert DueUnit.DAYS.abbrev == "D"

    def test_from_value(self):
        assert DueUnit("CYCLES") is DueUnit.CYCLES

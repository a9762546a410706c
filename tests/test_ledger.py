#!/usr/bin/env python3
"""
Tests for usage ledger replay.

Covers:
1. Cumulative aircraft/engine/propeller counters
2. CofA hours reset at marker entries
3. Hours-to-check extensions and completed checks
4. Determinism and append/replay equivalence
5. Back-dated entries re-replay later entries
"""

import pytest

from fleet import (
    Aircraft,
    Assembly,
    Baseline,
    FlightLogEntry,
    MissingReferenceError,
    ReplayState,
    UsageLedger,
    ValidationError,
    replay,
)


def make_entry(date, block_hrs, cycles=1, **kwargs):
    return FlightLogEntry("ac-1", date, block_hrs, cycles, **kwargs)


@pytest.fixture
def baseline():
    return Baseline(
        epoch_date="2025-08-21",
        aircraft_hrs=1000.0,
        aircraft_cyc=500,
        cofa_hours=50.0,
        hours_to_check=100.0,
        engine_tsn_hrs=400.0,
        engine_csn=300,
        engine_hrs_to_overhaul=3000.0,
        prop_tsn_hrs=600.0,
        prop_csn=350,
        prop_tso_hrs=200.0,
    )


# =============================================================================
# Counters
# =============================================================================


class TestCumulativeCounters:
    """Aircraft and assembly counters accumulate block hours and cycles."""

    def test_empty_ledger_is_baseline(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        assert ledger.current == baseline.snapshot()
        assert len(ledger) == 0

    def test_aircraft_totals(self, baseline):
        snaps = replay(baseline, [make_entry("2025-08-22", 2.5, 3), make_entry("2025-08-23", 1.5, 2)])
        assert snaps[-1].aircraft_hrs == 1004.0
        assert snaps[-1].aircraft_cyc == 505
        assert snaps[-1].as_of == "2025-08-23"

    def test_engine_and_prop_accumulate(self, baseline):
        snaps = replay(baseline, [make_entry("2025-08-22", 2.5, 3)])
        snap = snaps[-1]
        assert snap.engine_tsn_hrs == 402.5
        assert snap.engine_csn == 303
        assert snap.prop_tsn_hrs == 602.5
        assert snap.prop_csn == 353

    def test_tso_pinned_at_baseline(self, baseline):
        snaps = replay(baseline, [make_entry("2025-08-22", 2.5, 3)])
        assert snaps[-1].engine_tso_hrs == 0.0
        assert snaps[-1].engine_cso == 0
        assert snaps[-1].prop_tso_hrs == 200.0

    def test_hours_to_overhaul_counts_down(self, baseline):
        snaps = replay(baseline, [make_entry("2025-08-22", 2.5)])
        assert snaps[-1].engine_hrs_to_overhaul == 2997.5
        assert snaps[-1].prop_hrs_to_overhaul is None

    def test_tenths_do_not_drift(self, baseline):
        entries = [make_entry("2025-09-01", 0.1) for _ in range(30)]
        snaps = replay(baseline, entries)
        assert snaps[-1].aircraft_hrs == 1003.0


# =============================================================================
# CofA hours
# =============================================================================


class TestCofaHours:
    """CofA hours counter and its reset entries."""

    def test_no_reset_adds_to_baseline(self, baseline):
        snaps = replay(baseline, [make_entry("2025-08-22", 10), make_entry("2025-08-23", 5)])
        assert snaps[-1].cofa_hours == 65.0

    def test_reset_entry_reports_zero(self, baseline):
        entries = [make_entry("2025-08-22", 10), make_entry("2025-08-23", 3, cofa_reset=True)]
        snaps = replay(baseline, entries)
        assert snaps[-1].cofa_hours == 0.0

    def test_hours_counted_from_reset(self, baseline):
        """[10, 5, (reset)3, 4] gives 3 + 4, independent of earlier totals."""
        entries = [
            make_entry("2025-08-22", 10),
            make_entry("2025-08-23", 5),
            make_entry("2025-08-24", 3, cofa_reset=True),
            make_entry("2025-08-25", 4),
        ]
        snaps = replay(baseline, entries)
        assert [s.cofa_hours for s in snaps] == [60.0, 65.0, 0.0, 7.0]

    def test_second_reset_starts_over(self, baseline):
        entries = [
            make_entry("2025-08-22", 3, cofa_reset=True),
            make_entry("2025-08-23", 4),
            make_entry("2025-08-24", 2, cofa_reset=True),
            make_entry("2025-08-25", 6),
        ]
        snaps = replay(baseline, entries)
        assert snaps[-1].cofa_hours == 8.0


# =============================================================================
# Hours to check
# =============================================================================


class TestHoursToCheck:
    """Running hours-to-check counter with overrides."""

    def test_extension_then_completed_check(self, baseline):
        """100 -> 80 -> 80 - 10 + 50 = 120 -> 200 - 15 = 185."""
        entries = [
            make_entry("2025-08-22", 20),
            make_entry("2025-08-23", 10, hours_to_check=50, is_extension=True),
            make_entry("2025-08-24", 15, hours_to_check=200, is_extension=False),
        ]
        snaps = replay(baseline, entries)
        assert [s.hours_to_check for s in snaps] == [80.0, 120.0, 185.0]

    def test_runs_negative_when_overflown(self, baseline):
        snaps = replay(baseline, [make_entry("2025-08-22", 60), make_entry("2025-08-23", 50)])
        assert snaps[-1].hours_to_check == -10.0

    def test_zero_override_is_a_check(self, baseline):
        """A zero override still replaces the counter."""
        snaps = replay(baseline, [make_entry("2025-08-22", 0, 0, hours_to_check=0)])
        assert snaps[-1].hours_to_check == 0.0


# =============================================================================
# Replay properties
# =============================================================================


class TestReplayProperties:
    """Determinism and append/replay equivalence."""

    @pytest.fixture
    def entries(self):
        return [
            make_entry("2025-08-22", 10, 4),
            make_entry("2025-08-23", 5, 2, hours_to_check=50, is_extension=True),
            make_entry("2025-08-24", 3, 1, cofa_reset=True),
            make_entry("2025-08-25", 4, 3, hours_to_check=100),
        ]

    def test_replay_is_deterministic(self, baseline, entries):
        assert replay(baseline, entries) == replay(baseline, entries)

    def test_append_equals_full_replay(self, baseline, entries):
        """Folding E onto the pre-E state equals replaying everything."""
        state = ReplayState(baseline.snapshot())
        for entry in entries[:-1]:
            state.fold(entry)
        assert state.fold(entries[-1]) == replay(baseline, entries)[-1]

    def test_ledger_append_matches_replay(self, baseline, entries):
        ledger = UsageLedger("ac-1", baseline)
        for entry in entries:
            ledger.append(entry)
        assert ledger.current == replay(baseline, entries)[-1]
        assert [e.snapshot for e in ledger.entries] == replay(baseline, entries)

    def test_replay_sorts_by_date(self, baseline):
        later = make_entry("2025-08-25", 4)
        reset = make_entry("2025-08-24", 3, cofa_reset=True)
        snaps = replay(baseline, [later, reset])
        assert snaps[-1].as_of == "2025-08-25"
        assert snaps[-1].cofa_hours == 7.0

    def test_same_date_keeps_insertion_order(self, baseline):
        first = make_entry("2025-08-22", 3, cofa_reset=True)
        second = make_entry("2025-08-22", 4)
        ledger = UsageLedger("ac-1", baseline, [first, second])
        assert ledger.entries == [first, second]
        assert ledger.current.cofa_hours == 7.0


class TestBackDatedAppend:
    """Entries dated before the ledger tail are inserted and replayed."""

    def test_later_snapshots_are_corrected(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        ledger.append(make_entry("2025-08-22", 10))
        late = make_entry("2025-08-25", 4)
        ledger.append(late)
        assert late.snapshot.aircraft_hrs == 1014.0

        ledger.append(make_entry("2025-08-23", 2))

        assert [e.date for e in ledger.entries] == ["2025-08-22", "2025-08-23", "2025-08-25"]
        assert late.snapshot.aircraft_hrs == 1016.0
        assert ledger.current.aircraft_hrs == 1016.0

    def test_back_dated_reset_moves_cofa(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        ledger.append(make_entry("2025-08-22", 10))
        ledger.append(make_entry("2025-08-25", 4))
        ledger.append(make_entry("2025-08-23", 3, cofa_reset=True))
        assert ledger.current.cofa_hours == 7.0

    def test_back_dated_append_is_logged(self, baseline, caplog):
        ledger = UsageLedger("ac-1", baseline)
        ledger.append(make_entry("2025-08-25", 4))
        with caplog.at_level("WARNING", logger="fleet.ledger"):
            ledger.append(make_entry("2025-08-23", 3))
        assert "Back-dated" in caplog.text


class TestLedgerRejects:
    """Invalid entries are rejected before any state changes."""

    def test_missing_block_hours(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        with pytest.raises(ValidationError):
            ledger.append(FlightLogEntry("ac-1", "2025-08-22", None, 1))
        assert len(ledger) == 0

    def test_bad_date(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        with pytest.raises(ValidationError):
            ledger.append(FlightLogEntry("ac-1", "22/08/2025", 1.0, 1))

    def test_negative_hours(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        with pytest.raises(ValidationError):
            ledger.append(make_entry("2025-08-22", -1.0))

    def test_extension_without_hours(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        with pytest.raises(ValidationError):
            ledger.append(make_entry("2025-08-22", 1.0, is_extension=True))

    def test_other_aircraft(self, baseline):
        ledger = UsageLedger("ac-1", baseline)
        with pytest.raises(MissingReferenceError):
            ledger.append(FlightLogEntry("ac-2", "2025-08-22", 1.0, 1))
        assert ledger.current == baseline.snapshot()


class TestApplyTo:
    """Writing the latest snapshot to the aircraft and its assemblies."""

    def test_aircraft_live_fields(self, baseline):
        aircraft = Aircraft("ac-1", "5H-AAF", "C208B")
        ledger = UsageLedger("ac-1", baseline, [make_entry("2025-08-22", 2.0, 3)])
        ledger.apply_to(aircraft)
        assert aircraft.current_hrs == 1002.0
        assert aircraft.current_cyc == 503
        assert aircraft.current_date == "2025-08-22"
        assert aircraft.cofa_hours == 52.0
        assert aircraft.hours_to_check == 98.0

    def test_assemblies_rederived(self, baseline):
        aircraft = Aircraft("ac-1", "5H-AAF", "C208B")
        engine = Assembly("eng-1", "ac-1", "Engine", "PT6A-114A", "PCE-1", tso_hrs=100.0, cso=20)
        apu = Assembly("apu-1", "ac-1", "APU", "GTCP36", "P-1", tsn_hrs=55.0)
        ledger = UsageLedger("ac-1", baseline, [make_entry("2025-08-22", 2.0, 3)])
        ledger.apply_to(aircraft, [engine, apu])
        assert engine.tsn_hrs == 902.0
        assert engine.csn == 483
        assert apu.tsn_hrs == 55.0


class TestUsageOn:
    """Counters as of a past day."""

    @pytest.fixture
    def ledger(self, baseline):
        return UsageLedger(
            "ac-1",
            baseline,
            [make_entry("2025-08-22", 2.0, 2), make_entry("2025-08-22", 1.0, 1), make_entry("2025-08-25", 4.0, 3)],
        )

    def test_epoch_is_baseline(self, ledger, baseline):
        assert ledger.usage_on("2025-08-21") == baseline.snapshot()

    def test_end_of_day(self, ledger):
        """Every entry of the day counts."""
        assert ledger.usage_on("2025-08-22").aircraft_hrs == 1003.0

    def test_between_entries(self, ledger):
        assert ledger.usage_on("2025-08-24").aircraft_cyc == 503

    def test_after_last_entry(self, ledger):
        assert ledger.usage_on("2026-01-01") == ledger.current

    def test_before_baseline(self, ledger):
        with pytest.raises(ValidationError):
            ledger.usage_on("2025-08-20")

    def test_bad_date(self, ledger):
        with pytest.raises(ValidationError):
            ledger.usage_on("yesterday")

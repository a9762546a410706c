"""
Usage ledger replay.

Folds an aircraft's flight log, in date order, over a fixed baseline to get
the cumulative aircraft/engine/propeller counters, the CofA hours and the
hours remaining to the next check. The fold is pure: the same baseline and
entries always give the same snapshots.
"""

import logging
from bisect import bisect_right
from typing import Iterable, List, Optional

from .aircraft import Aircraft, Assembly
from .calculations import parse_iso_date
from .errors import MissingReferenceError, ValidationError
from .flight_log import FlightLogEntry, validate_entry
from .snapshot import Baseline, UsageSnapshot, round_hrs

logger = logging.getLogger(__name__)


class ReplayState:
    """
    Running state of a replay.

    Besides the latest snapshot this carries the block hours flown since the
    most recent CofA reset (None until a reset is seen), which the snapshot
    alone cannot recover because a reset entry reports 0.
    """

    def __init__(self, snapshot: UsageSnapshot, hrs_since_reset: Optional[float] = None):
        self.snapshot = snapshot
        self.hrs_since_reset = hrs_since_reset

    def fold(self, entry: FlightLogEntry) -> UsageSnapshot:
        """Apply one entry and return the snapshot as of that entry."""
        prev = self.snapshot
        block = entry.block_hrs

        if entry.cofa_reset:
            self.hrs_since_reset = block
            cofa_hours = 0.0
        elif self.hrs_since_reset is not None:
            self.hrs_since_reset = round_hrs(self.hrs_since_reset + block)
            cofa_hours = self.hrs_since_reset
        else:
            cofa_hours = round_hrs(prev.cofa_hours + block)

        if entry.has_check_override and entry.is_extension:
            hours_to_check = prev.hours_to_check - block + entry.hours_to_check
        elif entry.has_check_override:
            hours_to_check = entry.hours_to_check - block
        else:
            hours_to_check = prev.hours_to_check - block

        engine_oh = prev.engine_hrs_to_overhaul
        prop_oh = prev.prop_hrs_to_overhaul

        self.snapshot = prev.evolve(
            as_of=entry.date,
            aircraft_hrs=round_hrs(prev.aircraft_hrs + block),
            aircraft_cyc=prev.aircraft_cyc + entry.cycles,
            cofa_hours=cofa_hours,
            hours_to_check=round_hrs(hours_to_check),
            engine_tsn_hrs=round_hrs(prev.engine_tsn_hrs + block),
            engine_csn=prev.engine_csn + entry.cycles,
            engine_hrs_to_overhaul=(
                round_hrs(engine_oh - block) if engine_oh is not None else None
            ),
            prop_tsn_hrs=round_hrs(prev.prop_tsn_hrs + block),
            prop_csn=prev.prop_csn + entry.cycles,
            prop_hrs_to_overhaul=(
                round_hrs(prop_oh - block) if prop_oh is not None else None
            ),
        )
        return self.snapshot


def sort_entries(entries: Iterable[FlightLogEntry]) -> List[FlightLogEntry]:
    """Date order; sorted() is stable so equal dates keep insertion order."""
    return sorted(entries, key=lambda e: e.date)


def replay(baseline: Baseline, entries: Iterable[FlightLogEntry]) -> List[UsageSnapshot]:
    """Snapshot after each entry, in date order, starting from the baseline."""
    state = ReplayState(baseline.snapshot())
    return [state.fold(entry) for entry in sort_entries(entries)]


class UsageLedger:
    """
    Append-only, date-ordered flight log for one aircraft.

    Every entry carries its state-at-time snapshot. In-order appends fold the
    new entry onto the cached tail state; a back-dated entry is inserted at
    its chronological position and the whole ledger is replayed so that the
    stored snapshots of all later entries are corrected.
    """

    def __init__(
        self,
        aircraft_id: str,
        baseline: Baseline,
        entries: Optional[Iterable[FlightLogEntry]] = None,
    ):
        self.aircraft_id = aircraft_id
        self.baseline = baseline
        self._entries: List[FlightLogEntry] = []
        self._tail = ReplayState(baseline.snapshot())
        for entry in entries or []:
            self._check(entry)
            self._entries.append(entry)
        self._entries = sort_entries(self._entries)
        self.replay_all()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[FlightLogEntry]:
        return list(self._entries)

    @property
    def current(self) -> UsageSnapshot:
        """Latest snapshot; the baseline itself when nothing has been flown."""
        return self._tail.snapshot

    def _check(self, entry: FlightLogEntry) -> None:
        validate_entry(entry)
        if entry.aircraft_id != self.aircraft_id:
            raise MissingReferenceError(
                f"Entry for aircraft '{entry.aircraft_id}' cannot be added to "
                f"the ledger of '{self.aircraft_id}'"
            )

    def usage_on(self, on: str) -> UsageSnapshot:
        """
        Counters at the end of a given day: the snapshot of the last entry
        dated on or before it, or the baseline when nothing was flown yet.
        """
        parse_iso_date(on)
        if on < self.baseline.epoch_date:
            raise ValidationError(
                f"{on} is before the ledger baseline of {self.baseline.epoch_date}"
            )
        snapshot = self.baseline.snapshot()
        for entry in self._entries:
            if entry.date > on:
                break
            snapshot = entry.snapshot
        return snapshot

    def replay_all(self) -> UsageSnapshot:
        """Recompute every entry's snapshot from the baseline."""
        self._tail = ReplayState(self.baseline.snapshot())
        for entry in self._entries:
            entry.snapshot = self._tail.fold(entry)
        return self.current

    def append(self, entry: FlightLogEntry) -> UsageSnapshot:
        """
        Add an entry and return its snapshot.

        Raises ValidationError or MissingReferenceError before anything is
        changed.
        """
        self._check(entry)
        if self._entries and entry.date < self._entries[-1].date:
            position = bisect_right([e.date for e in self._entries], entry.date)
            logger.warning(
                "Back-dated flight log entry %s for %s inserted before %d later "
                "entries; replaying ledger",
                entry.date,
                self.aircraft_id,
                len(self._entries) - position,
            )
            self._entries.insert(position, entry)
            self.replay_all()
        else:
            self._entries.append(entry)
            entry.snapshot = self._tail.fold(entry)
        logger.debug(
            "Appended %s: %.1f h / %d cyc for %s",
            entry.date,
            entry.block_hrs,
            entry.cycles,
            self.aircraft_id,
        )
        return entry.snapshot

    def apply_to(self, aircraft: Aircraft, assemblies: Iterable[Assembly] = ()) -> None:
        """Write the latest snapshot to the aircraft, then re-derive assemblies."""
        aircraft.apply_snapshot(self.current)
        for assembly in assemblies:
            assembly.rederive(aircraft)

"""FlightLogEntry class for usage ledger events."""

from typing import Optional

from .calculations import parse_iso_date
from .errors import ValidationError
from .snapshot import UsageSnapshot


class FlightLogEntry:
    """
    One flight (or day of flying) recorded in the aircraft's tech log.

    Optional event modifiers:
    - cofa_reset: the CofA hour counter restarts at this entry
    - hours_to_check + is_extension: override of the hours-to-check counter;
      an extension adds hours, otherwise a completed check replaces it
    """

    def __init__(
        self,
        aircraft_id: str,
        date: str,
        block_hrs: float,
        cycles: int,
        cofa_reset: bool = False,
        hours_to_check: Optional[float] = None,
        is_extension: bool = False,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        techlog_number: Optional[str] = None,
        pilot: Optional[str] = None,
        remarks: Optional[str] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.aircraft_id = aircraft_id
        self.date = date
        self.block_hrs = block_hrs
        self.cycles = cycles
        self.cofa_reset = cofa_reset or False
        self.hours_to_check = hours_to_check
        self.is_extension = is_extension or False
        self.origin = origin
        self.destination = destination
        self.techlog_number = techlog_number
        self.pilot = pilot
        self.remarks = remarks
        # State-at-time, filled in by the ledger when the entry is appended
        self.snapshot: Optional[UsageSnapshot] = None

    @property
    def has_check_override(self) -> bool:
        return self.hours_to_check is not None

    @property
    def route(self) -> Optional[str]:
        if self.origin or self.destination:
            return f"{self.origin or '?'}-{self.destination or '?'}"
        return None


def validate_entry(entry: FlightLogEntry) -> None:
    """
    Reject an entry that cannot be replayed.

    Raises ValidationError for a missing aircraft id, a missing or
    non-ISO date, missing or negative block hours/cycles, and a negative
    hours-to-check override.
    """
    if not entry.aircraft_id:
        raise ValidationError("Flight log entry is missing an aircraft id")
    if not entry.date:
        raise ValidationError("Flight log entry is missing a date")
    parse_iso_date(entry.date, "flight log date")
    if entry.block_hrs is None or entry.cycles is None:
        raise ValidationError("Flight log entry needs block hours and cycles")
    if entry.block_hrs < 0 or entry.cycles < 0:
        raise ValidationError("Block hours and cycles cannot be negative")
    if entry.hours_to_check is not None and entry.hours_to_check < 0:
        raise ValidationError("Hours-to-check override cannot be negative")
    if entry.is_extension and entry.hours_to_check is None:
        raise ValidationError("An extension needs an hours-to-check value")

"""Compliance records: each time a maintenance item was signed off."""

from typing import Iterable, List, Optional

from .aircraft import Aircraft
from .calculations import parse_iso_date
from .maintenance_item import Anchor, MaintenanceItem
from .snapshot import UsageSnapshot


class ComplianceRecord:
    """A record of maintenance performed on one aircraft."""

    def __init__(
        self,
        item_id: str,
        aircraft_id: str,
        date: str,
        hrs_at: Optional[float] = None,
        cyc_at: Optional[float] = None,
        remark: Optional[str] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.item_id = item_id
        self.aircraft_id = aircraft_id
        self.date = date
        self.hrs_at = hrs_at
        self.cyc_at = cyc_at
        self.remark = remark

    def as_anchor(self) -> Anchor:
        return Anchor(date=self.date, hrs=self.hrs_at, cyc=self.cyc_at)


def history_for(
    item_id: str, records: Optional[Iterable[ComplianceRecord]]
) -> List[ComplianceRecord]:
    """All records for an item, oldest first."""
    matching = [r for r in records or [] if r.item_id == item_id]
    return sorted(matching, key=lambda r: (r.date, r.hrs_at or 0))


def record_compliance(
    item: MaintenanceItem,
    aircraft: Aircraft,
    on: Optional[str] = None,
    remark: Optional[str] = None,
    usage: Optional[UsageSnapshot] = None,
) -> ComplianceRecord:
    """
    Sign off an item.

    The date defaults to the aircraft's last ledger date. Hours and cycles
    come from usage (the counters on that date) when given, otherwise from
    the aircraft's current state.

    Raises ValidationError for a date that is not YYYY-MM-DD.
    """
    on = on or aircraft.current_date
    parse_iso_date(on, "compliance date")
    return ComplianceRecord(
        item_id=item.id,
        aircraft_id=aircraft.id,
        date=on,
        hrs_at=usage.aircraft_hrs if usage else aircraft.current_hrs,
        cyc_at=usage.aircraft_cyc if usage else aircraft.current_cyc,
        remark=remark,
    )

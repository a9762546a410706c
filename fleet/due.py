"""Due classification of maintenance items against current aircraft usage."""

from datetime import date
from typing import Iterable, List, Optional

from .aircraft import Aircraft
from .calculations import (
    DEFAULT_BANDS,
    DueBands,
    calc_due_date,
    calc_due_usage,
    check_status,
    days_between,
    parse_iso_date,
)
from .compliance import ComplianceRecord, history_for
from .computed_due import ComputedDue, DueLimit
from .maintenance_item import MaintenanceItem
from .projection import estimate_min_days
from .snapshot import round_hrs
from .status import DueUnit, worst_status


def compute_due(
    item: MaintenanceItem,
    aircraft: Aircraft,
    compliance: Optional[Iterable[ComplianceRecord]] = None,
    as_of: Optional[date] = None,
    bands: DueBands = DEFAULT_BANDS,
) -> ComputedDue:
    """
    Calculate the remaining margin per governing unit and the overall status.

    Logic:
    - The latest compliance record, when there is one, is the anchor and the
      repeat interval applies; otherwise the item's own last-done (or
      installation) anchor and the initial interval apply
    - HOURS/CYCLES: due at anchor + interval (0 + interval if never done)
    - DAYS: due at anchor date + interval days; skipped without a date
    - Units with no interval produce no limit
    - Overall status is the worst status among the limits
    """
    today = as_of or date.today()
    history = history_for(item.id, compliance)
    anchor = history[-1].as_anchor() if history else item.anchor
    repeat = bool(history)

    limits: List[DueLimit] = []
    next_hrs = next_cyc = next_date = None
    for unit in item.interval.governing_units():
        interval = item.interval.effective(unit, repeat)
        if interval is None:
            continue
        if unit is DueUnit.HOURS:
            next_hrs = calc_due_usage(anchor.hrs, interval)
            remaining = round_hrs(next_hrs - aircraft.current_hrs)
        elif unit is DueUnit.CYCLES:
            next_cyc = calc_due_usage(anchor.cyc, interval)
            remaining = next_cyc - aircraft.current_cyc
        else:
            if anchor.date is None:
                continue
            due_date = calc_due_date(parse_iso_date(anchor.date), days=interval)
            next_date = due_date.isoformat()
            remaining = days_between(today, due_date)
        limits.append(
            DueLimit(unit, remaining, check_status(remaining, bands.for_unit(unit)))
        )

    return ComputedDue(
        item_id=item.id,
        title=item.title,
        status=worst_status(*(lim.status for lim in limits)),
        limits=limits,
        estimated_days=estimate_min_days(limits, aircraft),
        next_due_hrs=next_hrs,
        next_due_cyc=next_cyc,
        next_due_date=next_date,
    )


def compute_due_list(
    items: Iterable[MaintenanceItem],
    aircraft: Aircraft,
    compliance: Optional[Iterable[ComplianceRecord]] = None,
    as_of: Optional[date] = None,
    bands: DueBands = DEFAULT_BANDS,
) -> List[ComputedDue]:
    """
    Due status for every independently tracked item, most urgent first.

    Tasks under a parent check are left out (the check carries them), as are
    items with no interval-based limits.
    """
    compliance = list(compliance or [])
    rows = []
    for item in items:
        if item.is_subsumed:
            continue
        due = compute_due(item, aircraft, compliance, as_of, bands)
        if not due.limits:
            continue
        rows.append(due)
    return sorted(rows, key=lambda d: (d.status.value, d.min_remaining))

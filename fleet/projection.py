"""
Projection of hours/cycles margins onto the calendar.

Assumes the aircraft keeps flying at its recent average daily rate. The
result is an estimate to plan with, not a guaranteed due date.
"""

from typing import Dict, Iterable, List, Optional, Sequence

from .aircraft import Aircraft
from .computed_due import ComputedDue, DueLimit
from .status import DueUnit

DEFAULT_WINDOWS = (30, 60, 90)


def estimate_days(limit: DueLimit, aircraft: Aircraft) -> Optional[float]:
    """
    Days until a limit is reached.

    DAYS limits are already in days. HOURS/CYCLES are divided by the daily
    utilization; a zero or missing rate gives None (the unit cannot be
    projected).
    """
    if limit.unit is DueUnit.DAYS:
        return float(limit.remaining)
    if limit.unit is DueUnit.HOURS:
        rate = aircraft.avg_daily_hrs
    else:
        rate = aircraft.avg_daily_cyc
    if not rate or rate <= 0:
        return None
    return limit.remaining / rate


def estimate_min_days(
    limits: Iterable[DueLimit], aircraft: Aircraft
) -> Optional[float]:
    """Soonest projected day count across limits, None if nothing projects."""
    estimates = [estimate_days(lim, aircraft) for lim in limits]
    estimates = [e for e in estimates if e is not None]
    return min(estimates) if estimates else None


def in_projection_window(
    due: ComputedDue, aircraft: Aircraft, window_days: float
) -> bool:
    """Is the item expected to come due within the next window_days days?"""
    soonest = estimate_min_days(due.limits, aircraft)
    if soonest is None:
        return False
    return soonest <= window_days


def project(
    dues: Iterable[ComputedDue],
    aircraft: Aircraft,
    windows: Sequence[int] = DEFAULT_WINDOWS,
) -> Dict[int, List[ComputedDue]]:
    """Items falling inside each projection window, soonest first."""
    dues = list(dues)
    result = {}
    for window in windows:
        hits = [d for d in dues if in_projection_window(d, aircraft, window)]
        result[window] = sorted(
            hits, key=lambda d: estimate_min_days(d.limits, aircraft)
        )
    return result

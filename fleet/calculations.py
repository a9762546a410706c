"""Helper functions for due calculations."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .errors import ValidationError
from .status import DueStatus, DueUnit


@dataclass(frozen=True)
class DueBands:
    """Absolute near-threshold margins that make a limit DUE_SOON."""

    hours: float = 10
    cycles: float = 10
    days: float = 7

    def for_unit(self, unit: DueUnit) -> float:
        if unit is DueUnit.HOURS:
            return self.hours
        if unit is DueUnit.CYCLES:
            return self.cycles
        return self.days


DEFAULT_BANDS = DueBands()

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_iso_date(value: Optional[str], what: str = "date") -> date:
    """Parse a YYYY-MM-DD string, raising ValidationError for anything else."""
    # fromisoformat alone also takes basic and week formats on newer Pythons
    if not isinstance(value, str) or not ISO_DATE.fullmatch(value):
        raise ValidationError(f"Invalid {what}: {value!r} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid {what}: {value!r} (expected YYYY-MM-DD)")


def calc_due_usage(
    last_usage: Optional[float], interval: Optional[float]
) -> Optional[float]:
    """
    Calculate the next due hours/cycles.

    - Done before: last_usage + interval
    - Never done: 0 + interval (counted from the aircraft's zero hours)
    """
    if interval is None:
        return None
    if last_usage is not None:
        return last_usage + interval
    return interval


def calc_due_date(
    last_date: Optional[date],
    days: Optional[float] = None,
    months: Optional[float] = None,
    years: Optional[float] = None,
    short_one_day: bool = False,
) -> Optional[date]:
    """Calculate the next due date: last + interval (None without a last date)."""
    if last_date is None or (days is None and months is None and years is None):
        return None
    delta = relativedelta(
        years=int(years or 0), months=int(months or 0), days=int(days or 0)
    )
    if short_one_day:
        delta -= relativedelta(days=1)
    return last_date + delta


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)."""
    return (end - start).days


def check_status(remaining: float, soon_threshold: float) -> DueStatus:
    """Classify the margin left before a threshold."""
    if remaining < 0:
        return DueStatus.OVERDUE
    if remaining == 0:
        return DueStatus.DUE
    if remaining <= soon_threshold:
        return DueStatus.DUE_SOON
    return DueStatus.OK

"""Calendar-only aircraft items (CofA expiry, W&B, ELT battery, ...)."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .calculations import (
    DEFAULT_BANDS,
    DueBands,
    calc_due_date,
    check_status,
    days_between,
    parse_iso_date,
)
from .status import DueStatus


class MonitoringItem:
    """
    An aircraft document or equipment item that expires on a date.

    short_one_day marks validities of "N years less one day" (fire
    extinguisher, standby compass).
    """

    def __init__(
        self,
        id: str,
        name: str,
        last_done: Optional[str] = None,
        interval_years: Optional[float] = None,
        interval_months: Optional[float] = None,
        interval_days: Optional[float] = None,
        short_one_day: bool = False,
        next_due: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.last_done = last_done
        self.interval_years = interval_years
        self.interval_months = interval_months
        self.interval_days = interval_days
        self.short_one_day = short_one_day or False
        self.next_due = next_due

    def due_date(self) -> Optional[date]:
        """Explicit next-due date if recorded, else last done + validity."""
        if self.next_due:
            return parse_iso_date(self.next_due, "next due date")
        if not self.last_done:
            return None
        return calc_due_date(
            parse_iso_date(self.last_done, "last done date"),
            days=self.interval_days,
            months=self.interval_months,
            years=self.interval_years,
            short_one_day=self.short_one_day,
        )


@dataclass
class MonitoringStatus:
    item: MonitoringItem
    status: Optional[DueStatus]
    next_due: Optional[str] = None
    days_until_due: Optional[int] = None


def monitoring_status(
    item: MonitoringItem, as_of: Optional[date] = None, bands: DueBands = DEFAULT_BANDS
) -> MonitoringStatus:
    """Status of a calendar item; status is None when no due date is known."""
    due = item.due_date()
    if due is None:
        return MonitoringStatus(item=item, status=None)
    days = days_between(as_of or date.today(), due)
    return MonitoringStatus(
        item=item,
        status=check_status(days, bands.days),
        next_due=due.isoformat(),
        days_until_due=days,
    )


def monitoring_report(
    items: Iterable[MonitoringItem],
    as_of: Optional[date] = None,
    bands: DueBands = DEFAULT_BANDS,
) -> List[MonitoringStatus]:
    """Status for every item, most urgent first, unknown last."""
    results = [monitoring_status(i, as_of, bands) for i in items]
    return sorted(
        results,
        key=lambda r: (r.status.value if r.status else 99, r.days_until_due or 0),
    )

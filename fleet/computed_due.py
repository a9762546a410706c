"""ComputedDue dataclass for calculated maintenance status."""

from dataclasses import dataclass, field
from typing import List, Optional

from .status import DueStatus, DueUnit


@dataclass(frozen=True)
class DueLimit:
    """Margin left on one governing unit (negative when overdue)."""

    unit: DueUnit
    remaining: float
    status: DueStatus = DueStatus.OK


@dataclass
class ComputedDue:
    """Due information for one maintenance item. Derived, never stored."""

    item_id: str
    title: str
    status: DueStatus
    limits: List[DueLimit] = field(default_factory=list)
    estimated_days: Optional[float] = None
    next_due_hrs: Optional[float] = None
    next_due_cyc: Optional[float] = None
    next_due_date: Optional[str] = None

    @property
    def is_due(self) -> bool:
        return self.status is not DueStatus.OK

    def limit(self, unit: DueUnit) -> Optional[DueLimit]:
        for lim in self.limits:
            if lim.unit is unit:
                return lim
        return None

    @property
    def min_remaining(self) -> float:
        return min(lim.remaining for lim in self.limits)

"""Status and unit enums for maintenance due calculations."""

from enum import Enum


class DueStatus(Enum):
    """Maintenance status categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE = 2
    DUE_SOON = 3
    OK = 4


class DueUnit(Enum):
    """Units an interval can be governed by."""

    HOURS = "HOURS"
    CYCLES = "CYCLES"
    DAYS = "DAYS"

    @property
    def abbrev(self) -> str:
        return self.value[0]


def worst_status(*statuses: DueStatus) -> DueStatus:
    """Most urgent of the given statuses (OK when none given)."""
    if not statuses:
        return DueStatus.OK
    return min(statuses, key=lambda s: s.value)

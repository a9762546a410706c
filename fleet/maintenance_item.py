"""Maintenance item model: tasks, checks and components on one interval shape."""

from enum import Enum
from typing import List, Optional, Sequence

from .status import DueUnit


class ItemKind(Enum):
    TASK = "task"
    CHECK = "check"
    COMPONENT = "component"


class IntervalSpec:
    """
    Initial and repeat thresholds per unit.

    The legacy single interval (interval_hrs etc.) stands in for both the
    initial and the repeat threshold when those are not given.
    """

    def __init__(
        self,
        initial_hrs: Optional[float] = None,
        initial_cyc: Optional[float] = None,
        initial_days: Optional[float] = None,
        repeat_hrs: Optional[float] = None,
        repeat_cyc: Optional[float] = None,
        repeat_days: Optional[float] = None,
        interval_hrs: Optional[float] = None,
        interval_cyc: Optional[float] = None,
        interval_days: Optional[float] = None,
        due_units: Optional[Sequence[DueUnit]] = None,
    ):
        self.initial = {
            DueUnit.HOURS: initial_hrs,
            DueUnit.CYCLES: initial_cyc,
            DueUnit.DAYS: initial_days,
        }
        self.repeat = {
            DueUnit.HOURS: repeat_hrs,
            DueUnit.CYCLES: repeat_cyc,
            DueUnit.DAYS: repeat_days,
        }
        self.legacy = {
            DueUnit.HOURS: interval_hrs,
            DueUnit.CYCLES: interval_cyc,
            DueUnit.DAYS: interval_days,
        }
        self.due_units = list(due_units) if due_units else None

    def effective(self, unit: DueUnit, repeat: bool) -> Optional[float]:
        """
        Interval for a unit: repeat once the item has been done, initial
        before that. Falls back to the legacy interval, then to the other
        phase's value. Zero counts as "not declared".
        """
        if repeat:
            order = (self.repeat, self.legacy, self.initial)
        else:
            order = (self.initial, self.legacy, self.repeat)
        for table in order:
            if table[unit]:
                return table[unit]
        return None

    def governing_units(self) -> List[DueUnit]:
        """Units declared on the item, or every unit with an interval."""
        if self.due_units is not None:
            return self.due_units
        return [
            unit
            for unit in DueUnit
            if self.initial[unit] or self.repeat[unit] or self.legacy[unit]
        ]


class Anchor:
    """When the item was last done (or installed) in date and aircraft usage."""

    def __init__(
        self,
        date: Optional[str] = None,
        hrs: Optional[float] = None,
        cyc: Optional[float] = None,
    ):
        self.date = date
        self.hrs = hrs
        self.cyc = cyc


class MaintenanceItem:
    """A task, check or component tracked against its intervals."""

    def __init__(
        self,
        id: str,
        title: str,
        kind: ItemKind,
        interval: IntervalSpec,
        anchor: Optional[Anchor] = None,
        reference: Optional[str] = None,
        category: Optional[str] = None,
        check_id: Optional[str] = None,
        aircraft_type: Optional[str] = None,
        tail_specific_id: Optional[str] = None,
        pn: Optional[str] = None,
        sn: Optional[str] = None,
    ):
        self.id = id
        self.title = title
        self.kind = kind
        self.interval = interval
        self.anchor = anchor or Anchor()
        self.reference = reference
        self.category = category
        self.check_id = check_id
        self.aircraft_type = aircraft_type
        self.tail_specific_id = tail_specific_id
        self.pn = pn
        self.sn = sn

    @property
    def is_subsumed(self) -> bool:
        """Tasks covered by a parent check are not listed on their own."""
        return self.kind is ItemKind.TASK and self.check_id is not None

    def applies_to(self, aircraft_id: str, aircraft_type: str) -> bool:
        """Items target either a whole aircraft type or one tail."""
        if self.tail_specific_id is not None:
            return self.tail_specific_id == aircraft_id
        if self.aircraft_type is not None:
            return self.aircraft_type == aircraft_type
        return True

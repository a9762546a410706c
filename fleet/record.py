"""AircraftRecord - the main aggregate for one aircraft's data and calculations."""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from .aircraft import Aircraft, Assembly
from .calculations import DEFAULT_BANDS, DueBands
from .compliance import ComplianceRecord, record_compliance
from .computed_due import ComputedDue
from .due import compute_due, compute_due_list
from .errors import MissingReferenceError
from .flight_log import FlightLogEntry
from .ledger import UsageLedger
from .maintenance_item import ItemKind, MaintenanceItem
from .monitoring import MonitoringItem, MonitoringStatus, monitoring_report
from .projection import DEFAULT_WINDOWS, project
from .snapshot import Baseline, UsageSnapshot

logger = logging.getLogger(__name__)


class AircraftRecord:
    """Complete aircraft record: usage ledger, maintenance items and history."""

    def __init__(
        self,
        aircraft: Aircraft,
        baseline: Baseline,
        assemblies: Optional[List[Assembly]] = None,
        flight_logs: Optional[List[FlightLogEntry]] = None,
        items: Optional[List[MaintenanceItem]] = None,
        compliance: Optional[List[ComplianceRecord]] = None,
        monitoring: Optional[List[MonitoringItem]] = None,
    ):
        self.aircraft = aircraft
        self.baseline = baseline
        self.assemblies = assemblies or []
        self.items = items or []
        self.compliance = compliance or []
        self.monitoring = monitoring or []
        self.ledger = UsageLedger(aircraft.id, baseline, flight_logs)
        self.ledger.apply_to(self.aircraft, self.assemblies)

    @property
    def usage(self) -> UsageSnapshot:
        return self.ledger.current

    def items_of_kind(self, kind: ItemKind) -> List[MaintenanceItem]:
        return [i for i in self.items if i.kind is kind]

    @property
    def applicable_items(self) -> List[MaintenanceItem]:
        """Items targeting this aircraft's type or this tail."""
        return [
            i for i in self.items if i.applies_to(self.aircraft.id, self.aircraft.type)
        ]

    def get_item(self, item_id: str) -> Optional[MaintenanceItem]:
        """Find an item by id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def require_item(self, item_id: str) -> MaintenanceItem:
        item = self.get_item(item_id)
        if item is None:
            raise MissingReferenceError(f"Unknown maintenance item '{item_id}'")
        return item

    def subsumed_tasks(self, check_id: str) -> List[MaintenanceItem]:
        """Tasks carried by a check."""
        return [
            i for i in self.items_of_kind(ItemKind.TASK) if i.check_id == check_id
        ]

    def log_flight(self, entry: FlightLogEntry) -> UsageSnapshot:
        """Append a flight log entry and bring the live aircraft state up to date."""
        snapshot = self.ledger.append(entry)
        self.ledger.apply_to(self.aircraft, self.assemblies)
        logger.info(
            "%s now at %.1f h / %d cyc (CofA %.1f h, %.1f h to check)",
            self.aircraft.registration,
            self.aircraft.current_hrs,
            self.aircraft.current_cyc,
            self.aircraft.cofa_hours,
            self.aircraft.hours_to_check,
        )
        return snapshot

    def mark_done(
        self, item_id: str, on: Optional[str] = None, remark: Optional[str] = None
    ) -> List[ComplianceRecord]:
        """
        Record compliance for an item at the current usage.

        Completing a check also signs off every task it carries. A past date
        takes the hours and cycles the ledger shows for that day.
        """
        item = self.require_item(item_id)
        usage = self.ledger.usage_on(on) if on else None
        targets = [item]
        if item.kind is ItemKind.CHECK:
            targets.extend(self.subsumed_tasks(item.id))
        records = [
            record_compliance(t, self.aircraft, on, remark, usage) for t in targets
        ]
        self.compliance.extend(records)
        return records

    def compute_due(
        self,
        item_id: str,
        as_of: Optional[date] = None,
        bands: DueBands = DEFAULT_BANDS,
    ) -> ComputedDue:
        item = self.require_item(item_id)
        return compute_due(item, self.aircraft, self.compliance, as_of, bands)

    def due_list(
        self, as_of: Optional[date] = None, bands: DueBands = DEFAULT_BANDS
    ) -> List[ComputedDue]:
        """Due status for checks, standalone tasks and components."""
        return compute_due_list(
            self.applicable_items, self.aircraft, self.compliance, as_of, bands
        )

    def projections(
        self,
        windows: Sequence[int] = DEFAULT_WINDOWS,
        as_of: Optional[date] = None,
        bands: DueBands = DEFAULT_BANDS,
    ) -> Dict[int, List[ComputedDue]]:
        return project(self.due_list(as_of, bands), self.aircraft, windows)

    def monitoring_report(
        self, as_of: Optional[date] = None, bands: DueBands = DEFAULT_BANDS
    ) -> List[MonitoringStatus]:
        return monitoring_report(self.monitoring, as_of, bands)

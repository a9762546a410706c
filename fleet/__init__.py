"""
Aircraft usage and maintenance tracking models.

This package provides:
- UsageLedger: date-ordered flight log replayed over a Baseline into
  UsageSnapshots (aircraft/engine/prop counters, CofA hours, hours to check)
- MaintenanceItem: tasks, checks and components on one interval shape
- compute_due / compute_due_list: per-unit margins and DueStatus
- in_projection_window / project: utilization-based "due within N days"
- AircraftRecord: main aggregate combining all of the above
- load_aircraft_record / YamlFleetRepository: YAML storage
"""

from .status import DueStatus, DueUnit, worst_status
from .errors import FleetError, ValidationError, MissingReferenceError
from .snapshot import Baseline, UsageSnapshot
from .aircraft import Aircraft, Assembly
from .flight_log import FlightLogEntry, validate_entry
from .ledger import ReplayState, UsageLedger, replay
from .maintenance_item import Anchor, IntervalSpec, ItemKind, MaintenanceItem
from .compliance import ComplianceRecord, record_compliance
from .calculations import DueBands, calc_due_usage, calc_due_date, check_status
from .computed_due import ComputedDue, DueLimit
from .projection import estimate_days, in_projection_window, project
from .due import compute_due, compute_due_list
from .monitoring import MonitoringItem, MonitoringStatus, monitoring_status
from .record import AircraftRecord
from .loader import (
    load_aircraft_record,
    save_flight_log,
    save_compliance,
    create_aircraft_file,
)
from .repository import FleetRepository, YamlFleetRepository

__all__ = [
    "DueStatus",
    "DueUnit",
    "worst_status",
    "FleetError",
    "ValidationError",
    "MissingReferenceError",
    "Baseline",
    "UsageSnapshot",
    "Aircraft",
    "Assembly",
    "FlightLogEntry",
    "validate_entry",
    "ReplayState",
    "UsageLedger",
    "replay",
    "Anchor",
    "IntervalSpec",
    "ItemKind",
    "MaintenanceItem",
    "ComplianceRecord",
    "record_compliance",
    "DueBands",
    "calc_due_usage",
    "calc_due_date",
    "check_status",
    "ComputedDue",
    "DueLimit",
    "estimate_days",
    "in_projection_window",
    "project",
    "compute_due",
    "compute_due_list",
    "MonitoringItem",
    "MonitoringStatus",
    "monitoring_status",
    "AircraftRecord",
    "load_aircraft_record",
    "save_flight_log",
    "save_compliance",
    "create_aircraft_file",
    "FleetRepository",
    "YamlFleetRepository",
]

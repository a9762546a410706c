"""YAML loading and saving utilities for aircraft records."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

import yaml

from .aircraft import Aircraft, Assembly
from .calculations import parse_iso_date
from .compliance import ComplianceRecord
from .errors import ValidationError
from .flight_log import FlightLogEntry
from .maintenance_item import Anchor, IntervalSpec, ItemKind, MaintenanceItem
from .monitoring import MonitoringItem
from .record import AircraftRecord
from .snapshot import Baseline, UsageSnapshot
from .status import DueUnit

logger = logging.getLogger(__name__)

ITEM_SECTIONS = {
    "tasks": ItemKind.TASK,
    "checks": ItemKind.CHECK,
    "components": ItemKind.COMPONENT,
}

SNAPSHOT_KEYS = {
    "aircraft_hrs": "aircraftHrs",
    "aircraft_cyc": "aircraftCyc",
    "cofa_hours": "cofaHours",
    "hours_to_check": "hoursToCheck",
    "engine_tsn_hrs": "engineTsnHrs",
    "engine_csn": "engineCsn",
    "engine_tso_hrs": "engineTsoHrs",
    "engine_cso": "engineCso",
    "engine_hrs_to_overhaul": "engineHrsToOverhaul",
    "prop_tsn_hrs": "propTsnHrs",
    "prop_csn": "propCsn",
    "prop_tso_hrs": "propTsoHrs",
    "prop_cso": "propCso",
    "prop_hrs_to_overhaul": "propHrsToOverhaul",
}


def _parse_object(dct: Dict[str, Any]) -> Any:
    """Parse dictionary into appropriate object type."""
    # Aircraft identity (inside 'aircraft' key)
    if "registration" in dct and "type" in dct:
        return Aircraft(
            dct["id"],
            dct["registration"],
            dct["type"],
            dct.get("msn"),
            dct.get("avgDailyHrs"),
            dct.get("avgDailyCyc"),
            dct.get("currentHrs"),
            dct.get("currentCyc"),
            dct.get("currentDate"),
        )
    # Replay baseline
    elif "epochDate" in dct:
        parse_iso_date(dct["epochDate"], "baseline epoch date")
        return Baseline(
            dct["epochDate"],
            dct["aircraftHrs"],
            dct["aircraftCyc"],
            dct.get("cofaHours"),
            dct.get("hoursToCheck"),
            dct.get("engineTsnHrs"),
            dct.get("engineCsn"),
            dct.get("engineTsoHrs"),
            dct.get("engineCso"),
            dct.get("engineHrsToOverhaul"),
            dct.get("propTsnHrs"),
            dct.get("propCsn"),
            dct.get("propTsoHrs"),
            dct.get("propCso"),
            dct.get("propHrsToOverhaul"),
        )
    # Flight log entry; any stored 'state' is ignored, the ledger replays
    elif "blockHrs" in dct:
        return FlightLogEntry(
            dct.get("aircraftId"),
            dct.get("date"),
            dct.get("blockHrs"),
            dct.get("cycles"),
            dct.get("cofaReset"),
            dct.get("hoursToCheck"),
            dct.get("isExtension"),
            dct.get("from"),
            dct.get("to"),
            dct.get("techlogNumber"),
            dct.get("pilot"),
            dct.get("remarks"),
            dct.get("id"),
        )
    # Engine / propeller
    elif "serial" in dct and "model" in dct:
        return Assembly(
            dct["id"],
            dct.get("aircraftId"),
            dct["type"],
            dct["model"],
            dct["serial"],
            dct.get("position", "C"),
            dct.get("tsnHrs"),
            dct.get("csn"),
            dct.get("tsoHrs"),
            dct.get("cso"),
            dct.get("tboHrs"),
        )
    # Compliance record
    elif "itemId" in dct:
        parse_iso_date(dct.get("date"), f"compliance date for {dct['itemId']}")
        return ComplianceRecord(
            dct["itemId"],
            dct.get("aircraftId"),
            dct["date"],
            dct.get("hrsAt"),
            dct.get("cycAt"),
            dct.get("remark"),
            dct.get("id"),
        )
    # Top-level aircraft file
    elif "aircraft" in dct and "baseline" in dct:
        return _build_record(dct)
    else:
        # Maintenance items, monitoring items and 'state' stay as dicts
        return dct


def _parse_item(dct: Dict[str, Any], kind: ItemKind) -> MaintenanceItem:
    """Build a task, check or component from its camelCase dict."""
    title = dct.get("title") or dct.get("name")
    if not dct.get("id") or not title:
        raise ValidationError(f"Maintenance {kind.value} needs an id and a title")
    due_units = None
    if dct.get("dueUnits"):
        try:
            due_units = [DueUnit(u) for u in dct["dueUnits"]]
        except ValueError:
            raise ValidationError(
                f"Unknown due unit in {dct['id']}: {dct['dueUnits']}"
            )
    interval = IntervalSpec(
        dct.get("initialIntervalHrs"),
        dct.get("initialIntervalCyc"),
        dct.get("initialIntervalDays"),
        dct.get("repeatIntervalHrs"),
        dct.get("repeatIntervalCyc"),
        dct.get("repeatIntervalDays"),
        dct.get("intervalHrs", dct.get("limitHrs")),
        dct.get("intervalCyc", dct.get("limitCyc")),
        dct.get("intervalDays", dct.get("limitDays")),
        due_units,
    )
    if kind is ItemKind.COMPONENT:
        anchor = Anchor(
            dct.get("lastDoneDate") or dct.get("installedDate"),
            dct.get("lastDoneHrs", dct.get("installedAtAcHrs")),
            dct.get("lastDoneCyc", dct.get("installedAtAcCyc")),
        )
    else:
        anchor = Anchor(
            dct.get("lastDoneDate"), dct.get("lastDoneHrs"), dct.get("lastDoneCyc")
        )
    if anchor.date is not None:
        parse_iso_date(anchor.date, f"last done date of {dct['id']}")
    return MaintenanceItem(
        dct["id"],
        title,
        kind,
        interval,
        anchor,
        dct.get("reference"),
        dct.get("type") or dct.get("category"),
        dct.get("checkId"),
        dct.get("aircraftType"),
        dct.get("tailSpecificId"),
        dct.get("pn"),
        dct.get("sn"),
    )


def _parse_monitoring(dct: Dict[str, Any]) -> MonitoringItem:
    for key in ("lastDone", "nextDue"):
        if dct.get(key) is not None:
            parse_iso_date(dct[key], f"{key} of {dct.get('id')}")
    return MonitoringItem(
        dct["id"],
        dct["name"],
        dct.get("lastDone"),
        dct.get("intervalYears"),
        dct.get("intervalMonths"),
        dct.get("intervalDays"),
        dct.get("shortOneDay"),
        dct.get("nextDue"),
    )


def _build_record(dct: Dict[str, Any]) -> AircraftRecord:
    aircraft = dct["aircraft"]
    # Per-aircraft files may omit the aircraft id on child records
    children = (
        (dct.get("assemblies") or [])
        + (dct.get("flightLogs") or [])
        + (dct.get("compliance") or [])
    )
    for child in children:
        if isinstance(child, dict):
            raise ValidationError(f"Unrecognized record in aircraft file: {child}")
        if child.aircraft_id is None:
            child.aircraft_id = aircraft.id
    items = []
    for section, kind in ITEM_SECTIONS.items():
        items.extend(_parse_item(d, kind) for d in dct.get(section) or [])
    return AircraftRecord(
        aircraft,
        dct["baseline"],
        dct.get("assemblies"),
        dct.get("flightLogs"),
        items,
        dct.get("compliance"),
        [_parse_monitoring(d) for d in dct.get("monitoring") or []],
    )


def load_aircraft_record(filename: Union[str, Path]) -> AircraftRecord:
    """Load an aircraft record from a YAML file and replay its ledger."""
    with open(filename, "rb") as fp:
        # default=str turns unquoted YAML dates back into ISO strings
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader), indent=4, default=str
        )
        record = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(record, AircraftRecord):
        raise ValidationError(f"{filename} is not an aircraft file")
    logger.debug(
        "Loaded %s: %d flight log entries, %d items",
        record.aircraft.registration,
        len(record.ledger),
        len(record.items),
    )
    return record


def _dump(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _snapshot_to_dict(snapshot: UsageSnapshot) -> Dict[str, Any]:
    """Serialize a snapshot with camelCase keys, omitting unset counters."""
    d: Dict[str, Any] = {}
    for attr, key in SNAPSHOT_KEYS.items():
        value = getattr(snapshot, attr)
        if value is not None:
            d[key] = value
    return d


def _entry_to_dict(entry: FlightLogEntry) -> Dict[str, Any]:
    """Serialize an entry, omitting None values for cleaner YAML."""
    d: Dict[str, Any] = {"id": entry.id} if entry.id else {}
    d["date"] = entry.date
    d["blockHrs"] = entry.block_hrs
    d["cycles"] = entry.cycles
    if entry.cofa_reset:
        d["cofaReset"] = True
    if entry.hours_to_check is not None:
        d["hoursToCheck"] = entry.hours_to_check
    if entry.is_extension:
        d["isExtension"] = True
    optional = {
        "from": entry.origin,
        "to": entry.destination,
        "techlogNumber": entry.techlog_number,
        "pilot": entry.pilot,
        "remarks": entry.remarks,
    }
    d.update({k: v for k, v in optional.items() if v is not None})
    if entry.snapshot is not None:
        d["state"] = _snapshot_to_dict(entry.snapshot)
    return d


def _compliance_to_dict(record: ComplianceRecord) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": record.id,
        "itemId": record.item_id,
        "date": record.date,
    }
    if record.hrs_at is not None:
        d["hrsAt"] = record.hrs_at
    if record.cyc_at is not None:
        d["cycAt"] = record.cyc_at
    if record.remark is not None:
        d["remark"] = record.remark
    return d


def _write_live_state(data: Dict[str, Any], record: AircraftRecord) -> None:
    """Copy the replayed aircraft and assembly counters into the raw YAML."""
    aircraft = record.aircraft
    data["aircraft"].update(
        {
            "currentHrs": aircraft.current_hrs,
            "currentCyc": aircraft.current_cyc,
            "currentDate": aircraft.current_date,
            "cofaHours": aircraft.cofa_hours,
            "hoursToCheck": aircraft.hours_to_check,
        }
    )
    by_id = {a.id: a for a in record.assemblies}
    for raw in data.get("assemblies") or []:
        assembly = by_id.get(raw.get("id"))
        if assembly is not None and assembly.is_tracked:
            raw["tsnHrs"] = assembly.tsn_hrs
            raw["csn"] = assembly.csn


def save_flight_log(
    filename: Union[str, Path], record: AircraftRecord, entry: FlightLogEntry
) -> UsageSnapshot:
    """
    Append a flight log entry to an aircraft YAML file.

    The entry is replayed into the record first (a bad entry raises before
    the file is touched). The whole flight log is then rewritten in date
    order with each entry's state-at-time, so a back-dated entry also
    refreshes the stored state of every later entry.
    """
    if entry.id is None:
        entry.id = f"fl-{record.aircraft.id}-{uuid4().hex[:8]}"
    snapshot = record.log_flight(entry)

    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)

    data["flightLogs"] = [_entry_to_dict(e) for e in record.ledger.entries]
    _write_live_state(data, record)
    _dump(filename, data)
    logger.info("Saved flight log %s to %s", entry.id, filename)
    return snapshot


def save_compliance(
    filename: Union[str, Path], records: List[ComplianceRecord]
) -> None:
    """Append compliance records to an aircraft YAML file."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)

    if data.get("compliance") is None:
        data["compliance"] = []

    for record in records:
        if record.id is None:
            record.id = f"cr-{uuid4().hex[:8]}"
        data["compliance"].append(_compliance_to_dict(record))

    _dump(filename, data)
    logger.info("Saved %d compliance record(s) to %s", len(records), filename)


def create_aircraft_file(
    filename: Union[str, Path],
    aircraft: Aircraft,
    baseline: Baseline,
    avg_daily_hrs: Optional[float] = None,
    avg_daily_cyc: Optional[float] = None,
) -> None:
    """
    Create a new aircraft YAML file with its replay baseline.

    Initializes with empty flight log, items and compliance history.
    """
    aircraft_dict: Dict[str, Any] = {
        "id": aircraft.id,
        "registration": aircraft.registration,
        "type": aircraft.type,
    }
    if aircraft.msn is not None:
        aircraft_dict["msn"] = aircraft.msn
    aircraft_dict["avgDailyHrs"] = avg_daily_hrs or aircraft.avg_daily_hrs
    aircraft_dict["avgDailyCyc"] = avg_daily_cyc or aircraft.avg_daily_cyc

    baseline_dict: Dict[str, Any] = {"epochDate": baseline.epoch_date}
    baseline_dict.update(_snapshot_to_dict(baseline.snapshot()))

    data: Dict[str, Any] = {
        "aircraft": aircraft_dict,
        "baseline": baseline_dict,
        "assemblies": [],
        "flightLogs": [],
        "tasks": [],
        "checks": [],
        "components": [],
        "compliance": [],
    }
    _dump(filename, data)

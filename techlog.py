#!/usr/bin/env python3
"""
Unified CLI for aircraft usage and maintenance tracking.

Commands:
  status       - Show what maintenance is overdue, due, due soon or OK
  projections  - Show items expected to come due within 30/60/90 days
  log          - Append a flight log entry and replay the usage ledger
  ledger       - View the flight log with each entry's state-at-time
  usage        - Show current aircraft, engine and propeller counters
  done         - Record compliance for a task, check or component
  monitoring   - Show calendar items (CofA, W&B, ELT battery, ...)
  items        - List maintenance items and their intervals
"""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fleet import (
    ComputedDue,
    DueBands,
    DueStatus,
    DueUnit,
    FleetError,
    FlightLogEntry,
    MaintenanceItem,
    ValidationError,
    YamlFleetRepository,
)
from fleet.calculations import parse_iso_date
from fleet.monitoring import MonitoringStatus
from fleet.projection import DEFAULT_WINDOWS

logger = logging.getLogger("techlog")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_hours(hours: Optional[float]) -> str:
    """Format flight hours for display."""
    return f"{hours:,.1f}" if hours is not None else "-"


def format_cycles(cycles: Optional[float]) -> str:
    """Format cycles for display."""
    return f"{cycles:,.0f}" if cycles is not None else "-"


def format_limits(due: ComputedDue) -> str:
    """Remaining margin per unit, e.g. 'H:8.0  C:120  D:-2'."""
    parts = []
    for lim in due.limits:
        if lim.unit is DueUnit.HOURS:
            parts.append(f"H:{lim.remaining:.1f}")
        else:
            parts.append(f"{lim.unit.abbrev}:{lim.remaining:.0f}")
    return "  ".join(parts) if parts else "-"


def format_estimated_days(days: Optional[float]) -> str:
    """Format a projected day count (estimates are whole days, rounded down)."""
    if days is None:
        return "-"
    return f"{int(days // 1)}d"


def format_next_due(due: ComputedDue) -> str:
    parts = []
    if due.next_due_hrs is not None:
        parts.append(f"{format_hours(due.next_due_hrs)} h")
    if due.next_due_cyc is not None:
        parts.append(f"{format_cycles(due.next_due_cyc)} c")
    if due.next_due_date is not None:
        parts.append(due.next_due_date)
    return " / ".join(parts) if parts else "-"


def format_interval(hrs, cyc, days) -> str:
    parts = []
    if hrs:
        parts.append(f"{hrs:,.0f}h")
    if cyc:
        parts.append(f"{cyc:,.0f}c")
    if days:
        parts.append(f"{days:,.0f}d")
    return " / ".join(parts) if parts else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_windows(text: str) -> List[int]:
    """Parse '30,60,90' into a list of day windows."""
    return [int(w.strip()) for w in text.split(",") if w.strip()]


def resolve_aircraft_file(value: str) -> Path:
    """
    A path to an aircraft YAML file, or an aircraft id looked up in
    $FLEET_DATA_DIR.
    """
    path = Path(value)
    if path.exists():
        return path
    data_dir = os.environ.get("FLEET_DATA_DIR")
    if data_dir:
        return Path(data_dir) / f"{value}.yaml"
    return path


def bands_from_args(args) -> DueBands:
    return DueBands(hours=args.soon_hours, cycles=args.soon_cycles, days=args.soon_days)


def iso_date(text: str) -> date:
    """argparse type for YYYY-MM-DD options."""
    try:
        return parse_iso_date(text)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e))


def open_repository(path: Path):
    """The repository holding an aircraft file, and the file's aircraft key."""
    return YamlFleetRepository(path.parent, path.suffix), path.stem


def load_record(args):
    repo, key = open_repository(args.aircraft_file)
    return repo.load(key)


# =============================================================================
# Status command
# =============================================================================


def make_due_table(dues: List[ComputedDue]) -> List[List[str]]:
    """Convert computed due list to table rows."""
    rows = []
    for due in dues:
        rows.append(
            [
                truncate(due.title, 40),
                format_limits(due),
                format_next_due(due),
                format_estimated_days(due.estimated_days),
            ]
        )
    return rows


def print_header(record) -> None:
    aircraft = record.aircraft
    print(f"Aircraft: {aircraft.name}")
    print(
        f"Current usage: {format_hours(aircraft.current_hrs)} h / "
        f"{format_cycles(aircraft.current_cyc)} cyc (as of {aircraft.current_date})"
    )


def cmd_status(args):
    """Show what maintenance is overdue, due, due soon or OK."""
    record = load_record(args)
    dues = record.due_list(as_of=args.as_of, bands=bands_from_args(args))

    print_header(record)
    print(f"Tracked items: {len(dues)} of {len(record.items)}")
    print()

    headers = ["Item", "Remaining", "Next Due", "Est. Days"]
    sections = [
        (DueStatus.OVERDUE, "OVERDUE:"),
        (DueStatus.DUE, "DUE:"),
        (DueStatus.DUE_SOON, "DUE SOON:"),
        (DueStatus.OK, "OK:"),
    ]
    for status, title in sections:
        group = [d for d in dues if d.status == status]
        if args.due_only and status == DueStatus.OK:
            continue
        if group:
            print(title)
            print(tabulate(make_due_table(group), headers=headers, tablefmt="simple"))
            print()

    if not dues:
        print("No interval-based items configured.")

    return 0


# =============================================================================
# Projections command
# =============================================================================


def cmd_projections(args):
    """Show items expected to come due within each window."""
    record = load_record(args)
    windows = parse_windows(args.windows)
    projected = record.projections(
        windows, as_of=args.as_of, bands=bands_from_args(args)
    )

    print_header(record)
    print(
        f"Utilization: {format_hours(record.aircraft.avg_daily_hrs)} h/day, "
        f"{record.aircraft.avg_daily_cyc:g} cyc/day"
    )
    print("Estimates assume the average daily utilization continues.")
    print()

    for window in windows:
        hits = projected[window]
        print(f"Projection {window}d: {len(hits)} due within {window} days")
        if hits:
            print(
                tabulate(
                    make_due_table(hits),
                    headers=["Item", "Remaining", "Next Due", "Est. Days"],
                    tablefmt="simple",
                )
            )
        else:
            print("  Nothing due in this window.")
        print()

    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args):
    """Append a flight log entry."""
    repo, key = open_repository(args.aircraft_file)
    record = repo.load(key)

    entry = FlightLogEntry(
        aircraft_id=record.aircraft.id,
        date=args.date or date.today().isoformat(),
        block_hrs=args.block_hrs,
        cycles=args.cycles,
        cofa_reset=args.cofa_reset,
        hours_to_check=args.hours_to_check,
        is_extension=args.extension,
        origin=args.origin,
        destination=args.destination,
        techlog_number=args.techlog,
        pilot=args.pilot,
        remarks=args.remarks,
    )

    print(f"Adding flight log entry to {args.aircraft_file}:")
    print(f"  Date:    {entry.date}")
    print(f"  Block:   {format_hours(entry.block_hrs)} h / {entry.cycles} cyc")
    if entry.route:
        print(f"  Route:   {entry.route}")
    if entry.cofa_reset:
        print("  CofA:    reset")
    if entry.hours_to_check is not None:
        kind = "extension" if entry.is_extension else "check completed"
        print(f"  Check:   {format_hours(entry.hours_to_check)} h ({kind})")
    print()

    if args.dry_run:
        snapshot = record.log_flight(entry)
        print_snapshot(snapshot)
        print("(dry run - no changes made)")
        return 0

    snapshot = repo.log_flight(key, entry)
    print_snapshot(snapshot)
    print("Entry saved.")

    return 0


def print_snapshot(snapshot) -> None:
    print(
        f"  Aircraft: {format_hours(snapshot.aircraft_hrs)} h / "
        f"{format_cycles(snapshot.aircraft_cyc)} cyc"
    )
    print(f"  CofA hours:     {format_hours(snapshot.cofa_hours)}")
    print(f"  Hours to check: {format_hours(snapshot.hours_to_check)}")


# =============================================================================
# Ledger command
# =============================================================================


def make_ledger_table(entries: List[FlightLogEntry]) -> List[List[str]]:
    """Convert flight log entries to table rows with state-at-time."""
    rows = []
    for entry in entries:
        snap = entry.snapshot
        marks = []
        if entry.cofa_reset:
            marks.append("CofA reset")
        if entry.hours_to_check is not None:
            marks.append("ext" if entry.is_extension else "check")
        rows.append(
            [
                entry.date,
                format_hours(entry.block_hrs),
                entry.cycles,
                entry.route or "-",
                format_hours(snap.aircraft_hrs) if snap else "-",
                format_cycles(snap.aircraft_cyc) if snap else "-",
                format_hours(snap.cofa_hours) if snap else "-",
                format_hours(snap.hours_to_check) if snap else "-",
                ", ".join(marks) or "-",
            ]
        )
    return rows


def cmd_ledger(args):
    """View the flight log."""
    record = load_record(args)
    entries = record.ledger.entries
    if args.since:
        entries = [e for e in entries if e.date >= args.since]
    if not args.asc:
        entries = list(reversed(entries))

    print_header(record)
    print(f"Flight log entries: {len(record.ledger)}")
    print()

    if not entries:
        print("No flight log entries found.")
        return 0

    headers = [
        "Date", "Block", "Cyc", "Route", "A/C Hrs", "A/C Cyc", "CofA Hrs",
        "To Check", "Events",
    ]
    print(tabulate(make_ledger_table(entries), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Usage command
# =============================================================================


def cmd_usage(args):
    """Show current counters."""
    record = load_record(args)
    usage = record.usage

    print_header(record)
    print()
    print("Ledger counters:")
    rows = [
        ["CofA hours", format_hours(usage.cofa_hours)],
        ["Hours to check", format_hours(usage.hours_to_check)],
        ["Engine TSN / CSN", f"{format_hours(usage.engine_tsn_hrs)} / {format_cycles(usage.engine_csn)}"],
        ["Engine TSO / CSO", f"{format_hours(usage.engine_tso_hrs)} / {format_cycles(usage.engine_cso)}"],
        ["Engine hrs to overhaul", format_hours(usage.engine_hrs_to_overhaul)],
        ["Prop TSN / CSN", f"{format_hours(usage.prop_tsn_hrs)} / {format_cycles(usage.prop_csn)}"],
        ["Prop TSO / CSO", f"{format_hours(usage.prop_tso_hrs)} / {format_cycles(usage.prop_cso)}"],
        ["Prop hrs to overhaul", format_hours(usage.prop_hrs_to_overhaul)],
    ]
    print(tabulate(rows, tablefmt="simple"))

    if record.assemblies:
        print()
        print("Assemblies (aircraft totals less TSO/CSO offset):")
        rows = [
            [a.type, a.position, a.model, a.serial, format_hours(a.tsn_hrs),
             format_cycles(a.csn), format_hours(a.hours_to_tbo)]
            for a in record.assemblies
        ]
        headers = ["Assembly", "Pos", "Model", "Serial", "TSN", "CSN", "To TBO"]
        print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Done command
# =============================================================================


def cmd_done(args):
    """Record compliance for an item."""
    repo, key = open_repository(args.aircraft_file)
    record = repo.load(key)
    if args.dry_run:
        records = record.mark_done(args.item_id, on=args.date, remark=args.remark)
    else:
        records = repo.mark_done(key, args.item_id, on=args.date, remark=args.remark)

    print(f"Recording compliance in {args.aircraft_file}:")
    for rec in records:
        item = record.get_item(rec.item_id)
        print(
            f"  {item.title}: {rec.date} @ {format_hours(rec.hrs_at)} h / "
            f"{format_cycles(rec.cyc_at)} cyc"
        )
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    print("Compliance saved.")
    return 0


# =============================================================================
# Monitoring command
# =============================================================================


def make_monitoring_table(results: List[MonitoringStatus]) -> List[List[str]]:
    rows = []
    for res in results:
        rows.append(
            [
                res.item.name,
                res.item.last_done or "-",
                res.next_due or "-",
                res.days_until_due if res.days_until_due is not None else "-",
                res.status.name if res.status else "UNKNOWN",
            ]
        )
    return rows


def cmd_monitoring(args):
    """Show calendar items."""
    record = load_record(args)
    results = record.monitoring_report(
        as_of=args.as_of, bands=bands_from_args(args)
    )

    print(f"Aircraft: {record.aircraft.name}")
    print()
    if not results:
        print("No monitoring items configured.")
        return 0
    headers = ["Item", "Last Done", "Next Due", "Days", "Status"]
    print(tabulate(make_monitoring_table(results), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Items command
# =============================================================================


def make_items_table(items: List[MaintenanceItem]) -> List[List[str]]:
    rows = []
    for item in items:
        spec = item.interval
        initial = format_interval(*(spec.effective(u, False) for u in DueUnit))
        repeat = format_interval(*(spec.effective(u, True) for u in DueUnit))
        rows.append(
            [
                item.id,
                truncate(item.title, 40),
                item.kind.value,
                item.check_id or "-",
                initial,
                repeat,
                item.reference or "-",
            ]
        )
    return rows


def cmd_items(args):
    """List maintenance items."""
    record = load_record(args)
    items = sorted(record.items, key=lambda i: (i.kind.value, i.id))

    print(f"Aircraft: {record.aircraft.name}")
    print(f"Items: {len(items)}")
    print()
    headers = ["Id", "Title", "Kind", "Check", "Initial", "Repeat", "Ref"]
    print(tabulate(make_items_table(items), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


def add_due_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--as-of", type=iso_date, help="Evaluate calendar limits on this date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--soon-hours", type=float, default=10, help="Due-soon band in hours (default: 10)"
    )
    parser.add_argument(
        "--soon-cycles", type=float, default=10, help="Due-soon band in cycles (default: 10)"
    )
    parser.add_argument(
        "--soon-days", type=float, default=7, help="Due-soon band in days (default: 7)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Aircraft usage and maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fleet/5H-AAF.yaml status
  %(prog)s fleet/5H-AAF.yaml status --due-only --soon-hours 25
  %(prog)s fleet/5H-AAF.yaml projections --windows 30,60,90
  %(prog)s fleet/5H-AAF.yaml log --date 2025-09-01 --block-hrs 6.4 --cycles 7
  %(prog)s fleet/5H-AAF.yaml log --block-hrs 1.2 --cycles 2 \\
      --hours-to-check 100
  %(prog)s fleet/5H-AAF.yaml done check-C208B-100hr
  FLEET_DATA_DIR=fleet %(prog)s 5H-AAF ledger
""",
    )
    parser.add_argument(
        "aircraft_file",
        type=resolve_aircraft_file,
        help="Path to aircraft YAML file, or aircraft id in $FLEET_DATA_DIR",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser(
        "status", help="Show what maintenance is overdue, due or upcoming"
    )
    add_due_options(status_parser)
    status_parser.add_argument(
        "--due-only", action="store_true", help="Hide items that are OK"
    )

    projections_parser = subparsers.add_parser(
        "projections", help="Show items expected to come due within N days"
    )
    add_due_options(projections_parser)
    projections_parser.add_argument(
        "--windows",
        type=str,
        default=",".join(str(w) for w in DEFAULT_WINDOWS),
        help="Comma-separated day windows (default: 30,60,90)",
    )

    log_parser = subparsers.add_parser("log", help="Append a flight log entry")
    log_parser.add_argument(
        "--date", type=str, help="Flight date in YYYY-MM-DD format (default: today)"
    )
    log_parser.add_argument("--block-hrs", type=float, required=True, help="Block hours")
    log_parser.add_argument("--cycles", type=int, required=True, help="Cycles (landings)")
    log_parser.add_argument(
        "--cofa-reset", action="store_true", help="CofA hour counter restarts here"
    )
    log_parser.add_argument(
        "--hours-to-check",
        type=float,
        help="Hours to next check: new check interval, or hours added with --extension",
    )
    log_parser.add_argument(
        "--extension",
        action="store_true",
        help="Treat --hours-to-check as an extension added to the running value",
    )
    log_parser.add_argument("--from", dest="origin", type=str, help="Departure")
    log_parser.add_argument("--to", dest="destination", type=str, help="Arrival")
    log_parser.add_argument("--techlog", type=str, help="Tech log page number")
    log_parser.add_argument("--pilot", type=str, help="Pilot in command")
    log_parser.add_argument("--remarks", type=str, help="Remarks")
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show the replayed state without saving"
    )

    ledger_parser = subparsers.add_parser("ledger", help="View the flight log")
    ledger_parser.add_argument(
        "--since", type=str, help="Show only entries since date (YYYY-MM-DD)"
    )
    ledger_parser.add_argument(
        "--asc", action="store_true", help="Oldest first instead of newest first"
    )

    subparsers.add_parser("usage", help="Show current usage counters")

    done_parser = subparsers.add_parser("done", help="Record compliance for an item")
    done_parser.add_argument("item_id", type=str, help="Task, check or component id")
    done_parser.add_argument(
        "--date", type=str, help="Compliance date (default: aircraft's last flight date)"
    )
    done_parser.add_argument("--remark", type=str, help="Remark")
    done_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    monitoring_parser = subparsers.add_parser("monitoring", help="Show calendar items")
    add_due_options(monitoring_parser)

    subparsers.add_parser("items", help="List maintenance items")

    return parser


COMMANDS = {
    "status": cmd_status,
    "projections": cmd_projections,
    "log": cmd_log,
    "ledger": cmd_ledger,
    "usage": cmd_usage,
    "done": cmd_done,
    "monitoring": cmd_monitoring,
    "items": cmd_items,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate aircraft file exists
    if not args.aircraft_file.exists():
        print(f"Error: File not found: {args.aircraft_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except FleetError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)

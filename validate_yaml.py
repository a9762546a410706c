#!/usr/bin/env python3
"""
Validate aircraft YAML files.

Two passes per file:
1. Structure against schema.yaml (every violation is reported, not just the first)
2. Cross-references the schema cannot express: duplicate item ids, tasks
   pointing at unknown checks, compliance for unknown items, and a ledger
   that fails to replay
"""
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

import yaml
from jsonschema import Draft7Validator

from fleet import FleetError, load_aircraft_record
from fleet.loader import ITEM_SECTIONS


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def schema_errors(data: Any, schema: dict) -> List[str]:
    errors = []
    validator = Draft7Validator(schema)
    for err in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
        errors.append(f"Schema validation error: {err.message}")
        if err.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in err.path)}")
    return errors


def reference_errors(data: Dict[str, Any]) -> List[str]:
    """Problems between sections of an otherwise well-formed file."""
    errors = []
    item_ids = [
        d.get("id") for section in ITEM_SECTIONS for d in data.get(section) or []
    ]
    for item_id, count in Counter(item_ids).items():
        if count > 1:
            errors.append(f"Duplicate item id: {item_id}")

    check_ids = {d.get("id") for d in data.get("checks") or []}
    for task in data.get("tasks") or []:
        if task.get("checkId") and task["checkId"] not in check_ids:
            errors.append(f"Task {task['id']} refers to unknown check {task['checkId']}")

    known = set(item_ids)
    for rec in data.get("compliance") or []:
        if rec.get("itemId") not in known:
            errors.append(f"Compliance record for unknown item {rec.get('itemId')}")
    return errors


def validate_aircraft_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single aircraft YAML file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    errors = schema_errors(data, schema)
    if errors:
        return errors
    errors = reference_errors(data)
    if errors:
        return errors

    try:
        load_aircraft_record(filepath)
    except FleetError as e:
        errors.append(f"Ledger error: {e}")
    return errors


def main(argv=None):
    """Validate the given aircraft files, or every file in aircraft/."""
    schema = load_schema()
    args = sys.argv[1:] if argv is None else argv

    if args:
        yaml_files = [Path(a) for a in args]
    else:
        aircraft_dir = Path(__file__).parent / "aircraft"
        if not aircraft_dir.exists():
            print(f"Error: aircraft directory not found: {aircraft_dir}")
            return 1
        yaml_files = list(aircraft_dir.glob("*.yaml")) + list(aircraft_dir.glob("*.yml"))

    if not yaml_files:
        print("Warning: No YAML files found")
        return 0

    failed = 0
    for filepath in sorted(yaml_files):
        errors = validate_aircraft_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            failed += 1
        else:
            print(f"OK: {filepath.name}")

    if failed:
        print(f"{failed} of {len(yaml_files)} file(s) failed validation")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

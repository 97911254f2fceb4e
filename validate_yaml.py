#!/usr/bin/env python3
"""
Validate a fleet data directory.

Vehicle files are checked against schema.yaml and then for the rules a
schema cannot express: the file name must match the vehicle id, each
registry-owned kind may appear once, and a stored kind must agree with a
well-known label. notifications.yaml is checked for unique ids and
identity keys that match their fields.
"""
import os
import sys
from collections import Counter
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from fleet import InvalidDataFileError, load_notifications, load_vehicle, make_identity_key


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_vehicle_rules(filepath: Path) -> list[str]:
    """Cross-field rules for a schema-valid vehicle file."""
    try:
        vehicle = load_vehicle(filepath)
    except InvalidDataFileError as e:
        return [f"Load error: {e.reason}"]

    errors = []
    if vehicle.id != filepath.stem:
        errors.append(f"id {vehicle.id!r} does not match file name {filepath.stem!r}")
    for kind in vehicle.duplicate_kinds():
        indices = [str(i) for i, _ in vehicle.reminders_of_kind(kind)]
        errors.append(f"duplicate {kind.value} reminders at index {', '.join(indices)}")
    for i, reminder in enumerate(vehicle.reminders):
        if reminder.has_kind_conflict:
            errors.append(
                f"reminders.{i}: kind {reminder.kind.value!r} conflicts with "
                f"label {reminder.name!r} ({reminder.label_kind.value})"
            )
    return errors


def validate_vehicle_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single vehicle YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    else:
        errors.extend(check_vehicle_rules(filepath))
    return errors


def validate_notifications_file(filepath: Path) -> list[str]:
    """Validate notifications.yaml. Returns list of errors."""
    try:
        notifications = load_notifications(filepath)
    except InvalidDataFileError as e:
        return [e.reason]

    errors = []
    ids = Counter(n.id for n in notifications)
    for notification_id, count in sorted(ids.items(), key=lambda item: str(item[0])):
        if notification_id is None:
            errors.append(f"{count} notification(s) without an id")
        elif count > 1:
            errors.append(f"id {notification_id} used {count} times")

    keys = Counter(n.identity_key for n in notifications)
    for key, count in sorted(keys.items()):
        if count > 1:
            errors.append(f"identity key {key!r} used {count} times")

    for n in notifications:
        expected = make_identity_key(n.vehicle_id, n.reminder_kind, n.due_date)
        if n.identity_key != expected:
            errors.append(f"id {n.id}: identity key {n.identity_key!r} should be {expected!r}")
    return errors


def main():
    """Validate <data dir>/vehicles/*.yaml and <data dir>/notifications.yaml."""
    schema = load_schema()
    data_dir = Path(sys.argv[1] if len(sys.argv) > 1 else os.environ.get("FLEET_DATA_DIR", "data"))
    vehicles_dir = data_dir / "vehicles"

    if not vehicles_dir.exists():
        print(f"Error: vehicles directory not found: {vehicles_dir}")
        return 1

    yaml_files = list(vehicles_dir.glob("*.yaml")) + list(vehicles_dir.glob("*.yml"))

    if not yaml_files:
        print(f"Warning: No YAML files found in {vehicles_dir}")

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_vehicle_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    notifications_path = data_dir / "notifications.yaml"
    if notifications_path.exists():
        errors = validate_notifications_file(notifications_path)
        if errors:
            print(f"FAIL: {notifications_path.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {notifications_path.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())

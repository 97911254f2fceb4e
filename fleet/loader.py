"""YAML loading and saving utilities for vehicle and notification data."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .errors import InvalidDataFileError
from .notification import Notification
from .reminder import Reminder, ReminderKind
from .vehicle import Vehicle


def _parse_object(dct: Dict[str, Any]) -> Union[Reminder, Vehicle, dict]:
    """Parse dictionary into appropriate object type."""
    # Top-level vehicle object
    if "id" in dct:
        if any(not isinstance(r, Reminder) for r in dct.get("reminders") or []):
            raise ValueError("every reminder needs a 'name'")
        return Vehicle(
            str(dct["id"]),
            dct.get("make"),
            dct.get("model"),
            dct.get("year"),
            dct.get("mileage"),
            dct.get("reminders") or [],
        )
    # Reminder entry
    elif "name" in dct:
        kind = dct.get("kind")
        try:
            kind = ReminderKind(kind) if kind else None
        except ValueError:
            raise ValueError(f"unknown reminder kind {kind!r} on {dct['name']!r}") from None
        return Reminder(
            dct["name"],
            dct.get("date"),
            dct.get("enabled", True),
            dct.get("notes"),
            kind,
        )
    else:
        return dct


def _read(filename: Union[str, Path]) -> Any:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader)


def _write(filename: Union[str, Path], data: Any) -> None:
    """Dump to a temp file beside the target, then swap it in."""
    path = Path(filename)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """
    Load a vehicle from a YAML file.

    Raises InvalidDataFileError when the document is not a vehicle mapping.
    """
    try:
        data = _read(filename)
    except yaml.YAMLError as e:
        raise InvalidDataFileError(filename, f"YAML parse error: {e}") from e
    if not isinstance(data, dict) or "id" not in data:
        raise InvalidDataFileError(filename, "expected a mapping with an 'id'")

    # Unquoted YAML dates load as date objects; default=str keeps them ISO
    json_data = json.dumps(data, indent=4, default=str)
    try:
        return json.loads(json_data, object_hook=_parse_object)
    except ValueError as e:
        raise InvalidDataFileError(filename, str(e)) from e


def _reminder_to_dict(reminder: Reminder) -> Dict[str, Any]:
    """Serialize a Reminder to the YAML dict format."""
    d: Dict[str, Any] = {
        "name": reminder.name,
        "date": reminder.date,
        "enabled": reminder.enabled,
    }
    if reminder.notes is not None:
        d["notes"] = reminder.notes
    if reminder.kind != ReminderKind.from_label(reminder.name):
        d["kind"] = reminder.kind.value
    return d


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the YAML dict format, omitting None fields."""
    d: Dict[str, Any] = {"id": vehicle.id}
    for name in ("make", "model", "year", "mileage"):
        value = getattr(vehicle, name)
        if value is not None:
            d[name] = value
    d["reminders"] = [_reminder_to_dict(r) for r in vehicle.reminders]
    return d


def save_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """Write a vehicle to its YAML file, replacing previous contents."""
    _write(filename, _vehicle_to_dict(vehicle))


def create_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """Create a new vehicle YAML file. Refuses to overwrite an existing one."""
    if Path(filename).exists():
        raise FileExistsError(f"Vehicle file already exists: {filename}")
    save_vehicle(filename, vehicle)


def delete_vehicle(filename: Union[str, Path]) -> None:
    """Remove a vehicle YAML file from disk."""
    Path(filename).unlink()


def load_notifications(filename: Union[str, Path]) -> List[Notification]:
    """Load all stored notifications. A missing file means none yet."""
    if not Path(filename).exists():
        return []
    try:
        data = _read(filename)
    except yaml.YAMLError as e:
        raise InvalidDataFileError(filename, f"YAML parse error: {e}") from e
    if data is None:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("notifications") or [], list):
        raise InvalidDataFileError(filename, "expected a mapping with a 'notifications' list")
    try:
        return [Notification.from_dict(d) for d in data.get("notifications") or []]
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidDataFileError(filename, f"bad notification entry: {e}") from e


def save_notifications(filename: Union[str, Path], notifications: List[Notification]) -> None:
    """Write the full notification list to its YAML file."""
    _write(filename, {"notifications": [n.to_dict() for n in notifications]})

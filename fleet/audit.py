"""Field-level change sets between two versions of a vehicle."""

from dataclasses import asdict, dataclass
from typing import Any, List

from .reconcile import DESCRIPTIVE_FIELDS
from .vehicle import Vehicle

REMINDER_FIELDS = ("name", "date", "enabled", "notes")


@dataclass(frozen=True)
class FieldChange:
    """One changed field, in the shape an audit log entry records."""

    field: str
    old_value: Any = None
    new_value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.old_value!r} -> {self.new_value!r}"


def _reminder_summary(reminder) -> dict:
    return {k: v for k, v in asdict(reminder).items() if k in REMINDER_FIELDS}


def diff_vehicles(before: Vehicle, after: Vehicle) -> List[FieldChange]:
    """
    Compare two vehicles field by field.

    Reminders are compared by position: changed attributes are reported as
    'reminders[i].<attr>', and extra entries as added or removed.
    """
    changes = []
    for name in DESCRIPTIVE_FIELDS:
        old, new = getattr(before, name), getattr(after, name)
        if old != new:
            changes.append(FieldChange(name, old, new))

    for i in range(max(len(before.reminders), len(after.reminders))):
        if i >= len(before.reminders):
            changes.append(
                FieldChange(f"reminders[{i}]", None, _reminder_summary(after.reminders[i]))
            )
            continue
        if i >= len(after.reminders):
            changes.append(
                FieldChange(f"reminders[{i}]", _reminder_summary(before.reminders[i]), None)
            )
            continue
        old_r, new_r = before.reminders[i], after.reminders[i]
        for attr in REMINDER_FIELDS:
            if getattr(old_r, attr) != getattr(new_r, attr):
                changes.append(
                    FieldChange(f"reminders[{i}].{attr}", getattr(old_r, attr), getattr(new_r, attr))
                )
    return changes

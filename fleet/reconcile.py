"""Merge registry snapshots into a vehicle's reminder list."""

import logging
from dataclasses import replace
from typing import Dict, Optional

from .calculations import to_canonical_date
from .reminder import ReminderKind
from .snapshot import RegistrySnapshot
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

DESCRIPTIVE_FIELDS = ("make", "model", "year", "mileage")


def snapshot_dates(snapshot: RegistrySnapshot) -> Dict[ReminderKind, Optional[str]]:
    """Canonical due date per registry-owned kind (None = no information)."""
    return {
        ReminderKind.ROADWORTHINESS: to_canonical_date(snapshot.road_worthiness_date),
        ReminderKind.INSURANCE: to_canonical_date(snapshot.insurance_policy_date),
    }


def reconcile(vehicle: Vehicle, snapshot: RegistrySnapshot) -> Vehicle:
    """
    Return vehicle updated with snapshot data.

    Logic:
    - For each registry-owned kind with a date: update the first reminder
      of that kind (date + enabled only) or append a new one
    - Kinds without a date are left untouched
    - Descriptive fields take the snapshot value when it is not None
    - Legacy duplicate reminders of a kind are reported, never merged

    Applying the same snapshot twice gives the same vehicle as applying it once.
    """
    for kind in vehicle.duplicate_kinds():
        logger.warning(
            "Vehicle %s has %d %s reminders; updating the first only",
            vehicle.id,
            len(vehicle.reminders_of_kind(kind)),
            kind.value,
        )

    updated = vehicle
    for kind, due_date in snapshot_dates(snapshot).items():
        if due_date is None:
            continue
        updated = updated.upsert_reminder(kind, due_date)

    changes = {
        name: getattr(snapshot, name)
        for name in DESCRIPTIVE_FIELDS
        if getattr(snapshot, name) is not None
        and getattr(snapshot, name) != getattr(updated, name)
    }
    if changes:
        updated = replace(updated, **changes)

    logger.debug("Reconciled vehicle %s with registry snapshot", vehicle.id)
    return updated

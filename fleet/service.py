"""Thin orchestration between the pure engine, the store and the registry."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import List, Optional

from .audit import FieldChange, diff_vehicles
from .derive import ReminderSummary, derive, summarize
from .calculations import parse_date
from .errors import InvalidDateError, SnapshotUnavailableError
from .feed import find_stale, rank_feed, reconcile_feed
from .notification import Notification, NotificationCandidate
from .reminder import Reminder
from .reconcile import reconcile
from .registry import Registry
from .snapshot import RegistrySnapshot
from .store import FleetStore
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of a registry sync or user edit on one vehicle."""

    before: Vehicle
    after: Vehicle
    changes: List[FieldChange] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


@dataclass
class GenerationResult:
    candidates: List[NotificationCandidate] = field(default_factory=list)
    inserted: List[Notification] = field(default_factory=list)


class FleetService:
    """Entry point used by the CLI and the web app."""

    def __init__(self, store: FleetStore, registry: Optional[Registry] = None):
        self.store = store
        self.registry = registry

    def sync_vehicle(
        self,
        vehicle_id: str,
        snapshot: Optional[RegistrySnapshot] = None,
        dry_run: bool = False,
    ) -> SyncResult:
        """
        Reconcile one vehicle with registry data and persist the result.

        Without an explicit snapshot the configured registry is asked for
        one. The read-reconcile-write runs under the vehicle's lock.
        """
        if snapshot is None:
            snapshot = self.registry.fetch_snapshot(vehicle_id) if self.registry else None
            if snapshot is None:
                raise SnapshotUnavailableError(vehicle_id)

        with self.store.vehicle_lock(vehicle_id):
            before = self.store.get_vehicle(vehicle_id)
            after = reconcile(before, snapshot)
            changes = diff_vehicles(before, after)
            if changes and not dry_run:
                self.store.save_vehicle(after)

        for change in changes:
            logger.info("Vehicle %s changed %s", vehicle_id, change)
        if not changes:
            logger.info("Vehicle %s already up to date with registry", vehicle_id)
        return SyncResult(before=before, after=after, changes=changes)

    def generate_notifications(
        self,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
        dry_run: bool = False,
    ) -> GenerationResult:
        """Derive candidates over all vehicles and store the new ones."""
        candidates = derive(self.store.list_vehicles(), today)
        update = reconcile_feed(candidates, self.store.all_notifications(), now)
        inserted = update.to_insert
        if not dry_run:
            inserted = self.store.insert_notifications(update.to_insert)
        logger.info(
            "Generated %d notification(s) from %d candidate(s)",
            len(inserted),
            len(candidates),
        )
        return GenerationResult(candidates=candidates, inserted=inserted)

    def feed(self, unread_only: bool = False) -> List[Notification]:
        return rank_feed(self.store.visible_notifications(unread_only=unread_only))

    def summary(self, today: Optional[date] = None) -> ReminderSummary:
        return summarize(self.store.list_vehicles(), today)

    def stale_notifications(self, today: Optional[date] = None) -> List[Notification]:
        """Visible notifications no current reminder backs any more."""
        candidates = derive(self.store.list_vehicles(), today)
        return find_stale(self.store.all_notifications(), candidates)

    # -- user edits ----------------------------------------------------------

    def create_vehicle(self, vehicle: Vehicle) -> Vehicle:
        with self.store.vehicle_lock(vehicle.id):
            self.store.create_vehicle(vehicle)
        logger.info("Created vehicle %s", vehicle.id)
        return vehicle

    def delete_vehicle(self, vehicle_id: str) -> None:
        with self.store.vehicle_lock(vehicle_id):
            self.store.delete_vehicle(vehicle_id)
        logger.info("Deleted vehicle %s", vehicle_id)

    def add_reminder(self, vehicle_id: str, reminder: Reminder) -> Vehicle:
        reminder = replace(reminder, date=_canonical(reminder.date))
        with self.store.vehicle_lock(vehicle_id):
            vehicle = self.store.get_vehicle(vehicle_id).add_reminder(reminder)
            self.store.save_vehicle(vehicle)
        logger.info("Vehicle %s: added reminder %r", vehicle_id, reminder.name)
        return vehicle

    def edit_reminder(
        self,
        vehicle_id: str,
        index: int,
        due_date: Optional[str] = None,
        enabled: Optional[bool] = None,
        notes: Optional[str] = None,
    ) -> SyncResult:
        """
        Change the date, enabled flag or notes of the reminder at index.

        Arguments left as None keep their current value; notes="" clears
        the notes. Raises IndexError for an index outside the list.
        """
        with self.store.vehicle_lock(vehicle_id):
            before = self.store.get_vehicle(vehicle_id)
            current = before.reminder_at(index)
            changes = {}
            if due_date is not None:
                changes["date"] = _canonical(due_date)
            if enabled is not None:
                changes["enabled"] = enabled
            if notes is not None:
                changes["notes"] = notes or None
            after = before.update_reminder(index, replace(current, **changes))
            diff = diff_vehicles(before, after)
            if diff:
                self.store.save_vehicle(after)

        for change in diff:
            logger.info("Vehicle %s changed %s", vehicle_id, change)
        return SyncResult(before=before, after=after, changes=diff)

    def remove_reminder(self, vehicle_id: str, index: int) -> Reminder:
        """Delete the reminder at index and return it."""
        with self.store.vehicle_lock(vehicle_id):
            vehicle = self.store.get_vehicle(vehicle_id)
            updated = vehicle.remove_reminder(index)
            self.store.save_vehicle(updated)
        removed = vehicle.reminders[index]
        logger.info("Vehicle %s: removed reminder %r", vehicle_id, removed.name)
        return removed


def _canonical(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise InvalidDateError(value)
    return parsed.isoformat()

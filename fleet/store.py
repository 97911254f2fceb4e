"""File-backed persistence for vehicles and notifications."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterator, List, Union

from . import loader
from .errors import (
    InvalidDataFileError,
    NotificationNotFoundError,
    VehicleExistsError,
    VehicleNotFoundError,
)
from .feed import dismiss, mark_read
from .notification import Notification
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


class FleetStore:
    """
    Vehicles as one YAML file each under <data_dir>/vehicles, notifications
    in <data_dir>/notifications.yaml.

    Writes for one vehicle are serialized through vehicle_lock(); notification
    inserts are insert-or-ignore by identity key. Files are replaced
    atomically, so readers never see a half-written document.

    The locks are per process. Running the CLI and the web app against the
    same data_dir at once can lose one side's notification flag update.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self.vehicles_dir = self.data_dir / "vehicles"
        self.notifications_path = self.data_dir / "notifications.yaml"
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._notifications_lock = threading.Lock()

    # -- vehicles ----------------------------------------------------------

    def vehicle_path(self, vehicle_id: str) -> Path:
        return self.vehicles_dir / f"{vehicle_id}.yaml"

    def vehicle_ids(self) -> List[str]:
        if not self.vehicles_dir.exists():
            return []
        return sorted(p.stem for p in self.vehicles_dir.glob("*.yaml"))

    def list_vehicles(self) -> List[Vehicle]:
        """Every readable vehicle. Broken files are logged and skipped."""
        vehicles = []
        for vehicle_id in self.vehicle_ids():
            try:
                vehicles.append(loader.load_vehicle(self.vehicle_path(vehicle_id)))
            except InvalidDataFileError as e:
                logger.error("Skipping vehicle %s: %s", vehicle_id, e)
        return vehicles

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        path = self.vehicle_path(vehicle_id)
        if not path.exists():
            raise VehicleNotFoundError(vehicle_id)
        return loader.load_vehicle(path)

    def save_vehicle(self, vehicle: Vehicle) -> None:
        self.vehicles_dir.mkdir(parents=True, exist_ok=True)
        loader.save_vehicle(self.vehicle_path(vehicle.id), vehicle)

    def create_vehicle(self, vehicle: Vehicle) -> None:
        """Store a new vehicle; refuses to replace an existing one."""
        self.vehicles_dir.mkdir(parents=True, exist_ok=True)
        try:
            loader.create_vehicle(self.vehicle_path(vehicle.id), vehicle)
        except FileExistsError:
            raise VehicleExistsError(vehicle.id) from None

    def delete_vehicle(self, vehicle_id: str) -> None:
        path = self.vehicle_path(vehicle_id)
        if not path.exists():
            raise VehicleNotFoundError(vehicle_id)
        loader.delete_vehicle(path)

    @contextmanager
    def vehicle_lock(self, vehicle_id: str) -> Iterator[None]:
        """Hold for a whole read-modify-write of one vehicle."""
        with self._locks_guard:
            lock = self._locks.setdefault(vehicle_id, threading.Lock())
        with lock:
            yield

    # -- notifications -----------------------------------------------------

    def all_notifications(self) -> List[Notification]:
        """Every stored notification, dismissed ones included."""
        return loader.load_notifications(self.notifications_path)

    def visible_notifications(self, unread_only: bool = False) -> List[Notification]:
        return [
            n
            for n in self.all_notifications()
            if not n.is_dismissed and not (unread_only and n.is_read)
        ]

    def insert_notifications(self, notifications: List[Notification]) -> List[Notification]:
        """
        Store new notifications, ignoring any whose identity key already exists.

        Returns the rows actually inserted, with ids assigned.
        """
        with self._notifications_lock:
            stored = self.all_notifications()
            keys = {n.identity_key for n in stored}
            next_id = max((n.id or 0 for n in stored), default=0) + 1
            inserted = []
            for notification in notifications:
                if notification.identity_key in keys:
                    logger.debug("Ignoring duplicate notification %s", notification.identity_key)
                    continue
                row = replace(notification, id=next_id)
                next_id += 1
                keys.add(row.identity_key)
                inserted.append(row)
            if inserted:
                self._write_notifications(stored + inserted)
            return inserted

    def mark_read(self, notification_id: int) -> Notification:
        return self._update(notification_id, mark_read)

    def dismiss(self, notification_id: int) -> Notification:
        return self._update(notification_id, dismiss)

    def mark_all_read(self) -> int:
        """Mark every visible unread notification read; returns how many changed."""
        with self._notifications_lock:
            stored = self.all_notifications()
            changed = 0
            updated = []
            for n in stored:
                if n.is_visible and not n.is_read:
                    n = mark_read(n)
                    changed += 1
                updated.append(n)
            if changed:
                self._write_notifications(updated)
            return changed

    def _update(self, notification_id: int, change) -> Notification:
        with self._notifications_lock:
            stored = self.all_notifications()
            for i, n in enumerate(stored):
                if n.id == notification_id:
                    stored[i] = change(n)
                    self._write_notifications(stored)
                    return stored[i]
        raise NotificationNotFoundError(notification_id)

    def _write_notifications(self, notifications: List[Notification]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        loader.save_notifications(self.notifications_path, notifications)

"""
Vehicle reminder tracking and notification engine.

This package provides the pieces of the fleet reminder lifecycle:
- Status / Priority: urgency bands and notification priority
- Reminder / ReminderKind: due-date obligations and their well-known kinds
- Vehicle: a vehicle and its ordered reminder list
- RegistrySnapshot / reconcile: merging external registry data
- derive / summarize: notification candidates and dashboard counts
- reconcile_feed: deduplicating candidates against stored notifications
- FleetStore / FleetService: YAML persistence and orchestration
"""

from .status import Status, Priority
from .reminder import Reminder, ReminderKind
from .vehicle import Vehicle
from .snapshot import RegistrySnapshot
from .calculations import DueDateStatus, classify, parse_date, priority_for, to_canonical_date
from .reconcile import reconcile
from .notification import Notification, NotificationCandidate, make_identity_key
from .derive import ReminderSummary, derive, summarize
from .feed import FeedUpdate, reconcile_feed, find_stale, mark_read, dismiss, rank_feed
from .audit import FieldChange, diff_vehicles
from .errors import (
    FleetError,
    InvalidDataFileError,
    InvalidDateError,
    NotificationNotFoundError,
    SnapshotUnavailableError,
    VehicleExistsError,
    VehicleNotFoundError,
)
from .loader import (
    load_vehicle,
    save_vehicle,
    create_vehicle,
    delete_vehicle,
    load_notifications,
    save_notifications,
)
from .registry import FileRegistry, Registry, load_snapshot
from .store import FleetStore
from .service import FleetService, GenerationResult, SyncResult

__all__ = [
    "Status",
    "Priority",
    "Reminder",
    "ReminderKind",
    "Vehicle",
    "RegistrySnapshot",
    "DueDateStatus",
    "classify",
    "parse_date",
    "priority_for",
    "to_canonical_date",
    "reconcile",
    "Notification",
    "NotificationCandidate",
    "make_identity_key",
    "ReminderSummary",
    "derive",
    "summarize",
    "FeedUpdate",
    "reconcile_feed",
    "find_stale",
    "mark_read",
    "dismiss",
    "rank_feed",
    "FieldChange",
    "diff_vehicles",
    "FleetError",
    "InvalidDataFileError",
    "InvalidDateError",
    "NotificationNotFoundError",
    "SnapshotUnavailableError",
    "VehicleExistsError",
    "VehicleNotFoundError",
    "load_vehicle",
    "save_vehicle",
    "create_vehicle",
    "delete_vehicle",
    "load_notifications",
    "save_notifications",
    "FileRegistry",
    "Registry",
    "load_snapshot",
    "FleetStore",
    "FleetService",
    "GenerationResult",
    "SyncResult",
]

#!/usr/bin/env python3
"""
Unified CLI for fleet reminder tracking.

Commands:
  status           - Show reminder urgency for every vehicle
  summary          - Dashboard counts (expired, expiring soon, ...)
  sync             - Merge registry data into a vehicle's reminders
  add-reminder     - Add a reminder to a vehicle
  edit-reminder    - Change a reminder's date, enabled flag or notes
  remove-reminder  - Remove a reminder by index
  add-vehicle      - Register a new vehicle
  remove-vehicle   - Delete a vehicle
  notify           - Generate, list, read and dismiss notifications
"""

import argparse
import os
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fleet import (
    FileRegistry,
    FleetError,
    FleetService,
    FleetStore,
    Notification,
    Reminder,
    Vehicle,
    classify,
    load_snapshot,
    parse_date,
)
from fleet.logging_config import configure_logging

# =============================================================================
# Formatting helpers
# =============================================================================


def format_days(days: Optional[int]) -> str:
    """Format days until due for display (e.g., 'in 5d', 'today', '3d ago')."""
    if days is None:
        return "-"
    if days == 0:
        return "today"
    if days < 0:
        return f"{abs(days)}d ago"
    return f"in {days}d"


def truncate(text: Optional[str], max_len: int = 40) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_today(value: Optional[str]) -> Optional[date]:
    """Parse a --today override; None means use the real date."""
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")
    return parsed


# =============================================================================
# Status command
# =============================================================================


def make_status_table(vehicle: Vehicle, today: Optional[date] = None) -> List[List[str]]:
    """Convert a vehicle's reminders to table rows, most urgent first."""
    rows = []
    for index, reminder in enumerate(vehicle.reminders):
        result = classify(reminder.date, today)
        rows.append(
            (
                result.status.value if reminder.enabled else 99,
                [
                    str(index),
                    reminder.name,
                    reminder.date or "-",
                    format_days(result.days_until_due),
                    result.status.key if reminder.enabled else "disabled",
                    truncate(reminder.notes),
                ],
            )
        )
    rows.sort(key=lambda r: r[0])
    return [row for _, row in rows]


def cmd_status(args, service: FleetService):
    """Show reminder urgency per vehicle."""
    today = parse_today(args.today)
    if args.vehicle:
        vehicles = [service.store.get_vehicle(args.vehicle)]
    else:
        vehicles = service.store.list_vehicles()

    if not vehicles:
        print("No vehicles found.")
        return 0

    headers = ["#", "Reminder", "Due", "When", "Status", "Notes"]
    for vehicle in vehicles:
        print(f"Vehicle: {vehicle.id} ({vehicle.name})")
        if vehicle.mileage is not None:
            print(f"Mileage: {vehicle.mileage:,}")
        if vehicle.reminders:
            print(tabulate(make_status_table(vehicle, today), headers=headers, tablefmt="simple"))
        else:
            print("  No reminders.")
        print()
    return 0


def cmd_summary(args, service: FleetService):
    """Show dashboard counts over all enabled reminders."""
    summary = service.summary(parse_today(args.today))
    rows = [
        ["Expired", summary.expired],
        ["Expiring soon", summary.expiring_soon],
        ["  within 7 days", summary.due_within_week],
        ["Valid", summary.valid],
        ["Unknown date", summary.unknown],
        ["Total", summary.total],
    ]
    print(tabulate(rows, headers=["Reminders", "Count"], tablefmt="simple"))
    return 0


# =============================================================================
# Sync command
# =============================================================================


def cmd_sync(args, service: FleetService):
    """Merge registry data into a vehicle."""
    snapshot = load_snapshot(args.snapshot) if args.snapshot else None
    result = service.sync_vehicle(args.vehicle_id, snapshot=snapshot, dry_run=args.dry_run)

    print(f"Vehicle: {result.after.id} ({result.after.name})")
    if not result.changed:
        print("Already up to date.")
        return 0

    print("Changes:")
    for change in result.changes:
        print(f"  {change}")
    print()
    if args.dry_run:
        print("(dry run - no changes made)")
    else:
        print("Vehicle saved.")
    return 0


# =============================================================================
# Reminder commands
# =============================================================================


def cmd_add_reminder(args, service: FleetService):
    """Add a reminder to a vehicle."""
    reminder = Reminder(
        name=args.name, date=args.date, enabled=not args.disabled, notes=args.notes
    )
    vehicle = service.add_reminder(args.vehicle_id, reminder)
    added = vehicle.reminders[-1]
    print(f"Added reminder '{added.name}' due {added.date} to {args.vehicle_id}.")
    return 0


def cmd_edit_reminder(args, service: FleetService):
    """Change the date, enabled flag or notes of a reminder by index."""
    try:
        result = service.edit_reminder(
            args.vehicle_id,
            args.index,
            due_date=args.date,
            enabled=args.enabled,
            notes=args.notes,
        )
    except IndexError as e:
        print(f"Error: {e}")
        return 1

    reminder = result.after.reminders[args.index]
    if not result.changed:
        print(f"Reminder '{reminder.name}' unchanged.")
        return 0
    print(f"Updated reminder '{reminder.name}' on {args.vehicle_id}:")
    for change in result.changes:
        print(f"  {change}")
    return 0


def cmd_remove_reminder(args, service: FleetService):
    """Remove a reminder by its index in the status table."""
    try:
        removed = service.remove_reminder(args.vehicle_id, args.index)
    except IndexError as e:
        print(f"Error: {e}")
        return 1
    print(f"Removed reminder '{removed.name}' from {args.vehicle_id}.")
    return 0


# =============================================================================
# Vehicle commands
# =============================================================================


def cmd_add_vehicle(args, service: FleetService):
    """Register a new vehicle with no reminders."""
    vehicle = Vehicle(
        args.vehicle_id, make=args.make, model=args.model, year=args.year, mileage=args.mileage
    )
    service.create_vehicle(vehicle)
    print(f"Added vehicle {vehicle.id} ({vehicle.name}).")
    return 0


def cmd_remove_vehicle(args, service: FleetService):
    """Delete a vehicle file."""
    service.delete_vehicle(args.vehicle_id)
    print(f"Removed vehicle {args.vehicle_id}.")
    return 0


# =============================================================================
# Notify commands
# =============================================================================


def make_notification_table(notifications: List[Notification]) -> List[List[str]]:
    """Convert notifications to table rows."""
    return [
        [
            str(n.id),
            n.priority.key,
            n.vehicle_id,
            truncate(n.title),
            n.due_date,
            "dismissed" if n.is_dismissed else ("read" if n.is_read else "new"),
        ]
        for n in notifications
    ]


def cmd_notify(args, service: FleetService):
    """Dispatch notify subcommands."""
    if args.notify_command == "generate":
        result = service.generate_notifications(
            today=parse_today(args.today), dry_run=args.dry_run
        )
        print(f"Candidates: {len(result.candidates)}")
        print(f"New notifications: {len(result.inserted)}")
        if result.inserted:
            print()
            print(
                tabulate(
                    make_notification_table(result.inserted),
                    headers=["ID", "Priority", "Vehicle", "Title", "Due", "State"],
                    tablefmt="simple",
                )
            )
        if args.dry_run:
            print("(dry run - no changes made)")
        return 0

    if args.notify_command == "list":
        if args.all:
            notifications = service.store.all_notifications()
        else:
            notifications = service.feed(unread_only=args.unread)
        if not notifications:
            print("No notifications.")
            return 0
        print(
            tabulate(
                make_notification_table(notifications),
                headers=["ID", "Priority", "Vehicle", "Title", "Due", "State"],
                tablefmt="simple",
            )
        )
        return 0

    if args.notify_command == "stale":
        stale = service.stale_notifications(today=parse_today(args.today))
        if not stale:
            print("No stale notifications.")
            return 0
        print("Notifications no longer backed by a due reminder:")
        print(
            tabulate(
                make_notification_table(stale),
                headers=["ID", "Priority", "Vehicle", "Title", "Due", "State"],
                tablefmt="simple",
            )
        )
        return 0

    if args.notify_command == "read":
        notification = service.store.mark_read(args.id)
        print(f"Marked read: {notification.title}")
    elif args.notify_command == "dismiss":
        notification = service.store.dismiss(args.id)
        print(f"Dismissed: {notification.title}")
    elif args.notify_command == "read-all":
        count = service.store.mark_all_read()
        print(f"Marked {count} notification(s) read.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet reminder tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s status
  %(prog)s status --vehicle ABC-123 --today 2025-06-01
  %(prog)s summary
  %(prog)s sync ABC-123 --snapshot registry/ABC-123.yaml --dry-run
  %(prog)s add-reminder ABC-123 "Service Due" 2025-09-01
  %(prog)s edit-reminder ABC-123 2 --disable
  %(prog)s notify generate
  %(prog)s notify list --unread
  %(prog)s notify dismiss 3
""",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(os.environ.get("FLEET_DATA_DIR", "data")),
        help="Directory holding vehicles/ and notifications.yaml (default: $FLEET_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--registry-dir",
        type=Path,
        default=os.environ.get("FLEET_REGISTRY_DIR"),
        help="Directory of registry payload files (default: <data-dir>/registry)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: $FLEET_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    status_parser = subparsers.add_parser("status", help="Show reminder urgency")
    status_parser.add_argument("--vehicle", type=str, help="Only show this vehicle")
    status_parser.add_argument("--today", type=str, help="Evaluate as of date (YYYY-MM-DD)")

    summary_parser = subparsers.add_parser("summary", help="Dashboard counts")
    summary_parser.add_argument("--today", type=str, help="Evaluate as of date (YYYY-MM-DD)")

    sync_parser = subparsers.add_parser("sync", help="Merge registry data into a vehicle")
    sync_parser.add_argument("vehicle_id", type=str, help="Vehicle plate / ID")
    sync_parser.add_argument(
        "--snapshot",
        type=Path,
        help="Registry payload file (YAML or JSON); default: look up in registry dir",
    )
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without saving",
    )

    add_parser = subparsers.add_parser("add-reminder", help="Add a reminder to a vehicle")
    add_parser.add_argument("vehicle_id", type=str, help="Vehicle plate / ID")
    add_parser.add_argument("name", type=str, help="Reminder name (e.g., 'Service Due')")
    add_parser.add_argument("date", type=str, help="Due date in YYYY-MM-DD format")
    add_parser.add_argument("--notes", type=str, help="Free-text notes")
    add_parser.add_argument("--disabled", action="store_true", help="Create disabled")

    edit_parser = subparsers.add_parser("edit-reminder", help="Change a reminder by index")
    edit_parser.add_argument("vehicle_id", type=str, help="Vehicle plate / ID")
    edit_parser.add_argument("index", type=int, help="Index shown in the status table")
    edit_parser.add_argument("--date", type=str, help="New due date in YYYY-MM-DD format")
    edit_parser.add_argument("--notes", type=str, help="New notes (empty string clears)")
    enabled_group = edit_parser.add_mutually_exclusive_group()
    enabled_group.add_argument(
        "--enable", dest="enabled", action="store_const", const=True, help="Enable the reminder"
    )
    enabled_group.add_argument(
        "--disable", dest="enabled", action="store_const", const=False, help="Disable the reminder"
    )

    remove_parser = subparsers.add_parser("remove-reminder", help="Remove a reminder by index")
    remove_parser.add_argument("vehicle_id", type=str, help="Vehicle plate / ID")
    remove_parser.add_argument("index", type=int, help="Index shown in the status table")

    vehicle_parser = subparsers.add_parser("add-vehicle", help="Register a new vehicle")
    vehicle_parser.add_argument("vehicle_id", type=str, help="Vehicle plate / ID")
    vehicle_parser.add_argument("--make", type=str, help="Manufacturer")
    vehicle_parser.add_argument("--model", type=str, help="Model name")
    vehicle_parser.add_argument("--year", type=int, help="Model year")
    vehicle_parser.add_argument("--mileage", type=int, help="Current odometer reading")

    remove_vehicle_parser = subparsers.add_parser("remove-vehicle", help="Delete a vehicle")
    remove_vehicle_parser.add_argument("vehicle_id", type=str, help="Vehicle plate / ID")

    notify_parser = subparsers.add_parser("notify", help="Notification feed")
    notify_sub = notify_parser.add_subparsers(dest="notify_command", required=True)
    generate_parser = notify_sub.add_parser("generate", help="Generate notifications from reminders")
    generate_parser.add_argument("--today", type=str, help="Evaluate as of date (YYYY-MM-DD)")
    generate_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be created without saving"
    )
    list_parser = notify_sub.add_parser("list", help="List notifications")
    list_parser.add_argument("--unread", action="store_true", help="Only unread notifications")
    list_parser.add_argument("--all", action="store_true", help="Include dismissed notifications")
    stale_parser = notify_sub.add_parser(
        "stale", help="List notifications with no due reminder behind them"
    )
    stale_parser.add_argument("--today", type=str, help="Evaluate as of date (YYYY-MM-DD)")
    read_parser = notify_sub.add_parser("read", help="Mark a notification read")
    read_parser.add_argument("id", type=int, help="Notification ID")
    dismiss_parser = notify_sub.add_parser("dismiss", help="Dismiss a notification")
    dismiss_parser.add_argument("id", type=int, help="Notification ID")
    notify_sub.add_parser("read-all", help="Mark all notifications read")

    return parser


COMMANDS = {
    "status": cmd_status,
    "summary": cmd_summary,
    "sync": cmd_sync,
    "add-reminder": cmd_add_reminder,
    "edit-reminder": cmd_edit_reminder,
    "remove-reminder": cmd_remove_reminder,
    "add-vehicle": cmd_add_vehicle,
    "remove-vehicle": cmd_remove_vehicle,
    "notify": cmd_notify,
}


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    registry_dir = args.registry_dir or args.data_dir / "registry"
    service = FleetService(FleetStore(args.data_dir), FileRegistry(registry_dir))

    try:
        return COMMANDS[args.command](args, service)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}")
        return 1
    except FleetError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)

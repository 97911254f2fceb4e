"""Derive notification candidates and dashboard counts from vehicle reminders."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .calculations import HIGH_PRIORITY_DAYS, classify, parse_date, priority_for
from .notification import NotificationCandidate
from .reminder import Reminder
from .status import Status
from .vehicle import Vehicle


@dataclass
class ReminderSummary:
    """Dashboard counts over all enabled reminders."""

    expired: int = 0
    expiring_soon: int = 0
    due_within_week: int = 0  # subset of expiring_soon
    valid: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        return self.expired + self.expiring_soon + self.valid + self.unknown

    @property
    def urgent(self) -> int:
        """Reminders that rank as high priority notifications."""
        return self.expired + self.due_within_week


def _describe(vehicle: Vehicle) -> str:
    return " ".join(p for p in (vehicle.make, vehicle.model) if p) or vehicle.id


def make_title(reminder: Reminder, vehicle: Vehicle, days: int) -> str:
    """Short headline for a due reminder."""
    if days < 0:
        return f"{reminder.name} overdue for {_describe(vehicle)}"
    if days == 0:
        return f"{reminder.name} due today"
    if days <= HIGH_PRIORITY_DAYS:
        return f"{reminder.name} due in {days} day{'' if days == 1 else 's'}"
    return f"{reminder.name} due soon"


def make_message(reminder: Reminder, vehicle: Vehicle) -> str:
    due_date = parse_date(reminder.date).isoformat()
    return f"{reminder.name} for {_describe(vehicle)} ({vehicle.id}) is due on {due_date}."


def derive(
    vehicles: Iterable[Vehicle], today: Optional[date] = None
) -> List[NotificationCandidate]:
    """
    Build notification candidates for every due, enabled reminder.

    Only EXPIRED and EXPIRING_SOON reminders produce candidates. Output is
    ranked by priority, then days until due, then vehicle and kind. No
    deduplication against stored notifications happens here.
    """
    today = today or date.today()
    candidates = []
    for vehicle in vehicles:
        for reminder in vehicle.enabled_reminders:
            result = classify(reminder.date, today)
            priority = priority_for(result)
            if priority is None:
                continue
            due_date = parse_date(reminder.date).isoformat()
            candidates.append(
                NotificationCandidate(
                    vehicle_id=vehicle.id,
                    reminder_kind=reminder.kind_key,
                    reminder_name=reminder.name,
                    due_date=due_date,
                    days_until_due=result.days_until_due,
                    priority=priority,
                    title=make_title(reminder, vehicle, result.days_until_due),
                    message=make_message(reminder, vehicle),
                )
            )
    candidates.sort(
        key=lambda c: (c.priority.value, c.days_until_due, c.vehicle_id, c.reminder_kind)
    )
    return candidates


def summarize(vehicles: Iterable[Vehicle], today: Optional[date] = None) -> ReminderSummary:
    """Count enabled reminders per urgency band, using the same windows as derive()."""
    today = today or date.today()
    summary = ReminderSummary()
    for vehicle in vehicles:
        for reminder in vehicle.enabled_reminders:
            result = classify(reminder.date, today)
            if result.status == Status.EXPIRED:
                summary.expired += 1
            elif result.status == Status.EXPIRING_SOON:
                summary.expiring_soon += 1
                if result.days_until_due <= HIGH_PRIORITY_DAYS:
                    summary.due_within_week += 1
            elif result.status == Status.VALID:
                summary.valid += 1
            else:
                summary.unknown += 1
    return summary

"""Vehicle class - the aggregate owning a vehicle's reminder list."""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .reminder import Reminder, ReminderKind


@dataclass
class Vehicle:
    """
    Vehicle record with descriptive fields and an ordered reminder list.

    Reminder edits return a new Vehicle; the original is never mutated.
    """

    id: str
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    mileage: Optional[int] = None
    reminders: List[Reminder] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        parts = [str(p) for p in (self.year, self.make, self.model) if p]
        return " ".join(parts) if parts else self.id

    @property
    def enabled_reminders(self) -> List[Reminder]:
        return [r for r in self.reminders if r.enabled]

    def reminders_of_kind(self, kind: ReminderKind) -> List[Tuple[int, Reminder]]:
        """All (index, reminder) pairs standing for a kind, in list order."""
        return [(i, r) for i, r in enumerate(self.reminders) if r.matches_kind(kind)]

    def find_reminder_index(self, kind: ReminderKind) -> Optional[int]:
        """Index of the first reminder of a kind, or None."""
        matches = self.reminders_of_kind(kind)
        return matches[0][0] if matches else None

    def duplicate_kinds(self) -> List[ReminderKind]:
        """Registry-owned kinds that appear more than once (legacy data)."""
        return [
            kind
            for kind in ReminderKind
            if kind.is_registry_owned and len(self.reminders_of_kind(kind)) > 1
        ]

    def upsert_reminder(self, kind: ReminderKind, due_date: str) -> "Vehicle":
        """
        Set the due date of the first reminder of a well-known kind.

        The matched reminder keeps its name and notes while its date is set
        and enabled is forced on. A conflicting stored kind is corrected too.
        With no match a new reminder carrying the kind's canonical label
        is appended.
        """
        if kind == ReminderKind.CUSTOM:
            raise ValueError("Custom reminders can only be edited by index")
        reminders = list(self.reminders)
        index = self.find_reminder_index(kind)
        if index is None:
            reminders.append(Reminder(kind.label, due_date, enabled=True, kind=kind))
        else:
            current = reminders[index]
            if current.date != due_date or not current.enabled or current.kind != kind:
                reminders[index] = replace(current, date=due_date, enabled=True, kind=kind)
        return replace(self, reminders=reminders)

    def reminder_at(self, index: int) -> Reminder:
        """Reminder at a user-facing index; IndexError outside the list."""
        self._check_index(index)
        return self.reminders[index]

    def add_reminder(self, reminder: Reminder) -> "Vehicle":
        """Append a reminder (user action)."""
        return replace(self, reminders=self.reminders + [reminder])

    def update_reminder(self, index: int, reminder: Reminder) -> "Vehicle":
        """Replace the reminder at index (user action)."""
        self._check_index(index)
        reminders = list(self.reminders)
        reminders[index] = reminder
        return replace(self, reminders=reminders)

    def remove_reminder(self, index: int) -> "Vehicle":
        """Delete the reminder at index (user action)."""
        self._check_index(index)
        reminders = list(self.reminders)
        del reminders[index]
        return replace(self, reminders=reminders)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.reminders):
            raise IndexError(
                f"Reminder index {index} out of range (0..{len(self.reminders) - 1})"
            )

"""Reminder class and the ReminderKind enumeration."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ReminderKind(Enum):
    """Well-known reminder kinds. CUSTOM covers user-defined labels."""

    INSURANCE = "insurance"
    ROADWORTHINESS = "roadworthiness"
    SERVICE = "service"
    CUSTOM = "custom"

    @property
    def label(self) -> Optional[str]:
        """Canonical display label used when creating a reminder of this kind."""
        return _LABELS.get(self)

    @property
    def is_registry_owned(self) -> bool:
        """True for kinds the external registry can supply a date for."""
        return self in (ReminderKind.INSURANCE, ReminderKind.ROADWORTHINESS)

    @classmethod
    def from_label(cls, name: Optional[str]) -> "ReminderKind":
        """
        Infer a kind from a stored reminder label.

        Only exact (case-insensitive) canonical labels and their legacy
        aliases map to a well-known kind; everything else is CUSTOM.
        """
        if not name:
            return cls.CUSTOM
        return _ALIASES.get(name.strip().lower(), cls.CUSTOM)


_LABELS = {
    ReminderKind.INSURANCE: "Insurance Renewal",
    ReminderKind.ROADWORTHINESS: "Road Worthiness Certificate",
    ReminderKind.SERVICE: "Service Due",
}

_LEGACY_LABELS: Tuple[Tuple[str, ReminderKind], ...] = (
    ("Insurance", ReminderKind.INSURANCE),
    ("OCTA", ReminderKind.INSURANCE),
    ("Road Worthiness", ReminderKind.ROADWORTHINESS),
)

_ALIASES = {label.lower(): kind for kind, label in _LABELS.items()}
_ALIASES.update({label.lower(): kind for label, kind in _LEGACY_LABELS})


@dataclass
class Reminder:
    """A named due-date obligation attached to a vehicle."""

    name: str
    date: Optional[str] = None
    enabled: bool = True
    notes: Optional[str] = None
    kind: Optional[ReminderKind] = None

    def __post_init__(self):
        if self.kind is None:
            self.kind = ReminderKind.from_label(self.name)

    @property
    def kind_key(self) -> str:
        """
        Stable key for this reminder's kind.

        Well-known kinds use the enum value; custom reminders use their
        normalized name so two different custom labels never collide.
        """
        if self.kind != ReminderKind.CUSTOM:
            return self.kind.value
        return f"custom:{' '.join(self.name.lower().split())}"

    @property
    def label_kind(self) -> ReminderKind:
        """Kind implied by the name alone."""
        return ReminderKind.from_label(self.name)

    @property
    def has_kind_conflict(self) -> bool:
        """True when the name is a well-known label but kind says otherwise."""
        return self.label_kind != ReminderKind.CUSTOM and self.label_kind != self.kind

    def matches_kind(self, kind: ReminderKind) -> bool:
        """
        True if this reminder stands for a kind.

        A well-known label counts even when a stored kind disagrees, so a
        list never ends up with two reminders named after the same kind.
        """
        if self.kind == kind:
            return True
        return kind != ReminderKind.CUSTOM and self.label_kind == kind

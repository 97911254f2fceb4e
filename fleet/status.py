"""Status and Priority enums for reminder urgency levels."""

from enum import Enum


class Status(Enum):
    """Due-date urgency bands. Lower value = more urgent."""

    EXPIRED = 1
    EXPIRING_SOON = 2
    VALID = 3
    UNKNOWN = 4  # Can't classify (missing or malformed date)

    @property
    def key(self) -> str:
        """Wire name, e.g. 'expiring_soon'."""
        return self.name.lower()



class Priority(Enum):
    """Notification priority. Lower value = more urgent."""

    HIGH = 1
    NORMAL = 2
    LOW = 3

    @property
    def key(self) -> str:
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> "Priority":
        """Look up a priority by its wire name (case-insensitive)."""
        return cls[key.strip().upper()]

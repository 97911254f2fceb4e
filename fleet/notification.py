"""NotificationCandidate and Notification dataclasses."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .status import Priority


def make_identity_key(vehicle_id: str, kind_key: str, due_date: str) -> str:
    """Deterministic key for one due-date instance of one reminder kind."""
    return f"{vehicle_id}|{kind_key}|{due_date}"


@dataclass(frozen=True)
class NotificationCandidate:
    """A notification derived from a reminder's current urgency (not persisted)."""

    vehicle_id: str
    reminder_kind: str
    reminder_name: str
    due_date: str
    days_until_due: int
    priority: Priority
    title: str = ""
    message: str = ""

    @property
    def identity_key(self) -> str:
        return make_identity_key(self.vehicle_id, self.reminder_kind, self.due_date)


@dataclass(frozen=True)
class Notification:
    """A persisted notification with read/dismissed state."""

    vehicle_id: str
    reminder_kind: str
    reminder_name: str
    due_date: str
    days_until_due: int
    priority: Priority
    identity_key: str
    title: str = ""
    message: str = ""
    id: Optional[int] = None
    is_read: bool = False
    is_dismissed: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_candidate(
        cls, candidate: NotificationCandidate, created_at: Optional[str] = None
    ) -> "Notification":
        return cls(
            vehicle_id=candidate.vehicle_id,
            reminder_kind=candidate.reminder_kind,
            reminder_name=candidate.reminder_name,
            due_date=candidate.due_date,
            days_until_due=candidate.days_until_due,
            priority=candidate.priority,
            identity_key=candidate.identity_key,
            title=candidate.title,
            message=candidate.message,
            created_at=created_at,
        )

    @property
    def is_visible(self) -> bool:
        return not self.is_dismissed

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys (YAML store and JSON API format)."""
        d = asdict(self)
        return {
            "id": d["id"],
            "identityKey": d["identity_key"],
            "vehicleId": d["vehicle_id"],
            "reminderKind": d["reminder_kind"],
            "reminderName": d["reminder_name"],
            "dueDate": d["due_date"],
            "daysUntilDue": d["days_until_due"],
            "priority": self.priority.key,
            "title": d["title"],
            "message": d["message"],
            "isRead": d["is_read"],
            "isDismissed": d["is_dismissed"],
            "createdAt": d["created_at"],
        }

    @classmethod
    def from_dict(cls, dct: Dict[str, Any]) -> "Notification":
        return cls(
            vehicle_id=str(dct["vehicleId"]),
            reminder_kind=dct["reminderKind"],
            reminder_name=dct.get("reminderName") or "",
            due_date=str(dct["dueDate"]),
            days_until_due=int(dct.get("daysUntilDue") or 0),
            priority=Priority.from_key(dct.get("priority") or "normal"),
            identity_key=dct["identityKey"],
            title=dct.get("title") or "",
            message=dct.get("message") or "",
            id=dct.get("id"),
            is_read=bool(dct.get("isRead", False)),
            is_dismissed=bool(dct.get("isDismissed", False)),
            created_at=dct.get("createdAt"),
        )

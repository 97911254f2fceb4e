"""Merge derived candidates with stored notifications and manage read/dismiss flags."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, List, Optional

from .notification import Notification, NotificationCandidate

logger = logging.getLogger(__name__)


@dataclass
class FeedUpdate:
    """Result of reconciling candidates against stored notifications."""

    to_insert: List[Notification] = field(default_factory=list)
    unchanged: List[Notification] = field(default_factory=list)


def reconcile_feed(
    candidates: Iterable[NotificationCandidate],
    existing: Iterable[Notification],
    now: Optional[datetime] = None,
) -> FeedUpdate:
    """
    Decide which candidates become new notifications.

    A candidate is inserted only when no existing notification, dismissed
    or not, shares its identity key. Existing notifications are returned
    untouched in `unchanged`, including ones no longer backed by a
    candidate; see find_stale() for that policy.
    """
    existing = list(existing)
    dismissed_keys = {n.identity_key for n in existing if n.is_dismissed}
    active_keys = {n.identity_key for n in existing if not n.is_dismissed}
    created_at = (now or datetime.now()).isoformat(timespec="seconds")

    to_insert = []
    seen = set()
    for candidate in candidates:
        key = candidate.identity_key
        if key in seen or key in active_keys or key in dismissed_keys:
            continue
        seen.add(key)
        to_insert.append(Notification.from_candidate(candidate, created_at=created_at))

    logger.debug(
        "Feed reconcile: %d new, %d existing (%d dismissed)",
        len(to_insert),
        len(existing),
        len(dismissed_keys),
    )
    return FeedUpdate(to_insert=to_insert, unchanged=existing)


def find_stale(
    existing: Iterable[Notification], candidates: Iterable[NotificationCandidate]
) -> List[Notification]:
    """Visible notifications whose identity key no longer has a candidate."""
    current = {c.identity_key for c in candidates}
    return [n for n in existing if n.is_visible and n.identity_key not in current]


def mark_read(notification: Notification) -> Notification:
    return replace(notification, is_read=True)


def dismiss(notification: Notification) -> Notification:
    return replace(notification, is_dismissed=True)


def rank_feed(notifications: Iterable[Notification]) -> List[Notification]:
    """
    Order notifications for display.

    Sorted by priority, then earliest due date, then newest first.
    """
    ranked = sorted(notifications, key=lambda n: n.created_at or "", reverse=True)
    return sorted(ranked, key=lambda n: (n.priority.value, n.due_date))

"""Helper functions for due-date classification and date handling."""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as date_parser

from .status import Priority, Status

logger = logging.getLogger(__name__)

EXPIRING_SOON_DAYS = 30
HIGH_PRIORITY_DAYS = 7
NORMAL_PRIORITY_DAYS = 14

DateLike = Union[date, datetime, str, None]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DAY_MONTH_YEAR = re.compile(r"^\d{1,2}[./-]\d{1,2}[./-]\d{4}$")


@dataclass(frozen=True)
class DueDateStatus:
    """Result of classifying a due date against today."""

    days_until_due: Optional[int]
    status: Status


def parse_date(value: DateLike) -> Optional[date]:
    """
    Reduce a date-like value to a calendar date.

    Accepts date/datetime objects and ISO strings (with or without a time part).
    Returns None for missing or malformed input instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _ISO_DATE.match(text):
        return None
    try:
        return date_parser.isoparse(text).date()
    except (ValueError, OverflowError):
        return None


def to_canonical_date(value: DateLike) -> Optional[str]:
    """
    Convert a registry-supplied date to canonical YYYY-MM-DD form.

    - ISO strings and date objects are passed through parse_date
    - Day-month-year strings (15.06.2025, 15/06/2025, 15-06-2025) are
      parsed day-first
    - Anything else yields None ("no information")
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if _DAY_MONTH_YEAR.match(text):
            try:
                return date_parser.parse(text, dayfirst=True).date().isoformat()
            except (ValueError, OverflowError):
                logger.warning("Ignoring invalid day-month-year date %r", value)
                return None
    parsed = parse_date(value)
    if parsed is None:
        logger.warning("Ignoring unrecognised date %r", value)
        return None
    return parsed.isoformat()


def days_until(due: date, today: date) -> int:
    """Signed whole days from today to due (negative = overdue)."""
    return (due - today).days


def classify(due: DateLike, today: DateLike = None) -> DueDateStatus:
    """
    Classify a due date into an urgency band.

    Both dates are compared at calendar-day granularity. A date due today
    is EXPIRING_SOON with 0 days remaining; 30 days out is still
    EXPIRING_SOON, 31 is VALID.
    """
    due_date = parse_date(due)
    if due_date is None:
        return DueDateStatus(days_until_due=None, status=Status.UNKNOWN)

    current = parse_date(today) or date.today()
    days = days_until(due_date, current)

    if days < 0:
        status = Status.EXPIRED
    elif days <= EXPIRING_SOON_DAYS:
        status = Status.EXPIRING_SOON
    else:
        status = Status.VALID
    return DueDateStatus(days_until_due=days, status=status)


def priority_for(result: DueDateStatus) -> Optional[Priority]:
    """Notification priority for a classified date, or None if not due."""
    if result.status == Status.EXPIRED:
        return Priority.HIGH
    if result.status != Status.EXPIRING_SOON:
        return None
    if result.days_until_due <= HIGH_PRIORITY_DAYS:
        return Priority.HIGH
    if result.days_until_due <= NORMAL_PRIORITY_DAYS:
        return Priority.NORMAL
    return Priority.LOW

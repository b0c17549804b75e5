"""
Field validation and due date normalization for todo records.

`validate_todo` checks a candidate record (possibly an existing record merged
with a partial update) and returns the first failure message, or None.
Checks run in a fixed order: category, priority, status, dueDate, then the
todo text. Only the first failure is reported.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Type

from dateutil import parser as date_parser

from .exceptions import ValidationError
from .models import Category, Priority, Status

INVALID_CATEGORY = "Invalid Todo Category"
INVALID_PRIORITY = "Invalid Todo Priority"
INVALID_STATUS = "Invalid Todo Status"
INVALID_DUE_DATE = "Invalid Due Date"
INVALID_TODO_TEXT = "Invalid Todo Text"

# Every date component differs between the two, so a missing one shows up as a mismatch.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _is_member(enum_cls: Type[Enum], value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def parse_due_date(value: Any) -> Optional[date]:
    """
    Return the calendar date for a due date input, or None if it is not one.

    - date/datetime: the date part as written (no timezone conversion)
    - str: parsed with dateutil; year, month and day must all be present,
      time of day and offset are dropped
    - int/float: epoch milliseconds, read as UTC
    Anything else (None, bools, empty strings, impossible dates) is None.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # bool is an int subclass; True/False are not dates
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            first = date_parser.parse(s, default=_DEFAULT_A).date()
            second = date_parser.parse(s, default=_DEFAULT_B).date()
        except (ValueError, OverflowError):
            return None
        # Year, month or day taken from the default means the input was not a full date.
        return first if first == second else None
    return None


# PUBLIC_INTERFACE
def normalize_due_date(value: Any) -> str:
    """
    Normalize a due date input to a 'yyyy-MM-dd' string.

    Raises:
        ValidationError: if the value does not parse to a calendar date.
    """
    parsed = parse_due_date(value)
    if parsed is None:
        raise ValidationError(INVALID_DUE_DATE)
    return parsed.isoformat()


# PUBLIC_INTERFACE
def validate_todo(candidate: Mapping[str, Any]) -> Optional[str]:
    """Return the first validation failure message for candidate, or None."""
    if not _is_member(Category, candidate.get("category")):
        return INVALID_CATEGORY
    if not _is_member(Priority, candidate.get("priority")):
        return INVALID_PRIORITY
    if not _is_member(Status, candidate.get("status")):
        return INVALID_STATUS
    if parse_due_date(candidate.get("dueDate")) is None:
        return INVALID_DUE_DATE
    text = candidate.get("todo")
    if not isinstance(text, str) or not text.strip():
        return INVALID_TODO_TEXT
    return None

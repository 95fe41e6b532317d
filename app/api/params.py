"""Validation helpers shared by the route modules.

Every helper raises a 400 before storage is touched when input is malformed.
"""

from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app import clock
from app.crud import get_habit
from app.local_date import MAX_TZ_OFFSET_MINUTES, format_date_with_offset, parse_date_parts, parse_offset_minutes
from app.models import Habit


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=400, detail=detail)


def non_empty_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def to_date(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    parts = parse_date_parts(value)
    if not parts:
        return None
    return date(parts.year, parts.month, parts.day)


def require_local_date(value: Optional[str], detail: str) -> date:
    day = to_date(value)
    if day is None:
        raise bad_request(detail)
    return day


def tz_offset_or_400(raw: Optional[str], detail: str) -> int:
    """Offset in minutes; 0 only when the parameter is absent."""
    if raw is None:
        return 0
    offset = parse_offset_minutes(raw)
    if offset is None or abs(offset) > MAX_TZ_OFFSET_MINUTES:
        raise bad_request(detail)
    return offset


def latest_possible_local_date() -> str:
    """The calendar date in the timezone furthest ahead of UTC right now."""
    return format_date_with_offset(clock.utcnow(), -MAX_TZ_OFFSET_MINUTES)


def require_habit(db: Session, user_id: str, habit_id: str) -> Habit:
    habit = get_habit(db, user_id, habit_id)
    if not habit:
        raise bad_request("Habit not found")
    return habit


def parse_email(value: Any) -> Optional[str]:
    email = non_empty_str(value)
    if not email:
        return None
    at_index = email.find("@")
    dot_index = email.rfind(".")
    if at_index <= 0 or dot_index <= at_index + 1 or dot_index >= len(email) - 1:
        return None
    return email.lower()

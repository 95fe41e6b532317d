"""Canonical ``YYYY-MM-DD`` date strings under a caller-supplied timezone offset.

Offsets follow the browser ``getTimezoneOffset`` convention: minutes the local
zone lags UTC, so positive values are west of UTC.
"""

import calendar
import re
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

MAX_TZ_OFFSET_MINUTES = 14 * 60

_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_MONTH_RE = re.compile(r"(\d{4})-(\d{2})", re.ASCII)
_OFFSET_RE = re.compile(r"[-+]?\d+", re.ASCII)


class LocalDateParts(NamedTuple):
    year: int
    month: int
    day: int
    utc_midnight: datetime


class ParsedMonth(NamedTuple):
    year: int
    month: int
    start_date: str
    end_date: str


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def parse_date_parts(value: str) -> Optional[LocalDateParts]:
    match = _DATE_RE.fullmatch(value or "")
    if not match:
        return None

    year, month, day = (int(group) for group in match.groups())
    try:
        utc_midnight = datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None

    if (utc_midnight.year, utc_midnight.month, utc_midnight.day) != (year, month, day):
        return None
    return LocalDateParts(year, month, day, utc_midnight)


def is_valid_local_date(value: str) -> bool:
    return parse_date_parts(value) is not None


def format_date(instant: datetime) -> str:
    utc = _as_utc(instant)
    return f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"


def _shift(instant: datetime, offset_minutes: int) -> datetime:
    if offset_minutes == 0:
        return instant
    return instant - timedelta(minutes=offset_minutes)


def format_date_with_offset(instant: datetime, offset_minutes: int = 0) -> str:
    return format_date(_shift(instant, offset_minutes))


def format_time_with_offset(instant: datetime, offset_minutes: int = 0) -> str:
    utc = _as_utc(_shift(instant, offset_minutes))
    return f"{utc.hour:02d}:{utc.minute:02d}"


def previous_date(value: str) -> Optional[str]:
    parsed = parse_date_parts(value)
    if not parsed:
        return None
    try:
        return format_date(parsed.utc_midnight - timedelta(days=1))
    except OverflowError:
        return None


def parse_month(value: str) -> Optional[ParsedMonth]:
    match = _MONTH_RE.fullmatch(value or "")
    if not match:
        return None

    year, month = int(match.group(1)), int(match.group(2))
    if month < 1 or month > 12:
        return None

    try:
        start = datetime(year, month, 1, tzinfo=timezone.utc)
    except ValueError:
        return None

    end = start.replace(day=calendar.monthrange(year, month)[1])
    return ParsedMonth(year, month, format_date(start), format_date(end))


def parse_offset_minutes(raw: Optional[str]) -> Optional[int]:
    """Integer minutes from a query-string value, or None when it is not an integer.

    Range checks against ``MAX_TZ_OFFSET_MINUTES`` are left to the caller.
    """
    if raw is None or not _OFFSET_RE.fullmatch(raw):
        return None
    return int(raw)

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from app import clock
from app.api.deps import get_current_user, get_db
from app.api.params import bad_request, non_empty_str, require_habit, require_local_date, tz_offset_or_400
from app.calendar_window import resolve_calendar_window
from app.crud import get_completion_dates_in_range, get_completion_dates_up_to
from app.local_date import parse_month
from app.models import User
from app.streaks import compute_streaks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["progress"])

UNDEFINED_TABLE_SQLSTATE = "42P01"


def _is_missing_relation(exc: DBAPIError) -> bool:
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == UNDEFINED_TABLE_SQLSTATE:
        return True
    return "no such table" in str(orig).lower()


@router.get("/streaks")
def habit_streaks(
    habit_id: Optional[str] = Query(default=None, alias="habitId"),
    local_date: Optional[str] = Query(default=None, alias="localDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, int]:
    habit_id = non_empty_str(habit_id)
    if not habit_id:
        raise bad_request("Habit id and local date are required")
    day = require_local_date(local_date, "Habit id and local date are required")

    habit = require_habit(db, user.id, habit_id)

    dates: List[str] = []
    try:
        dates = get_completion_dates_up_to(db, user.id, habit.id, day, descending=True)
    except DBAPIError as exc:
        if not _is_missing_relation(exc):
            raise
        # Environments without the completions table yet have no history.
        db.rollback()
        logger.warning("Completions table missing; reporting empty streaks for habit %s", habit.id)

    result = compute_streaks(dates, day.isoformat())
    return {"currentStreak": result.current, "bestStreak": result.best}


@router.get("/history")
def habit_history(
    habit_id: Optional[str] = Query(default=None, alias="habitId"),
    local_date: Optional[str] = Query(default=None, alias="localDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habit_id = non_empty_str(habit_id)
    if not habit_id:
        raise bad_request("Habit id and local date are required")
    day = require_local_date(local_date, "Habit id and local date are required")

    habit = require_habit(db, user.id, habit_id)
    return {"habitId": habit.id, "dates": get_completion_dates_up_to(db, user.id, habit.id, day)}


@router.get("/calendar")
def habit_calendar(
    habit_id: Optional[str] = Query(default=None, alias="habitId"),
    month: Optional[str] = Query(default=None),
    tz_offset_minutes: Optional[str] = Query(default=None, alias="tzOffsetMinutes"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habit_id = non_empty_str(habit_id)
    parsed_month = parse_month(month or "")
    if not habit_id or not parsed_month:
        raise bad_request("Habit id and month are required")
    offset = tz_offset_or_400(tz_offset_minutes, "Habit id and month are required")

    habit = require_habit(db, user.id, habit_id)

    window = resolve_calendar_window(parsed_month, habit.created_at, clock.utcnow(), offset)
    if window is None:
        return {"habitId": habit.id, "month": month, "dates": []}

    start, end = window
    dates = get_completion_dates_in_range(db, user.id, habit.id, date.fromisoformat(start), date.fromisoformat(end))
    return {"habitId": habit.id, "month": month, "dates": dates}

import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.api.params import bad_request, non_empty_str, require_habit
from app.crud import (
    archive_habit,
    create_habit,
    delete_habit,
    get_active_habits,
    get_habits_by_ids,
    reorder_habits,
    set_reminder_time,
)
from app.models import User
from app.schemas import HabitOut

router = APIRouter(prefix="/api/habits", tags=["habits"])

REMINDER_TIME_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)", re.ASCII)
HABIT_ACTIONS = ("archive", "hardDelete", "setReminder", "clearReminder")


def _ordered_ids(payload: Dict[str, Any]) -> Optional[List[str]]:
    ordered_ids = payload.get("orderedIds")
    if not isinstance(ordered_ids, list) or not ordered_ids:
        return None
    if not all(isinstance(habit_id, str) for habit_id in ordered_ids):
        return None
    return ordered_ids


def _habit_action(payload: Dict[str, Any]) -> Optional[Dict[str, str]]:
    # Older clients archive with a bare {"archiveId": ...}.
    archive_id = non_empty_str(payload.get("archiveId"))
    if archive_id:
        return {"action": "archive", "habit_id": archive_id}

    action = payload.get("action")
    habit_id = non_empty_str(payload.get("habitId"))
    if action not in HABIT_ACTIONS or not habit_id:
        return None

    if action == "setReminder":
        reminder_time = payload.get("reminderTime")
        if not isinstance(reminder_time, str) or not REMINDER_TIME_RE.fullmatch(reminder_time):
            return None
        return {"action": action, "habit_id": habit_id, "reminder_time": reminder_time}

    return {"action": action, "habit_id": habit_id}


@router.get("")
def list_habits(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    return {"habits": [HabitOut.model_validate(habit).to_json() for habit in get_active_habits(db, user.id)]}


@router.post("", status_code=201)
def add_habit(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    name = non_empty_str(payload.get("name"))
    if not name:
        raise bad_request("Name is required")

    habit = create_habit(db, user.id, name)
    return {"habit": HabitOut.model_validate(habit).to_json()}


@router.patch("")
def update_habits(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    ordered_ids = _ordered_ids(payload)
    mutation = _habit_action(payload)

    if ordered_ids and mutation:
        raise bad_request("Provide either ordered habit ids or a habit action")

    if mutation:
        habit = require_habit(db, user.id, mutation["habit_id"])
        action = mutation["action"]

        if action == "archive":
            archive_habit(db, habit)
            return {"operation": "archive", "archived": True}

        if action in ("setReminder", "clearReminder") and habit.archived_at is not None:
            raise bad_request("Cannot update reminder for archived habit")

        if action == "setReminder":
            set_reminder_time(db, habit, mutation["reminder_time"])
            return {"operation": "setReminder", "reminderTime": mutation["reminder_time"]}

        if action == "clearReminder":
            set_reminder_time(db, habit, None)
            return {"operation": "clearReminder", "reminderTime": None, "removed": True}

        if not delete_habit(db, user.id, habit.id):
            raise bad_request("Habit not found")
        return {"operation": "hardDelete", "deleted": True}

    if not ordered_ids:
        raise bad_request("Ordered habit ids are required")

    if len(set(ordered_ids)) != len(ordered_ids):
        raise bad_request("Ordered habit ids must be unique")

    if len(get_habits_by_ids(db, user.id, ordered_ids)) != len(ordered_ids):
        raise bad_request("One or more habits were not found")

    reorder_habits(db, user.id, ordered_ids)
    return {"success": True}


@router.delete("")
def remove_habit(
    habit_id: Optional[str] = Query(default=None, alias="habitId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    habit_id = non_empty_str(habit_id)
    if not habit_id:
        raise bad_request("Habit id is required")

    if not delete_habit(db, user.id, habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"operation": "hardDelete", "deleted": True}

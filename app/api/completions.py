from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.api.params import bad_request, latest_possible_local_date, require_habit, require_local_date, to_date
from app.crud import (
    delete_completion,
    get_completed_habit_ids,
    get_completion,
    get_habits_by_ids,
    insert_completion,
    insert_completions_bulk,
)
from app.models import User
from app.schemas import CompletionOut

router = APIRouter(prefix="/api/completions", tags=["completions"])


def _completion_item(payload: Any) -> Optional[Tuple[str, date]]:
    if not isinstance(payload, dict):
        return None
    habit_id = payload.get("habitId")
    completed_on = to_date(payload.get("localDate"))
    if not isinstance(habit_id, str) or completed_on is None:
        return None
    return habit_id, completed_on


def _completion_list(payload: Dict[str, Any]) -> Optional[List[Tuple[str, date]]]:
    completions = payload.get("completions")
    if not isinstance(completions, list) or not completions:
        return None
    items = [_completion_item(item) for item in completions]
    if any(item is None for item in items):
        return None
    return items


def _reject_future(days: List[date]) -> None:
    latest = latest_possible_local_date()
    if any(day.isoformat() > latest for day in days):
        raise bad_request("Completion date is in the future")


@router.get("")
def completed_on_date(
    local_date: Optional[str] = Query(default=None, alias="localDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    day = require_local_date(local_date, "Local date is required")
    return {"habitIds": get_completed_habit_ids(db, user.id, day)}


@router.post("")
def mark_complete(
    payload: Dict[str, Any],
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    items = _completion_list(payload)
    if items:
        _reject_future([day for _, day in items])
        habit_ids = {habit_id for habit_id, _ in items}
        if len(get_habits_by_ids(db, user.id, list(habit_ids))) != len(habit_ids):
            raise bad_request("Habit not found")

        inserted = insert_completions_bulk(db, user.id, items)
        return {
            "completions": [CompletionOut.model_validate(row).to_json() for row in inserted],
            "createdCount": len(inserted),
            "totalCount": len(items),
        }

    item = _completion_item(payload)
    if not item:
        raise bad_request("Habit id and local date are required")

    habit_id, day = item
    _reject_future([day])
    require_habit(db, user.id, habit_id)

    completion = insert_completion(db, user.id, habit_id, day)
    if completion:
        response.status_code = 201
        return {"completion": CompletionOut.model_validate(completion).to_json(), "created": True}

    existing = get_completion(db, user.id, habit_id, day)
    if not existing:
        raise bad_request("Unable to save completion")
    return {"completion": CompletionOut.model_validate(existing).to_json(), "created": False}


@router.delete("")
def unmark_complete(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    item = _completion_item(payload)
    if not item:
        raise bad_request("Habit id and local date are required")

    habit_id, day = item
    require_habit(db, user.id, habit_id)
    return {"removed": delete_completion(db, user.id, habit_id, day)}

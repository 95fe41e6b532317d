from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app import clock
from app.api.deps import get_current_user, get_db
from app.api.params import bad_request, non_empty_str
from app.config import settings
from app.crud import (
    claim_reminder_dispatches,
    deactivate_push_subscription,
    get_completed_habit_ids,
    get_due_reminder_habits,
    upsert_push_subscription,
)
from app.local_date import MAX_TZ_OFFSET_MINUTES, format_date_with_offset, format_time_with_offset
from app.models import User
from app.push import reminder_payload, send_to_user
from app.schemas import PushSubscriptionOut

router = APIRouter(prefix="/api", tags=["notifications"])


def _expiration_time(value: Any) -> Optional[datetime]:
    """Browser ``expirationTime`` is epoch milliseconds or null."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


def _subscription_input(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    subscription = payload.get("subscription")
    if not isinstance(subscription, dict):
        return None

    keys = subscription.get("keys")
    keys = keys if isinstance(keys, dict) else {}
    endpoint = non_empty_str(subscription.get("endpoint"))
    p256dh = non_empty_str(keys.get("p256dh"))
    auth = non_empty_str(keys.get("auth"))
    if not endpoint or not p256dh or not auth:
        return None

    return {
        "endpoint": endpoint,
        "p256dh": p256dh,
        "auth": auth,
        "expiration_time": _expiration_time(subscription.get("expirationTime")),
    }


def _dispatch_now(payload: Dict[str, Any]) -> datetime:
    now_iso = non_empty_str(payload.get("nowIso"))
    if not now_iso:
        return clock.utcnow()
    if now_iso.endswith(("Z", "z")):
        # fromisoformat only accepts the Z suffix from Python 3.11 on.
        now_iso = now_iso[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(now_iso)
    except ValueError:
        return clock.utcnow()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _dispatch_offset(payload: Dict[str, Any]) -> int:
    offset = payload.get("tzOffsetMinutes")
    if isinstance(offset, bool) or not isinstance(offset, int) or abs(offset) > MAX_TZ_OFFSET_MINUTES:
        return 0
    return offset


@router.get("/push-subscriptions")
def push_config(_: User = Depends(get_current_user)) -> Dict[str, Optional[str]]:
    return {"vapidPublicKey": settings.WEB_PUSH_VAPID_PUBLIC_KEY or None}


@router.post("/push-subscriptions", status_code=201)
def subscribe(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    subscription = _subscription_input(payload)
    if not subscription:
        raise bad_request("Valid push subscription payload is required")

    stored = upsert_push_subscription(db, user.id, **subscription)
    return {"subscription": PushSubscriptionOut.model_validate(stored).to_json()}


@router.delete("/push-subscriptions")
def unsubscribe(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, bool]:
    subscription = _subscription_input(payload)
    if not subscription:
        raise bad_request("Valid push subscription payload is required")

    return {"removed": deactivate_push_subscription(db, user.id, subscription["endpoint"])}


@router.post("/reminders")
def dispatch_reminders(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    payload = payload or {}
    now = _dispatch_now(payload)
    offset = _dispatch_offset(payload)
    local_date = format_date_with_offset(now, offset)
    local_time = format_time_with_offset(now, offset)
    local_day = date.fromisoformat(local_date)

    due = get_due_reminder_habits(db, user.id, local_time)
    completed = set(get_completed_habit_ids(db, user.id, local_day))
    due_incomplete = [habit for habit in due if habit.id not in completed]

    claimed = claim_reminder_dispatches(db, user.id, local_day, due_incomplete)
    push = send_to_user(db, user.id, [reminder_payload(habit) for habit in claimed])

    return {
        "dispatchedAt": now.isoformat() + "Z",
        "localDate": local_date,
        "localTime": local_time,
        "dueHabitsCount": len(due),
        "skippedCompletedCount": len(due) - len(due_incomplete),
        "skippedAlreadyRemindedCount": len(due_incomplete) - len(claimed),
        "remindedHabitsCount": len(claimed),
        "push": push.as_dict(),
    }

import logging
import math
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import clock
from app.api.deps import get_current_user, get_db
from app.api.params import bad_request, non_empty_str, parse_email, require_local_date
from app.config import settings
from app.crud import (
    accept_invite,
    count_nudges_sent_since,
    create_invite,
    create_nudge,
    delete_accepted_invite_for_pair,
    delete_partnerships_for_user,
    delete_pending_invite_for_inviter,
    get_accepted_invite_for_pair,
    get_active_habits,
    get_completed_habit_ids,
    get_invite,
    get_latest_nudge_at,
    get_partnership_for_user,
    get_pending_invite_for_pair,
    get_pending_invites_for_email,
    get_pending_invites_for_inviter,
    get_user_by_email,
    reject_invite,
)
from app.local_date import format_date
from app.models import INVITE_PENDING, User
from app.push import nudge_payload, send_to_user
from app.schemas import InviteOut, NudgeOut, PartnershipOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["partners"])

INVITE_ACTIONS = ("accept", "reject", "delete")


def _invite_action(payload: Dict[str, Any]) -> str:
    action = payload.get("action")
    return action if action in INVITE_ACTIONS else "accept"


def _cooldown_seconds_remaining(last_nudge_at: datetime, now: datetime) -> int:
    elapsed = (now - last_nudge_at).total_seconds()
    if elapsed >= settings.NUDGE_COOLDOWN_SECONDS:
        return 0
    return math.ceil(settings.NUDGE_COOLDOWN_SECONDS - elapsed)


def _cooldown_message(seconds_remaining: int) -> str:
    if seconds_remaining < 60:
        return f"Nudge cooldown active. Try again in {seconds_remaining}s"
    return f"Nudge cooldown active. Try again in {math.ceil(seconds_remaining / 60)}m"


@router.post("/partner-invites", status_code=201)
def send_invite(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    invite_email = parse_email(payload.get("email"))
    if not invite_email:
        raise bad_request("Valid invite email is required")

    if user.email.lower() == invite_email:
        raise bad_request("Cannot invite yourself")

    if get_partnership_for_user(db, user.id):
        raise bad_request("You already have a partner")

    if get_pending_invites_for_inviter(db, user.id):
        raise bad_request("You already have a pending invite")

    target = get_user_by_email(db, invite_email)
    if target and target.id != user.id and get_pending_invite_for_pair(db, target.id, user.email.lower()):
        raise bad_request("A pending invite already exists from this user. Accept or reject it first")

    if get_accepted_invite_for_pair(db, user.id, invite_email):
        delete_accepted_invite_for_pair(db, user.id, invite_email)

    invite = create_invite(db, user.id, invite_email)
    if not invite:
        raise bad_request("Invite already pending")
    return {"invite": InviteOut.model_validate(invite).to_json()}


@router.get("/partner-invites")
def list_invites(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    received = [InviteOut.model_validate(i).to_json() for i in get_pending_invites_for_email(db, user.email.lower())]
    sent = [InviteOut.model_validate(i).to_json() for i in get_pending_invites_for_inviter(db, user.id)]
    return {"invites": received, "receivedInvites": received, "sentInvites": sent}


@router.patch("/partner-invites")
def respond_to_invite(
    payload: Dict[str, Any],
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    invite_id = non_empty_str(payload.get("inviteId"))
    if not invite_id:
        raise bad_request("Invite id is required")

    action = _invite_action(payload)
    if action == "delete":
        deleted = delete_pending_invite_for_inviter(db, invite_id, user.id)
        if not deleted:
            raise bad_request("Invite not found")
        return {"invite": InviteOut.model_validate(deleted).to_json()}

    invite = get_invite(db, invite_id)
    if not invite:
        raise bad_request("Invite not found")
    if invite.status != INVITE_PENDING:
        raise bad_request("Invite is no longer pending")
    if user.email.lower() != invite.invitee_email.lower():
        raise bad_request("Invite is not for current user")
    if invite.inviter_user_id == user.id:
        raise bad_request("Cannot accept your own invite")

    if action == "reject":
        return {"invite": InviteOut.model_validate(reject_invite(db, invite)).to_json()}

    if get_accepted_invite_for_pair(db, invite.inviter_user_id, invite.invitee_email):
        raise bad_request("Invite was already accepted")

    user_a_id, user_b_id = sorted([invite.inviter_user_id, user.id])
    for member_id in (user_a_id, user_b_id):
        existing = get_partnership_for_user(db, member_id)
        if existing and {existing.user_a_id, existing.user_b_id} != {user_a_id, user_b_id}:
            detail = "You already have a partner" if member_id == user.id else "Inviter already has a partner"
            raise bad_request(detail)

    partnership = accept_invite(db, invite, user_a_id, user_b_id)
    return {"partnership": PartnershipOut.model_validate(partnership).to_json()}


@router.delete("/partner-invites")
def cancel_invite(
    invite_id: Optional[str] = Query(default=None, alias="inviteId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    invite_id = non_empty_str(invite_id)
    if not invite_id:
        raise bad_request("Invite id is required")

    deleted = delete_pending_invite_for_inviter(db, invite_id, user.id)
    if not deleted:
        raise bad_request("Invite not found")
    return {"invite": InviteOut.model_validate(deleted).to_json()}


@router.get("/partnerships")
def partner_status(
    local_date: Optional[str] = Query(default=None, alias="localDate"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    day = require_local_date(local_date, "Local date is required")

    partnership = get_partnership_for_user(db, user.id)
    if not partnership:
        raise HTTPException(status_code=404, detail="No partnership found")

    partner_user_id = partnership.partner_of(user.id)
    started_on = format_date(partnership.started_at)

    completed_ids: set[str] = set()
    if day.isoformat() >= started_on:
        completed_ids = set(get_completed_habit_ids(db, partner_user_id, day))

    return {
        "partner": {"userId": partner_user_id, "startedOn": started_on},
        "habits": [
            {"id": habit.id, "name": habit.name, "completedToday": habit.id in completed_ids}
            for habit in get_active_habits(db, partner_user_id)
        ],
    }


@router.delete("/partnerships")
def revoke_partnership(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, bool]:
    if not delete_partnerships_for_user(db, user.id):
        raise HTTPException(status_code=404, detail="No partnership found")
    return {"revoked": True}


@router.post("/nudges", status_code=201)
def send_nudge(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict[str, Any]:
    partnership = get_partnership_for_user(db, user.id)
    if not partnership:
        raise bad_request("Active partnership required to send a nudge")

    receiver_user_id = partnership.partner_of(user.id)
    now = clock.utcnow()
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    # Check-then-insert; two simultaneous requests may both pass, which is tolerated.
    last_nudge_at = get_latest_nudge_at(db, user.id)
    if last_nudge_at:
        seconds_remaining = _cooldown_seconds_remaining(last_nudge_at, now)
        if seconds_remaining > 0:
            raise HTTPException(
                status_code=429,
                detail={
                    "error": _cooldown_message(seconds_remaining),
                    "code": "NUDGE_COOLDOWN",
                    "retryAfterSeconds": seconds_remaining,
                },
                headers={"Retry-After": str(seconds_remaining)},
            )

    sent_today = count_nudges_sent_since(db, user.id, day_start)
    daily_limit = settings.NUDGE_DAILY_LIMIT
    if sent_today >= daily_limit:
        raise HTTPException(
            status_code=429,
            detail={
                "error": f"Daily nudge limit reached ({daily_limit}/day). Try again tomorrow",
                "code": "NUDGE_DAILY_LIMIT",
                "dailyLimit": daily_limit,
            },
        )

    nudge = create_nudge(db, user.id, receiver_user_id, now)

    try:
        send_to_user(db, receiver_user_id, [nudge_payload(nudge)])
    except Exception:
        # The nudge is stored either way; delivery is best effort.
        logger.exception("Push delivery for nudge %s failed", nudge.id)

    return {
        "nudge": NudgeOut.model_validate(nudge).to_json(),
        "limits": {
            "cooldownSeconds": settings.NUDGE_COOLDOWN_SECONDS,
            "dailyLimit": daily_limit,
            "remainingToday": max(daily_limit - sent_today - 1, 0),
        },
    }

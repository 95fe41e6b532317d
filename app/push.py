"""Web Push delivery for partner nudges and habit reminders."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from pywebpush import WebPushException, webpush
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import deactivate_push_subscription, get_active_push_subscriptions
from app.models import Habit, PartnerNudge, PushSubscription

logger = logging.getLogger(__name__)

# Push services answer 404/410 once a subscription has been revoked by the browser.
STALE_STATUS_CODES = {404, 410}


@dataclass
class PushResult:
    sent_count: int = 0
    stale_count: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"sentCount": self.sent_count, "staleCount": self.stale_count}


def is_configured() -> bool:
    return bool(
        settings.WEB_PUSH_VAPID_PUBLIC_KEY and settings.WEB_PUSH_VAPID_PRIVATE_KEY and settings.WEB_PUSH_VAPID_SUBJECT
    )


def nudge_payload(nudge: PartnerNudge) -> dict[str, Any]:
    return {
        "type": "partner_nudge",
        "nudgeId": nudge.id,
        "senderUserId": nudge.sender_user_id,
        "createdAt": nudge.created_at.isoformat() + "Z",
        "title": "Habit nudge",
        "body": "Your partner sent you a nudge.",
    }


def reminder_payload(habit: Habit) -> dict[str, Any]:
    return {
        "type": "habit_reminder",
        "habitId": habit.id,
        "title": "Habit reminder",
        "body": f"Time for {habit.name}",
    }


def _subscription_info(subscription: PushSubscription) -> dict[str, Any]:
    return {
        "endpoint": subscription.endpoint,
        "keys": {"p256dh": subscription.p256dh, "auth": subscription.auth},
    }


def _is_stale(exc: WebPushException) -> bool:
    response = getattr(exc, "response", None)
    return response is not None and response.status_code in STALE_STATUS_CODES


def send_to_user(db: Session, user_id: str, payloads: list[dict[str, Any]]) -> PushResult:
    """Send every payload to each active subscription of the user.

    Subscriptions the push service reports as gone are soft-deleted afterwards.
    """
    result = PushResult()
    if not payloads or not is_configured():
        return result

    subscriptions = get_active_push_subscriptions(db, user_id)
    if not subscriptions:
        return result

    stale_endpoints: set[str] = set()
    for payload in payloads:
        data = json.dumps(payload)
        for subscription in subscriptions:
            if subscription.endpoint in stale_endpoints:
                continue
            try:
                webpush(
                    subscription_info=_subscription_info(subscription),
                    data=data,
                    vapid_private_key=settings.WEB_PUSH_VAPID_PRIVATE_KEY,
                    vapid_claims={"sub": settings.WEB_PUSH_VAPID_SUBJECT},
                )
            except WebPushException as exc:
                if _is_stale(exc):
                    stale_endpoints.add(subscription.endpoint)
                else:
                    logger.warning("Push delivery to subscription %s failed: %s", subscription.id, exc)
                continue
            except Exception as exc:
                # Network and VAPID signing errors; the remaining subscriptions still get their push.
                logger.warning("Push delivery to subscription %s errored: %r", subscription.id, exc)
                continue
            result.sent_count += 1

    for endpoint in stale_endpoints:
        logger.info("Deactivating stale push subscription for user %s", user_id)
        deactivate_push_subscription(db, user_id, endpoint)
    result.stale_count = len(stale_endpoints)
    return result

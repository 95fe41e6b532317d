from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.clock import utcnow
from app.models import PushSubscription


def upsert_push_subscription(
    db: Session,
    user_id: str,
    endpoint: str,
    p256dh: str,
    auth: str,
    expiration_time: Optional[datetime],
) -> PushSubscription:
    """Store a subscription keyed by endpoint, reassigning and reactivating an existing row."""
    subscription = db.scalar(select(PushSubscription).where(PushSubscription.endpoint == endpoint))
    if subscription is None:
        subscription = PushSubscription(endpoint=endpoint)
        db.add(subscription)

    subscription.user_id = user_id
    subscription.p256dh = p256dh
    subscription.auth = auth
    subscription.expiration_time = expiration_time
    subscription.deleted_at = None
    subscription.updated_at = utcnow()
    db.commit()
    db.refresh(subscription)
    return subscription


def deactivate_push_subscription(db: Session, user_id: str, endpoint: str) -> bool:
    subscription = db.scalar(
        select(PushSubscription).where(
            PushSubscription.user_id == user_id,
            PushSubscription.endpoint == endpoint,
            PushSubscription.deleted_at.is_(None),
        )
    )
    if not subscription:
        return False

    now = utcnow()
    subscription.deleted_at = now
    subscription.updated_at = now
    db.commit()
    return True


def get_active_push_subscriptions(db: Session, user_id: str) -> list[PushSubscription]:
    return list(
        db.scalars(
            select(PushSubscription).where(
                PushSubscription.user_id == user_id, PushSubscription.deleted_at.is_(None)
            )
        )
    )

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models import PartnerNudge


def create_nudge(db: Session, sender_user_id: str, receiver_user_id: str, created_at: datetime) -> PartnerNudge:
    nudge = PartnerNudge(sender_user_id=sender_user_id, receiver_user_id=receiver_user_id, created_at=created_at)
    db.add(nudge)
    db.commit()
    db.refresh(nudge)
    return nudge


def get_latest_nudge_at(db: Session, sender_user_id: str) -> Optional[datetime]:
    return db.scalar(
        select(PartnerNudge.created_at)
        .where(PartnerNudge.sender_user_id == sender_user_id)
        .order_by(PartnerNudge.created_at.desc())
        .limit(1)
    )


def count_nudges_sent_since(db: Session, sender_user_id: str, since: datetime) -> int:
    return db.scalar(
        select(func.count())
        .select_from(PartnerNudge)
        .where(PartnerNudge.sender_user_id == sender_user_id, PartnerNudge.created_at >= since)
    ) or 0

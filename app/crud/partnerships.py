from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from app.models import Partnership


def get_partnership_for_user(db: Session, user_id: str) -> Optional[Partnership]:
    return db.scalar(
        select(Partnership)
        .where(or_(Partnership.user_a_id == user_id, Partnership.user_b_id == user_id))
        .order_by(Partnership.started_at)
        .limit(1)
    )


def delete_partnerships_for_user(db: Session, user_id: str) -> int:
    result = db.execute(
        delete(Partnership).where(or_(Partnership.user_a_id == user_id, Partnership.user_b_id == user_id))
    )
    db.commit()
    return result.rowcount or 0

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.clock import utcnow
from app.models.base import Base, new_id


class PartnerNudge(Base):
    __tablename__ = "partner_nudges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    sender_user_id: Mapped[str] = mapped_column(String(36), index=True)
    receiver_user_id: Mapped[str] = mapped_column(String(36), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

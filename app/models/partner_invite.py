from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.clock import utcnow
from app.models.base import Base, new_id

INVITE_PENDING = "pending"
INVITE_ACCEPTED = "accepted"
INVITE_REJECTED = "rejected"


class PartnerInvite(Base):
    __tablename__ = "partner_invites"
    __table_args__ = (
        UniqueConstraint("inviter_user_id", "invitee_email", "status", name="uq_partner_invite_pair_status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    inviter_user_id: Mapped[str] = mapped_column(String(36), index=True)
    invitee_email: Mapped[str] = mapped_column(String(320), index=True)
    status: Mapped[str] = mapped_column(String(16), default=INVITE_PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

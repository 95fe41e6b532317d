from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.clock import utcnow
from app.models.base import Base, new_id


class Partnership(Base):
    __tablename__ = "partnerships"
    __table_args__ = (UniqueConstraint("user_a_id", "user_b_id", name="uq_partnership_pair"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_a_id: Mapped[str] = mapped_column(String(36), index=True)
    user_b_id: Mapped[str] = mapped_column(String(36), index=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def partner_of(self, user_id: str) -> str:
        return self.user_b_id if self.user_a_id == user_id else self.user_a_id

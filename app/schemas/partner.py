from datetime import datetime

from app.schemas.base import CamelModel


class InviteOut(CamelModel):
    id: str
    inviter_user_id: str
    invitee_email: str
    status: str
    created_at: datetime


class PartnershipOut(CamelModel):
    id: str
    user_a_id: str
    user_b_id: str
    started_at: datetime


class NudgeOut(CamelModel):
    id: str
    sender_user_id: str
    receiver_user_id: str
    created_at: datetime

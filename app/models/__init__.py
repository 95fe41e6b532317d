from app.models.base import Base
from app.models.auth_session import AuthSession
from app.models.habit import Habit
from app.models.habit_completion import HabitCompletion
from app.models.habit_reminder_dispatch import HabitReminderDispatch
from app.models.partner_invite import INVITE_ACCEPTED, INVITE_PENDING, INVITE_REJECTED, PartnerInvite
from app.models.partner_nudge import PartnerNudge
from app.models.partnership import Partnership
from app.models.push_subscription import PushSubscription
from app.models.user import User

__all__ = [
    "Base",
    "AuthSession",
    "User",
    "Habit",
    "HabitCompletion",
    "HabitReminderDispatch",
    "PartnerInvite",
    "Partnership",
    "PartnerNudge",
    "PushSubscription",
    "INVITE_PENDING",
    "INVITE_ACCEPTED",
    "INVITE_REJECTED",
]

from app.schemas.completion import CompletionOut
from app.schemas.habit import HabitOut
from app.schemas.partner import InviteOut, NudgeOut, PartnershipOut
from app.schemas.push import PushSubscriptionOut
from app.schemas.user import UserOut

__all__ = ["UserOut", "HabitOut", "CompletionOut", "InviteOut", "PartnershipOut", "NudgeOut", "PushSubscriptionOut"]

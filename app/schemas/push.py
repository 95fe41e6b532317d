from datetime import datetime

from app.schemas.base import CamelModel


class PushSubscriptionOut(CamelModel):
    id: str
    endpoint: str
    created_at: datetime
    updated_at: datetime

from typing import Optional

from app.schemas.base import CamelModel


class HabitOut(CamelModel):
    id: str
    name: str
    sort_order: int
    reminder_time: Optional[str] = None

from datetime import date

from app.schemas.base import CamelModel


class CompletionOut(CamelModel):
    id: str
    habit_id: str
    completed_on: date

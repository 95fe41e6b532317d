from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Habit, HabitReminderDispatch


def claim_reminder_dispatches(db: Session, user_id: str, local_date: date, habits: list[Habit]) -> list[Habit]:
    """Record one reminder per habit per local day; returns the habits claimed by this call."""
    claimed: list[Habit] = []
    for habit in habits:
        already_sent = db.scalar(
            select(HabitReminderDispatch.id).where(
                HabitReminderDispatch.habit_id == habit.id, HabitReminderDispatch.local_date == local_date
            )
        )
        if already_sent:
            continue
        try:
            with db.begin_nested():
                db.add(HabitReminderDispatch(user_id=user_id, habit_id=habit.id, local_date=local_date))
        except IntegrityError:
            continue
        claimed.append(habit)
    db.commit()
    return claimed

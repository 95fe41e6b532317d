from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.clock import utcnow
from app.models import Habit


def get_active_habits(db: Session, user_id: str) -> list[Habit]:
    return list(
        db.scalars(
            select(Habit)
            .where(Habit.user_id == user_id, Habit.archived_at.is_(None))
            .order_by(Habit.sort_order)
        )
    )


def get_last_sort_order(db: Session, user_id: str) -> int:
    last = db.scalar(
        select(Habit.sort_order).where(Habit.user_id == user_id).order_by(Habit.sort_order.desc()).limit(1)
    )
    return last or 0


def create_habit(db: Session, user_id: str, name: str) -> Habit:
    habit = Habit(user_id=user_id, name=name, sort_order=get_last_sort_order(db, user_id) + 1)
    db.add(habit)
    db.commit()
    db.refresh(habit)
    return habit


def get_habit(db: Session, user_id: str, habit_id: str) -> Optional[Habit]:
    return db.scalar(select(Habit).where(Habit.user_id == user_id, Habit.id == habit_id))


def get_habits_by_ids(db: Session, user_id: str, habit_ids: list[str]) -> list[Habit]:
    if not habit_ids:
        return []
    return list(db.scalars(select(Habit).where(Habit.user_id == user_id, Habit.id.in_(habit_ids))))


def archive_habit(db: Session, habit: Habit) -> None:
    if habit.archived_at is None:
        habit.archived_at = utcnow()
        db.commit()


def set_reminder_time(db: Session, habit: Habit, reminder_time: Optional[str]) -> None:
    habit.reminder_time = reminder_time
    db.commit()


def reorder_habits(db: Session, user_id: str, ordered_ids: list[str]) -> None:
    habits = {habit.id: habit for habit in get_habits_by_ids(db, user_id, ordered_ids)}
    for index, habit_id in enumerate(ordered_ids):
        habits[habit_id].sort_order = index + 1
    db.commit()


def delete_habit(db: Session, user_id: str, habit_id: str) -> bool:
    result = db.execute(delete(Habit).where(Habit.user_id == user_id, Habit.id == habit_id))
    db.commit()
    return bool(result.rowcount)


def get_due_reminder_habits(db: Session, user_id: str, local_time: str) -> list[Habit]:
    """Active habits whose reminder time has been reached by ``local_time`` (``HH:MM``)."""
    return list(
        db.scalars(
            select(Habit)
            .where(
                Habit.user_id == user_id,
                Habit.archived_at.is_(None),
                Habit.reminder_time.is_not(None),
                Habit.reminder_time <= local_time,
            )
            .order_by(Habit.sort_order)
        )
    )

from datetime import date
from typing import Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import HabitCompletion


def _existing_completion(db: Session, user_id: str, habit_id: str, completed_on: date) -> Optional[HabitCompletion]:
    return db.scalar(
        select(HabitCompletion).where(
            and_(
                HabitCompletion.user_id == user_id,
                HabitCompletion.habit_id == habit_id,
                HabitCompletion.completed_on == completed_on,
            )
        )
    )


def _insert_or_ignore(db: Session, user_id: str, habit_id: str, completed_on: date) -> Optional[HabitCompletion]:
    if db.scalar(
        select(HabitCompletion.id).where(
            HabitCompletion.habit_id == habit_id, HabitCompletion.completed_on == completed_on
        )
    ):
        return None

    completion = HabitCompletion(user_id=user_id, habit_id=habit_id, completed_on=completed_on)
    # A concurrent insert can still win the race; the unique constraint decides.
    try:
        with db.begin_nested():
            db.add(completion)
    except IntegrityError:
        return None
    return completion


def insert_completion(db: Session, user_id: str, habit_id: str, completed_on: date) -> Optional[HabitCompletion]:
    """Insert a completion, returning None when one already exists for that habit and day."""
    completion = _insert_or_ignore(db, user_id, habit_id, completed_on)
    db.commit()
    if completion is not None:
        db.refresh(completion)
    return completion


def insert_completions_bulk(db: Session, user_id: str, items: list[tuple[str, date]]) -> list[HabitCompletion]:
    inserted: list[HabitCompletion] = []
    for habit_id, completed_on in items:
        completion = _insert_or_ignore(db, user_id, habit_id, completed_on)
        if completion is not None:
            inserted.append(completion)
    db.commit()
    for completion in inserted:
        db.refresh(completion)
    return inserted


def get_completion(db: Session, user_id: str, habit_id: str, completed_on: date) -> Optional[HabitCompletion]:
    return _existing_completion(db, user_id, habit_id, completed_on)


def delete_completion(db: Session, user_id: str, habit_id: str, completed_on: date) -> bool:
    result = db.execute(
        delete(HabitCompletion).where(
            and_(
                HabitCompletion.user_id == user_id,
                HabitCompletion.habit_id == habit_id,
                HabitCompletion.completed_on == completed_on,
            )
        )
    )
    db.commit()
    return bool(result.rowcount)


def get_completed_habit_ids(db: Session, user_id: str, completed_on: date) -> list[str]:
    return list(
        db.scalars(
            select(HabitCompletion.habit_id).where(
                HabitCompletion.user_id == user_id, HabitCompletion.completed_on == completed_on
            )
        )
    )


def get_completion_dates_up_to(
    db: Session, user_id: str, habit_id: str, up_to: date, descending: bool = False
) -> list[str]:
    order = HabitCompletion.completed_on.desc() if descending else HabitCompletion.completed_on
    rows = db.scalars(
        select(HabitCompletion.completed_on)
        .where(
            HabitCompletion.user_id == user_id,
            HabitCompletion.habit_id == habit_id,
            HabitCompletion.completed_on <= up_to,
        )
        .order_by(order)
    )
    return [completed_on.isoformat() for completed_on in rows]


def get_completion_dates_in_range(db: Session, user_id: str, habit_id: str, start: date, end: date) -> list[str]:
    rows = db.scalars(
        select(HabitCompletion.completed_on)
        .where(
            HabitCompletion.user_id == user_id,
            HabitCompletion.habit_id == habit_id,
            HabitCompletion.completed_on >= start,
            HabitCompletion.completed_on <= end,
        )
        .order_by(HabitCompletion.completed_on)
    )
    return [completed_on.isoformat() for completed_on in rows]

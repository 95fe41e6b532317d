import sqlite3
from datetime import date, datetime
from unittest.mock import patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.crud import create_habit, insert_completion
from app.models import User


def _complete(db: Session, user: User, habit, *days: str) -> None:
    for day in days:
        insert_completion(db, user.id, habit.id, date.fromisoformat(day))


@pytest.fixture
def habit(db: Session, alice: User):
    habit = create_habit(db, alice.id, "Practice")
    habit.created_at = datetime(2025, 5, 15, 8, 0)
    db.commit()
    db.refresh(habit)
    return habit


@pytest.mark.asyncio
async def test_streaks_current_and_best(
    client: AsyncClient, db: Session, alice: User, habit, alice_headers: dict
) -> None:
    _complete(db, alice, habit, "2025-05-01", "2025-05-02", "2025-05-03", "2025-05-04", "2025-05-09", "2025-05-10")

    resp = await client.get(
        "/api/streaks", params={"habitId": habit.id, "localDate": "2025-05-10"}, headers=alice_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"currentStreak": 2, "bestStreak": 4}


@pytest.mark.asyncio
async def test_streaks_ignore_completions_after_reference(
    client: AsyncClient, db: Session, alice: User, habit, alice_headers: dict
) -> None:
    _complete(db, alice, habit, "2025-05-01", "2025-05-02", "2025-05-03", "2025-05-05", "2025-05-06", "2025-05-07")

    resp = await client.get(
        "/api/streaks", params={"habitId": habit.id, "localDate": "2025-05-03"}, headers=alice_headers
    )
    assert resp.json() == {"currentStreak": 3, "bestStreak": 3}


@pytest.mark.asyncio
async def test_streaks_zero_when_reference_missed(
    client: AsyncClient, db: Session, alice: User, habit, alice_headers: dict
) -> None:
    _complete(db, alice, habit, "2025-05-01", "2025-05-02", "2025-05-03")

    resp = await client.get(
        "/api/streaks", params={"habitId": habit.id, "localDate": "2025-05-04"}, headers=alice_headers
    )
    assert resp.json() == {"currentStreak": 0, "bestStreak": 3}


@pytest.mark.asyncio
async def test_streaks_validation(client: AsyncClient, habit, alice_headers: dict) -> None:
    missing_date = await client.get("/api/streaks", params={"habitId": habit.id}, headers=alice_headers)
    assert missing_date.status_code == 400

    bad_date = await client.get(
        "/api/streaks", params={"habitId": habit.id, "localDate": "2025-02-30"}, headers=alice_headers
    )
    assert bad_date.status_code == 400

    unknown = await client.get(
        "/api/streaks", params={"habitId": "nope", "localDate": "2025-05-10"}, headers=alice_headers
    )
    assert unknown.status_code == 400
    assert unknown.json() == {"detail": "Habit not found"}


@pytest.mark.asyncio
async def test_streaks_treat_missing_table_as_empty(client: AsyncClient, habit, alice_headers: dict) -> None:
    error = OperationalError("SELECT", {}, sqlite3.OperationalError("no such table: habit_completions"))
    with patch("app.api.progress.get_completion_dates_up_to", side_effect=error):
        resp = await client.get(
            "/api/streaks", params={"habitId": habit.id, "localDate": "2025-05-10"}, headers=alice_headers
        )
    assert resp.status_code == 200
    assert resp.json() == {"currentStreak": 0, "bestStreak": 0}


@pytest.mark.asyncio
async def test_streaks_propagate_other_storage_errors(client: AsyncClient, habit, alice_headers: dict) -> None:
    error = OperationalError("SELECT", {}, sqlite3.OperationalError("disk I/O error"))
    with patch("app.api.progress.get_completion_dates_up_to", side_effect=error):
        with pytest.raises(OperationalError):
            await client.get(
                "/api/streaks", params={"habitId": habit.id, "localDate": "2025-05-10"}, headers=alice_headers
            )


@pytest.mark.asyncio
async def test_history_lists_dates_up_to_reference(
    client: AsyncClient, db: Session, alice: User, habit, alice_headers: dict
) -> None:
    _complete(db, alice, habit, "2025-05-03", "2025-05-01", "2025-05-08")

    resp = await client.get(
        "/api/history", params={"habitId": habit.id, "localDate": "2025-05-05"}, headers=alice_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"habitId": habit.id, "dates": ["2025-05-01", "2025-05-03"]}


@pytest.mark.asyncio
async def test_calendar_clips_to_creation_and_today(
    client: AsyncClient, db: Session, alice: User, habit, alice_headers: dict, frozen_now
) -> None:
    _complete(db, alice, habit, "2025-05-10", "2025-05-15", "2025-05-18", "2025-05-20", "2025-05-21")

    resp = await client.get(
        "/api/calendar", params={"habitId": habit.id, "month": "2025-05"}, headers=alice_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "habitId": habit.id,
        "month": "2025-05",
        "dates": ["2025-05-15", "2025-05-18", "2025-05-20"],
    }


@pytest.mark.asyncio
async def test_calendar_offset_shifts_today(
    client: AsyncClient, db: Session, alice: User, habit, alice_headers: dict, frozen_now
) -> None:
    _complete(db, alice, habit, "2025-05-19", "2025-05-20")

    # 12:00 UTC minus 13 hours is still the 19th locally.
    resp = await client.get(
        "/api/calendar",
        params={"habitId": habit.id, "month": "2025-05", "tzOffsetMinutes": "780"},
        headers=alice_headers,
    )
    assert resp.json()["dates"] == ["2025-05-19"]


@pytest.mark.asyncio
async def test_calendar_month_outside_window(
    client: AsyncClient, habit, alice_headers: dict, frozen_now
) -> None:
    resp = await client.get(
        "/api/calendar", params={"habitId": habit.id, "month": "2025-04"}, headers=alice_headers
    )
    assert resp.json() == {"habitId": habit.id, "month": "2025-04", "dates": []}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("with_habit", "params"),
    [
        (False, {"month": "2025-05"}),
        (True, {"month": "2025-13"}),
        (True, {"month": "2025-05", "tzOffsetMinutes": "900"}),
        (True, {"month": "2025-05", "tzOffsetMinutes": "abc"}),
        (True, {"month": "2025-05", "tzOffsetMinutes": "1.5"}),
    ],
)
async def test_calendar_validation(
    client: AsyncClient, habit, alice_headers: dict, with_habit: bool, params: dict
) -> None:
    query = {**params, "habitId": habit.id} if with_habit else params
    resp = await client.get("/api/calendar", params=query, headers=alice_headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Habit id and month are required"}


class UndefinedTable(Exception):
    sqlstate = "42P01"


@pytest.mark.asyncio
async def test_streaks_treat_undefined_relation_sqlstate_as_empty(
    client: AsyncClient, habit, alice_headers: dict
) -> None:
    error = OperationalError("SELECT", {}, UndefinedTable('relation "habit_completions" does not exist'))
    with patch("app.api.progress.get_completion_dates_up_to", side_effect=error):
        resp = await client.get(
            "/api/streaks", params={"habitId": habit.id, "localDate": "2025-05-10"}, headers=alice_headers
        )
    assert resp.status_code == 200
    assert resp.json() == {"currentStreak": 0, "bestStreak": 0}

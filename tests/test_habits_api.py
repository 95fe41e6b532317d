import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from app.clock import utcnow
from app.crud import create_habit, get_habit, insert_completion
from app.models import HabitCompletion, User


@pytest.mark.asyncio
async def test_create_and_list_habits(client: AsyncClient, alice_headers: dict) -> None:
    first = await client.post("/api/habits", json={"name": "  Read  "}, headers=alice_headers)
    second = await client.post("/api/habits", json={"name": "Run"}, headers=alice_headers)
    assert first.status_code == 201
    assert first.json()["habit"]["name"] == "Read"
    assert second.json()["habit"]["sortOrder"] == first.json()["habit"]["sortOrder"] + 1

    resp = await client.get("/api/habits", headers=alice_headers)
    assert resp.status_code == 200
    assert [habit["name"] for habit in resp.json()["habits"]] == ["Read", "Run"]


@pytest.mark.asyncio
async def test_create_habit_requires_name(client: AsyncClient, alice_headers: dict) -> None:
    resp = await client.post("/api/habits", json={"name": "   "}, headers=alice_headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Name is required"}


@pytest.mark.asyncio
async def test_habits_are_scoped_to_owner(
    client: AsyncClient, db: Session, bob: User, alice_headers: dict
) -> None:
    create_habit(db, bob.id, "Bob's habit")
    resp = await client.get("/api/habits", headers=alice_headers)
    assert resp.json() == {"habits": []}


@pytest.mark.asyncio
async def test_reorder_habits(client: AsyncClient, db: Session, alice: User, alice_headers: dict) -> None:
    a = create_habit(db, alice.id, "A")
    b = create_habit(db, alice.id, "B")
    c = create_habit(db, alice.id, "C")

    resp = await client.patch("/api/habits", json={"orderedIds": [c.id, a.id, b.id]}, headers=alice_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    listed = await client.get("/api/habits", headers=alice_headers)
    assert [habit["name"] for habit in listed.json()["habits"]] == ["C", "A", "B"]


@pytest.mark.asyncio
async def test_reorder_rejects_duplicates_and_foreign_ids(
    client: AsyncClient, db: Session, alice: User, bob: User, alice_headers: dict
) -> None:
    mine = create_habit(db, alice.id, "Mine")
    theirs = create_habit(db, bob.id, "Theirs")

    dup = await client.patch("/api/habits", json={"orderedIds": [mine.id, mine.id]}, headers=alice_headers)
    assert dup.status_code == 400

    foreign = await client.patch("/api/habits", json={"orderedIds": [mine.id, theirs.id]}, headers=alice_headers)
    assert foreign.status_code == 400
    assert foreign.json() == {"detail": "One or more habits were not found"}


@pytest.mark.asyncio
async def test_archive_hides_habit_but_keeps_history(
    client: AsyncClient, db: Session, alice: User, alice_headers: dict
) -> None:
    habit = create_habit(db, alice.id, "Stretch")
    insert_completion(db, alice.id, habit.id, utcnow().date())

    resp = await client.patch(
        "/api/habits", json={"action": "archive", "habitId": habit.id}, headers=alice_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"operation": "archive", "archived": True}

    listed = await client.get("/api/habits", headers=alice_headers)
    assert listed.json() == {"habits": []}
    assert db.query(HabitCompletion).filter_by(habit_id=habit.id).count() == 1


@pytest.mark.asyncio
async def test_legacy_archive_id(client: AsyncClient, db: Session, alice: User, alice_headers: dict) -> None:
    habit = create_habit(db, alice.id, "Old client")
    resp = await client.patch("/api/habits", json={"archiveId": habit.id}, headers=alice_headers)
    assert resp.status_code == 200
    db.expire_all()
    assert get_habit(db, alice.id, habit.id).archived_at is not None


@pytest.mark.asyncio
async def test_set_and_clear_reminder(client: AsyncClient, db: Session, alice: User, alice_headers: dict) -> None:
    habit = create_habit(db, alice.id, "Meditate")

    set_resp = await client.patch(
        "/api/habits",
        json={"action": "setReminder", "habitId": habit.id, "reminderTime": "07:30"},
        headers=alice_headers,
    )
    assert set_resp.json() == {"operation": "setReminder", "reminderTime": "07:30"}

    listed = await client.get("/api/habits", headers=alice_headers)
    assert listed.json()["habits"][0]["reminderTime"] == "07:30"

    clear_resp = await client.patch(
        "/api/habits", json={"action": "clearReminder", "habitId": habit.id}, headers=alice_headers
    )
    assert clear_resp.json() == {"operation": "clearReminder", "reminderTime": None, "removed": True}


@pytest.mark.asyncio
@pytest.mark.parametrize("reminder_time", ["24:00", "7:30", "07:60", "0730", None])
async def test_set_reminder_rejects_bad_time(
    client: AsyncClient, db: Session, alice: User, alice_headers: dict, reminder_time
) -> None:
    habit = create_habit(db, alice.id, "Meditate")
    resp = await client.patch(
        "/api/habits",
        json={"action": "setReminder", "habitId": habit.id, "reminderTime": reminder_time},
        headers=alice_headers,
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_reminder_on_archived_habit_rejected(
    client: AsyncClient, db: Session, alice: User, alice_headers: dict
) -> None:
    habit = create_habit(db, alice.id, "Archived")
    await client.patch("/api/habits", json={"action": "archive", "habitId": habit.id}, headers=alice_headers)

    resp = await client.patch(
        "/api/habits",
        json={"action": "setReminder", "habitId": habit.id, "reminderTime": "08:00"},
        headers=alice_headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Cannot update reminder for archived habit"}


@pytest.mark.asyncio
async def test_hard_delete_cascades_completions(
    client: AsyncClient, db: Session, alice: User, alice_headers: dict
) -> None:
    habit = create_habit(db, alice.id, "Gone")
    insert_completion(db, alice.id, habit.id, utcnow().date())

    resp = await client.patch(
        "/api/habits", json={"action": "hardDelete", "habitId": habit.id}, headers=alice_headers
    )
    assert resp.json() == {"operation": "hardDelete", "deleted": True}
    assert db.query(HabitCompletion).count() == 0


@pytest.mark.asyncio
async def test_delete_by_query_param(client: AsyncClient, db: Session, alice: User, alice_headers: dict) -> None:
    habit = create_habit(db, alice.id, "Temporary")

    resp = await client.delete("/api/habits", params={"habitId": habit.id}, headers=alice_headers)
    assert resp.status_code == 200

    missing = await client.delete("/api/habits", params={"habitId": habit.id}, headers=alice_headers)
    assert missing.status_code == 404

    no_id = await client.delete("/api/habits", headers=alice_headers)
    assert no_id.status_code == 400


@pytest.mark.asyncio
async def test_patch_on_foreign_habit_is_not_found(
    client: AsyncClient, db: Session, bob: User, alice_headers: dict
) -> None:
    habit = create_habit(db, bob.id, "Bob's")
    resp = await client.patch(
        "/api/habits", json={"action": "hardDelete", "habitId": habit.id}, headers=alice_headers
    )
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Habit not found"}
    db.expire_all()
    assert get_habit(db, bob.id, habit.id) is not None

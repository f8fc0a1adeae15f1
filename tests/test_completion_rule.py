from datetime import timedelta

import pytest
from sqlalchemy import select

from app.models.todo import Todo
from app.models.user import User
from app.services import streak as streak_service
from app.services.streak import check_day_cleared, pending_count

from conftest import TODAY


@pytest.fixture
def claims(monkeypatch):
    """Record every claim_daily call made by the completion check."""
    calls = []
    original = streak_service.claim_daily

    async def recording_claim(db, user_id, today):
        calls.append((user_id, today))
        return await original(db, user_id, today)

    monkeypatch.setattr(streak_service, "claim_daily", recording_claim)
    return calls


async def _add_todos(db, user, day, count, completed=False):
    todos = [Todo(user_id=user.id, title=f"task {i}", date=day, completed=completed) for i in range(count)]
    db.add_all(todos)
    await db.commit()
    return todos


async def test_pending_count(db, user):
    await _add_todos(db, user, TODAY, 2)
    await _add_todos(db, user, TODAY, 1, completed=True)
    await _add_todos(db, user, TODAY + timedelta(days=1), 4)

    assert await pending_count(db, user.id, TODAY) == 2
    assert await pending_count(db, user.id, TODAY - timedelta(days=1)) == 0


async def test_not_fired_without_completion_transition(db, user, claims):
    (todo,) = await _add_todos(db, user, TODAY, 1, completed=True)
    assert await check_day_cleared(db, todo, just_completed=False, today=TODAY) is None
    assert claims == []


async def test_not_fired_while_tasks_remain(db, user, claims):
    first, _ = await _add_todos(db, user, TODAY, 2)
    first.completed = True
    await db.commit()

    assert await check_day_cleared(db, first, just_completed=True, today=TODAY) is None
    assert claims == []


async def test_fires_once_when_day_cleared(db, user, claims):
    (todo,) = await _add_todos(db, user, TODAY, 1)
    todo.completed = True
    await db.commit()

    assert await check_day_cleared(db, todo, just_completed=True, today=TODAY) == 1
    assert claims == [(user.id, TODAY)]


async def test_past_date_never_fires(db, user, claims):
    yesterday = TODAY - timedelta(days=1)
    (todo,) = await _add_todos(db, user, yesterday, 1)
    todo.completed = True
    await db.commit()

    assert await check_day_cleared(db, todo, just_completed=True, today=TODAY) is None
    assert claims == []


async def test_three_tasks_scenario_over_http(client, db, user, auth, claims):
    headers = auth(user)
    ids = []
    for title in ("write", "run", "read"):
        resp = await client.post("/todos", json={"title": title, "date": TODAY.isoformat()}, headers=headers)
        assert resp.status_code == 201
        ids.append(resp.json()["id"])

    for todo_id in ids[:2]:
        resp = await client.put(f"/todos/{todo_id}", json={"completed": True}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["reward"] is None
    assert claims == []

    resp = await client.put(f"/todos/{ids[2]}", json={"completed": True}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["reward"] == {"streak": 1, "message": "Daily reward updated!"}
    assert claims == [(user.id, TODAY)]

    # re-sending completed=true on a done task is not a new completion
    resp = await client.put(f"/todos/{ids[2]}", json={"completed": True}, headers=headers)
    assert resp.json()["reward"] is None
    assert len(claims) == 1


async def test_consecutive_cleared_days_extend_streak(client, user, auth, clock):
    headers = auth(user)
    for expected in (1, 2, 3):
        resp = await client.post("/todos", json={"title": "daily", "date": clock.today.isoformat()}, headers=headers)
        todo_id = resp.json()["id"]
        resp = await client.put(f"/todos/{todo_id}", json={"completed": True}, headers=headers)
        assert resp.json()["reward"]["streak"] == expected
        clock.advance()

    clock.advance(2)
    resp = await client.post("/todos", json={"title": "late", "date": clock.today.isoformat()}, headers=headers)
    resp = await client.put(f"/todos/{resp.json()['id']}", json={"completed": True}, headers=headers)
    assert resp.json()["reward"]["streak"] == 1


async def test_user_without_tasks_today_keeps_streak(client, db, user, auth):
    resp = await client.get(f"/rewards/{user.id}", headers=auth(user))
    assert resp.json() == {"user_id": user.id, "streak": 0, "last_completed_date": None}

    row = (await db.execute(select(User).where(User.id == user.id))).scalar_one()
    assert row.streak == 0


async def test_not_fired_when_today_already_claimed(db, user, claims):
    (todo,) = await _add_todos(db, user, TODAY, 1)
    user.streak = 2
    user.last_completed_date = TODAY
    todo.completed = True
    await db.commit()

    assert await check_day_cleared(db, todo, just_completed=True, today=TODAY) is None
    assert claims == []


async def test_cleared_day_is_rewarded_only_once(client, user, auth, claims):
    headers = auth(user)
    resp = await client.post("/todos", json={"title": "a", "date": TODAY.isoformat()}, headers=headers)
    first_id = resp.json()["id"]

    resp = await client.put(f"/todos/{first_id}", json={"completed": True}, headers=headers)
    assert resp.json()["reward"]["streak"] == 1

    # undo and redo the same task
    await client.put(f"/todos/{first_id}", json={"completed": False}, headers=headers)
    resp = await client.put(f"/todos/{first_id}", json={"completed": True}, headers=headers)
    assert resp.json()["reward"] is None

    # a task added after the day was cleared
    resp = await client.post("/todos", json={"title": "b", "date": TODAY.isoformat()}, headers=headers)
    resp = await client.put(f"/todos/{resp.json()['id']}", json={"completed": True}, headers=headers)
    assert resp.json()["reward"] is None

    assert claims == [(user.id, TODAY)]
    resp = await client.get(f"/rewards/{user.id}", headers=headers)
    assert resp.json()["streak"] == 1

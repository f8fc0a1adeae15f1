from datetime import timedelta

from conftest import TODAY


async def _create(client, headers, **fields):
    body = {"title": "Buy milk", "date": TODAY.isoformat(), **fields}
    resp = await client.post("/todos", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_create_and_list(client, user, auth):
    headers = auth(user)
    created = await _create(
        client,
        headers,
        description="2 litres",
        start_time="09:00",
        end_time="09:30",
        importance="high",
    )
    assert created["user_id"] == user.id
    assert created["importance"] == "high"
    assert created["completed"] is False
    assert created["completed_at"] is None
    assert created["start_time"] == "09:00:00"

    await _create(client, headers, title="Second")
    resp = await client.get(f"/todos/{user.id}", headers=headers)
    assert resp.status_code == 200
    assert [t["title"] for t in resp.json()] == ["Buy milk", "Second"]


async def test_create_defaults_importance_to_normal(client, user, auth):
    created = await _create(client, auth(user))
    assert created["importance"] == "normal"


async def test_create_requires_title_and_date(client, user, auth):
    resp = await client.post("/todos", json={"date": TODAY.isoformat()}, headers=auth(user))
    assert resp.status_code == 422
    resp = await client.post("/todos", json={"title": "No date"}, headers=auth(user))
    assert resp.status_code == 422


async def test_create_rejects_unknown_importance(client, user, auth):
    resp = await client.post(
        "/todos", json={"title": "x", "date": TODAY.isoformat(), "importance": "urgent"}, headers=auth(user)
    )
    assert resp.status_code == 422


async def test_update_merges_only_provided_fields(client, user, auth):
    headers = auth(user)
    todo = await _create(client, headers, description="keep me", importance="low")

    tomorrow = (TODAY + timedelta(days=1)).isoformat()
    resp = await client.put(f"/todos/{todo['id']}", json={"title": "Renamed", "date": tomorrow}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Renamed"
    assert body["date"] == tomorrow
    assert body["description"] == "keep me"
    assert body["importance"] == "low"

    # explicit nulls keep the previous value too
    resp = await client.put(f"/todos/{todo['id']}", json={"description": None}, headers=headers)
    assert resp.json()["description"] == "keep me"


async def test_completed_at_follows_completed(client, user, auth):
    headers = auth(user)
    todo = await _create(client, headers, date=(TODAY + timedelta(days=3)).isoformat())

    resp = await client.put(f"/todos/{todo['id']}", json={"completed": True}, headers=headers)
    done = resp.json()
    assert done["completed"] is True
    assert done["completed_at"] is not None
    assert done["reward"] is None  # not today's task

    resp = await client.put(f"/todos/{todo['id']}", json={"title": "still done"}, headers=headers)
    assert resp.json()["completed_at"] == done["completed_at"]

    resp = await client.put(f"/todos/{todo['id']}", json={"completed": False}, headers=headers)
    undone = resp.json()
    assert undone["completed"] is False
    assert undone["completed_at"] is None


async def test_delete(client, user, auth):
    headers = auth(user)
    todo = await _create(client, headers)

    resp = await client.delete(f"/todos/{todo['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Todo deleted"}

    resp = await client.get(f"/todos/{user.id}", headers=headers)
    assert resp.json() == []
    resp = await client.delete(f"/todos/{todo['id']}", headers=headers)
    assert resp.status_code == 404


async def test_update_missing_todo(client, user, auth):
    resp = await client.put("/todos/404", json={"title": "x"}, headers=auth(user))
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Todo not found"}


async def test_other_users_todos_are_hidden(client, make_user, user, auth):
    other = await make_user("other@example.com")
    todo = await _create(client, auth(other))

    resp = await client.put(f"/todos/{todo['id']}", json={"title": "mine now"}, headers=auth(user))
    assert resp.status_code == 404
    resp = await client.delete(f"/todos/{todo['id']}", headers=auth(user))
    assert resp.status_code == 404
    resp = await client.get(f"/todos/{other.id}", headers=auth(user))
    assert resp.status_code == 403


async def test_admin_can_read_any_users_todos(client, user, admin, auth):
    await _create(client, auth(user))
    resp = await client.get(f"/todos/{user.id}", headers=auth(admin))
    assert resp.status_code == 200
    assert len(resp.json()) == 1


async def test_requires_authentication(client, user):
    resp = await client.get(f"/todos/{user.id}")
    assert resp.status_code == 401
    resp = await client.get(f"/todos/{user.id}", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401

from __future__ import annotations

import pytest
from httpx import AsyncClient

from conftest import ADMIN, ALICE, BOB, as_user


@pytest.mark.anyio
async def test_health_and_version(client: AsyncClient) -> None:
  assert (await client.get("/health")).json() == {"ok": True}
  assert "version" in (await client.get("/version")).json()


@pytest.mark.anyio
async def test_missing_identity_is_unauthorized(client: AsyncClient) -> None:
  res = await client.get("/boards")
  assert res.status_code == 401, res.text


@pytest.mark.anyio
async def test_unknown_role_is_rejected(client: AsyncClient) -> None:
  res = await client.get("/boards", headers={"X-User-Name": "eve", "X-User-Role": "SUPERUSER"})
  assert res.status_code == 422, res.text


@pytest.mark.anyio
async def test_role_prefix_is_accepted(client: AsyncClient) -> None:
  res = await client.get("/boards", headers={"X-User-Name": "root", "X-User-Role": "ROLE_ADMIN"})
  assert res.status_code == 200, res.text


@pytest.mark.anyio
async def test_board_and_task_flow(client: AsyncClient) -> None:
  admin, alice = as_user(ADMIN), as_user(ALICE)

  created = await client.post("/boards", json={"name": "B1"}, headers=alice)
  assert created.status_code == 200, created.text
  board = created.json()
  assert board["columns"] == ["To Do", "In Progress", "Done"]
  assert board["createdBy"] == "alice"

  res = await client.post("/tasks", json={"boardId": board["id"], "title": "Fix bug", "assignedTo": "alice"}, headers=admin)
  assert res.status_code == 200, res.text
  task = res.json()
  assert task["status"] == "To Do"
  assert task["priority"] == "Medium"
  assert task["createdBy"] == "root"

  notes = (await client.get("/notifications", headers=alice)).json()
  assert [(n["type"], n["targetUser"], n["triggeredBy"]) for n in notes] == [("TASK_CREATED", "alice", "root")]

  body = {k: task[k] for k in ("title", "description", "priority", "assignedTo", "boardId")}
  forbidden = await client.put(f"/tasks/{task['id']}", json={**body, "title": "Other", "status": "Done"}, headers=alice)
  assert forbidden.status_code == 403, forbidden.text

  ok = await client.put(f"/tasks/{task['id']}", json={**body, "status": "Done"}, headers=alice)
  assert ok.status_code == 200, ok.text
  assert ok.json()["status"] == "Done"

  inbox = (await client.get("/notifications", headers=admin)).json()
  updated = [n for n in inbox if n["type"] == "TASK_UPDATED"]
  assert len(updated) == 1
  assert updated[0]["targetUser"] == "ADMIN"

  count = (await client.get("/notifications/unread-count", headers=alice)).json()
  assert count == {"count": 1}


@pytest.mark.anyio
async def test_status_endpoint_and_archive_flow(client: AsyncClient) -> None:
  admin, alice, bob = as_user(ADMIN), as_user(ALICE), as_user(BOB)
  board = (await client.post("/boards", json={"name": "Ops"}, headers=admin)).json()
  task = (await client.post("/tasks", json={"boardId": board["id"], "title": "Deploy", "assignedTo": "alice"}, headers=admin)).json()

  assert (await client.put(f"/tasks/{task['id']}/status", json={"status": "In Progress"}, headers=bob)).status_code == 403
  res = await client.put(f"/tasks/{task['id']}/status", json={"status": "In Progress"}, headers=alice)
  assert res.status_code == 200, res.text
  assert res.json()["status"] == "In Progress"
  inbox = (await client.get("/notifications", headers=admin)).json()
  to_admin = [(n["type"], n["triggeredBy"], n["taskId"]) for n in inbox if n["targetUser"] == "ADMIN"]
  assert to_admin == [("TASK_UPDATED", "alice", task["id"])]

  assert (await client.delete(f"/tasks/{task['id']}", headers=alice)).status_code == 403
  archived = await client.delete(f"/tasks/{task['id']}", headers=admin)
  assert archived.status_code == 200, archived.text
  assert archived.json()["archived"] is True

  assert [t["id"] for t in (await client.get("/tasks/archived", headers=alice)).json()] == [task["id"]]
  assert (await client.get("/tasks", headers=alice)).json() == []

  again = await client.delete(f"/tasks/{task['id']}", headers=admin)
  assert again.status_code == 400, again.text

  restored = await client.put(f"/tasks/{task['id']}/restore", headers=alice)
  assert restored.status_code == 200, restored.text
  assert [t["id"] for t in (await client.get("/tasks", headers=alice)).json()] == [task["id"]]


@pytest.mark.anyio
async def test_read_paths_hide_existence(client: AsyncClient) -> None:
  admin, alice, bob = as_user(ADMIN), as_user(ALICE), as_user(BOB)
  board = (await client.post("/boards", json={"name": "Private"}, headers=alice)).json()
  task = (await client.post("/tasks", json={"boardId": board["id"], "title": "Secret"}, headers=admin)).json()

  assert (await client.get(f"/boards/{board['id']}", headers=bob)).status_code == 404
  assert (await client.get(f"/tasks/{task['id']}", headers=bob)).status_code == 404
  assert (await client.get(f"/tasks/{task['id']}", headers=alice)).status_code == 200
  assert (await client.get(f"/boards/{board['id']}/tasks", headers=bob)).json() == []
  assert (await client.get("/boards/missing", headers=admin)).status_code == 404


@pytest.mark.anyio
async def test_task_on_missing_board_is_bad_request(client: AsyncClient) -> None:
  res = await client.post("/tasks", json={"boardId": "missing", "title": "x"}, headers=as_user(ADMIN))
  assert res.status_code == 400, res.text


@pytest.mark.anyio
async def test_board_listings(client: AsyncClient) -> None:
  admin, alice = as_user(ADMIN), as_user(ALICE)
  own = (await client.post("/boards", json={"name": "own"}, headers=alice)).json()
  other = (await client.post("/boards", json={"name": "other"}, headers=admin)).json()
  await client.post("/tasks", json={"boardId": other["id"], "title": "t", "assignedTo": "alice"}, headers=admin)

  assert [b["id"] for b in (await client.get("/boards/owned", headers=alice)).json()] == [own["id"]]
  assert [b["id"] for b in (await client.get("/boards/accessible", headers=alice)).json()] == [other["id"]]
  assert len((await client.get("/boards", headers=admin)).json()) == 2

  upd = await client.put(f"/boards/{own['id']}", json={"name": "own v2"}, headers=alice)
  assert upd.status_code == 200, upd.text
  assert upd.json()["columns"] == ["To Do", "In Progress", "Done"]
  assert (await client.put(f"/boards/{other['id']}", json={"name": "x"}, headers=alice)).status_code == 403
  assert (await client.delete(f"/boards/{own['id']}", headers=alice)).json() == {"ok": True}


@pytest.mark.anyio
async def test_mark_read_endpoints(client: AsyncClient) -> None:
  admin, alice, bob = as_user(ADMIN), as_user(ALICE), as_user(BOB)
  board = (await client.post("/boards", json={"name": "N"}, headers=admin)).json()
  await client.post("/tasks", json={"boardId": board["id"], "title": "a", "assignedTo": "alice"}, headers=admin)
  await client.post("/tasks", json={"boardId": board["id"], "title": "b", "assignedTo": "alice"}, headers=admin)

  first = (await client.get("/notifications", headers=alice)).json()[0]
  assert (await client.put(f"/notifications/{first['id']}/read", headers=bob)).status_code == 200
  assert (await client.get("/notifications/unread-count", headers=alice)).json() == {"count": 2}

  assert (await client.put(f"/notifications/{first['id']}/read", headers=alice)).status_code == 200
  assert (await client.get("/notifications/unread-count", headers=alice)).json() == {"count": 1}

  res = await client.put("/notifications/mark-all-read", headers=alice)
  assert res.json() == {"ok": True, "count": 1}
  assert (await client.get("/notifications/unread-count", headers=alice)).json() == {"count": 0}
  assert (await client.put("/notifications/missing/read", headers=alice)).status_code == 404


@pytest.mark.anyio
async def test_admin_only_endpoints(client: AsyncClient) -> None:
  admin, alice = as_user(ADMIN), as_user(ALICE)
  await client.post("/boards", json={"name": "Audited"}, headers=alice)

  assert (await client.get("/audit", headers=alice)).status_code == 403
  audit = await client.get("/audit", headers=admin)
  assert audit.status_code == 200, audit.text
  assert [e["eventType"] for e in audit.json()] == ["board.created"]
  assert audit.json()[0]["actor"] == "alice"

  assert (await client.get("/system/metrics", headers=alice)).status_code == 403
  metrics = await client.get("/system/metrics", headers=admin)
  assert metrics.status_code == 200, metrics.text
  assert metrics.json()["metrics"]["notificationsCreated"] >= 1


@pytest.mark.anyio
async def test_admin_reassign_over_http_notifies_new_assignee(client: AsyncClient) -> None:
  admin, bob = as_user(ADMIN), as_user(BOB)
  board = (await client.post("/boards", json={"name": "Ops"}, headers=admin)).json()
  task = (await client.post("/tasks", json={"boardId": board["id"], "title": "Deploy", "assignedTo": "alice"}, headers=admin)).json()

  body = {k: task[k] for k in ("title", "description", "status", "priority")}
  res = await client.put(f"/tasks/{task['id']}", json={**body, "assignedTo": "bob"}, headers=admin)
  assert res.status_code == 200, res.text
  assert res.json()["assignedTo"] == "bob"

  notes = (await client.get("/notifications", headers=bob)).json()
  assert [(n["type"], n["triggeredBy"]) for n in notes] == [("TASK_ASSIGNED", "root")]
  everything = (await client.get("/notifications", headers=admin)).json()
  assert sorted((n["type"], n["targetUser"]) for n in everything) == [("TASK_ASSIGNED", "bob"), ("TASK_CREATED", "alice")]

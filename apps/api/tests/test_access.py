from __future__ import annotations

import itertools

import pytest

from boardhub import access
from boardhub.entities import Board, Identity, Role, Task
from conftest import ADMIN, ALICE, BOB, make_board, make_task

NAMES = ["root", "alice", "bob"]


def _board(created_by: str) -> Board:
  return Board(id="b1", name="B1", description="", created_by=created_by, columns=("To Do",))


def _task(created_by: str, assigned_to: str | None) -> Task:
  return Task(
    id="t1",
    title="T",
    description="",
    status="To Do",
    priority="Medium",
    assigned_to=assigned_to,
    created_by=created_by,
    board_id="b1",
  )


def _identities() -> list[Identity]:
  return [Identity(name=n, role=r) for n in NAMES for r in Role]


def test_board_access_matrix() -> None:
  for owner, ident in itertools.product(NAMES, _identities()):
    b = _board(owner)
    expected = ident.role is Role.ADMIN or owner == ident.name
    assert access.can_access_board(b, ident) is expected
    assert access.can_modify_board(b, ident) is expected


def test_task_access_matrix() -> None:
  for creator, assignee, owner, ident in itertools.product(NAMES, NAMES + [None], NAMES, _identities()):
    t = _task(creator, assignee)
    b = _board(owner)
    expected = (
      ident.role is Role.ADMIN or creator == ident.name or assignee == ident.name or owner == ident.name
    )
    assert access.can_access_task(t, b, ident) is expected


def test_task_access_without_board_ignores_board_clause() -> None:
  t = _task("root", "bob")
  assert access.can_access_task(t, None, ALICE) is False
  assert access.can_access_task(t, None, BOB) is True


def test_modify_task_requires_admin_or_assignee() -> None:
  assert access.can_modify_task(_task("root", None), ADMIN) is True
  assert access.can_modify_task(_task("root", "alice"), ALICE) is True
  assert access.can_modify_task(_task("root", "alice"), BOB) is False
  assert access.can_modify_task(_task("root", None), ALICE) is False
  # Creating a task does not let a user modify it.
  assert access.can_modify_task(_task("alice", "bob"), ALICE) is False


def test_only_admin_creates_tasks() -> None:
  assert access.can_create_task_in_board(ADMIN) is True
  assert access.can_create_task_in_board(ALICE) is False


@pytest.mark.anyio
async def test_board_listings_use_different_rules(store) -> None:
  owned = await make_board(store, ALICE, name="Alice board")
  other = await make_board(store, ADMIN, name="Admin board")
  await make_task(store, other, assigned_to="alice")

  assert [b.id for b in await access.get_all_boards(store, ALICE)] == [owned.id]
  assert [b.id for b in await access.get_accessible_boards(store, ALICE)] == [other.id]
  assert {b.id for b in await access.get_all_boards(store, ADMIN)} == {owned.id, other.id}
  assert {b.id for b in await access.get_accessible_boards(store, ADMIN)} == {owned.id, other.id}


@pytest.mark.anyio
async def test_accessible_boards_are_deduplicated(store) -> None:
  b = await make_board(store)
  await make_task(store, b, title="one", assigned_to="alice")
  await make_task(store, b, title="two", assigned_to="alice")

  assert [x.id for x in await access.get_accessible_boards(store, ALICE)] == [b.id]
  assert await access.get_accessible_boards(store, BOB) == []


@pytest.mark.anyio
async def test_get_all_tasks_by_role(store) -> None:
  b = await make_board(store)
  mine = await make_task(store, b, title="mine", assigned_to="alice")
  await make_task(store, b, title="theirs", assigned_to="bob")
  await make_task(store, b, title="nobody")

  assert [t.id for t in await access.get_all_tasks(store, ALICE)] == [mine.id]
  assert len(await access.get_all_tasks(store, ADMIN)) == 3

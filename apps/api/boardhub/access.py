"""Who may read or change boards and tasks.

The single-entity predicates are pure. The listing helpers read through a
`Store` but apply the same ownership and assignment rules.
"""

from __future__ import annotations

from boardhub.entities import Board, Identity, Task
from boardhub.store import Store


def can_access_board(board: Board, identity: Identity) -> bool:
  # Having a task assigned on a board does not grant access to the board.
  return identity.is_admin or board.created_by == identity.name


def can_modify_board(board: Board, identity: Identity) -> bool:
  return can_access_board(board, identity)


def can_access_task(task: Task, board: Board | None, identity: Identity) -> bool:
  if identity.is_admin:
    return True
  if task.created_by == identity.name or task.assigned_to == identity.name:
    return True
  return board is not None and board.created_by == identity.name


def can_modify_task(task: Task, identity: Identity) -> bool:
  if identity.is_admin:
    return True
  return task.assigned_to is not None and task.assigned_to == identity.name


def can_create_task_in_board(identity: Identity) -> bool:
  return identity.is_admin


async def get_all_boards(store: Store, identity: Identity) -> list[Board]:
  if identity.is_admin:
    return await store.list_boards()
  return await store.boards_created_by(identity.name)


async def get_accessible_boards(store: Store, identity: Identity) -> list[Board]:
  if identity.is_admin:
    return await store.list_boards()
  tasks = await store.tasks_assigned_to(identity.name)
  board_ids = list(dict.fromkeys(t.board_id for t in tasks))
  return await store.boards_by_ids(board_ids)


async def get_all_tasks(store: Store, identity: Identity, *, archived: bool | None = None) -> list[Task]:
  if identity.is_admin:
    return await store.list_tasks(archived=archived)
  return await store.tasks_assigned_to(identity.name, archived=archived)

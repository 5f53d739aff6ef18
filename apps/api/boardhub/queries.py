from __future__ import annotations

from boardhub import access
from boardhub.entities import Board, Identity, Task
from boardhub.errors import NotFound
from boardhub.store import Store


async def get_board(store: Store, board_id: str, identity: Identity) -> Board:
  board = await store.get_board(board_id)
  if board is None or not access.can_access_board(board, identity):
    raise NotFound("Board not found")
  return board


async def list_boards(store: Store, identity: Identity) -> list[Board]:
  return await access.get_accessible_boards(store, identity)


async def list_owned_boards(store: Store, identity: Identity) -> list[Board]:
  return await access.get_all_boards(store, identity)


async def get_task(store: Store, task_id: str, identity: Identity) -> Task:
  task = await store.get_task(task_id)
  if task is None:
    raise NotFound("Task not found")
  board = await store.get_board(task.board_id)
  if not access.can_access_task(task, board, identity):
    raise NotFound("Task not found")
  return task


async def list_tasks(store: Store, identity: Identity) -> list[Task]:
  return await access.get_all_tasks(store, identity, archived=False)


async def list_archived_tasks(store: Store, identity: Identity) -> list[Task]:
  return await access.get_all_tasks(store, identity, archived=True)


async def list_board_tasks(store: Store, board_id: str, identity: Identity) -> list[Task]:
  board = await store.get_board(board_id)
  if board is None:
    raise NotFound("Board not found")
  tasks = await store.tasks_by_board(board_id)
  return [t for t in tasks if not t.archived and access.can_access_task(t, board, identity)]

from __future__ import annotations

from fastapi import APIRouter, Depends

from boardhub import queries
from boardhub.deps import get_identity, get_store
from boardhub.entities import Identity
from boardhub.schemas import TaskCreateIn, TaskOut, TaskStatusIn, TaskUpdateIn
from boardhub.store import SqlStore
from boardhub.tasks import service
from boardhub.tasks.service import TaskChanges

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskOut])
async def list_tasks(identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> list[TaskOut]:
  return [TaskOut.of(t) for t in await queries.list_tasks(store, identity)]


@router.get("/archived", response_model=list[TaskOut])
async def list_archived_tasks(
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> list[TaskOut]:
  return [TaskOut.of(t) for t in await queries.list_archived_tasks(store, identity)]


@router.post("", response_model=TaskOut)
async def create_task(
  payload: TaskCreateIn,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> TaskOut:
  t = await service.create_task(
    store,
    identity,
    board_id=payload.boardId,
    title=payload.title,
    description=payload.description,
    status=payload.status,
    priority=payload.priority,
    assigned_to=payload.assignedTo,
  )
  return TaskOut.of(t)


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(task_id: str, identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> TaskOut:
  return TaskOut.of(await queries.get_task(store, task_id, identity))


@router.put("/{task_id}", response_model=TaskOut)
async def update_task(
  task_id: str,
  payload: TaskUpdateIn,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> TaskOut:
  changes = TaskChanges(
    title=payload.title,
    description=payload.description,
    status=payload.status,
    priority=payload.priority,
    assigned_to=payload.assignedTo,
    board_id=payload.boardId,
  )
  return TaskOut.of(await service.update_task(store, task_id, identity, changes))


@router.put("/{task_id}/status", response_model=TaskOut)
async def update_task_status(
  task_id: str,
  payload: TaskStatusIn,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> TaskOut:
  return TaskOut.of(await service.update_task_status(store, task_id, identity, payload.status))


@router.delete("/{task_id}", response_model=TaskOut)
async def archive_task(task_id: str, identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> TaskOut:
  return TaskOut.of(await service.archive_task(store, task_id, identity))


@router.put("/{task_id}/restore", response_model=TaskOut)
async def restore_task(task_id: str, identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> TaskOut:
  return TaskOut.of(await service.restore_task(store, task_id, identity))

from __future__ import annotations

from typing import Any, Iterable, Protocol

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from boardhub import models
from boardhub.entities import Board, Notification, NotificationType, Task
from boardhub.errors import NotFound


class Store(Protocol):
  """Keyed store the core reads and writes through.

  Every method is a single round trip; writes become durable on `commit()`.
  """

  async def get_board(self, board_id: str) -> Board | None: ...
  async def list_boards(self) -> list[Board]: ...
  async def boards_created_by(self, name: str) -> list[Board]: ...
  async def boards_by_ids(self, board_ids: Iterable[str]) -> list[Board]: ...
  async def add_board(self, board: Board) -> Board: ...
  async def save_board(self, board: Board) -> Board: ...
  async def delete_board(self, board_id: str) -> None: ...

  async def get_task(self, task_id: str) -> Task | None: ...
  async def list_tasks(self, *, archived: bool | None = None) -> list[Task]: ...
  async def tasks_by_board(self, board_id: str) -> list[Task]: ...
  async def tasks_assigned_to(self, name: str, *, archived: bool | None = None) -> list[Task]: ...
  async def add_task(self, task: Task) -> Task: ...
  async def save_task(self, task: Task) -> Task: ...

  async def get_notification(self, notification_id: str) -> Notification | None: ...
  async def list_notifications(self) -> list[Notification]: ...
  async def notifications_for(self, target_user: str) -> list[Notification]: ...
  async def add_notification(self, notification: Notification, *, dedupe_key: str) -> Notification | None: ...
  async def mark_read(self, notification_id: str) -> bool: ...
  async def mark_all_read(self, target_user: str | None) -> int: ...
  async def count_unread(self, target_user: str | None) -> int: ...

  async def add_audit(self, row: models.AuditEvent) -> None: ...

  async def commit(self) -> None: ...
  async def rollback(self) -> None: ...


def _board(r: models.Board) -> Board:
  return Board(
    id=r.id,
    name=r.name,
    description=r.description or "",
    created_by=r.created_by,
    columns=tuple(r.columns or ()),
    created_at=r.created_at,
    updated_at=r.updated_at,
  )


def _task(r: models.Task) -> Task:
  return Task(
    id=r.id,
    title=r.title,
    description=r.description or "",
    status=r.status,
    priority=r.priority,
    assigned_to=r.assigned_to,
    created_by=r.created_by,
    board_id=r.board_id,
    archived=bool(r.archived),
    created_at=r.created_at,
    updated_at=r.updated_at,
  )


def _notification(r: models.Notification) -> Notification:
  return Notification(
    id=r.id,
    message=r.message,
    type=NotificationType(r.type),
    target_user=r.target_user,
    triggered_by=r.triggered_by,
    task_id=r.task_id,
    task_title=r.task_title,
    board_id=r.board_id,
    board_name=r.board_name,
    read=bool(r.is_read),
    created_at=r.created_at,
  )


class SqlStore:
  def __init__(self, db: AsyncSession) -> None:
    self.db = db

  # boards

  async def get_board(self, board_id: str) -> Board | None:
    res = await self.db.execute(select(models.Board).where(models.Board.id == board_id))
    r = res.scalar_one_or_none()
    return _board(r) if r else None

  async def list_boards(self) -> list[Board]:
    res = await self.db.execute(select(models.Board).order_by(models.Board.created_at.asc()))
    return [_board(r) for r in res.scalars().all()]

  async def boards_created_by(self, name: str) -> list[Board]:
    res = await self.db.execute(
      select(models.Board).where(models.Board.created_by == name).order_by(models.Board.created_at.asc())
    )
    return [_board(r) for r in res.scalars().all()]

  async def boards_by_ids(self, board_ids: Iterable[str]) -> list[Board]:
    ids = list(board_ids)
    if not ids:
      return []
    res = await self.db.execute(select(models.Board).where(models.Board.id.in_(ids)))
    by_id = {r.id: _board(r) for r in res.scalars().all()}
    return [by_id[i] for i in ids if i in by_id]

  async def add_board(self, board: Board) -> Board:
    now = models.utcnow()
    r = models.Board(
      id=board.id,
      name=board.name,
      description=board.description,
      created_by=board.created_by,
      columns=list(board.columns),
      created_at=now,
      updated_at=now,
    )
    self.db.add(r)
    await self.db.flush()
    return _board(r)

  async def save_board(self, board: Board) -> Board:
    r = await self.db.get(models.Board, board.id)
    if r is None:
      raise NotFound("Board not found")
    r.name = board.name
    r.description = board.description
    r.columns = list(board.columns)
    r.updated_at = models.utcnow()
    await self.db.flush()
    return _board(r)

  async def delete_board(self, board_id: str) -> None:
    await self.db.execute(delete(models.Board).where(models.Board.id == board_id))

  # tasks

  async def get_task(self, task_id: str) -> Task | None:
    res = await self.db.execute(select(models.Task).where(models.Task.id == task_id))
    r = res.scalar_one_or_none()
    return _task(r) if r else None

  async def list_tasks(self, *, archived: bool | None = None) -> list[Task]:
    q = select(models.Task)
    if archived is not None:
      q = q.where(models.Task.archived.is_(archived))
    res = await self.db.execute(q.order_by(models.Task.created_at.asc()))
    return [_task(r) for r in res.scalars().all()]

  async def tasks_by_board(self, board_id: str) -> list[Task]:
    res = await self.db.execute(
      select(models.Task).where(models.Task.board_id == board_id).order_by(models.Task.created_at.asc())
    )
    return [_task(r) for r in res.scalars().all()]

  async def tasks_assigned_to(self, name: str, *, archived: bool | None = None) -> list[Task]:
    q = select(models.Task).where(models.Task.assigned_to == name)
    if archived is not None:
      q = q.where(models.Task.archived.is_(archived))
    res = await self.db.execute(q.order_by(models.Task.created_at.asc()))
    return [_task(r) for r in res.scalars().all()]

  async def add_task(self, task: Task) -> Task:
    now = models.utcnow()
    r = models.Task(
      id=task.id,
      board_id=task.board_id,
      title=task.title,
      description=task.description,
      status=task.status,
      priority=task.priority,
      assigned_to=task.assigned_to,
      created_by=task.created_by,
      archived=task.archived,
      created_at=now,
      updated_at=now,
    )
    self.db.add(r)
    await self.db.flush()
    return _task(r)

  async def save_task(self, task: Task) -> Task:
    r = await self.db.get(models.Task, task.id)
    if r is None:
      raise NotFound("Task not found")
    r.title = task.title
    r.description = task.description
    r.status = task.status
    r.priority = task.priority
    r.assigned_to = task.assigned_to
    r.archived = task.archived
    r.updated_at = models.utcnow()
    await self.db.flush()
    return _task(r)

  # notifications

  async def get_notification(self, notification_id: str) -> Notification | None:
    res = await self.db.execute(select(models.Notification).where(models.Notification.id == notification_id))
    r = res.scalar_one_or_none()
    return _notification(r) if r else None

  async def list_notifications(self) -> list[Notification]:
    res = await self.db.execute(select(models.Notification).order_by(models.Notification.created_at.desc()))
    return [_notification(r) for r in res.scalars().all()]

  async def notifications_for(self, target_user: str) -> list[Notification]:
    res = await self.db.execute(
      select(models.Notification)
      .where(models.Notification.target_user == target_user)
      .order_by(models.Notification.created_at.desc())
    )
    return [_notification(r) for r in res.scalars().all()]

  def _insert(self, table: Any):
    if self.db.get_bind().dialect.name == "postgresql":
      return pg_insert(table)
    return sqlite_insert(table)

  async def add_notification(self, notification: Notification, *, dedupe_key: str) -> Notification | None:
    """Insert unless an unread row with the same dedupe key exists for the target.

    Returns the stored notification, or None when the insert was suppressed.
    """
    n = notification
    table = models.Notification.__table__
    stmt = (
      self._insert(table)
      .values(
        id=n.id,
        message=n.message,
        type=n.type.value,
        task_id=n.task_id,
        task_title=n.task_title,
        board_id=n.board_id,
        board_name=n.board_name,
        target_user=n.target_user,
        triggered_by=n.triggered_by,
        is_read=False,
        dedupe_key=dedupe_key,
        created_at=models.utcnow(),
      )
      .on_conflict_do_nothing(index_elements=["target_user", "dedupe_key"], index_where=text("NOT is_read"))
    )
    await self.db.execute(stmt)
    return await self.get_notification(n.id)

  async def mark_read(self, notification_id: str) -> bool:
    res = await self.db.execute(
      update(models.Notification)
      .where(models.Notification.id == notification_id, models.Notification.is_read.is_(False))
      .values(is_read=True)
    )
    return bool(res.rowcount)

  async def mark_all_read(self, target_user: str | None) -> int:
    q = update(models.Notification).where(models.Notification.is_read.is_(False))
    if target_user is not None:
      q = q.where(models.Notification.target_user == target_user)
    res = await self.db.execute(q.values(is_read=True))
    return int(res.rowcount or 0)

  async def count_unread(self, target_user: str | None) -> int:
    q = select(func.count()).select_from(models.Notification).where(models.Notification.is_read.is_(False))
    if target_user is not None:
      q = q.where(models.Notification.target_user == target_user)
    res = await self.db.execute(q)
    return int(res.scalar_one())

  # audit

  async def add_audit(self, row: models.AuditEvent) -> None:
    self.db.add(row)

  async def commit(self) -> None:
    await self.db.commit()

  async def rollback(self) -> None:
    await self.db.rollback()

"""Task lifecycle: create, update, archive and restore.

A task is ACTIVE until archived. Archiving keeps the row, and restoring
brings it back. Every operation checks access first, commits the change with
its audit row, and only then publishes a notification in a separate commit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import structlog

from boardhub import access
from boardhub.audit import write_audit
from boardhub.entities import Identity, NotificationType, Task, new_id
from boardhub.errors import Forbidden, InvalidState, NotFound, ValidationError
from boardhub.notifications import events
from boardhub.store import Store

log = structlog.get_logger()

# Fields a restricted caller must send back unchanged.
LOCKED_FIELDS = ("title", "description", "priority", "assigned_to")


@dataclass(frozen=True)
class TaskChanges:
  """Full set of editable task fields.

  `board_id` is only compared, never applied; None means the caller did not
  send one.
  """

  title: str
  description: str
  status: str
  priority: str
  assigned_to: str | None = None
  board_id: str | None = None


def _required(value: str | None, field: str) -> str:
  v = (value or "").strip()
  if not v:
    raise ValidationError(f"Task {field} is required")
  return v


def _assignee(value: str | None) -> str | None:
  v = (value or "").strip()
  return v or None


async def _notify(store: Store, event_type: NotificationType, task: Task, identity: Identity) -> None:
  try:
    await events.notify_task_event(store, event_type, task, identity)
    await store.commit()
  except Exception:
    log.exception("notification.failed", type=event_type.value, task_id=task.id, actor=identity.name)
    await store.rollback()


async def _load(store: Store, task_id: str) -> Task:
  task = await store.get_task(task_id)
  if task is None:
    raise NotFound("Task not found")
  return task


async def create_task(
  store: Store,
  identity: Identity,
  *,
  board_id: str,
  title: str,
  status: str,
  priority: str,
  description: str | None = None,
  assigned_to: str | None = None,
) -> Task:
  if not access.can_create_task_in_board(identity):
    raise Forbidden("Only an admin can create tasks")
  task = Task(
    id=new_id(),
    title=_required(title, "title"),
    description=description or "",
    status=_required(status, "status"),
    priority=_required(priority, "priority"),
    assigned_to=_assignee(assigned_to),
    created_by=identity.name,
    board_id=board_id,
  )
  if await store.get_board(board_id) is None:
    raise InvalidState("Board not found")

  task = await store.add_task(task)
  await write_audit(
    store,
    event_type="task.created",
    entity_type="Task",
    entity_id=task.id,
    board_id=task.board_id,
    task_id=task.id,
    actor=identity.name,
    payload={"title": task.title, "status": task.status, "assignedTo": task.assigned_to},
  )
  await store.commit()
  log.info("task.created", task_id=task.id, board_id=task.board_id, actor=identity.name)
  await _notify(store, NotificationType.TASK_CREATED, task, identity)
  return task


async def _commit_update(store: Store, before: Task, after: Task, identity: Identity) -> Task:
  saved = await store.save_task(after)
  changed = sorted(
    f for f in ("title", "description", "status", "priority", "assigned_to") if getattr(before, f) != getattr(saved, f)
  )
  await write_audit(
    store,
    event_type="task.updated",
    entity_type="Task",
    entity_id=saved.id,
    board_id=saved.board_id,
    task_id=saved.id,
    actor=identity.name,
    payload={"changed": changed, "status": saved.status, "assignedTo": saved.assigned_to},
  )
  await store.commit()
  event_type = events.resolve_task_event(before, saved)
  log.info("task.updated", task_id=saved.id, changed=changed, event_type=event_type.value, actor=identity.name)
  await _notify(store, event_type, saved, identity)
  return saved


async def update_task(store: Store, task_id: str, identity: Identity, changes: TaskChanges) -> Task:
  before = await _load(store, task_id)
  if not access.can_modify_task(before, identity):
    raise Forbidden("You can only update tasks assigned to you")

  status = _required(changes.status, "status")
  if identity.is_admin:
    after = replace(
      before,
      title=_required(changes.title, "title"),
      description=changes.description or "",
      status=status,
      priority=_required(changes.priority, "priority"),
      assigned_to=_assignee(changes.assigned_to),
    )
    return await _commit_update(store, before, after, identity)

  if changes.board_id is not None and changes.board_id != before.board_id:
    raise Forbidden("Only the status of an assigned task can be changed")
  for field in LOCKED_FIELDS:
    if getattr(changes, field) != getattr(before, field):
      raise Forbidden("Only the status of an assigned task can be changed")
  return await _commit_update(store, before, replace(before, status=status), identity)


async def update_task_status(store: Store, task_id: str, identity: Identity, status: str) -> Task:
  before = await _load(store, task_id)
  if not access.can_modify_task(before, identity):
    raise Forbidden("You can only update tasks assigned to you")
  return await _commit_update(store, before, replace(before, status=_required(status, "status")), identity)


async def archive_task(store: Store, task_id: str, identity: Identity) -> Task:
  if not identity.is_admin:
    raise Forbidden("Only an admin can archive tasks")
  task = await _load(store, task_id)
  if task.archived:
    raise InvalidState("Task is already archived")

  saved = await store.save_task(replace(task, archived=True))
  await write_audit(
    store,
    event_type="task.archived",
    entity_type="Task",
    entity_id=saved.id,
    board_id=saved.board_id,
    task_id=saved.id,
    actor=identity.name,
  )
  await store.commit()
  log.info("task.archived", task_id=saved.id, actor=identity.name)
  await _notify(store, NotificationType.TASK_ARCHIVED, saved, identity)
  return saved


async def restore_task(store: Store, task_id: str, identity: Identity) -> Task:
  task = await _load(store, task_id)
  if not access.can_modify_task(task, identity):
    raise Forbidden("You can only restore tasks assigned to you")
  if not task.archived:
    raise InvalidState("Task is not archived")

  saved = await store.save_task(replace(task, archived=False))
  await write_audit(
    store,
    event_type="task.restored",
    entity_type="Task",
    entity_id=saved.id,
    board_id=saved.board_id,
    task_id=saved.id,
    actor=identity.name,
  )
  await store.commit()
  log.info("task.restored", task_id=saved.id, actor=identity.name)
  await _notify(store, NotificationType.TASK_RESTORED, saved, identity)
  return saved

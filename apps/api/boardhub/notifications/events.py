from __future__ import annotations

import hashlib
from typing import Iterable

import structlog

from boardhub.config import settings
from boardhub.entities import Board, Identity, Notification, NotificationType, Task, new_id
from boardhub.metrics import runtime_metrics
from boardhub.store import Store

log = structlog.get_logger()

T = NotificationType

# Keyed by (type, audience); "assignee" is the admin-to-user direction.
_TASK_TEMPLATES: dict[tuple[NotificationType, str], str] = {
  (T.TASK_CREATED, "assignee"): "Task '{title}' has been assigned to you by {actor} in board '{board}'",
  (T.TASK_CREATED, "admin"): "New task '{title}' created by {actor} in board '{board}'",
  (T.TASK_UPDATED, "assignee"): "Task '{title}' assigned to you has been updated by {actor} in board '{board}' to '{status}'",
  (T.TASK_UPDATED, "admin"): "Task '{title}' updated by {actor} in board '{board}' to '{status}'",
  (T.TASK_ASSIGNED, "assignee"): "Task '{title}' has been assigned to you by {actor} in board '{board}' to '{status}'",
  (T.TASK_ASSIGNED, "admin"): "Task '{title}' assigned to {assignee} by {actor} in board '{board}' to '{status}'",
  (T.TASK_ARCHIVED, "assignee"): "Task '{title}' assigned to you has been archived by {actor} in board '{board}'",
  (T.TASK_ARCHIVED, "admin"): "Task '{title}' archived by {actor} in board '{board}'",
  (T.TASK_RESTORED, "assignee"): "Task '{title}' assigned to you has been restored by {actor} in board '{board}'",
  (T.TASK_RESTORED, "admin"): "Task '{title}' restored by {actor} in board '{board}'",
}

_BOARD_TEMPLATES: dict[NotificationType, str] = {
  T.BOARD_CREATED: "New board '{name}' created by {actor}",
  T.BOARD_UPDATED: "Board '{name}' has been updated by {actor}",
  T.BOARD_DELETED: "Board '{name}' has been deleted by {actor}",
}


def resolve_task_event(before: Task, after: Task) -> NotificationType:
  """Pick the single notification type for an update."""
  if before.assigned_to != after.assigned_to and after.assigned_to is not None:
    return T.TASK_ASSIGNED
  return T.TASK_UPDATED


def task_message(event_type: NotificationType, task: Task, *, board_name: str, actor: str, audience: str) -> str:
  tpl = _TASK_TEMPLATES.get((event_type, audience))
  if tpl is None:
    raise ValueError(f"Not a task event: {event_type}")
  return tpl.format(
    title=task.title,
    board=board_name,
    actor=actor,
    status=task.status,
    assignee=task.assigned_to or "nobody",
  )


def board_message(event_type: NotificationType, board: Board, *, actor: str) -> str:
  tpl = _BOARD_TEMPLATES.get(event_type)
  if tpl is None:
    raise ValueError(f"Not a board event: {event_type}")
  return tpl.format(name=board.name, actor=actor)


def build_board_notification(event_type: NotificationType, board: Board, identity: Identity) -> Notification | None:
  # Admin board changes are silent.
  if identity.is_admin:
    return None
  target = settings.admin_inbox
  if target == identity.name:
    return None
  return Notification(
    id=new_id(),
    message=board_message(event_type, board, actor=identity.name),
    type=event_type,
    target_user=target,
    triggered_by=identity.name,
    board_id=board.id,
    board_name=board.name,
  )


def task_target(task: Task, identity: Identity) -> tuple[str, str] | None:
  """Return (target_user, audience) for a task event, or None when nobody is told."""
  if identity.is_admin:
    assignee = task.assigned_to
    if assignee is None or assignee == identity.name or assignee == settings.admin_inbox:
      return None
    return assignee, "assignee"
  if settings.admin_inbox == identity.name:
    return None
  return settings.admin_inbox, "admin"


def build_task_notification(
  event_type: NotificationType,
  task: Task,
  identity: Identity,
  *,
  board_name: str,
) -> Notification | None:
  routed = task_target(task, identity)
  if routed is None:
    return None
  target, audience = routed
  return Notification(
    id=new_id(),
    message=task_message(event_type, task, board_name=board_name, actor=identity.name, audience=audience),
    type=event_type,
    target_user=target,
    triggered_by=identity.name,
    task_id=task.id,
    task_title=task.title,
    board_id=task.board_id,
    board_name=board_name,
  )


def is_duplicate(existing: Iterable[Notification], candidate: Notification) -> bool:
  for n in existing:
    if n.read:
      continue
    if n.type == candidate.type and n.task_id == candidate.task_id and n.message == candidate.message:
      return True
  return False


def dedupe_key(candidate: Notification) -> str:
  digest = hashlib.sha256(candidate.message.encode("utf-8")).hexdigest()
  return f"{candidate.type.value}:{candidate.task_id or ''}:{digest}"


async def publish(store: Store, candidate: Notification) -> Notification | None:
  """Persist a candidate unless an unread equivalent already exists for its target."""
  existing = await store.notifications_for(candidate.target_user)
  stored = None
  if not is_duplicate(existing, candidate):
    # The unique index catches a concurrent insert that slipped past the scan.
    stored = await store.add_notification(candidate, dedupe_key=dedupe_key(candidate))
  if stored is None:
    log.info(
      "notification.skipped_duplicate",
      target=candidate.target_user,
      type=candidate.type.value,
      message=candidate.message,
    )
    runtime_metrics.observe_notification(created=False)
    return None
  log.info("notification.created", id=stored.id, target=stored.target_user, type=stored.type.value)
  runtime_metrics.observe_notification(created=True)
  return stored


async def notify_board_event(store: Store, event_type: NotificationType, board: Board, identity: Identity) -> Notification | None:
  candidate = build_board_notification(event_type, board, identity)
  if candidate is None:
    return None
  return await publish(store, candidate)


async def board_name_for(store: Store, board_id: str) -> str:
  board = await store.get_board(board_id)
  return board.name if board is not None else settings.unknown_board_name


async def notify_task_event(store: Store, event_type: NotificationType, task: Task, identity: Identity) -> Notification | None:
  if task_target(task, identity) is None:
    return None
  board_name = await board_name_for(store, task.board_id)
  candidate = build_task_notification(event_type, task, identity, board_name=board_name)
  if candidate is None:
    return None
  return await publish(store, candidate)

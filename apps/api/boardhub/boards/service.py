from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import structlog

from boardhub import access
from boardhub.audit import write_audit
from boardhub.config import settings
from boardhub.entities import Board, Identity, NotificationType, new_id
from boardhub.errors import Forbidden, NotFound, ValidationError
from boardhub.notifications import events
from boardhub.store import Store

log = structlog.get_logger()


def _clean_name(name: str | None) -> str:
  n = (name or "").strip()
  if not n:
    raise ValidationError("Board name is required")
  return n


def _clean_columns(columns: Sequence[str] | None) -> tuple[str, ...] | None:
  if columns is None:
    return None
  out = []
  for c in columns:
    if not isinstance(c, str) or not c.strip():
      raise ValidationError("Board columns must be non-empty strings")
    out.append(c.strip())
  return tuple(out)


async def _notify(store: Store, event_type: NotificationType, board: Board, identity: Identity) -> None:
  try:
    await events.notify_board_event(store, event_type, board, identity)
    await store.commit()
  except Exception:
    log.exception("notification.failed", type=event_type.value, board_id=board.id, actor=identity.name)
    await store.rollback()


async def _load_modifiable(store: Store, board_id: str, identity: Identity) -> Board:
  board = await store.get_board(board_id)
  if board is None:
    raise NotFound("Board not found")
  if not access.can_modify_board(board, identity):
    raise Forbidden("Only the board owner or an admin can change this board")
  return board


async def create_board(
  store: Store,
  identity: Identity,
  *,
  name: str,
  description: str | None = None,
  columns: Sequence[str] | None = None,
) -> Board:
  cols = _clean_columns(columns)
  board = Board(
    id=new_id(),
    name=_clean_name(name),
    description=description or "",
    created_by=identity.name,
    columns=cols if cols is not None else tuple(settings.default_board_columns),
  )
  board = await store.add_board(board)
  await write_audit(
    store,
    event_type="board.created",
    entity_type="Board",
    entity_id=board.id,
    board_id=board.id,
    actor=identity.name,
    payload={"name": board.name, "columns": list(board.columns)},
  )
  await store.commit()
  log.info("board.created", board_id=board.id, actor=identity.name)
  await _notify(store, NotificationType.BOARD_CREATED, board, identity)
  return board


async def update_board(
  store: Store,
  board_id: str,
  identity: Identity,
  *,
  name: str,
  description: str | None = None,
  columns: Sequence[str] | None = None,
) -> Board:
  board = await _load_modifiable(store, board_id, identity)
  cols = _clean_columns(columns)
  updated = replace(
    board,
    name=_clean_name(name),
    description=description or "",
    columns=cols if cols is not None else board.columns,
  )
  updated = await store.save_board(updated)
  await write_audit(
    store,
    event_type="board.updated",
    entity_type="Board",
    entity_id=board.id,
    board_id=board.id,
    actor=identity.name,
    payload={"name": updated.name, "columns": list(updated.columns)},
  )
  await store.commit()
  log.info("board.updated", board_id=board.id, actor=identity.name)
  await _notify(store, NotificationType.BOARD_UPDATED, updated, identity)
  return updated


async def delete_board(store: Store, board_id: str, identity: Identity) -> Board:
  board = await _load_modifiable(store, board_id, identity)
  await store.delete_board(board.id)
  await write_audit(
    store,
    event_type="board.deleted",
    entity_type="Board",
    entity_id=board.id,
    board_id=board.id,
    actor=identity.name,
    payload={"name": board.name},
  )
  await store.commit()
  log.info("board.deleted", board_id=board.id, actor=identity.name)
  await _notify(store, NotificationType.BOARD_DELETED, board, identity)
  return board

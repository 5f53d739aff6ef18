from __future__ import annotations

from fastapi import APIRouter, Depends

from boardhub import queries
from boardhub.boards import service
from boardhub.deps import get_identity, get_store
from boardhub.entities import Identity
from boardhub.schemas import BoardCreateIn, BoardOut, BoardUpdateIn, TaskOut
from boardhub.store import SqlStore

router = APIRouter(prefix="/boards", tags=["boards"])


@router.get("", response_model=list[BoardOut])
async def list_boards(identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> list[BoardOut]:
  return [BoardOut.of(b) for b in await queries.list_boards(store, identity)]


@router.get("/accessible", response_model=list[BoardOut])
async def list_accessible_boards(
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> list[BoardOut]:
  return [BoardOut.of(b) for b in await queries.list_boards(store, identity)]


@router.get("/owned", response_model=list[BoardOut])
async def list_owned_boards(
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> list[BoardOut]:
  return [BoardOut.of(b) for b in await queries.list_owned_boards(store, identity)]


@router.post("", response_model=BoardOut)
async def create_board(
  payload: BoardCreateIn,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> BoardOut:
  b = await service.create_board(
    store,
    identity,
    name=payload.name,
    description=payload.description,
    columns=payload.columns,
  )
  return BoardOut.of(b)


@router.get("/{board_id}", response_model=BoardOut)
async def get_board(board_id: str, identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> BoardOut:
  return BoardOut.of(await queries.get_board(store, board_id, identity))


@router.put("/{board_id}", response_model=BoardOut)
async def update_board(
  board_id: str,
  payload: BoardUpdateIn,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> BoardOut:
  b = await service.update_board(
    store,
    board_id,
    identity,
    name=payload.name,
    description=payload.description,
    columns=payload.columns,
  )
  return BoardOut.of(b)


@router.delete("/{board_id}")
async def delete_board(board_id: str, identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> dict:
  await service.delete_board(store, board_id, identity)
  return {"ok": True}


@router.get("/{board_id}/tasks", response_model=list[TaskOut])
async def list_board_tasks(
  board_id: str,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> list[TaskOut]:
  return [TaskOut.of(t) for t in await queries.list_board_tasks(store, board_id, identity)]

from __future__ import annotations

from fastapi import APIRouter, Depends

from boardhub.deps import get_identity, get_store
from boardhub.entities import Identity
from boardhub.notifications import service
from boardhub.schemas import NotificationOut, UnreadCountOut
from boardhub.store import SqlStore

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
async def list_notifications(
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> list[NotificationOut]:
  return [NotificationOut.of(n) for n in await service.get_notifications(store, identity)]


@router.get("/unread-count", response_model=UnreadCountOut)
async def unread_count(identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> UnreadCountOut:
  return UnreadCountOut(count=await service.get_unread_count(store, identity))


@router.put("/mark-all-read")
async def mark_all_read(identity: Identity = Depends(get_identity), store: SqlStore = Depends(get_store)) -> dict:
  count = await service.mark_all_as_read(store, identity)
  return {"ok": True, "count": count}


@router.put("/{notification_id}/read")
async def mark_read(
  notification_id: str,
  identity: Identity = Depends(get_identity),
  store: SqlStore = Depends(get_store),
) -> dict:
  await service.mark_as_read(store, notification_id, identity)
  return {"ok": True}

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boardhub.deps import get_db, require_admin
from boardhub.entities import Identity
from boardhub.models import AuditEvent
from boardhub.schemas import AuditOut

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=list[AuditOut])
async def list_audit(
  boardId: str | None = None,
  taskId: str | None = None,
  limit: int = 200,
  _: Identity = Depends(require_admin),
  db: AsyncSession = Depends(get_db),
) -> list[AuditOut]:
  limit = max(1, min(int(limit), 500))
  q = select(AuditEvent).order_by(AuditEvent.created_at.desc()).limit(limit)
  if boardId:
    q = q.where(AuditEvent.board_id == boardId)
  if taskId:
    q = q.where(AuditEvent.task_id == taskId)
  res = await db.execute(q)
  out = []
  for ev in res.scalars().all():
    out.append(
      AuditOut(
        id=ev.id,
        boardId=ev.board_id,
        taskId=ev.task_id,
        actor=ev.actor,
        eventType=ev.event_type,
        entityType=ev.entity_type,
        entityId=ev.entity_id,
        payload=ev.payload,
        createdAt=ev.created_at,
      )
    )
  return out

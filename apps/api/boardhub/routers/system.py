from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from boardhub.config import settings
from boardhub.deps import require_admin
from boardhub.entities import Identity
from boardhub.metrics import runtime_metrics

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/metrics")
async def system_metrics(_: Identity = Depends(require_admin)) -> dict:
  return {
    "version": settings.app_version,
    "buildSha": settings.build_sha,
    "startedAt": runtime_metrics.started_at,
    "checkedAt": datetime.now(timezone.utc),
    "metrics": runtime_metrics.snapshot(),
  }

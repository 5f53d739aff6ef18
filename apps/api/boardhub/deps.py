from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from boardhub.config import settings
from boardhub.db import SessionLocal
from boardhub.entities import Identity
from boardhub.store import SqlStore


async def get_db() -> AsyncSession:
  async with SessionLocal() as session:
    yield session


async def get_store(db: AsyncSession = Depends(get_db)) -> SqlStore:
  return SqlStore(db)


async def get_identity(request: Request) -> Identity:
  # The gateway in front of the API has already authenticated the caller.
  name = (request.headers.get(settings.identity_name_header) or "").strip()
  role = (request.headers.get(settings.identity_role_header) or "").strip()
  if not name or not role:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
  return Identity.of(name, role)


async def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
  if not identity.is_admin:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin required")
  return identity

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{Path(tempfile.gettempdir()) / 'boardhub_test.db'}")

from boardhub.boards import service as boards
from boardhub.config import settings
from boardhub.db import SessionLocal, engine
from boardhub.entities import Board, Identity, Role, Task
from boardhub.main import app
from boardhub.models import Base
from boardhub.store import SqlStore
from boardhub.tasks import service as tasks

ADMIN = Identity(name="root", role=Role.ADMIN)
ALICE = Identity(name="alice", role=Role.USER)
BOB = Identity(name="bob", role=Role.USER)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture
async def fresh_db() -> None:
  db_name = settings.database_url.rsplit("/", 1)[-1]
  if "test" not in db_name:
    raise RuntimeError(
      "Refusing to run destructive tests against non-test DB. "
      "Set DATABASE_URL to a *_test database (e.g. boardhub_test)."
    )
  async with engine.begin() as conn:
    await conn.run_sync(Base.metadata.drop_all)
    await conn.run_sync(Base.metadata.create_all)
  yield
  await engine.dispose()


@pytest.fixture
async def store(fresh_db) -> SqlStore:
  async with SessionLocal() as db:
    yield SqlStore(db)


@pytest.fixture
async def client(fresh_db) -> AsyncClient:
  transport = ASGITransport(app=app)
  async with AsyncClient(transport=transport, base_url="http://localhost") as c:
    yield c


def as_user(identity: Identity) -> dict[str, str]:
  return {settings.identity_name_header: identity.name, settings.identity_role_header: identity.role.value}


async def make_board(store: SqlStore, owner: Identity = ADMIN, name: str = "B1", **kw) -> Board:
  return await boards.create_board(store, owner, name=name, **kw)


async def make_task(
  store: SqlStore,
  board: Board,
  *,
  title: str = "Fix bug",
  assigned_to: str | None = None,
  status: str = "To Do",
  priority: str = "Medium",
  actor: Identity = ADMIN,
) -> Task:
  return await tasks.create_task(
    store,
    actor,
    board_id=board.id,
    title=title,
    status=status,
    priority=priority,
    assigned_to=assigned_to,
  )

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from boardhub.errors import ValidationError


def new_id() -> str:
  return str(uuid.uuid4())


class Role(str, Enum):
  ADMIN = "ADMIN"
  USER = "USER"

  @classmethod
  def parse(cls, value: str | None) -> Role:
    # Unknown roles are rejected instead of being treated as USER.
    v = (value or "").strip().upper()
    if v.startswith("ROLE_"):
      v = v[len("ROLE_") :]
    try:
      return cls(v)
    except ValueError:
      raise ValidationError(f"Unknown role: {value!r}") from None


class NotificationType(str, Enum):
  BOARD_CREATED = "BOARD_CREATED"
  BOARD_UPDATED = "BOARD_UPDATED"
  BOARD_DELETED = "BOARD_DELETED"
  TASK_CREATED = "TASK_CREATED"
  TASK_UPDATED = "TASK_UPDATED"
  TASK_ASSIGNED = "TASK_ASSIGNED"
  TASK_ARCHIVED = "TASK_ARCHIVED"
  TASK_RESTORED = "TASK_RESTORED"


@dataclass(frozen=True)
class Identity:
  name: str
  role: Role

  @classmethod
  def of(cls, name: str | None, role: str | None) -> Identity:
    n = (name or "").strip()
    if not n:
      raise ValidationError("Identity name is required")
    return cls(name=n, role=Role.parse(role))

  @property
  def is_admin(self) -> bool:
    return self.role is Role.ADMIN


@dataclass(frozen=True)
class Board:
  id: str
  name: str
  description: str
  created_by: str
  columns: tuple[str, ...]
  created_at: datetime | None = None
  updated_at: datetime | None = None


@dataclass(frozen=True)
class Task:
  id: str
  title: str
  description: str
  status: str
  priority: str
  assigned_to: str | None
  created_by: str
  board_id: str
  archived: bool = False
  created_at: datetime | None = None
  updated_at: datetime | None = None


@dataclass(frozen=True)
class Notification:
  id: str
  message: str
  type: NotificationType
  target_user: str
  triggered_by: str
  task_id: str | None = None
  task_title: str | None = None
  board_id: str | None = None
  board_name: str | None = None
  read: bool = False
  created_at: datetime | None = None

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from boardhub.config import settings
from boardhub.entities import Board, Notification, Task


class BoardCreateIn(BaseModel):
  name: str = Field(min_length=1, max_length=120)
  description: str = ""
  columns: list[str] | None = None


class BoardUpdateIn(BaseModel):
  name: str = Field(min_length=1, max_length=120)
  description: str = ""
  columns: list[str] | None = None


class BoardOut(BaseModel):
  id: str
  name: str
  description: str
  createdBy: str
  columns: list[str]
  createdAt: datetime | None
  updatedAt: datetime | None

  @classmethod
  def of(cls, b: Board) -> BoardOut:
    return cls(
      id=b.id,
      name=b.name,
      description=b.description,
      createdBy=b.created_by,
      columns=list(b.columns),
      createdAt=b.created_at,
      updatedAt=b.updated_at,
    )


class TaskCreateIn(BaseModel):
  boardId: str
  title: str = Field(min_length=1, max_length=200)
  description: str = ""
  status: str = Field(default=settings.default_task_status, min_length=1, max_length=64)
  priority: str = Field(default=settings.default_task_priority, min_length=1, max_length=64)
  assignedTo: str | None = None


class TaskUpdateIn(BaseModel):
  title: str = Field(min_length=1, max_length=200)
  description: str = ""
  status: str = Field(min_length=1, max_length=64)
  priority: str = Field(min_length=1, max_length=64)
  assignedTo: str | None = None
  boardId: str | None = None


class TaskStatusIn(BaseModel):
  status: str = Field(min_length=1, max_length=64)


class TaskOut(BaseModel):
  id: str
  boardId: str
  title: str
  description: str
  status: str
  priority: str
  assignedTo: str | None
  createdBy: str
  archived: bool
  createdAt: datetime | None
  updatedAt: datetime | None

  @classmethod
  def of(cls, t: Task) -> TaskOut:
    return cls(
      id=t.id,
      boardId=t.board_id,
      title=t.title,
      description=t.description,
      status=t.status,
      priority=t.priority,
      assignedTo=t.assigned_to,
      createdBy=t.created_by,
      archived=t.archived,
      createdAt=t.created_at,
      updatedAt=t.updated_at,
    )


class NotificationOut(BaseModel):
  id: str
  message: str
  type: str
  taskId: str | None
  taskTitle: str | None
  boardId: str | None
  boardName: str | None
  targetUser: str
  triggeredBy: str
  read: bool
  createdAt: datetime | None

  @classmethod
  def of(cls, n: Notification) -> NotificationOut:
    return cls(
      id=n.id,
      message=n.message,
      type=n.type.value,
      taskId=n.task_id,
      taskTitle=n.task_title,
      boardId=n.board_id,
      boardName=n.board_name,
      targetUser=n.target_user,
      triggeredBy=n.triggered_by,
      read=n.read,
      createdAt=n.created_at,
    )


class UnreadCountOut(BaseModel):
  count: int


class AuditOut(BaseModel):
  id: str
  boardId: str | None
  taskId: str | None
  actor: str | None
  eventType: str
  entityType: str
  entityId: str | None
  payload: dict[str, Any]
  createdAt: datetime

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
  return datetime.now(timezone.utc)


class Base(DeclarativeBase):
  pass


class Board(Base):
  __tablename__ = "boards"

  id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
  name: Mapped[str] = mapped_column(String, nullable=False)
  description: Mapped[str] = mapped_column(Text, nullable=False, default="")
  created_by: Mapped[str] = mapped_column(String, nullable=False, index=True)
  columns: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Task(Base):
  __tablename__ = "tasks"
  __table_args__ = (Index("ix_tasks_assigned_to_archived", "assigned_to", "archived"),)

  id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
  # No FK: tasks outlive a deleted board.
  board_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  description: Mapped[str] = mapped_column(Text, nullable=False, default="")
  status: Mapped[str] = mapped_column(String, nullable=False)
  priority: Mapped[str] = mapped_column(String, nullable=False)
  assigned_to: Mapped[str | None] = mapped_column(String, nullable=True)
  created_by: Mapped[str] = mapped_column(String, nullable=False)
  archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Notification(Base):
  __tablename__ = "notifications"
  __table_args__ = (
    Index(
      "ux_notifications_unread_dedupe",
      "target_user",
      "dedupe_key",
      unique=True,
      sqlite_where=text("NOT is_read"),
      postgresql_where=text("NOT is_read"),
    ),
  )

  id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
  message: Mapped[str] = mapped_column(Text, nullable=False)
  type: Mapped[str] = mapped_column(String, nullable=False)
  task_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
  task_title: Mapped[str | None] = mapped_column(String, nullable=True)
  board_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
  board_name: Mapped[str | None] = mapped_column(String, nullable=True)
  target_user: Mapped[str] = mapped_column(String, nullable=False, index=True)
  triggered_by: Mapped[str] = mapped_column(String, nullable=False)
  is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
  dedupe_key: Mapped[str] = mapped_column(String, nullable=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class AuditEvent(Base):
  __tablename__ = "audit_events"

  id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
  board_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
  task_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
  actor: Mapped[str | None] = mapped_column(String, nullable=True)
  event_type: Mapped[str] = mapped_column(String, nullable=False)
  entity_type: Mapped[str] = mapped_column(String, nullable=False)
  entity_id: Mapped[str | None] = mapped_column(String, nullable=True)
  payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

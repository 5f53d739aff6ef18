"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-16
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
  op.create_table(
    "boards",
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("name", sa.String(), nullable=False),
    sa.Column("description", sa.Text(), nullable=False, server_default=""),
    sa.Column("created_by", sa.String(), nullable=False),
    sa.Column("columns", sa.JSON(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_boards_created_by", "boards", ["created_by"], unique=False)

  op.create_table(
    "tasks",
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("board_id", sa.String(36), nullable=False),
    sa.Column("title", sa.String(), nullable=False),
    sa.Column("description", sa.Text(), nullable=False, server_default=""),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("priority", sa.String(), nullable=False),
    sa.Column("assigned_to", sa.String(), nullable=True),
    sa.Column("created_by", sa.String(), nullable=False),
    sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_tasks_board_id", "tasks", ["board_id"], unique=False)
  op.create_index("ix_tasks_archived", "tasks", ["archived"], unique=False)
  op.create_index("ix_tasks_assigned_to_archived", "tasks", ["assigned_to", "archived"], unique=False)

  op.create_table(
    "notifications",
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("message", sa.Text(), nullable=False),
    sa.Column("type", sa.String(), nullable=False),
    sa.Column("task_id", sa.String(36), nullable=True),
    sa.Column("task_title", sa.String(), nullable=True),
    sa.Column("board_id", sa.String(36), nullable=True),
    sa.Column("board_name", sa.String(), nullable=True),
    sa.Column("target_user", sa.String(), nullable=False),
    sa.Column("triggered_by", sa.String(), nullable=False),
    sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
    sa.Column("dedupe_key", sa.String(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_notifications_target_user", "notifications", ["target_user"], unique=False)
  op.create_index(
    "ux_notifications_unread_dedupe",
    "notifications",
    ["target_user", "dedupe_key"],
    unique=True,
    postgresql_where=sa.text("NOT is_read"),
    sqlite_where=sa.text("NOT is_read"),
  )

  op.create_table(
    "audit_events",
    sa.Column("id", sa.String(36), primary_key=True),
    sa.Column("board_id", sa.String(36), nullable=True),
    sa.Column("task_id", sa.String(36), nullable=True),
    sa.Column("actor", sa.String(), nullable=True),
    sa.Column("event_type", sa.String(), nullable=False),
    sa.Column("entity_type", sa.String(), nullable=False),
    sa.Column("entity_id", sa.String(), nullable=True),
    sa.Column("payload", sa.JSON(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_audit_events_board_id", "audit_events", ["board_id"], unique=False)
  op.create_index("ix_audit_events_task_id", "audit_events", ["task_id"], unique=False)


def downgrade() -> None:
  op.drop_table("audit_events")
  op.drop_index("ux_notifications_unread_dedupe", table_name="notifications")
  op.drop_table("notifications")
  op.drop_table("tasks")
  op.drop_table("boards")

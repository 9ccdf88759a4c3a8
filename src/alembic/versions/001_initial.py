"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-09-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("hashed_password", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column(
            "role",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="auditor",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("password_changed_at", sa.DateTime(), nullable=True),
        sa.Column("password_expires_at", sa.DateTime(), nullable=True),
        sa.Column(
            "force_password_change", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column(
            "preferences",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # 2. Password reset tokens
    op.create_table(
        "password_reset_tokens",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("token_hash", sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("used_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_password_reset_tokens_token_hash", "password_reset_tokens", ["token_hash"], unique=True
    )
    op.create_index(
        "ix_password_reset_tokens_user_created",
        "password_reset_tokens",
        ["user_id", "created_at"],
    )

    # 3. Projects
    op.create_table(
        "projects",
        sa.Column("id", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("client", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("project_type", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column(
            "status",
            sqlmodel.sql.sqltypes.AutoString(length=50),
            nullable=False,
            server_default="planning",
        ),
        sa.Column("priority", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("description", sqlmodel.sql.sqltypes.AutoString(length=4000), nullable=True),
        sa.Column("budget", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("estimated_budget", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("actual_budget", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("cost_center", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("purchase_order", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("actual_hours", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("request_date", sa.DateTime(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("requestor_info", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("site_location", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("business_line", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column(
            "parent_project_id", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True
        ),
        sa.Column(
            "tasks", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default="[]"
        ),
        sa.Column(
            "time_entries",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="[]",
        ),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["parent_project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_parent_project_id", "projects", ["parent_project_id"])
    op.create_index("ix_projects_created_at", "projects", ["created_at"])

    # 4. Audit logs
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("user", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("action", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column("resource", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("project_id", sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column("task_id", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column(
            "category",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="general",
        ),
        sa.Column(
            "severity",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="info",
        ),
        sa.Column("ip_address", sqlmodel.sql.sqltypes.AutoString(length=45), nullable=True),
        sa.Column("user_agent", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("request_id", sqlmodel.sql.sqltypes.AutoString(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_created", "audit_logs", ["created_at"])
    op.create_index("ix_audit_logs_category_created", "audit_logs", ["category", "created_at"])
    op.create_index("ix_audit_logs_project", "audit_logs", ["project_id"])

    # 5. Rooms
    op.create_table(
        "rooms",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("schedule_day", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "schedule_day_name", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False
        ),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("schedule_day BETWEEN 0 AND 6", name="ck_rooms_schedule_day"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rooms_room_id", "rooms", ["room_id"], unique=True)

    # 6. Room check history
    op.create_table(
        "room_check_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column(
            "rag_status",
            sqlmodel.sql.sqltypes.AutoString(length=10),
            nullable=False,
            server_default="green",
        ),
        sa.Column(
            "limited_functionality", sa.Boolean(), nullable=False, server_default=sa.text("false")
        ),
        sa.Column(
            "non_functional_reason", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True
        ),
        *[
            sa.Column(f"check{i}", sa.Boolean(), nullable=False, server_default=sa.text("false"))
            for i in range(1, 6)
        ],
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("checked_by", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column("checked_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.room_id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_room_check_history_room_checked", "room_check_history", ["room_id", "checked_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_room_check_history_room_checked", table_name="room_check_history")
    op.drop_table("room_check_history")
    op.drop_index("ix_rooms_room_id", table_name="rooms")
    op.drop_table("rooms")
    op.drop_index("ix_audit_logs_project", table_name="audit_logs")
    op.drop_index("ix_audit_logs_category_created", table_name="audit_logs")
    op.drop_index("ix_audit_logs_created", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_projects_created_at", table_name="projects")
    op.drop_index("ix_projects_parent_project_id", table_name="projects")
    op.drop_table("projects")
    op.drop_index("ix_password_reset_tokens_user_created", table_name="password_reset_tokens")
    op.drop_index("ix_password_reset_tokens_token_hash", table_name="password_reset_tokens")
    op.drop_table("password_reset_tokens")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

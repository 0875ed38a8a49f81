"""Create notifications and notification_preferences tables.

Revision ID: 3f9c2b7a1d64
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op

revision = "3f9c2b7a1d64"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE = sa.text("deleted_at IS NULL")


def upgrade() -> None:
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=100), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=True),
        sa.Column("entity_id", sa.String(length=36), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("action_url", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    for name, columns in (
        ("idx_notifications_user_id", ["user_id"]),
        ("idx_notifications_read", ["user_id", "read_at"]),
        ("idx_notifications_type", ["type"]),
        ("idx_notifications_entity", ["entity_type", "entity_id"]),
        ("idx_notifications_created_at", ["created_at"]),
    ):
        op.create_index(
            name,
            "notifications",
            columns,
            postgresql_where=ACTIVE,
            sqlite_where=ACTIVE,
        )

    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("notification_type", sa.String(length=100), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("email_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("whatsapp_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id",
            "notification_type",
            name="notification_preferences_user_id_notification_type_key",
        ),
    )
    op.create_index(
        "idx_notification_preferences_user_id", "notification_preferences", ["user_id"]
    )


def downgrade() -> None:
    op.drop_index("idx_notification_preferences_user_id", table_name="notification_preferences")
    op.drop_table("notification_preferences")
    for name in (
        "idx_notifications_created_at",
        "idx_notifications_entity",
        "idx_notifications_type",
        "idx_notifications_read",
        "idx_notifications_user_id",
    ):
        op.drop_index(name, table_name="notifications")
    op.drop_table("notifications")

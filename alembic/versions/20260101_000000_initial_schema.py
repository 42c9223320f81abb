"""
Initial schema with uuid-ossp extension and chat tables.

Revision ID: 20260101_000000_initial_schema
Revises:
Create Date: 2026-01-01 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20260101_000000_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp";')

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), server_default=sa.text("uuid_generate_v4()")),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), server_default=sa.text("1"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="users_pkey"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.Uuid(), server_default=sa.text("uuid_generate_v4()")),
        sa.Column("name", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="groups_pkey"),
    )

    op.create_table(
        "group_users",
        sa.Column("group_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["group_id"], ["groups.id"], ondelete="CASCADE", name="group_users_group_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="group_users_user_id_fkey"
        ),
        sa.PrimaryKeyConstraint("group_id", "user_id", name="group_users_pkey"),
    )
    op.create_index("idx_group_users_user", "group_users", ["user_id"])

    op.create_table(
        "friends",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("friend_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="friends_user_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["friend_id"], ["users.id"], ondelete="CASCADE", name="friends_friend_id_fkey"
        ),
        sa.PrimaryKeyConstraint("user_id", "friend_id", name="friends_pkey"),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), server_default=sa.text("uuid_generate_v4()")),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("group_id", sa.Uuid(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="messages_user_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["group_id"], ["groups.id"], ondelete="CASCADE", name="messages_group_id_fkey"
        ),
        sa.PrimaryKeyConstraint("id", name="messages_pkey"),
    )
    op.create_index("idx_messages_group_created", "messages", ["group_id", "created_at"])
    op.create_index("idx_messages_user", "messages", ["user_id"])

    op.create_table(
        "last_read",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("message_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="last_read_user_id_fkey"
        ),
        sa.ForeignKeyConstraint(
            ["message_id"],
            ["messages.id"],
            ondelete="CASCADE",
            name="last_read_message_id_fkey",
        ),
        sa.PrimaryKeyConstraint("user_id", "message_id", name="last_read_pkey"),
    )


def downgrade() -> None:
    op.drop_table("last_read")
    op.drop_index("idx_messages_user", table_name="messages")
    op.drop_index("idx_messages_group_created", table_name="messages")
    op.drop_table("messages")
    op.drop_table("friends")
    op.drop_index("idx_group_users_user", table_name="group_users")
    op.drop_table("group_users")
    op.drop_table("groups")
    op.drop_table("users")

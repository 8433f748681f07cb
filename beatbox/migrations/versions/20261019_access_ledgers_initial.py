"""Identity table plus session and activity ledgers.

Revision ID: 20261019_access_ledgers_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_access_ledgers_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("avatar_ref", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    # user_id columns are not foreign keys.
    op.create_table(
        "user_sessions",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("sign_in_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_user_sessions_user_sign_in_at", "user_sessions", ["user_id", "sign_in_at"])
    op.create_index("ix_user_sessions_sign_in_at", "user_sessions", ["sign_in_at"])

    op.create_table(
        "user_activity",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("activity_type", sa.String(length=64), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("page_url", sa.Text(), nullable=True),
        sa.Column("action", sa.String(length=255), nullable=True),
        sa.Column("session_id", sa.String(length=64), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
    )
    op.create_index("ix_user_activity_timestamp", "user_activity", ["timestamp"])
    op.create_index("ix_user_activity_user_timestamp", "user_activity", ["user_id", "timestamp"])
    op.create_index("ix_user_activity_type_timestamp", "user_activity", ["activity_type", "timestamp"])


def downgrade():
    op.drop_index("ix_user_activity_type_timestamp", table_name="user_activity")
    op.drop_index("ix_user_activity_user_timestamp", table_name="user_activity")
    op.drop_index("ix_user_activity_timestamp", table_name="user_activity")
    op.drop_table("user_activity")
    op.drop_index("ix_user_sessions_sign_in_at", table_name="user_sessions")
    op.drop_index("ix_user_sessions_user_sign_in_at", table_name="user_sessions")
    op.drop_table("user_sessions")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")

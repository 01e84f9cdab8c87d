"""Initial diary schema

Revision ID: 001
Revises: None
Create Date: 2025-03-01 00:00:00.000000+00:00

What:  Creates users, strains, sessions, symptom_logs and tolerance_breaks.
How:   Generic sa.Uuid / sa.JSON types so the same migration runs on
       PostgreSQL (native UUID/JSON) and SQLite (CHAR(32)/TEXT).

Rollback: downgrade() drops every table (destructive: all diary data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _owner() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, comment="Lower-cased login email"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password_salt", sa.String(64), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("is_pro", sa.Boolean(), server_default=sa.false(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "strains",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("type", sa.String(20), server_default=sa.text("'hybrid'"), nullable=False),
        sa.Column("thc_percent", sa.Float(), nullable=True),
        sa.Column("cbd_percent", sa.Float(), nullable=True),
        sa.Column("rating", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("effects", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.String(2048), nullable=True),
        sa.Column("dispensary", sa.String(120), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=True),
        sa.Column("favorite", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("would_buy_again", sa.Boolean(), server_default=sa.false(), nullable=False),
        _created_at(),
    )
    op.create_index("idx_strains_user_created_at", "strains", ["user_id", "created_at"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column(
            "strain_id",
            sa.Uuid(),
            sa.ForeignKey("strains.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("strain_name", sa.String(120), nullable=False),
        sa.Column("method", sa.String(20), server_default=sa.text("'smoke'"), nullable=False),
        sa.Column("amount", sa.String(60), nullable=True),
        sa.Column("mood_before", sa.Integer(), server_default=sa.text("3"), nullable=False),
        sa.Column("mood_after", sa.Integer(), nullable=True),
        sa.Column("effects", sa.JSON(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True, comment="Minutes"),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("idx_sessions_user_created_at", "sessions", ["user_id", "created_at"])
    op.create_index("idx_sessions_strain_id", "sessions", ["strain_id"])

    op.create_table(
        "symptom_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("symptom", sa.String(30), nullable=False),
        sa.Column("severity_before", sa.Integer(), nullable=False),
        sa.Column("severity_after", sa.Integer(), nullable=True),
        sa.Column("strain_used", sa.String(120), nullable=True),
        sa.Column("method", sa.String(20), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index(
        "idx_symptom_logs_user_created_at", "symptom_logs", ["user_id", "created_at"]
    )

    op.create_table(
        "tolerance_breaks",
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("target_days", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(280), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("tolerance_breaks")
    op.drop_index("idx_symptom_logs_user_created_at", table_name="symptom_logs")
    op.drop_table("symptom_logs")
    op.drop_index("idx_sessions_strain_id", table_name="sessions")
    op.drop_index("idx_sessions_user_created_at", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("idx_strains_user_created_at", table_name="strains")
    op.drop_table("strains")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

"""create_events

Revision ID: 3c1f2a7d9e40
Revises:
Create Date: 2026-03-01 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f2a7d9e40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the events table."""
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("scheduled_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="normal"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_events")),
    )
    op.create_index(op.f("ix_events_scheduled_time"), "events", ["scheduled_time"], unique=False)
    op.create_index(
        "ix_events_completed_scheduled_time",
        "events",
        ["completed", "scheduled_time"],
        unique=False,
    )


def downgrade() -> None:
    """Drop the events table."""
    op.drop_index("ix_events_completed_scheduled_time", table_name="events")
    op.drop_index(op.f("ix_events_scheduled_time"), table_name="events")
    op.drop_table("events")

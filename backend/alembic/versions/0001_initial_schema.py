"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Creates the profiles, events and attendees tables.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("time", sa.String(20), nullable=False),
        sa.Column("location", sa.String(500), nullable=False),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("organizer_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False, server_default="10"),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_date", "events", ["date"])
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"])

    # --- attendees ---
    op.create_table(
        "attendees",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "user_id", name="uq_attendees_event_user"),
    )
    op.create_index("ix_attendees_event_id", "attendees", ["event_id"])
    op.create_index("ix_attendees_user_id", "attendees", ["user_id"])


def downgrade() -> None:
    op.drop_table("attendees")
    op.drop_table("events")
    op.drop_table("profiles")

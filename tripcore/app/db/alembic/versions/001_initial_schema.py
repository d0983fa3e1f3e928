"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates profile, trip, trip_participant and trip_itinerary.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JsonDocument = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "profile",
        sa.Column("user_id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("role", sa.Text(), nullable=False, server_default="user"),
        sa.Column("home_airport", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "trip",
        sa.Column("trip_id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("estimated_participants", sa.Integer(), nullable=True),
        sa.Column("destination_airport_code", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_trip_owner", "trip", ["owner_id"])

    op.create_table(
        "trip_participant",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("trip_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="going"),
        sa.Column("guests", JsonDocument, nullable=False),
        sa.Column("is_flying", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("arrival_date", sa.Date(), nullable=True),
        sa.Column("departure_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["trip_id"], ["trip.trip_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("trip_id", "user_id", name="uq_participant_trip_user"),
    )
    op.create_index("idx_participant_user", "trip_participant", ["user_id"])

    op.create_table(
        "trip_itinerary",
        sa.Column("trip_id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("data", JsonDocument, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["trip_id"], ["trip.trip_id"], ondelete="CASCADE"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("trip_itinerary")
    op.drop_index("idx_participant_user", table_name="trip_participant")
    op.drop_table("trip_participant")
    op.drop_index("idx_trip_owner", table_name="trip")
    op.drop_table("profile")
    op.drop_table("trip")

"""SQLAlchemy ORM models for trips, participants, itinerary documents and profiles."""

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JsonDocument = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Profile(Base):
    """Profile table - global role and home airport per user."""

    __tablename__ = "profile"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="user")
    home_airport: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Trip(Base):
    """Trip table - header fields used for cost splitting and live status."""

    __tablename__ = "trip"
    __table_args__ = (Index("idx_trip_owner", "owner_id"),)

    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    estimated_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    destination_airport_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    participants: Mapped[list["TripParticipant"]] = relationship(
        "TripParticipant",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="TripParticipant.id",
    )
    itinerary: Mapped["TripItinerary | None"] = relationship(
        "TripItinerary", back_populates="trip", cascade="all, delete-orphan", uselist=False
    )


class TripParticipant(Base):
    """Trip participant table - one row per user per trip."""

    __tablename__ = "trip_participant"
    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_participant_trip_user"),
        Index("idx_participant_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("trip.trip_id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="going")
    guests: Mapped[list[dict[str, Any]]] = mapped_column(JsonDocument, nullable=False, default=list)
    is_flying: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    arrival_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    departure_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="participants")


class TripItinerary(Base):
    """Itinerary table - the whole nested document of a trip plus its version."""

    __tablename__ = "trip_itinerary"

    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("trip.trip_id", ondelete="CASCADE"), primary_key=True
    )
    data: Mapped[dict[str, Any]] = mapped_column(JsonDocument, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="itinerary")

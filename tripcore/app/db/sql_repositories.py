"""SQL implementations of repository interfaces."""

import uuid

from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from tripcore.app.db.models import Profile as ProfileDB
from tripcore.app.db.models import Trip as TripDB
from tripcore.app.db.models import TripItinerary as TripItineraryDB
from tripcore.app.db.models import TripParticipant as TripParticipantDB
from tripcore.app.db.repositories import ProfileRecord, VersionedDocument
from tripcore.app.errors import NotFoundError, VersionConflictError
from tripcore.app.models.common import ProfileRole
from tripcore.app.models.itinerary import ItineraryDocument
from tripcore.app.models.trip import Guest, Participant, Trip


class SqlDocumentStore:
    """SQL implementation of DocumentStore.

    The version column is the compare-and-swap token: a write only matches
    the row while the version it was loaded at is still current.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, trip_id: uuid.UUID) -> int:
        """Create an empty itinerary document."""
        empty = ItineraryDocument(trip_id=trip_id)
        self._session.add(
            TripItineraryDB(trip_id=trip_id, data=empty.model_dump(mode="json"), version=0)
        )
        self._session.commit()
        return 0

    def load(self, trip_id: uuid.UUID) -> VersionedDocument:
        """Load document and version."""
        # Column select, not entity: never served from the identity map
        row = self._session.execute(
            select(TripItineraryDB.data, TripItineraryDB.version).where(
                TripItineraryDB.trip_id == trip_id
            )
        ).first()

        if row is None:
            raise NotFoundError(f"Trip {trip_id} has no itinerary")

        return VersionedDocument(
            document=ItineraryDocument.model_validate(row.data), version=row.version
        )

    def write(
        self, trip_id: uuid.UUID, document: ItineraryDocument, expected_version: int
    ) -> int:
        """Compare-and-swap write."""
        result = self._session.execute(
            update(TripItineraryDB)
            .where(
                TripItineraryDB.trip_id == trip_id,
                TripItineraryDB.version == expected_version,
            )
            .values(
                data=document.model_dump(mode="json"),
                version=expected_version + 1,
                updated_at=func.now(),
            )
        )

        if result.rowcount != 1:
            self._session.rollback()
            raise VersionConflictError(trip_id, expected_version)

        self._session.commit()
        return expected_version + 1

    def delete(self, trip_id: uuid.UUID) -> None:
        """Delete document if present."""
        itin = self._session.get(TripItineraryDB, trip_id)
        if itin is not None:
            self._session.delete(itin)
            self._session.commit()


def _participant_from_row(row: TripParticipantDB) -> Participant:
    return Participant(
        user_id=row.user_id,
        status=row.status,
        guests=[Guest.model_validate(g) for g in row.guests or []],
        is_flying=row.is_flying,
        arrival_date=row.arrival_date,
        departure_date=row.departure_date,
    )


def _apply_participant(row: TripParticipantDB, participant: Participant) -> None:
    row.status = participant.status.value
    row.guests = [g.model_dump(mode="json") for g in participant.guests]
    row.is_flying = participant.is_flying
    row.arrival_date = participant.arrival_date
    row.departure_date = participant.departure_date


class SqlTripRepository:
    """SQL implementation of TripRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create_trip(self, trip: Trip) -> None:
        """Persist a new trip with its participants."""
        row = TripDB(
            trip_id=trip.id,
            name=trip.name,
            start_date=trip.start_date,
            end_date=trip.end_date,
            estimated_participants=trip.estimated_participants,
            destination_airport_code=trip.destination_airport_code,
            owner_id=trip.owner_id,
        )
        for participant in trip.participants:
            participant_row = TripParticipantDB(user_id=participant.user_id)
            _apply_participant(participant_row, participant)
            row.participants.append(participant_row)

        self._session.add(row)
        self._session.commit()

    def get_trip(self, trip_id: uuid.UUID) -> Trip | None:
        """Get trip by ID."""
        row = self._session.get(TripDB, trip_id, populate_existing=True)

        if row is None:
            return None

        participant_rows = self._session.execute(
            select(TripParticipantDB)
            .where(TripParticipantDB.trip_id == trip_id)
            .order_by(TripParticipantDB.id)
            .execution_options(populate_existing=True)
        ).scalars()

        return Trip(
            id=row.trip_id,
            name=row.name,
            start_date=row.start_date,
            end_date=row.end_date,
            estimated_participants=row.estimated_participants,
            destination_airport_code=row.destination_airport_code,
            owner_id=row.owner_id,
            participants=[_participant_from_row(p) for p in participant_rows],
        )

    def delete_trip(self, trip_id: uuid.UUID) -> bool:
        """Delete trip; participants and itinerary cascade."""
        row = self._session.get(TripDB, trip_id)

        if row is None:
            return False

        self._session.delete(row)
        self._session.commit()
        return True

    def save_participant(self, trip_id: uuid.UUID, participant: Participant) -> None:
        """Insert or replace a participant record."""
        if self._session.get(TripDB, trip_id) is None:
            raise NotFoundError(f"Trip {trip_id} not found")

        row = self._session.execute(
            select(TripParticipantDB).where(
                TripParticipantDB.trip_id == trip_id,
                TripParticipantDB.user_id == participant.user_id,
            )
        ).scalar_one_or_none()

        if row is None:
            row = TripParticipantDB(trip_id=trip_id, user_id=participant.user_id)
            self._session.add(row)

        _apply_participant(row, participant)
        self._session.commit()


class SqlProfileRepository:
    """SQL implementation of ProfileRepository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_profile(self, user_id: uuid.UUID) -> ProfileRecord | None:
        """Get profile by user ID."""
        row = self._session.get(ProfileDB, user_id)

        if row is None:
            return None

        return ProfileRecord(
            user_id=row.user_id, role=ProfileRole(row.role), home_airport=row.home_airport
        )

    def save_profile(self, profile: ProfileRecord) -> None:
        """Insert or replace profile."""
        row = self._session.get(ProfileDB, profile.user_id)

        if row is None:
            row = ProfileDB(user_id=profile.user_id)
            self._session.add(row)

        row.role = profile.role.value
        row.home_airport = profile.home_airport
        self._session.commit()

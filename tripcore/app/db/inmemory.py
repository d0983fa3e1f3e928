"""In-memory implementations of repository interfaces."""

import threading
from typing import Any
from uuid import UUID

from tripcore.app.db.repositories import ProfileRecord, VersionedDocument
from tripcore.app.errors import NotFoundError, VersionConflictError
from tripcore.app.models.itinerary import ItineraryDocument
from tripcore.app.models.trip import Participant, Trip


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore.

    Documents are kept serialized so every load hands out an independent copy,
    just like a round trip through the database.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[UUID, tuple[dict[str, Any], int]] = {}

    def create(self, trip_id: UUID) -> int:
        """Create an empty itinerary document."""
        with self._lock:
            empty = ItineraryDocument(trip_id=trip_id)
            self._documents[trip_id] = (empty.model_dump(mode="json"), 0)
        return 0

    def load(self, trip_id: UUID) -> VersionedDocument:
        """Load document and version."""
        with self._lock:
            stored = self._documents.get(trip_id)

        if stored is None:
            raise NotFoundError(f"Trip {trip_id} has no itinerary")

        data, version = stored
        return VersionedDocument(document=ItineraryDocument.model_validate(data), version=version)

    def write(self, trip_id: UUID, document: ItineraryDocument, expected_version: int) -> int:
        """Compare-and-swap write."""
        with self._lock:
            stored = self._documents.get(trip_id)
            if stored is None:
                raise NotFoundError(f"Trip {trip_id} has no itinerary")

            _, current_version = stored
            if current_version != expected_version:
                raise VersionConflictError(trip_id, expected_version)

            new_version = current_version + 1
            self._documents[trip_id] = (document.model_dump(mode="json"), new_version)
            return new_version

    def delete(self, trip_id: UUID) -> None:
        """Delete document if present."""
        with self._lock:
            self._documents.pop(trip_id, None)


class InMemoryTripRepository:
    """In-memory implementation of TripRepository."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._trips: dict[UUID, dict[str, Any]] = {}

    def create_trip(self, trip: Trip) -> None:
        """Persist a new trip."""
        with self._lock:
            self._trips[trip.id] = trip.model_dump(mode="json")

    def get_trip(self, trip_id: UUID) -> Trip | None:
        """Get trip by ID."""
        with self._lock:
            data = self._trips.get(trip_id)
        return Trip.model_validate(data) if data is not None else None

    def delete_trip(self, trip_id: UUID) -> bool:
        """Delete trip."""
        with self._lock:
            return self._trips.pop(trip_id, None) is not None

    def save_participant(self, trip_id: UUID, participant: Participant) -> None:
        """Insert or replace a participant record."""
        with self._lock:
            data = self._trips.get(trip_id)
            if data is None:
                raise NotFoundError(f"Trip {trip_id} not found")

            trip = Trip.model_validate(data)
            for index, existing in enumerate(trip.participants):
                if existing.user_id == participant.user_id:
                    trip.participants[index] = participant
                    break
            else:
                trip.participants.append(participant)
            self._trips[trip_id] = trip.model_dump(mode="json")


class InMemoryProfileRepository:
    """In-memory implementation of ProfileRepository."""

    def __init__(self) -> None:
        self._profiles: dict[UUID, ProfileRecord] = {}

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Get profile by user ID."""
        return self._profiles.get(user_id)

    def save_profile(self, profile: ProfileRecord) -> None:
        """Insert or replace profile."""
        self._profiles[profile.user_id] = profile

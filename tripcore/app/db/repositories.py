"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from tripcore.app.models.common import ProfileRole
from tripcore.app.models.itinerary import ItineraryDocument
from tripcore.app.models.trip import Participant, Trip


@dataclass
class VersionedDocument:
    """Itinerary document together with the version it was loaded at."""

    document: ItineraryDocument
    version: int


@dataclass
class ProfileRecord:
    """User profile data relevant to trips."""

    user_id: UUID
    role: ProfileRole
    home_airport: str | None


class DocumentStore(Protocol):
    """Whole-document storage with compare-and-swap writes."""

    def create(self, trip_id: UUID) -> int:
        """Create an empty itinerary document for a trip.

        Args:
            trip_id: Trip ID

        Returns:
            Initial version
        """
        ...

    def load(self, trip_id: UUID) -> VersionedDocument:
        """Load the current document and its version.

        Args:
            trip_id: Trip ID

        Returns:
            Document and opaque version token

        Raises:
            NotFoundError: If the trip has no itinerary document
        """
        ...

    def write(self, trip_id: UUID, document: ItineraryDocument, expected_version: int) -> int:
        """Write the document if the stored version still equals expected_version.

        Args:
            trip_id: Trip ID
            document: Complete new document
            expected_version: Version returned by the load this write is based on

        Returns:
            New version

        Raises:
            VersionConflictError: If another write happened since the load
        """
        ...

    def delete(self, trip_id: UUID) -> None:
        """Delete the document of a trip (no-op if absent).

        Args:
            trip_id: Trip ID
        """
        ...


class TripRepository(Protocol):
    """Repository for trip headers and participants."""

    def create_trip(self, trip: Trip) -> None:
        """Persist a new trip with its participants.

        Args:
            trip: Trip data
        """
        ...

    def get_trip(self, trip_id: UUID) -> Trip | None:
        """Get trip with participants.

        Args:
            trip_id: Trip ID

        Returns:
            Trip or None if not found
        """
        ...

    def delete_trip(self, trip_id: UUID) -> bool:
        """Delete a trip and its participants.

        Args:
            trip_id: Trip ID

        Returns:
            True if a trip was deleted
        """
        ...

    def save_participant(self, trip_id: UUID, participant: Participant) -> None:
        """Insert or replace one participant record.

        Args:
            trip_id: Trip ID
            participant: Participation record
        """
        ...


class ProfileRepository(Protocol):
    """Repository for user profiles."""

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Get profile by user ID.

        Args:
            user_id: User ID

        Returns:
            Profile or None if not found
        """
        ...

    def save_profile(self, profile: ProfileRecord) -> None:
        """Insert or replace a profile.

        Args:
            profile: Profile data
        """
        ...

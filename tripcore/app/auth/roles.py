"""Trip role resolution and the role predicates mutations declare."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from tripcore.app.db.repositories import DocumentStore, ProfileRepository, TripRepository
from tripcore.app.errors import NotFoundError
from tripcore.app.models.common import ProfileRole


@dataclass(frozen=True)
class TripRoles:
    """What a user is with respect to one trip."""

    user_id: UUID
    is_owner: bool = False
    is_admin: bool = False
    is_participant: bool = False
    hosted_lodging_ids: frozenset[str] = field(default_factory=frozenset)

    def is_host(self, lodging_id: str) -> bool:
        """Whether the user proposed the lodging."""
        return lodging_id in self.hosted_lodging_ids


class AuthorizationService(Protocol):
    """Resolves a user's roles on a trip."""

    def resolve_role(self, user_id: UUID, trip_id: UUID) -> TripRoles:
        """Resolve roles.

        Raises:
            NotFoundError: If the trip does not exist
        """
        ...


class RoleResolver:
    """AuthorizationService backed by the trip, profile and document stores."""

    def __init__(
        self,
        trips: TripRepository,
        profiles: ProfileRepository,
        documents: DocumentStore,
        admin_user_ids: Iterable[str] = (),
    ) -> None:
        self._trips = trips
        self._profiles = profiles
        self._documents = documents
        self._admin_user_ids = frozenset(admin_user_ids)

    def resolve_role(self, user_id: UUID, trip_id: UUID) -> TripRoles:
        """Resolve roles of a user on a trip."""
        trip = self._trips.get_trip(trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")

        profile = self._profiles.get_profile(user_id)
        is_admin = str(user_id) in self._admin_user_ids or (
            profile is not None and profile.role == ProfileRole.admin
        )
        is_owner = trip.owner_id == user_id

        return TripRoles(
            user_id=user_id,
            is_owner=is_owner,
            is_admin=is_admin,
            is_participant=is_owner or trip.participant(user_id) is not None,
            hosted_lodging_ids=self._documents.load(trip_id).document.hosted_lodging_ids(user_id),
        )


RolePredicate = Callable[[TripRoles], bool]


def authenticated(roles: TripRoles) -> bool:
    """Any authenticated user."""
    return True


def owner_or_admin(roles: TripRoles) -> bool:
    """Trip owner or global admin."""
    return roles.is_owner or roles.is_admin


def participant_or_admin(roles: TripRoles) -> bool:
    """Anyone on the trip (owner included) or a global admin."""
    return roles.is_participant or roles.is_admin


def host_or_owner_or_admin(lodging_id: str) -> RolePredicate:
    """Proposing host of a lodging, trip owner or global admin."""

    def predicate(roles: TripRoles) -> bool:
        return roles.is_host(lodging_id) or owner_or_admin(roles)

    return predicate


def self_or_owner_or_admin(target_user_id: UUID) -> RolePredicate:
    """The affected user themself, trip owner or global admin."""

    def predicate(roles: TripRoles) -> bool:
        return roles.user_id == target_user_id or owner_or_admin(roles)

    return predicate

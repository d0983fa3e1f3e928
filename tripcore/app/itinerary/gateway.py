"""Itinerary mutation gateway - the only write path to a trip's itinerary.

Per mutation request:
    Authorizing -> Loading -> Applying -> CommittingOrConflict -> Done

The document is read-modify-written as a whole, so every write is a
compare-and-swap on the version returned by the load. On a version mismatch
the mutation is re-applied to the freshly loaded document, up to
`max_attempts` times, before being reported as a conflict.

Mutating calls never raise ItineraryError; they return a MutationResult.
`read` raises instead.
"""

import time
from collections.abc import Callable
from datetime import date
from uuid import UUID

from pydantic import ValidationError

from tripcore.app.auth.roles import (
    AuthorizationService,
    TripRoles,
    owner_or_admin,
    participant_or_admin,
    self_or_owner_or_admin,
)
from tripcore.app.db.context import RequestContext
from tripcore.app.db.repositories import DocumentStore, TripRepository, VersionedDocument
from tripcore.app.errors import (
    ConflictError,
    InvalidInputError,
    ItineraryError,
    NotFoundError,
    UnauthorizedError,
    VersionConflictError,
)
from tripcore.app.itinerary.mutations import Mutation
from tripcore.app.models.common import ParticipantStatus
from tripcore.app.models.results import MutationResult
from tripcore.app.models.trip import Guest, Participant, Trip
from tripcore.app.utils.logging import StructuredMutationLogger
from tripcore.app.utils.metrics import PrometheusMutationMetrics


def _invalid(exc: ValidationError) -> InvalidInputError:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid input")
    return InvalidInputError(f"{location}: {message}" if location else message)


class ItineraryMutationGateway:
    """Authorizes, applies and commits itinerary mutations."""

    def __init__(
        self,
        documents: DocumentStore,
        trips: TripRepository,
        authorization: AuthorizationService,
        *,
        max_attempts: int = 3,
        logger: StructuredMutationLogger | None = None,
        metrics: PrometheusMutationMetrics | None = None,
    ) -> None:
        """Initialize gateway.

        Args:
            documents: Versioned itinerary document store
            trips: Trip header and participant repository
            authorization: Role resolution
            max_attempts: Load/apply/write attempts before reporting a conflict
            logger: Structured mutation logger
            metrics: Mutation metrics sink
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        self._documents = documents
        self._trips = trips
        self._authorization = authorization
        self._max_attempts = max_attempts
        self._logger = logger or StructuredMutationLogger()
        self._metrics = metrics or PrometheusMutationMetrics()

    def _authorize(
        self, ctx: RequestContext, trip_id: UUID, requires: Callable[[TripRoles], bool], denied: str
    ) -> TripRoles:
        roles = self._authorization.resolve_role(ctx.user_id, trip_id)
        if not requires(roles):
            raise UnauthorizedError(denied)
        return roles

    def execute(self, ctx: RequestContext, trip_id: UUID, mutation: Mutation) -> MutationResult:
        """Run one mutation through authorize/load/apply/commit with bounded retries.

        Args:
            ctx: Acting user
            trip_id: Trip whose itinerary is mutated
            mutation: Mutation from the catalogue

        Returns:
            MutationResult (never raises for expected failures)
        """
        started = time.perf_counter()
        attempt = 0

        def finish(outcome: str, result: MutationResult, reason: str | None = None) -> MutationResult:
            latency_ms = (time.perf_counter() - started) * 1000
            self._logger.log_attempt(
                trip_id=trip_id,
                user_id=ctx.user_id,
                mutation=mutation.name,
                attempt=attempt,
                outcome=outcome,
                latency_ms=latency_ms,
                version=result.version,
                reason=reason,
            )
            self._metrics.record(mutation.name, outcome, latency_ms)
            return result

        try:
            self._authorize(ctx, trip_id, mutation.requires, mutation.denied)

            while attempt < self._max_attempts:
                attempt += 1
                loaded = self._documents.load(trip_id)
                working = loaded.document.model_copy(deep=True)

                try:
                    applied = mutation.apply(working)
                except ValidationError as e:
                    raise _invalid(e) from e

                if not applied.changed:
                    return finish(
                        "unchanged",
                        MutationResult.success(
                            changed=False, version=loaded.version, message=applied.message
                        ),
                    )

                try:
                    version = self._documents.write(trip_id, working, loaded.version)
                except VersionConflictError:
                    self._metrics.inc_conflict(mutation.name)
                    self._logger.log_attempt(
                        trip_id=trip_id,
                        user_id=ctx.user_id,
                        mutation=mutation.name,
                        attempt=attempt,
                        outcome="conflict_retry",
                        latency_ms=(time.perf_counter() - started) * 1000,
                        version=loaded.version,
                    )
                    continue

                return finish(
                    "committed",
                    MutationResult.success(changed=True, version=version, message=applied.message),
                )

            raise ConflictError(
                "The itinerary was changed by someone else, please try again"
            )

        except ItineraryError as e:
            return finish(e.code, MutationResult.failure(e.code, e.message), reason=e.message)

    # Reads

    def read(self, ctx: RequestContext, trip_id: UUID) -> tuple[Trip, VersionedDocument]:
        """Load trip header and itinerary for a trip member.

        Raises:
            NotFoundError: If the trip does not exist
            UnauthorizedError: If the caller is not on the trip
        """
        self._authorize(ctx, trip_id, participant_or_admin, "You are not on this trip")
        trip = self._trips.get_trip(trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        return trip, self._documents.load(trip_id)

    # Trip lifecycle

    def create_trip(self, ctx: RequestContext, trip: Trip) -> MutationResult:
        """Create a trip owned by the caller, with an empty itinerary."""
        if trip.owner_id != ctx.user_id:
            return MutationResult.failure(
                UnauthorizedError.code, "Trips can only be created for yourself"
            )

        if trip.participant(ctx.user_id) is None:
            trip = trip.model_copy(
                update={"participants": [Participant(user_id=ctx.user_id), *trip.participants]}
            )

        self._trips.create_trip(trip)
        version = self._documents.create(trip.id)
        return MutationResult.success(changed=True, version=version)

    def delete_trip(self, ctx: RequestContext, trip_id: UUID) -> MutationResult:
        """Delete a trip together with its itinerary."""
        try:
            self._authorize(ctx, trip_id, owner_or_admin, "Only the trip owner can delete it")
        except ItineraryError as e:
            return MutationResult.failure(e.code, e.message)

        self._documents.delete(trip_id)
        self._trips.delete_trip(trip_id)
        return MutationResult.success(changed=True, version=None)

    # Participant records (single-row updates, no document CAS)

    def _update_participant(
        self,
        ctx: RequestContext,
        trip_id: UUID,
        user_id: UUID,
        change: Callable[[Participant | None], Participant],
    ) -> MutationResult:
        try:
            self._authorize(
                ctx,
                trip_id,
                self_or_owner_or_admin(user_id),
                "You can only change your own participation",
            )
            trip = self._trips.get_trip(trip_id)
            if trip is None:
                raise NotFoundError(f"Trip {trip_id} not found")

            current = trip.participant(user_id)
            try:
                updated = change(current)
            except ValidationError as e:
                raise _invalid(e) from e

            if updated == current:
                return MutationResult.success(changed=False, version=None)

            self._trips.save_participant(trip_id, updated)
            return MutationResult.success(changed=True, version=None)
        except ItineraryError as e:
            return MutationResult.failure(e.code, e.message)

    def rsvp(
        self,
        ctx: RequestContext,
        trip_id: UUID,
        status: ParticipantStatus,
        guests: list[Guest] | None = None,
        user_id: UUID | None = None,
    ) -> MutationResult:
        """Set going/declined and the guests a participant brings."""
        target = user_id or ctx.user_id

        def change(current: Participant | None) -> Participant:
            base = current or Participant(user_id=target)
            update: dict[str, object] = {"status": status}
            if guests is not None:
                update["guests"] = [g.model_copy() for g in guests]
            return Participant.model_validate({**base.model_dump(), **update})

        return self._update_participant(ctx, trip_id, target, change)

    def set_flying(
        self,
        ctx: RequestContext,
        trip_id: UUID,
        is_flying: bool,
        arrival_date: date | None = None,
        departure_date: date | None = None,
        user_id: UUID | None = None,
    ) -> MutationResult:
        """Set whether a participant flies, with optional travel dates."""
        target = user_id or ctx.user_id

        def change(current: Participant | None) -> Participant:
            if current is None:
                raise NotFoundError("You have not joined this trip")
            if arrival_date and departure_date and departure_date < arrival_date:
                raise InvalidInputError("departure_date must be >= arrival_date")
            return current.model_copy(
                update={
                    "is_flying": is_flying,
                    "arrival_date": arrival_date,
                    "departure_date": departure_date,
                }
            )

        return self._update_participant(ctx, trip_id, target, change)

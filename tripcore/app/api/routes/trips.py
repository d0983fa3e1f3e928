"""Trip endpoints - lifecycle, participation records and derived projections."""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, ValidationError

from tripcore.app.adapters.flights import FlightEstimateProvider
from tripcore.app.api.auth import get_current_context
from tripcore.app.api.deps import (
    Repositories,
    get_clock,
    get_flight_provider,
    get_gateway,
    get_repositories,
)
from tripcore.app.api.responses import http_error, http_error_for, mutation_response
from tripcore.app.db.context import RequestContext
from tripcore.app.errors import ItineraryError
from tripcore.app.itinerary import costs, participation
from tripcore.app.itinerary.gateway import ItineraryMutationGateway
from tripcore.app.itinerary.live_status import Clock, live_status
from tripcore.app.models.common import CalendarDate, ParticipantStatus
from tripcore.app.models.itinerary import ItineraryDocument
from tripcore.app.models.results import (
    ActivityCounts,
    CostEstimate,
    FlightEstimate,
    FlightUnavailable,
    LiveStatus,
    MutationResult,
)
from tripcore.app.models.trip import Guest, Trip

router = APIRouter(prefix="/trips", tags=["trips"])

Context = Annotated[RequestContext, Depends(get_current_context)]
Gateway = Annotated[ItineraryMutationGateway, Depends(get_gateway)]


class CreateTripRequest(BaseModel):
    """Request body for POST /trips."""

    name: str = Field(..., min_length=1)
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    estimated_participants: int | None = Field(None, ge=0)
    destination_airport_code: str | None = None


class CreateTripResponse(BaseModel):
    """Response for POST /trips."""

    trip_id: str
    version: int | None


class TripResponse(BaseModel):
    """Response for GET /trips/{trip_id}."""

    trip: Trip
    itinerary: ItineraryDocument
    version: int


class CostEstimateResponse(BaseModel):
    """Response for GET /trips/{trip_id}/cost-estimate."""

    estimate: CostEstimate
    flight: FlightEstimate | FlightUnavailable | None


class RsvpRequest(BaseModel):
    """Request body for POST /trips/{trip_id}/rsvp."""

    status: ParticipantStatus
    guests: list[Guest] | None = None
    user_id: uuid.UUID | None = None


class FlyingRequest(BaseModel):
    """Request body for POST /trips/{trip_id}/flying."""

    is_flying: bool
    arrival_date: date | None = None
    departure_date: date | None = None
    user_id: uuid.UUID | None = None


def _read(gateway: ItineraryMutationGateway, ctx: RequestContext, trip_id: uuid.UUID) -> TripResponse:
    try:
        trip, loaded = gateway.read(ctx, trip_id)
    except ItineraryError as e:
        raise http_error_for(e) from e
    return TripResponse(trip=trip, itinerary=loaded.document, version=loaded.version)


@router.post("", response_model=CreateTripResponse, status_code=status.HTTP_201_CREATED)
def create_trip(request: CreateTripRequest, ctx: Context, gateway: Gateway) -> CreateTripResponse:
    """Create a trip owned by the caller with an empty itinerary."""
    try:
        trip = Trip(id=uuid.uuid4(), owner_id=ctx.user_id, **request.model_dump())
    except ValidationError as e:
        raise http_error("invalid", e.errors()[0]["msg"]) from e
    result = mutation_response(gateway.create_trip(ctx, trip))
    return CreateTripResponse(trip_id=str(trip.id), version=result.version)


@router.delete("/{trip_id}", response_model=MutationResult)
def delete_trip(trip_id: uuid.UUID, ctx: Context, gateway: Gateway) -> MutationResult:
    """Delete a trip and its itinerary."""
    return mutation_response(gateway.delete_trip(ctx, trip_id))


@router.get("/{trip_id}", response_model=TripResponse)
def get_trip(trip_id: uuid.UUID, ctx: Context, gateway: Gateway) -> TripResponse:
    """Trip header, participants and the current itinerary document."""
    return _read(gateway, ctx, trip_id)


@router.post("/{trip_id}/rsvp", response_model=MutationResult)
def rsvp(trip_id: uuid.UUID, request: RsvpRequest, ctx: Context, gateway: Gateway) -> MutationResult:
    """Set going/declined and guests."""
    return mutation_response(
        gateway.rsvp(ctx, trip_id, request.status, request.guests, request.user_id)
    )


@router.post("/{trip_id}/flying", response_model=MutationResult)
def set_flying(
    trip_id: uuid.UUID, request: FlyingRequest, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Set whether the participant flies."""
    return mutation_response(
        gateway.set_flying(
            ctx,
            trip_id,
            request.is_flying,
            request.arrival_date,
            request.departure_date,
            request.user_id,
        )
    )


@router.get("/{trip_id}/cost-estimate", response_model=CostEstimateResponse)
async def cost_estimate(
    trip_id: uuid.UUID,
    ctx: Context,
    gateway: Gateway,
    repos: Annotated[Repositories, Depends(get_repositories)],
    flights: Annotated[FlightEstimateProvider, Depends(get_flight_provider)],
) -> CostEstimateResponse:
    """Per-person estimate for the caller: flight + lodging + joined activities."""
    loaded = await run_in_threadpool(_read, gateway, ctx, trip_id)

    flight: FlightEstimate | FlightUnavailable | None = None
    if costs.is_flying(loaded.trip, ctx.user_id):
        profile = await run_in_threadpool(repos.profiles.get_profile, ctx.user_id)
        flight = await flights.estimate(
            loaded.trip, loaded.itinerary, profile.home_airport if profile else None
        )

    return CostEstimateResponse(
        estimate=costs.estimate(loaded.trip, loaded.itinerary, user_id=ctx.user_id, flight=flight),
        flight=flight,
    )


@router.get("/{trip_id}/invitation-estimate", response_model=CostEstimate)
def invitation_estimate(trip_id: uuid.UUID, ctx: Context, gateway: Gateway) -> CostEstimate:
    """Estimate for an invitee, assuming every activity is joined."""
    loaded = _read(gateway, ctx, trip_id)
    return costs.estimate_for_invitation(loaded.trip, loaded.itinerary)


@router.get("/{trip_id}/live-status", response_model=LiveStatus)
def get_live_status(
    trip_id: uuid.UUID,
    ctx: Context,
    gateway: Gateway,
    clock: Annotated[Clock, Depends(get_clock)],
) -> LiveStatus:
    """Whether the trip is happening now, with current and next activity."""
    loaded = _read(gateway, ctx, trip_id)
    return live_status(loaded.trip, loaded.itinerary, clock.now())


@router.get("/{trip_id}/activity-counts", response_model=ActivityCounts)
def activity_counts(trip_id: uuid.UUID, ctx: Context, gateway: Gateway) -> ActivityCounts:
    """Total activities and how many the caller joined."""
    loaded = _read(gateway, ctx, trip_id)
    return participation.activity_counts(loaded.itinerary, ctx.user_id)

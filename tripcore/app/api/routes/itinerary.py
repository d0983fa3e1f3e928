"""Itinerary endpoints - every write goes through the mutation gateway."""

import uuid
from datetime import date
from typing import Annotated, Any, TypeVar

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, ValidationError

from tripcore.app.api.auth import get_current_context
from tripcore.app.api.deps import get_gateway
from tripcore.app.api.responses import http_error, mutation_response
from tripcore.app.db.context import RequestContext
from tripcore.app.itinerary import mutations
from tripcore.app.itinerary.gateway import ItineraryMutationGateway
from tripcore.app.models.common import Amount, CalendarDate, ClockTime, LodgingType
from tripcore.app.models.itinerary import ActivityRef, Leg, Lodging, ScheduledActivity
from tripcore.app.models.patches import ActivityPatch, LegPatch, LodgingPatch
from tripcore.app.models.results import MutationResult

router = APIRouter(prefix="/trips/{trip_id}/itinerary", tags=["itinerary"])

Context = Annotated[RequestContext, Depends(get_current_context)]
Gateway = Annotated[ItineraryMutationGateway, Depends(get_gateway)]

M = TypeVar("M", bound=BaseModel)


def _build(model: type[M], data: dict[str, Any]) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise http_error("invalid", e.errors()[0]["msg"]) from e


class LegRequest(BaseModel):
    """Request body for POST /legs."""

    name: str = Field(..., min_length=1)
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    activities: list[str] = Field(default_factory=list)


class ActivityRequest(BaseModel):
    """Request body for adding an activity to a day."""

    time: ClockTime
    description: str = Field(..., min_length=1)
    location_name: str | None = None
    estimated_cost: Amount | None = None
    venmo_link: str | None = None


class ActivityEditRequest(BaseModel):
    """Request body for POST /activities/edit."""

    ref: ActivityRef
    patch: ActivityPatch


class ActivityPhotoRequest(BaseModel):
    """Request body for POST /activities/photos."""

    ref: ActivityRef
    url: str = Field(..., min_length=1)


class LodgingRequest(BaseModel):
    """Request body for proposing lodging on a leg."""

    name: str = Field(..., min_length=1)
    address: str = ""
    type: LodgingType = LodgingType.other
    total_cost: Amount | None = None
    estimated_cost_per_person: Amount | None = None
    total_bedrooms: int = Field(0, ge=0)
    available_bedrooms: int | None = Field(None, ge=0)


class BookedRequest(BaseModel):
    """Request body for POST /lodging/{lodging_id}/booked."""

    booked: bool


class CapacityRequest(BaseModel):
    """Request body for POST /lodging/{lodging_id}/capacity."""

    total_bedrooms: int = Field(..., ge=0)
    available_bedrooms: int = Field(..., ge=0)


# Legs


@router.post("/legs", response_model=MutationResult)
def add_leg(
    trip_id: uuid.UUID, request: LegRequest, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Append a leg."""
    leg = _build(Leg, request.model_dump())
    return mutation_response(gateway.execute(ctx, trip_id, mutations.add_leg(leg)))


@router.patch("/legs/{leg_index}", response_model=MutationResult)
def update_leg(
    trip_id: uuid.UUID, leg_index: int, patch: LegPatch, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Edit a leg's name, dates or categories."""
    return mutation_response(gateway.execute(ctx, trip_id, mutations.update_leg(leg_index, patch)))


@router.delete("/legs/{leg_index}", response_model=MutationResult)
def remove_leg(
    trip_id: uuid.UUID, leg_index: int, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Remove a leg with its schedule and lodging."""
    return mutation_response(gateway.execute(ctx, trip_id, mutations.remove_leg(leg_index)))


# Schedule


@router.post("/legs/{leg_index}/days/{on}/activities", response_model=MutationResult)
def add_activity(
    trip_id: uuid.UUID,
    leg_index: int,
    on: date,
    request: ActivityRequest,
    ctx: Context,
    gateway: Gateway,
) -> MutationResult:
    """Schedule an activity, creating the day if needed."""
    activity = ScheduledActivity(**request.model_dump())
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.add_activity(leg_index, on, activity))
    )


@router.post("/activities/edit", response_model=MutationResult)
def edit_activity(
    trip_id: uuid.UUID, request: ActivityEditRequest, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Edit an activity's details."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.edit_activity(request.ref, request.patch))
    )


@router.post("/activities/delete", response_model=MutationResult)
def delete_activity(
    trip_id: uuid.UUID, ref: ActivityRef, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Delete an activity."""
    return mutation_response(gateway.execute(ctx, trip_id, mutations.delete_activity(ref)))


@router.post("/activities/photos", response_model=MutationResult)
def add_activity_photo(
    trip_id: uuid.UUID, request: ActivityPhotoRequest, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Attach a photo URL to an activity."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.add_activity_photo(request.ref, request.url))
    )


@router.post("/activities/toggle", response_model=MutationResult)
def toggle_participation(
    trip_id: uuid.UUID, ref: ActivityRef, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Join the activity if not joined, otherwise leave it."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.toggle_participation(ref, ctx.user_id))
    )


@router.post("/activities/join-all", response_model=MutationResult)
def join_all_activities(trip_id: uuid.UUID, ctx: Context, gateway: Gateway) -> MutationResult:
    """Join every scheduled activity."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.join_all_activities(ctx.user_id))
    )


@router.post("/activities/leave-all", response_model=MutationResult)
def leave_all_activities(trip_id: uuid.UUID, ctx: Context, gateway: Gateway) -> MutationResult:
    """Leave every scheduled activity."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.leave_all_activities(ctx.user_id))
    )


# Lodging


@router.post("/legs/{leg_index}/lodging", response_model=MutationResult)
def propose_lodging(
    trip_id: uuid.UUID,
    leg_index: int,
    request: LodgingRequest,
    ctx: Context,
    gateway: Gateway,
) -> MutationResult:
    """Propose lodging for a leg, hosted by the caller."""
    data = request.model_dump()
    if data["available_bedrooms"] is None:
        data["available_bedrooms"] = data["total_bedrooms"]
    lodging = _build(Lodging, data)
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.propose_lodging(leg_index, lodging, ctx.user_id))
    )


@router.patch("/lodging/{lodging_id}", response_model=MutationResult)
def update_lodging(
    trip_id: uuid.UUID, lodging_id: str, patch: LodgingPatch, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Edit lodging details."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.update_lodging(lodging_id, patch))
    )


@router.delete("/lodging/{lodging_id}", response_model=MutationResult)
def remove_lodging(
    trip_id: uuid.UUID, lodging_id: str, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Withdraw a lodging proposal."""
    return mutation_response(gateway.execute(ctx, trip_id, mutations.remove_lodging(lodging_id)))


@router.post("/lodging/{lodging_id}/booked", response_model=MutationResult)
def set_lodging_booked(
    trip_id: uuid.UUID, lodging_id: str, request: BookedRequest, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Mark lodging as booked or not."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.set_lodging_booked(lodging_id, request.booked))
    )


@router.post("/lodging/{lodging_id}/capacity", response_model=MutationResult)
def set_lodging_capacity(
    trip_id: uuid.UUID,
    lodging_id: str,
    request: CapacityRequest,
    ctx: Context,
    gateway: Gateway,
) -> MutationResult:
    """Change bedroom counts."""
    mutation = mutations.set_lodging_capacity(
        lodging_id, request.total_bedrooms, request.available_bedrooms
    )
    return mutation_response(gateway.execute(ctx, trip_id, mutation))


@router.post("/lodging/{lodging_id}/join", response_model=MutationResult)
def join_lodging(
    trip_id: uuid.UUID, lodging_id: str, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Take a bedroom."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.join_lodging(lodging_id, ctx.user_id))
    )


@router.post("/lodging/{lodging_id}/leave", response_model=MutationResult)
def leave_lodging(
    trip_id: uuid.UUID, lodging_id: str, ctx: Context, gateway: Gateway
) -> MutationResult:
    """Give a bedroom back."""
    return mutation_response(
        gateway.execute(ctx, trip_id, mutations.leave_lodging(lodging_id, ctx.user_id))
    )

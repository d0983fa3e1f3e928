"""Catalogue of itinerary mutations.

Each factory returns a Mutation: a name (for logs and metrics), the role
predicate a caller must satisfy, and a pure function applying the change to
an in-memory document. The gateway re-runs `apply` against a fresh document
on every attempt, so it must depend only on its arguments.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from tripcore.app.auth.roles import (
    RolePredicate,
    authenticated,
    host_or_owner_or_admin,
    owner_or_admin,
    participant_or_admin,
)
from tripcore.app.errors import InvalidInputError
from tripcore.app.itinerary import participation, rooms
from tripcore.app.models.itinerary import (
    ActivityRef,
    ItineraryDocument,
    Leg,
    Lodging,
    ScheduledActivity,
)
from tripcore.app.models.patches import ActivityPatch, LegPatch, LodgingPatch, apply_patch


@dataclass(frozen=True)
class Applied:
    """Outcome of applying a mutation to a document."""

    changed: bool
    message: str | None = None


@dataclass(frozen=True)
class Mutation:
    """A document change together with the role it requires."""

    name: str
    requires: RolePredicate
    apply: Callable[[ItineraryDocument], Applied]
    denied: str = "You are not allowed to change this trip"


# Legs


def add_leg(leg: Leg) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        document.legs.append(leg.model_copy(deep=True))
        return Applied(changed=True)

    return Mutation("add_leg", owner_or_admin, apply, "Only the trip owner can edit legs")


def update_leg(leg_index: int, patch: LegPatch) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        leg = document.leg(leg_index)
        document.legs[leg_index] = apply_patch(leg, patch)
        return Applied(changed=True)

    return Mutation("update_leg", owner_or_admin, apply, "Only the trip owner can edit legs")


def remove_leg(leg_index: int) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        document.leg(leg_index)
        del document.legs[leg_index]
        return Applied(changed=True)

    return Mutation("remove_leg", owner_or_admin, apply, "Only the trip owner can edit legs")


# Daily schedule


def add_activity(leg_index: int, on: date, activity: ScheduledActivity) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        day = document.ensure_day(leg_index, on)
        if any(existing.id == activity.id for existing in day.activities):
            return Applied(changed=False, message="Activity already added")
        day.activities.append(activity.model_copy(deep=True))
        day.sort()
        return Applied(changed=True)

    return Mutation(
        "add_activity", owner_or_admin, apply, "Only the trip owner can edit the schedule"
    )


def edit_activity(ref: ActivityRef, patch: ActivityPatch) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        target = participation.resolve_activity(document, ref)
        day = document.day(ref.leg_index, ref.date)
        day.activities = [
            apply_patch(activity, patch) if activity is target else activity
            for activity in day.activities
        ]
        day.sort()
        return Applied(changed=True)

    return Mutation(
        "edit_activity", owner_or_admin, apply, "Only the trip owner can edit the schedule"
    )


def delete_activity(ref: ActivityRef) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        target = participation.resolve_activity(document, ref)
        day = document.day(ref.leg_index, ref.date)
        day.activities = [activity for activity in day.activities if activity is not target]
        return Applied(changed=True)

    return Mutation(
        "delete_activity", owner_or_admin, apply, "Only the trip owner can edit the schedule"
    )


def add_activity_photo(ref: ActivityRef, url: str) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        if not url.strip():
            raise InvalidInputError("Photo URL is required")
        activity = participation.resolve_activity(document, ref)
        if url in activity.photos:
            return Applied(changed=False, message="Photo already added")
        activity.photos.append(url)
        return Applied(changed=True)

    return Mutation(
        "add_activity_photo", participant_or_admin, apply, "Only trip members can add photos"
    )


# Activity participation


def toggle_participation(ref: ActivityRef, user_id: UUID) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        activity = participation.resolve_activity(document, ref)
        joined = participation.toggle(activity, user_id)
        return Applied(changed=True, message="Joined" if joined else "Left")

    return Mutation("toggle_participation", authenticated, apply)


def join_all_activities(user_id: UUID) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        if participation.join_all(document, user_id) == 0:
            return Applied(changed=False, message="Already joined all activities")
        return Applied(changed=True)

    return Mutation("join_all_activities", authenticated, apply)


def leave_all_activities(user_id: UUID) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        if participation.leave_all(document, user_id) == 0:
            return Applied(changed=False, message="Already left all activities")
        return Applied(changed=True)

    return Mutation("leave_all_activities", authenticated, apply)


# Lodging


def propose_lodging(leg_index: int, lodging: Lodging, host_id: UUID) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        leg = document.leg(leg_index)
        if any(item.id == lodging.id for other in document.legs for item in other.lodging):
            raise InvalidInputError(f"Lodging {lodging.id} already exists")

        proposed = lodging.model_copy(deep=True, update={"host_id": host_id})
        leg.lodging.append(proposed)
        return Applied(changed=True)

    return Mutation(
        "propose_lodging", participant_or_admin, apply, "Only trip members can propose lodging"
    )


def _replace_lodging(document: ItineraryDocument, lodging_id: str, new: Lodging | None) -> None:
    leg_index, current = document.lodging(lodging_id)
    leg = document.legs[leg_index]
    if new is None:
        leg.lodging = [item for item in leg.lodging if item is not current]
    else:
        leg.lodging = [new if item is current else item for item in leg.lodging]


def update_lodging(lodging_id: str, patch: LodgingPatch) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        _, current = document.lodging(lodging_id)
        _replace_lodging(document, lodging_id, apply_patch(current, patch))
        return Applied(changed=True)

    return Mutation(
        "update_lodging",
        host_or_owner_or_admin(lodging_id),
        apply,
        "Only the host or trip owner can edit this lodging",
    )


def remove_lodging(lodging_id: str) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        _replace_lodging(document, lodging_id, None)
        return Applied(changed=True)

    return Mutation(
        "remove_lodging",
        host_or_owner_or_admin(lodging_id),
        apply,
        "Only the host or trip owner can remove this lodging",
    )


def set_lodging_booked(lodging_id: str, booked: bool) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        _, lodging = document.lodging(lodging_id)
        if lodging.booked == booked:
            return Applied(changed=False)
        lodging.booked = booked
        return Applied(changed=True)

    return Mutation(
        "set_lodging_booked",
        host_or_owner_or_admin(lodging_id),
        apply,
        "Only the host or trip owner can change booking status",
    )


def set_lodging_capacity(lodging_id: str, total_bedrooms: int, available_bedrooms: int) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        _, lodging = document.lodging(lodging_id)
        rooms.set_capacity(lodging, total_bedrooms, available_bedrooms)
        return Applied(changed=True)

    return Mutation(
        "set_lodging_capacity",
        host_or_owner_or_admin(lodging_id),
        apply,
        "Only the host or trip owner can change capacity",
    )


def join_lodging(lodging_id: str, user_id: UUID) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        _, lodging = document.lodging(lodging_id)
        if rooms.join(lodging, user_id) == rooms.RoomOutcome.already_joined:
            return Applied(changed=False, message="Already joined")
        return Applied(changed=True)

    return Mutation("join_lodging", authenticated, apply)


def leave_lodging(lodging_id: str, user_id: UUID) -> Mutation:
    def apply(document: ItineraryDocument) -> Applied:
        _, lodging = document.lodging(lodging_id)
        if rooms.leave(lodging, user_id) == rooms.RoomOutcome.not_a_guest:
            return Applied(changed=False, message="Not staying here")
        return Applied(changed=True)

    return Mutation("leave_lodging", authenticated, apply)

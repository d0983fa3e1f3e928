"""Per-person cost estimates derived from a trip and its itinerary.

Two lodging pricing models are combined:
- hotel: estimated_cost_per_person is per night, multiplied by the leg's nights
- airbnb / other / custom: total_cost is split across the trip's estimated participants

Activity costs are per participating person. All functions are pure.
"""

from uuid import UUID

from tripcore.app.models.common import LodgingType
from tripcore.app.models.itinerary import ItineraryDocument, Leg, Lodging
from tripcore.app.models.results import CostEstimate, FlightEstimate, FlightUnavailable
from tripcore.app.models.trip import Trip


def lodging_item_per_person(item: Lodging, leg: Leg, split_count: int) -> float:
    """Per-person cost of one lodging option."""
    if item.type == LodgingType.hotel:
        return (item.estimated_cost_per_person or 0.0) * leg.nights
    return (item.total_cost or 0.0) / max(split_count, 1)


def leg_lodging_per_person(trip: Trip, leg: Leg) -> float:
    """Sum of per-person lodging cost over every option in a leg."""
    return sum(lodging_item_per_person(item, leg, trip.split_count) for item in leg.lodging)


def lodging_per_person(trip: Trip, document: ItineraryDocument) -> float:
    """Trip-wide lodging estimate per person."""
    return sum(leg_lodging_per_person(trip, leg) for leg in document.legs)


def total_potential_activity_cost(document: ItineraryDocument) -> float:
    """Cost of participating in every scheduled activity."""
    return sum(activity.estimated_cost or 0.0 for _, _, activity in document.iter_activities())


def personal_activity_cost(document: ItineraryDocument, user_id: UUID) -> float:
    """Cost of the activities a user joined."""
    return sum(
        activity.estimated_cost or 0.0
        for _, _, activity in document.iter_activities()
        if user_id in activity.participants
    )


def is_flying(trip: Trip, user_id: UUID | None) -> bool:
    """Whether flights count towards a user's estimate.

    Users without a participation record get the participant default.
    """
    if user_id is None:
        return True
    participant = trip.participant(user_id)
    return participant.is_flying if participant is not None else True


def estimate(
    trip: Trip,
    document: ItineraryDocument,
    *,
    user_id: UUID | None = None,
    flight: FlightEstimate | FlightUnavailable | None = None,
) -> CostEstimate:
    """Combine flight, lodging and activity costs into a per-person estimate.

    Args:
        trip: Trip header (split count, participants)
        document: Itinerary document
        user_id: Requesting user; None falls back to total-potential activities
        flight: Flight estimate from the pricing provider, if any; ignored for non-flyers

    Returns:
        CostEstimate; all zeros with flights=None is a valid "no data yet" result
    """
    flights: float | None = None
    if not is_flying(trip, user_id):
        flights = 0.0
    elif isinstance(flight, FlightEstimate):
        flights = flight.amount

    lodging = lodging_per_person(trip, document)

    if user_id is not None:
        activities = personal_activity_cost(document, user_id)
        basis = "personal"
    else:
        activities = total_potential_activity_cost(document)
        basis = "total_potential"

    return CostEstimate(
        flights=flights,
        lodging_per_person=lodging,
        activities=activities,
        activities_basis=basis,
        estimated_participants=trip.split_count,
        total=(flights or 0.0) + lodging + activities,
    )


def estimate_for_invitation(trip: Trip, document: ItineraryDocument) -> CostEstimate:
    """Estimate for an invitee: everything joined, no flight data."""
    return estimate(trip, document)

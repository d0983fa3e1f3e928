"""Models package - re-exports for convenience."""

from tripcore.app.models.common import (
    CalendarDate,
    ClockTime,
    LodgingType,
    ParticipantStatus,
    ProfileRole,
)
from tripcore.app.models.itinerary import (
    ActivityRef,
    DailySchedule,
    ItineraryDocument,
    Leg,
    Lodging,
    ScheduledActivity,
)
from tripcore.app.models.results import (
    ActivityCounts,
    CostEstimate,
    FlightEstimate,
    FlightUnavailable,
    LiveStatus,
    MutationResult,
)
from tripcore.app.models.trip import Guest, Participant, Trip

__all__ = [
    # Common
    "CalendarDate",
    "ClockTime",
    "LodgingType",
    "ParticipantStatus",
    "ProfileRole",
    # Itinerary
    "ActivityRef",
    "ItineraryDocument",
    "Leg",
    "DailySchedule",
    "ScheduledActivity",
    "Lodging",
    # Trip
    "Trip",
    "Participant",
    "Guest",
    # Results
    "MutationResult",
    "CostEstimate",
    "FlightEstimate",
    "FlightUnavailable",
    "LiveStatus",
    "ActivityCounts",
]

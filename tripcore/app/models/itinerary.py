"""Itinerary document models - legs, daily schedules, activities and lodging.

The whole itinerary of a trip is one nested document. It is loaded, mutated
in memory and written back as a unit, so the helpers here never perform I/O.
"""

import uuid
from collections.abc import Iterator
from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from tripcore.app.errors import NotFoundError
from tripcore.app.models.common import Amount, CalendarDate, ClockTime, LodgingType


def new_id() -> str:
    """Generate a stable identifier for a sub-entity of the document."""
    return uuid.uuid4().hex


class ScheduledActivity(BaseModel):
    """Single time-boxed event within a day."""

    id: str = Field(default_factory=new_id)
    time: ClockTime
    description: str = Field(..., min_length=1)
    location_name: str | None = None
    estimated_cost: Amount | None = None  # per participating person
    venmo_link: str | None = None
    participants: set[UUID] = Field(default_factory=set)
    photos: list[str] = Field(default_factory=list)

    @property
    def start(self) -> time:
        """Start time of day."""
        hours, minutes = self.time.split(":")
        return time(int(hours), int(minutes))


class DailySchedule(BaseModel):
    """Activities of one calendar day within a leg."""

    date: CalendarDate
    activities: list[ScheduledActivity] = Field(default_factory=list)

    def sorted_activities(self) -> list[ScheduledActivity]:
        """Activities in ascending time order (stable for equal times)."""
        return sorted(self.activities, key=lambda a: a.time)

    def sort(self) -> None:
        """Restore ascending time order in place."""
        self.activities = self.sorted_activities()


class Lodging(BaseModel):
    """Place-to-stay option proposed for a leg."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1)
    address: str = ""
    type: LodgingType = LodgingType.other
    host_id: UUID | None = None
    total_cost: Amount | None = None  # whole stay, non-hotel types
    estimated_cost_per_person: Amount | None = None  # per night, hotel type
    total_bedrooms: int = Field(0, ge=0)
    available_bedrooms: int = Field(0, ge=0)
    guest_ids: set[UUID] = Field(default_factory=set)
    booked: bool = False

    @model_validator(mode="after")
    def validate_available_within_total(self) -> "Lodging":
        """Ensure available_bedrooms <= total_bedrooms."""
        if self.available_bedrooms > self.total_bedrooms:
            raise ValueError("available_bedrooms must be <= total_bedrooms")
        return self


class Leg(BaseModel):
    """One geographic segment of a trip."""

    name: str = Field(..., min_length=1)
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    activities: list[str] = Field(default_factory=list)  # activity category names
    schedule: list[DailySchedule] = Field(default_factory=list)
    lodging: list[Lodging] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_schedule_dates(self) -> "Leg":
        """Ensure at most one DailySchedule per calendar date."""
        seen: set[date] = set()
        for day in self.schedule:
            if day.date in seen:
                raise ValueError(f"duplicate schedule for {day.date.isoformat()}")
            seen.add(day.date)
        return self

    @property
    def nights(self) -> int:
        """Nights between leg start and end; 0 when either date is missing."""
        if self.start_date is None or self.end_date is None:
            return 0
        return max(0, (self.end_date - self.start_date).days)

    def day(self, on: date) -> DailySchedule | None:
        """Schedule for a calendar date, if any."""
        for day in self.schedule:
            if day.date == on:
                return day
        return None


class ItineraryDocument(BaseModel):
    """Complete itinerary of one trip."""

    trip_id: UUID
    legs: list[Leg] = Field(default_factory=list)

    def leg(self, leg_index: int) -> Leg:
        """Get leg by position.

        Raises:
            NotFoundError: If the index is out of range
        """
        if leg_index < 0 or leg_index >= len(self.legs):
            raise NotFoundError(f"Leg {leg_index} not found")
        return self.legs[leg_index]

    def day(self, leg_index: int, on: date) -> DailySchedule:
        """Get a leg's schedule for a date.

        Raises:
            NotFoundError: If the leg or the day does not exist
        """
        schedule = self.leg(leg_index).day(on)
        if schedule is None:
            raise NotFoundError(f"No schedule for {on.isoformat()} in leg {leg_index}")
        return schedule

    def ensure_day(self, leg_index: int, on: date) -> DailySchedule:
        """Get a leg's schedule for a date, creating an empty one if missing."""
        leg = self.leg(leg_index)
        schedule = leg.day(on)
        if schedule is None:
            schedule = DailySchedule(date=on)
            leg.schedule.append(schedule)
            leg.schedule.sort(key=lambda d: d.date)
        return schedule

    def iter_activities(self) -> Iterator[tuple[int, DailySchedule, ScheduledActivity]]:
        """Yield (leg_index, day, activity) for every scheduled activity."""
        for leg_index, leg in enumerate(self.legs):
            for day in leg.schedule:
                for activity in day.activities:
                    yield leg_index, day, activity

    def days_on(self, on: date) -> Iterator[DailySchedule]:
        """Yield every schedule across legs that falls on a date, in leg order."""
        for leg in self.legs:
            schedule = leg.day(on)
            if schedule is not None:
                yield schedule

    def lodging(self, lodging_id: str) -> tuple[int, Lodging]:
        """Find lodging by id across all legs.

        Raises:
            NotFoundError: If no leg holds the lodging
        """
        for leg_index, leg in enumerate(self.legs):
            for item in leg.lodging:
                if item.id == lodging_id:
                    return leg_index, item
        raise NotFoundError(f"Lodging {lodging_id} not found")

    def hosted_lodging_ids(self, user_id: UUID) -> frozenset[str]:
        """Ids of lodging proposed by a user."""
        return frozenset(
            item.id for leg in self.legs for item in leg.lodging if item.host_id == user_id
        )


class ActivityRef(BaseModel):
    """Address of a scheduled activity.

    Prefer `activity_id`; `position` indexes the day's activities sorted by
    time and is only stable until the next insert or edit of that day.
    """

    leg_index: int = Field(..., ge=0)
    date: CalendarDate
    activity_id: str | None = None
    position: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_has_address(self) -> "ActivityRef":
        """Ensure either activity_id or position is given."""
        if self.activity_id is None and self.position is None:
            raise ValueError("activity_id or position is required")
        return self

"""Common types and enums shared across all models."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field


class LodgingType(str, Enum):
    """Pricing model of a lodging option."""

    hotel = "hotel"
    airbnb = "airbnb"
    other = "other"
    custom = "custom"


class ParticipantStatus(str, Enum):
    """RSVP status of a trip participant."""

    going = "going"
    declined = "declined"


class ProfileRole(str, Enum):
    """Global role of a user profile."""

    user = "user"
    admin = "admin"


def coerce_calendar_date(value: Any) -> Any:
    """Drop any time component so dates compare by calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return value
    return value


CalendarDate = Annotated[date, BeforeValidator(coerce_calendar_date)]

# "HH:MM", 24-hour. Zero-padded so lexical order is chronological order.
ClockTime = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]

Amount = Annotated[float, Field(ge=0)]

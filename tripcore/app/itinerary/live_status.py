"""Live trip status - current and next activity from wall-clock time."""

from datetime import datetime, time
from typing import Protocol
from zoneinfo import ZoneInfo

from tripcore.app.models.itinerary import ItineraryDocument, ScheduledActivity
from tripcore.app.models.results import LiveStatus
from tripcore.app.models.trip import Trip


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current wall-clock time."""
        ...


class SystemClock:
    """Clock reading the system time in a fixed timezone."""

    def __init__(self, tz: str = "UTC") -> None:
        self._tz = ZoneInfo(tz)

    def now(self) -> datetime:
        """Current time in the configured timezone."""
        return datetime.now(self._tz)


class FixedClock:
    """Clock frozen at a given instant."""

    def __init__(self, at: datetime) -> None:
        self._at = at

    def now(self) -> datetime:
        """The frozen instant."""
        return self._at


def is_live(trip: Trip, now: datetime) -> bool:
    """True when now falls within [start of start_date, end of end_date]."""
    if trip.start_date is None or trip.end_date is None:
        return False

    start = datetime.combine(trip.start_date, time.min, tzinfo=now.tzinfo)
    end = datetime.combine(trip.end_date, time.max, tzinfo=now.tzinfo)
    return start <= now <= end


def resolve_now_next(
    document: ItineraryDocument, now: datetime
) -> tuple[ScheduledActivity | None, ScheduledActivity | None]:
    """Find the current and next activity of today.

    The first leg with a schedule for today wins. Current is the last
    activity that started at or before now; next is the first one after.
    Either may be None.
    """
    today = next(document.days_on(now.date()), None)
    if today is None:
        return None, None

    clock = now.strftime("%H:%M")
    current: ScheduledActivity | None = None
    upcoming: ScheduledActivity | None = None

    for activity in today.sorted_activities():
        if activity.time <= clock:
            current = activity
        else:
            upcoming = activity
            break

    return current, upcoming


def live_status(trip: Trip, document: ItineraryDocument, now: datetime) -> LiveStatus:
    """Live status of a trip at a given instant."""
    if not is_live(trip, now):
        return LiveStatus(is_live=False)

    current, upcoming = resolve_now_next(document, now)
    return LiveStatus(is_live=True, today=now.date(), current=current, next=upcoming)

"""Per-activity participation, including bulk join-all / leave-all."""

from uuid import UUID

from tripcore.app.errors import NotFoundError
from tripcore.app.models.itinerary import ActivityRef, ItineraryDocument, ScheduledActivity
from tripcore.app.models.results import ActivityCounts


def resolve_activity(document: ItineraryDocument, ref: ActivityRef) -> ScheduledActivity:
    """Find the activity an ActivityRef points to.

    Position references index the day's activities after re-sorting by time,
    so they must be resolved against the freshly loaded document.

    Raises:
        NotFoundError: If the leg, the day, the id or the position does not exist
    """
    day = document.day(ref.leg_index, ref.date)

    if ref.activity_id is not None:
        for activity in day.activities:
            if activity.id == ref.activity_id:
                return activity
        raise NotFoundError(f"Activity {ref.activity_id} not found on {ref.date.isoformat()}")

    ordered = day.sorted_activities()
    if ref.position is None or ref.position >= len(ordered):
        raise NotFoundError(f"No activity at position {ref.position} on {ref.date.isoformat()}")
    return ordered[ref.position]


def toggle(activity: ScheduledActivity, user_id: UUID) -> bool:
    """Join the activity if not a participant, otherwise leave it.

    Returns:
        True if the user is now participating
    """
    if user_id in activity.participants:
        activity.participants.discard(user_id)
        return False
    activity.participants.add(user_id)
    return True


def join_all(document: ItineraryDocument, user_id: UUID) -> int:
    """Add a user to every scheduled activity of the trip.

    Returns:
        Number of activities changed (0 means already joined everything)
    """
    changed = 0
    for _, _, activity in document.iter_activities():
        if user_id not in activity.participants:
            activity.participants.add(user_id)
            changed += 1
    return changed


def leave_all(document: ItineraryDocument, user_id: UUID) -> int:
    """Remove a user from every scheduled activity of the trip.

    Returns:
        Number of activities changed (0 means already left everything)
    """
    changed = 0
    for _, _, activity in document.iter_activities():
        if user_id in activity.participants:
            activity.participants.discard(user_id)
            changed += 1
    return changed


def activity_counts(document: ItineraryDocument, user_id: UUID) -> ActivityCounts:
    """Count all activities and the ones a user joined."""
    total = 0
    joined = 0
    for _, _, activity in document.iter_activities():
        total += 1
        if user_id in activity.participants:
            joined += 1
    return ActivityCounts(total=total, joined=joined)

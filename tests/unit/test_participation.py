"""Unit tests for activity participation."""

import uuid
from datetime import date

import pytest

from tripcore.app.errors import NotFoundError
from tripcore.app.itinerary import participation
from tripcore.app.models.itinerary import (
    ActivityRef,
    DailySchedule,
    ItineraryDocument,
    Leg,
    ScheduledActivity,
)

DAY = date(2025, 5, 2)
USER = uuid.uuid4()


@pytest.fixture
def document() -> ItineraryDocument:
    return ItineraryDocument(
        trip_id=uuid.uuid4(),
        legs=[
            Leg(
                name="Kyoto",
                schedule=[
                    DailySchedule(
                        date=DAY,
                        activities=[
                            ScheduledActivity(id="tea", time="15:00", description="Tea ceremony"),
                            ScheduledActivity(id="temple", time="08:30", description="Temple"),
                        ],
                    )
                ],
            ),
            Leg(
                name="Osaka",
                schedule=[
                    DailySchedule(
                        date=date(2025, 5, 4),
                        activities=[ScheduledActivity(time="19:00", description="Street food")],
                    )
                ],
            ),
        ],
    )


class TestResolveActivity:
    def test_by_id(self, document: ItineraryDocument) -> None:
        ref = ActivityRef(leg_index=0, date=DAY, activity_id="tea")

        assert participation.resolve_activity(document, ref).description == "Tea ceremony"

    def test_by_position_uses_time_order(self, document: ItineraryDocument) -> None:
        ref = ActivityRef(leg_index=0, date=DAY, position=0)

        assert participation.resolve_activity(document, ref).id == "temple"

    @pytest.mark.parametrize(
        "ref",
        [
            ActivityRef(leg_index=0, date=DAY, activity_id="missing"),
            ActivityRef(leg_index=0, date=DAY, position=2),
            ActivityRef(leg_index=5, date=DAY, position=0),
            ActivityRef(leg_index=0, date=date(2025, 5, 3), position=0),
        ],
    )
    def test_missing_raises_not_found(self, document: ItineraryDocument, ref: ActivityRef) -> None:
        with pytest.raises(NotFoundError):
            participation.resolve_activity(document, ref)


def test_toggle_joins_then_leaves(document: ItineraryDocument) -> None:
    activity = document.legs[0].schedule[0].activities[0]

    assert participation.toggle(activity, USER) is True
    assert USER in activity.participants
    assert participation.toggle(activity, USER) is False
    assert USER not in activity.participants


def test_join_all_and_leave_all(document: ItineraryDocument) -> None:
    document.legs[0].schedule[0].activities[0].participants.add(USER)

    assert participation.join_all(document, USER) == 2
    assert participation.join_all(document, USER) == 0
    assert participation.activity_counts(document, USER).fully_joined is True

    assert participation.leave_all(document, USER) == 3
    assert participation.leave_all(document, USER) == 0


def test_activity_counts(document: ItineraryDocument) -> None:
    document.legs[1].schedule[0].activities[0].participants.add(USER)

    counts = participation.activity_counts(document, USER)

    assert counts.total == 3
    assert counts.joined == 1
    assert counts.fully_joined is False


def test_counts_on_empty_document_not_fully_joined() -> None:
    counts = participation.activity_counts(ItineraryDocument(trip_id=uuid.uuid4()), USER)

    assert counts.total == 0
    assert counts.fully_joined is False

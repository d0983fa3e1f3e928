"""Patch models for editing parts of an itinerary document.

All fields are optional; only fields explicitly set are applied, so an
empty patch leaves the target unchanged.
"""

from typing import TypeVar

from pydantic import BaseModel, Field

from tripcore.app.models.common import Amount, CalendarDate, ClockTime, LodgingType

M = TypeVar("M", bound=BaseModel)


class LegPatch(BaseModel):
    """Editable leg fields."""

    name: str | None = Field(default=None, min_length=1)
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    activities: list[str] | None = None


class ActivityPatch(BaseModel):
    """Editable activity fields; participants and photos have their own mutations."""

    time: ClockTime | None = None
    description: str | None = Field(default=None, min_length=1)
    location_name: str | None = None
    estimated_cost: Amount | None = None
    venmo_link: str | None = None


class LodgingPatch(BaseModel):
    """Editable lodging details; capacity and booking have their own mutations."""

    name: str | None = Field(default=None, min_length=1)
    address: str | None = None
    type: LodgingType | None = None
    total_cost: Amount | None = None
    estimated_cost_per_person: Amount | None = None


def apply_patch(target: M, patch: BaseModel) -> M:
    """Return a re-validated copy of target with the patch's set fields applied.

    Raises:
        pydantic.ValidationError: If the patched model is invalid
    """
    data = target.model_dump()
    data.update(patch.model_dump(exclude_unset=True))
    return type(target).model_validate(data)

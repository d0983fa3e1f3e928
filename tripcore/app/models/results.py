"""Result models - mutation outcomes and derived projections."""

from datetime import date
from typing import Literal

from pydantic import BaseModel

from tripcore.app.models.itinerary import ScheduledActivity


class MutationResult(BaseModel):
    """Discriminated outcome of one gateway mutation.

    `ok` is False only for failures; idempotent no-ops are successes with
    `changed=False` and an informational message.
    """

    ok: bool
    code: str | None = None
    message: str | None = None
    changed: bool = False
    version: int | None = None

    @classmethod
    def success(
        cls, *, changed: bool, version: int | None, message: str | None = None
    ) -> "MutationResult":
        """Build a success result."""
        return cls(ok=True, changed=changed, version=version, message=message)

    @classmethod
    def failure(cls, code: str, message: str) -> "MutationResult":
        """Build a failure result."""
        return cls(ok=False, code=code, message=message)


class FlightEstimate(BaseModel):
    """Cheapest round-trip fare found for a participant."""

    amount: float
    currency: str
    origin: str
    destination: str
    airline: str | None = None
    deep_link: str | None = None


class FlightUnavailable(BaseModel):
    """No fare could be estimated."""

    reason: str


class CostEstimate(BaseModel):
    """Per-person cost estimate for a trip."""

    flights: float | None  # None -> no flight data (TBD)
    lodging_per_person: float
    activities: float
    activities_basis: Literal["personal", "total_potential"]
    estimated_participants: int
    total: float

    @property
    def has_cost_data(self) -> bool:
        """False for the valid "no cost data yet" estimate."""
        return self.total > 0 or self.flights is not None


class LiveStatus(BaseModel):
    """What is happening on a trip right now."""

    is_live: bool
    today: date | None = None
    current: ScheduledActivity | None = None
    next: ScheduledActivity | None = None


class ActivityCounts(BaseModel):
    """How many activities exist and how many a user joined."""

    total: int
    joined: int

    @property
    def fully_joined(self) -> bool:
        """True when there is at least one activity and all are joined."""
        return self.total > 0 and self.joined == self.total

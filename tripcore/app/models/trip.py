"""Trip models - trip-level parameters and participants."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from tripcore.app.models.common import CalendarDate, ParticipantStatus


class Guest(BaseModel):
    """Companion brought by a participant, not tied to a user account."""

    name: str = Field(..., min_length=1)
    age: int | None = Field(None, ge=0)


class Participant(BaseModel):
    """Trip-level participation record of one user."""

    user_id: UUID
    status: ParticipantStatus = ParticipantStatus.going
    guests: list[Guest] = Field(default_factory=list)
    is_flying: bool = True
    arrival_date: CalendarDate | None = None
    departure_date: CalendarDate | None = None


class Trip(BaseModel):
    """Trip header: dates, split parameters and participants."""

    id: UUID
    name: str = Field(..., min_length=1)
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    estimated_participants: int | None = Field(None, ge=0)
    destination_airport_code: str | None = None
    owner_id: UUID
    participants: list[Participant] = Field(default_factory=list)

    @field_validator("destination_airport_code")
    @classmethod
    def validate_airport_code(cls, v: str | None) -> str | None:
        """Normalize to an upper-case 3-letter IATA code."""
        if v is None or v == "":
            return None
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("destination_airport_code must be a 3-letter IATA code")
        return code

    @property
    def split_count(self) -> int:
        """Divisor for shared costs; never zero."""
        return self.estimated_participants or 1

    def participant(self, user_id: UUID) -> Participant | None:
        """Participation record of a user, if any."""
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None

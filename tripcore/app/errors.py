"""Error taxonomy for itinerary mutations."""


class ItineraryError(Exception):
    """Base class for expected, user-reportable mutation failures."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(ItineraryError):
    """Caller lacks the role required for this mutation."""

    code = "unauthorized"


class NotFoundError(ItineraryError):
    """Referenced leg, day, activity or lodging does not exist."""

    code = "not_found"


class NoCapacityError(ItineraryError):
    """Lodging has no available bedrooms."""

    code = "no_capacity"


class ConflictError(ItineraryError):
    """Concurrent writes kept winning until the attempt limit was reached."""

    code = "conflict"


class InvalidInputError(ItineraryError):
    """Malformed mutation input."""

    code = "invalid"


class VersionConflictError(Exception):
    """Conditional write rejected because the stored version moved on.

    Raised by document stores; the gateway retries and converts exhaustion
    into ConflictError.
    """

    def __init__(self, trip_id: object, expected_version: int) -> None:
        super().__init__(f"version {expected_version} of trip {trip_id} is stale")
        self.trip_id = trip_id
        self.expected_version = expected_version

"""Bedroom allocation for lodging options.

Invariant maintained by join/leave:
    0 <= available_bedrooms <= total_bedrooms
and, absent capacity overrides, available_bedrooms + len(guest_ids) == total_bedrooms.
The host does not occupy a bedroom unless they join like anyone else.
"""

from enum import Enum
from uuid import UUID

from tripcore.app.errors import InvalidInputError, NoCapacityError
from tripcore.app.models.itinerary import Lodging


class RoomOutcome(str, Enum):
    """Result of a join/leave request."""

    joined = "joined"
    already_joined = "already_joined"
    left = "left"
    not_a_guest = "not_a_guest"


def join(lodging: Lodging, user_id: UUID) -> RoomOutcome:
    """Take a bedroom in a lodging option.

    Returns:
        already_joined (no state change) if the user is already a guest

    Raises:
        NoCapacityError: If no bedroom is available
    """
    if user_id in lodging.guest_ids:
        return RoomOutcome.already_joined

    if lodging.available_bedrooms <= 0:
        raise NoCapacityError(f"No bedrooms available at {lodging.name}")

    lodging.guest_ids.add(user_id)
    lodging.available_bedrooms -= 1
    return RoomOutcome.joined


def leave(lodging: Lodging, user_id: UUID) -> RoomOutcome:
    """Give up a bedroom; a no-op when the user is not a guest."""
    if user_id not in lodging.guest_ids:
        return RoomOutcome.not_a_guest

    lodging.guest_ids.discard(user_id)
    # Capped in case capacity was edited down while occupied
    lodging.available_bedrooms = min(lodging.available_bedrooms + 1, lodging.total_bedrooms)
    return RoomOutcome.left


def set_capacity(lodging: Lodging, total_bedrooms: int, available_bedrooms: int) -> None:
    """Administrative capacity override.

    available_bedrooms is clamped to [0, total_bedrooms - guests] so that
    current guests keep their rooms.

    Raises:
        InvalidInputError: If total_bedrooms is negative or smaller than the
            number of current guests
    """
    if total_bedrooms < 0:
        raise InvalidInputError("total_bedrooms must be >= 0")

    occupied = len(lodging.guest_ids)
    if total_bedrooms < occupied:
        raise InvalidInputError(
            f"total_bedrooms ({total_bedrooms}) is below the {occupied} current guest(s)"
        )

    lodging.total_bedrooms = total_bedrooms
    lodging.available_bedrooms = max(0, min(available_bedrooms, total_bedrooms - occupied))

"""Request context identifying the acting user."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the authenticated user's identity.

    Every gateway operation acts on behalf of this user.
    """

    user_id: UUID

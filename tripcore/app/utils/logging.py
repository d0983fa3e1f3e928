"""Structured logging for itinerary mutations."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)

# Expected failures are reported to the caller, not treated as system errors
_INFO_OUTCOMES = {"committed", "unchanged", "unauthorized", "not_found", "no_capacity", "invalid"}


class StructuredMutationLogger:
    """Structured logger for gateway mutation attempts."""

    def log_attempt(
        self,
        *,
        trip_id: UUID,
        user_id: UUID,
        mutation: str,
        attempt: int,
        outcome: str,
        latency_ms: float,
        version: int | None = None,
        reason: str | None = None,
    ) -> None:
        """Log one mutation attempt with structured data."""
        log_data: dict[str, Any] = {
            "trip_id": str(trip_id),
            "user_id": str(user_id),
            "mutation": mutation,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if version is not None:
            log_data["version"] = version
        if reason:
            log_data["reason"] = reason

        log_msg = f"Itinerary mutation: {mutation} - {outcome}"

        if outcome in _INFO_OUTCOMES:
            logger.info(log_msg, extra={"structured": log_data})
        elif outcome == "conflict_retry":
            logger.debug(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

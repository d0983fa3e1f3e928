"""Mapping of gateway results and errors to HTTP responses."""

from fastapi import HTTPException, status

from tripcore.app.errors import ItineraryError
from tripcore.app.models.results import MutationResult

STATUS_BY_CODE = {
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "no_capacity": status.HTTP_409_CONFLICT,
    "conflict": status.HTTP_409_CONFLICT,
    "invalid": status.HTTP_422_UNPROCESSABLE_CONTENT,
}


def http_error(code: str | None, message: str | None) -> HTTPException:
    """HTTPException for an error code, detail carrying code and message."""
    return HTTPException(
        status_code=STATUS_BY_CODE.get(code or "", status.HTTP_400_BAD_REQUEST),
        detail={"code": code, "message": message},
    )


def mutation_response(result: MutationResult) -> MutationResult:
    """Return successful results as-is; raise failures as HTTP errors."""
    if not result.ok:
        raise http_error(result.code, result.message)
    return result


def http_error_for(exc: ItineraryError) -> HTTPException:
    """HTTPException for an ItineraryError raised on a read path."""
    return http_error(exc.code, exc.message)

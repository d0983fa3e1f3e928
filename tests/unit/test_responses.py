"""Unit tests for error-code to HTTP status mapping."""

import pytest

from tripcore.app.api.responses import http_error


@pytest.mark.parametrize(
    ("code", "status_code"),
    [
        ("unauthorized", 403),
        ("not_found", 404),
        ("no_capacity", 409),
        ("conflict", 409),
        ("invalid", 422),
        ("something_else", 400),
        (None, 400),
    ],
)
def test_http_error_status(code: str | None, status_code: int) -> None:
    exc = http_error(code, "msg")

    assert exc.status_code == status_code
    assert exc.detail == {"code": code, "message": "msg"}

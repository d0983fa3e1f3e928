"""Unit tests for request authentication."""

import uuid

import pytest
from fastapi import HTTPException

from tripcore.app.api.auth import get_current_context


@pytest.mark.asyncio
async def test_valid_bearer_user_id() -> None:
    user_id = uuid.uuid4()

    ctx = await get_current_context(authorization=f"Bearer {user_id}")

    assert ctx.user_id == user_id


@pytest.mark.asyncio
async def test_missing_header_raises_401() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization=None)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_invalid_bearer_format() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization="NotBearer token")

    assert exc_info.value.status_code == 401
    assert "Invalid authorization header format" in exc_info.value.detail


@pytest.mark.asyncio
async def test_invalid_uuid_format() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_context(authorization="Bearer not-a-uuid")

    assert exc_info.value.status_code == 401

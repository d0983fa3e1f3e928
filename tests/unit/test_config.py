"""Unit tests for settings loading."""

import pytest

from tripcore.app.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ADMIN_USER_IDS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url is None
    assert settings.mutation_max_attempts == 3
    assert settings.flight_currency == "USD"
    assert settings.admin_user_ids == []


def test_admin_ids_from_comma_separated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADMIN_USER_IDS", "a, b,,c")

    settings = Settings(_env_file=None)

    assert settings.admin_user_ids == ["a", "b", "c"]


def test_max_attempts_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MUTATION_MAX_ATTEMPTS", "0")

    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_flight_client_credentials_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLIGHT_API_CLIENT_ID", "app-id")
    monkeypatch.setenv("FLIGHT_API_CLIENT_SECRET", "app-secret")

    settings = Settings(_env_file=None)

    assert settings.flight_api_client_id == "app-id"
    assert settings.flight_api_client_secret == "app-secret"

"""Integration test for the Alembic migration chain on SQLite."""

from collections.abc import Generator
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from tripcore.app.config import get_settings

SCRIPT_LOCATION = Path(__file__).resolve().parents[2] / "tripcore" / "app" / "db" / "alembic"


@pytest.fixture
def database_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[str, None, None]:
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()

    yield url

    get_settings.cache_clear()


def alembic_config() -> Config:
    # No ini file: keeps the test process's logging configuration intact
    config = Config()
    config.set_main_option("script_location", str(SCRIPT_LOCATION))
    return config


def test_upgrade_and_downgrade(database_url: str) -> None:
    config = alembic_config()

    command.upgrade(config, "head")

    engine = create_engine(database_url)
    inspector = inspect(engine)
    assert {"profile", "trip", "trip_participant", "trip_itinerary"} <= set(
        inspector.get_table_names()
    )
    columns = {column["name"] for column in inspector.get_columns("trip_itinerary")}
    assert {"trip_id", "data", "version", "updated_at"} <= columns

    command.downgrade(config, "base")

    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()

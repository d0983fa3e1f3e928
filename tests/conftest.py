"""Shared pytest fixtures for all test suites."""

import uuid
from collections.abc import Generator
from datetime import date

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tripcore.app.api.deps import Repositories
from tripcore.app.auth.roles import RoleResolver
from tripcore.app.db.context import RequestContext
from tripcore.app.db.inmemory import (
    InMemoryDocumentStore,
    InMemoryProfileRepository,
    InMemoryTripRepository,
)
from tripcore.app.db.models import Base
from tripcore.app.itinerary.gateway import ItineraryMutationGateway
from tripcore.app.models.trip import Participant, Trip

OWNER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
MEMBER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b2")
OUTSIDER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c3")
ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-0000000000d4")


@pytest.fixture
def repos() -> Repositories:
    """Fresh in-memory repositories."""
    return Repositories(
        documents=InMemoryDocumentStore(),
        trips=InMemoryTripRepository(),
        profiles=InMemoryProfileRepository(),
    )


@pytest.fixture
def gateway(repos: Repositories) -> ItineraryMutationGateway:
    """Gateway over in-memory repositories with ADMIN_ID as bootstrap admin."""
    return ItineraryMutationGateway(
        repos.documents,
        repos.trips,
        RoleResolver(repos.trips, repos.profiles, repos.documents, [str(ADMIN_ID)]),
        max_attempts=3,
    )


@pytest.fixture
def trip() -> Trip:
    """Four-night trip owned by OWNER_ID with MEMBER_ID going."""
    return Trip(
        id=uuid.uuid4(),
        name="Lisbon",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 5),
        estimated_participants=4,
        destination_airport_code="lis",
        owner_id=OWNER_ID,
        participants=[Participant(user_id=OWNER_ID), Participant(user_id=MEMBER_ID)],
    )


@pytest.fixture
def trip_id(gateway: ItineraryMutationGateway, trip: Trip) -> uuid.UUID:
    """Persisted trip with an empty itinerary."""
    result = gateway.create_trip(RequestContext(user_id=OWNER_ID), trip)
    assert result.ok
    return trip.id


@pytest.fixture
def owner() -> RequestContext:
    return RequestContext(user_id=OWNER_ID)


@pytest.fixture
def member() -> RequestContext:
    return RequestContext(user_id=MEMBER_ID)


@pytest.fixture
def outsider() -> RequestContext:
    return RequestContext(user_id=OUTSIDER_ID)


@pytest.fixture
def admin() -> RequestContext:
    return RequestContext(user_id=ADMIN_ID)


@pytest.fixture
def sqlite_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the schema created.

    StaticPool keeps a single connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture
def sql_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session

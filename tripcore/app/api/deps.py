"""FastAPI dependencies wiring stores, gateway, clock and flight provider."""

from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from tripcore.app.adapters.flights import FlightEstimateProvider, HttpFlightEstimateProvider
from tripcore.app.auth.roles import RoleResolver
from tripcore.app.config import get_settings
from tripcore.app.db.engine import create_engine_from_settings, create_session_factory
from tripcore.app.db.inmemory import (
    InMemoryDocumentStore,
    InMemoryProfileRepository,
    InMemoryTripRepository,
)
from tripcore.app.db.repositories import DocumentStore, ProfileRepository, TripRepository
from tripcore.app.db.sql_repositories import (
    SqlDocumentStore,
    SqlProfileRepository,
    SqlTripRepository,
)
from tripcore.app.itinerary.gateway import ItineraryMutationGateway
from tripcore.app.itinerary.live_status import Clock, SystemClock


@dataclass
class Repositories:
    """Stores backing one request."""

    documents: DocumentStore
    trips: TripRepository
    profiles: ProfileRepository


@lru_cache
def _memory_repositories() -> Repositories:
    return Repositories(
        documents=InMemoryDocumentStore(),
        trips=InMemoryTripRepository(),
        profiles=InMemoryProfileRepository(),
    )


@lru_cache
def _session_factory() -> sessionmaker[Session]:
    return create_session_factory(create_engine_from_settings(get_settings()))


def get_repositories() -> Iterator[Repositories]:
    """SQL repositories on a per-request session, or process-wide in-memory ones."""
    if not get_settings().database_url:
        yield _memory_repositories()
        return

    with _session_factory()() as session:
        yield Repositories(
            documents=SqlDocumentStore(session),
            trips=SqlTripRepository(session),
            profiles=SqlProfileRepository(session),
        )


def get_gateway(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> ItineraryMutationGateway:
    """Gateway over the request's repositories."""
    settings = get_settings()
    return ItineraryMutationGateway(
        repos.documents,
        repos.trips,
        RoleResolver(repos.trips, repos.profiles, repos.documents, settings.admin_user_ids),
        max_attempts=settings.mutation_max_attempts,
    )


def get_clock() -> Clock:
    """Wall clock in the configured trip timezone."""
    return SystemClock(get_settings().trip_timezone)


@lru_cache
def get_flight_provider() -> FlightEstimateProvider:
    """Process-wide flight pricing provider, so its access token is reused."""
    settings = get_settings()
    return HttpFlightEstimateProvider(
        base_url=settings.flight_api_base_url,
        client_id=settings.flight_api_client_id,
        client_secret=settings.flight_api_client_secret,
        currency=settings.flight_currency,
        timeout_ms=settings.flight_api_timeout_ms,
    )

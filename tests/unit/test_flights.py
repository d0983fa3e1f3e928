"""Tests for the flight estimate adapter."""

import uuid
from collections.abc import Callable
from datetime import date
from urllib.parse import parse_qs

import httpx
import pytest

from tripcore.app.adapters.flights import (
    HttpFlightEstimateProvider,
    destination_code,
    google_flights_link,
)
from tripcore.app.models.itinerary import ItineraryDocument, Leg
from tripcore.app.models.results import FlightEstimate, FlightUnavailable
from tripcore.app.models.trip import Trip

OFFERS = {
    "data": [
        {
            "price": {"total": "412.30", "currency": "EUR"},
            "validatingAirlineCodes": ["TP"],
        }
    ]
}


def make_trip(code: str | None = "LIS") -> Trip:
    return Trip(
        id=uuid.uuid4(),
        name="Lisbon",
        start_date=date(2025, 9, 1),
        end_date=date(2025, 9, 8),
        destination_airport_code=code,
        owner_id=uuid.uuid4(),
    )


def provider_with(
    handler: Callable[[httpx.Request], httpx.Response],
    credentials: bool = False,
    clock: Callable[[], float] = lambda: 0.0,
) -> tuple[HttpFlightEstimateProvider, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = HttpFlightEstimateProvider(
        base_url="https://flights.example/",
        client_id="app-id" if credentials else "",
        client_secret="app-secret" if credentials else "",
        currency="EUR",
        client=client,
        clock=clock,
    )
    return provider, client


def token_response(token: str = "tok-1", expires_in: int = 1799) -> httpx.Response:
    return httpx.Response(
        200, json={"access_token": token, "token_type": "Bearer", "expires_in": expires_in}
    )


@pytest.mark.asyncio
async def test_estimate_parses_first_offer() -> None:
    """Request carries route and dates; first offer becomes the estimate."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/security/oauth2/token":
            return token_response("secret")
        seen.append(request)
        return httpx.Response(200, json=OFFERS)

    provider, client = provider_with(handler, credentials=True)
    trip = make_trip()

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), "sfo")

    assert isinstance(result, FlightEstimate)
    assert result.amount == pytest.approx(412.30)
    assert result.currency == "EUR"
    assert result.airline == "TP"
    assert result.origin == "SFO"
    assert result.destination == "LIS"
    assert result.deep_link is not None
    assert result.deep_link.startswith("https://www.google.com/travel/flights?q=")

    request = seen[0]
    assert request.url.path == "/v2/shopping/flight-offers"
    assert request.url.params["destinationLocationCode"] == "LIS"
    assert request.url.params["departureDate"] == "2025-09-01"
    assert request.url.params["returnDate"] == "2025-09-08"
    assert request.headers["Authorization"] == "Bearer secret"

    await client.aclose()


@pytest.mark.asyncio
async def test_first_leg_start_is_departure_date() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=OFFERS)

    provider, client = provider_with(handler)
    trip = make_trip()
    document = ItineraryDocument(
        trip_id=trip.id, legs=[Leg(name="Porto", start_date=date(2025, 8, 30))]
    )

    await provider.estimate(trip, document, "SFO")

    assert seen[0].url.params["departureDate"] == "2025-08-30"
    assert "Authorization" not in seen[0].headers

    await client.aclose()


@pytest.mark.asyncio
async def test_no_offers() -> None:
    provider, client = provider_with(lambda request: httpx.Response(200, json={"data": []}))
    trip = make_trip()

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), "SFO")

    assert result == FlightUnavailable(reason="No flights found")

    await client.aclose()


@pytest.mark.asyncio
async def test_http_error_is_unavailable() -> None:
    provider, client = provider_with(lambda request: httpx.Response(503))
    trip = make_trip()

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), "SFO")

    assert isinstance(result, FlightUnavailable)
    assert result.reason == "Failed to fetch flight estimate"

    await client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("origin", "code", "start", "reason"),
    [
        (None, "LIS", date(2025, 9, 1), "No home airport set"),
        ("SFO", None, date(2025, 9, 1), "Could not determine destination airport"),
        ("SFO", "LIS", None, "Trip has no start date"),
    ],
)
async def test_missing_inputs_skip_request(
    origin: str | None, code: str | None, start: date | None, reason: str
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    provider, client = provider_with(handler)
    trip = make_trip(code).model_copy(update={"start_date": start})

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), origin)

    assert result == FlightUnavailable(reason=reason)

    await client.aclose()


def test_destination_falls_back_to_iata_named_leg() -> None:
    trip = make_trip(code=None)

    airport_leg = ItineraryDocument(trip_id=trip.id, legs=[Leg(name="OPO")])
    city_leg = ItineraryDocument(trip_id=trip.id, legs=[Leg(name="Porto")])

    assert destination_code(trip, airport_leg) == "OPO"
    assert destination_code(trip, city_leg) is None


def test_google_flights_link_encodes_query() -> None:
    link = google_flights_link("SFO", "LIS", date(2025, 9, 1), date(2025, 9, 8))

    assert link == (
        "https://www.google.com/travel/flights?q="
        "Flights%20to%20LIS%20from%20SFO%20on%202025-09-01%20through%202025-09-08"
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"data": [{"validatingAirlineCodes": ["TP"]}]},
        [{"x": 1}],
        {"data": [{"price": {"total": "not-a-number"}}]},
        {"data": "oops"},
    ],
)
async def test_malformed_offers_are_unavailable(payload: object) -> None:
    provider, client = provider_with(lambda request: httpx.Response(200, json=payload))
    trip = make_trip()

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), "SFO")

    assert result == FlightUnavailable(reason="Failed to fetch flight estimate")

    await client.aclose()


@pytest.mark.asyncio
async def test_token_exchange_and_reuse() -> None:
    """Client credentials are exchanged once; the token is reused until it expires."""
    token_requests: list[httpx.Request] = []
    offer_auth: list[str] = []
    now = [0.0]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/security/oauth2/token":
            token_requests.append(request)
            return token_response(f"tok-{len(token_requests)}", expires_in=1800)
        offer_auth.append(request.headers["Authorization"])
        return httpx.Response(200, json=OFFERS)

    provider, client = provider_with(handler, credentials=True, clock=lambda: now[0])
    trip = make_trip()
    document = ItineraryDocument(trip_id=trip.id)

    await provider.estimate(trip, document, "SFO")
    now[0] = 1000.0
    await provider.estimate(trip, document, "SFO")
    now[0] = 1790.0
    await provider.estimate(trip, document, "SFO")

    assert offer_auth == ["Bearer tok-1", "Bearer tok-1", "Bearer tok-2"]
    assert len(token_requests) == 2
    form = parse_qs(token_requests[0].content.decode())
    assert form == {
        "grant_type": ["client_credentials"],
        "client_id": ["app-id"],
        "client_secret": ["app-secret"],
    }
    assert token_requests[0].method == "POST"

    await client.aclose()


@pytest.mark.asyncio
async def test_rejected_credentials_are_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/security/oauth2/token":
            return httpx.Response(401, json={"error": "invalid_client"})
        raise AssertionError("search must not run without a token")

    provider, client = provider_with(handler, credentials=True)
    trip = make_trip()

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), "SFO")

    assert result == FlightUnavailable(reason="Failed to fetch flight estimate")

    await client.aclose()


@pytest.mark.asyncio
async def test_city_name_leg_resolved_through_location_search() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/v1/reference-data/locations":
            return httpx.Response(200, json={"data": [{"iataCode": "OPO", "subType": "CITY"}]})
        return httpx.Response(200, json=OFFERS)

    provider, client = provider_with(handler)
    trip = make_trip(code=None)
    document = ItineraryDocument(trip_id=trip.id, legs=[Leg(name="Porto, Portugal")])

    result = await provider.estimate(trip, document, "SFO")

    assert isinstance(result, FlightEstimate)
    assert result.destination == "OPO"
    lookup, search = seen
    assert lookup.url.params["keyword"] == "Porto"
    assert lookup.url.params["subType"] == "CITY"
    assert search.url.params["destinationLocationCode"] == "OPO"

    await client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"data": []}),
        httpx.Response(200, json={"data": [{"name": "Porto"}]}),
        httpx.Response(500),
    ],
)
async def test_unresolved_city_name_gives_up(response: httpx.Response) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/reference-data/locations":
            return response
        raise AssertionError("no offer search expected")

    provider, client = provider_with(handler)
    trip = make_trip(code=None)
    document = ItineraryDocument(trip_id=trip.id, legs=[Leg(name="Porto")])

    result = await provider.estimate(trip, document, "SFO")

    assert result == FlightUnavailable(reason="Could not determine destination airport")

    await client.aclose()


@pytest.mark.asyncio
async def test_no_legs_and_no_code_skips_location_search() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    provider, client = provider_with(handler)
    trip = make_trip(code=None)

    result = await provider.estimate(trip, ItineraryDocument(trip_id=trip.id), "SFO")

    assert result == FlightUnavailable(reason="Could not determine destination airport")

    await client.aclose()

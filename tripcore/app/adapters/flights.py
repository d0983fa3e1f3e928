"""Flight price estimates from an Amadeus-style flight-offers search API."""

import logging
import re
import time
from collections.abc import Callable
from datetime import date
from typing import Protocol
from urllib.parse import quote

import httpx

from tripcore.app.models.itinerary import ItineraryDocument
from tripcore.app.models.results import FlightEstimate, FlightUnavailable
from tripcore.app.models.trip import Trip

logger = logging.getLogger(__name__)

IATA_CODE = re.compile(r"^[A-Z]{3}$")

# Refresh tokens this many seconds before the provider says they expire.
TOKEN_EXPIRY_MARGIN_S = 30


class FlightEstimateProvider(Protocol):
    """Source of per-person round-trip flight estimates."""

    async def estimate(
        self, trip: Trip, document: ItineraryDocument, origin: str | None
    ) -> FlightEstimate | FlightUnavailable:
        """Estimate the cheapest fare from origin to the trip destination."""
        ...


def destination_code(trip: Trip, document: ItineraryDocument) -> str | None:
    """Destination IATA code: the trip's own, else a first leg named like one."""
    if trip.destination_airport_code:
        return trip.destination_airport_code
    if document.legs:
        name = document.legs[0].name.strip()
        if len(name) == 3 and name.isalpha() and name == name.upper():
            return name
    return None


def google_flights_link(origin: str, destination: str, departure: date, ret: date | None) -> str:
    """Deep link to a Google Flights search for the same route and dates."""
    query = f"Flights to {destination} from {origin} on {departure.isoformat()}"
    if ret is not None:
        query += f" through {ret.isoformat()}"
    return f"https://www.google.com/travel/flights?q={quote(query)}"


class HttpFlightEstimateProvider:
    """FlightEstimateProvider calling an Amadeus-style flight-offers search API.

    Requests authenticate with an OAuth2 client-credentials token, fetched on
    first use and reused until shortly before it expires. Without credentials
    requests go out unauthenticated.
    """

    def __init__(
        self,
        base_url: str,
        client_id: str = "",
        client_secret: str = "",
        currency: str = "USD",
        timeout_ms: int = 4000,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize provider.

        Args:
            base_url: API base URL
            client_id: OAuth2 client id
            client_secret: OAuth2 client secret
            currency: Currency to price offers in
            timeout_ms: Request timeout
            client: Optional httpx client (for testing with mocks)
            clock: Monotonic seconds, used for token expiry
        """
        self._base_url = base_url.rstrip("/")
        self._client_id = client_id
        self._client_secret = client_secret
        self._currency = currency
        self._timeout = timeout_ms / 1000
        self._client = client
        self._clock = clock
        self._token: str | None = None
        self._token_expires_at = 0.0

    async def _auth_headers(self, client: httpx.AsyncClient) -> dict[str, str]:
        """Bearer header with a cached access token, fetching a new one when stale."""
        if not (self._client_id and self._client_secret):
            return {}

        if self._token is None or self._clock() >= self._token_expires_at:
            response = await client.post(
                f"{self._base_url}/v1/security/oauth2/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                },
            )
            response.raise_for_status()
            payload = response.json()
            self._token = str(payload["access_token"])
            expires_in = float(payload.get("expires_in", 0))
            self._token_expires_at = self._clock() + max(expires_in - TOKEN_EXPIRY_MARGIN_S, 0)

        return {"Authorization": f"Bearer {self._token}"}

    async def _lookup_city_code(
        self, client: httpx.AsyncClient, trip: Trip, name: str
    ) -> str | None:
        """IATA city code for a place name, or None when the search finds nothing."""
        keyword = name.split(",")[0].strip()
        if not keyword:
            return None

        try:
            response = await client.get(
                f"{self._base_url}/v1/reference-data/locations",
                params={"keyword": keyword, "subType": "CITY"},
                headers=await self._auth_headers(client),
            )
            response.raise_for_status()
            locations = response.json().get("data") or []
            if not locations:
                return None
            code = str(locations[0]["iataCode"]).upper()
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(
                "Destination lookup failed",
                extra={"structured": {"trip_id": str(trip.id), "error": type(e).__name__}},
            )
            return None

        return code if IATA_CODE.match(code) else None

    async def estimate(
        self, trip: Trip, document: ItineraryDocument, origin: str | None
    ) -> FlightEstimate | FlightUnavailable:
        """Search one adult round trip and return the first offer's total."""
        if not origin:
            return FlightUnavailable(reason="No home airport set")
        origin = origin.strip().upper()

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        try:
            return await self._search(client, trip, document, origin)
        finally:
            if close_client:
                await client.aclose()

    async def _search(
        self, client: httpx.AsyncClient, trip: Trip, document: ItineraryDocument, origin: str
    ) -> FlightEstimate | FlightUnavailable:
        destination = destination_code(trip, document)
        if destination is None and document.legs:
            destination = await self._lookup_city_code(client, trip, document.legs[0].name)
        if destination is None:
            return FlightUnavailable(reason="Could not determine destination airport")

        departure = document.legs[0].start_date if document.legs else None
        departure = departure or trip.start_date
        if departure is None:
            return FlightUnavailable(reason="Trip has no start date")

        params: dict[str, str] = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": departure.isoformat(),
            "currencyCode": self._currency,
            "adults": "1",
            "max": "1",
        }
        if trip.end_date is not None:
            params["returnDate"] = trip.end_date.isoformat()

        try:
            response = await client.get(
                f"{self._base_url}/v2/shopping/flight-offers",
                params=params,
                headers=await self._auth_headers(client),
            )
            response.raise_for_status()
            offers = response.json().get("data") or []
            if not offers:
                return FlightUnavailable(reason="No flights found")

            offer = offers[0]
            airlines = offer.get("validatingAirlineCodes") or []
            return FlightEstimate(
                amount=float(offer["price"]["total"]),
                currency=offer["price"].get("currency", self._currency),
                origin=origin,
                destination=destination,
                airline=airlines[0] if airlines else None,
                deep_link=google_flights_link(origin, destination, departure, trip.end_date),
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(
                "Flight estimate failed",
                extra={"structured": {"trip_id": str(trip.id), "error": type(e).__name__}},
            )
            return FlightUnavailable(reason="Failed to fetch flight estimate")

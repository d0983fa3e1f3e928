"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - itinerary_mutations_total{mutation, outcome}
    - itinerary_write_conflicts_total{mutation}
    - itinerary_mutation_latency_ms{mutation}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

"""FastAPI application."""

from fastapi import FastAPI

from tripcore.app.api.routes.health import router as health_router
from tripcore.app.api.routes.itinerary import router as itinerary_router
from tripcore.app.api.routes.metrics import router as metrics_router
from tripcore.app.api.routes.trips import router as trips_router

app = FastAPI(title="Trip Itinerary API", version="0.1.0")

app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(trips_router)
app.include_router(itinerary_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Trip Itinerary API", "version": "0.1.0"}

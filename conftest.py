"""Global pytest configuration."""

import os

# Empty DATABASE_URL -> in-memory stores; set before any settings are cached
os.environ.setdefault("DATABASE_URL", "")
os.environ.setdefault("TRIP_TIMEZONE", "UTC")

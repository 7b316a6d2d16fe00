"""
Service metadata routes: health check, endpoint index and client config.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from logic.config import get_config, validate_map_token

router = APIRouter()

API_VERSION = "1.0.0"

_started = time.monotonic()


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": get_config()["environment"],
        "uptime": time.monotonic() - _started,
    }


@router.get("/api")
async def api_index():
    return {
        "message": "BibleMap API",
        "version": API_VERSION,
        "endpoints": {
            "health": "/health",
            "config": "/api/config",
            "persons": "/api/persons",
            "locations": "/api/locations",
            "events": "/api/events",
            "journeys": "/api/journeys",
            "themes": "/api/themes",
            "verses": "/api/verses",
            "search": "/api/search",
        },
    }


@router.get("/api/config")
async def client_config():
    """Settings the client needs at start-up.

    An unusable map token is reported in "map" rather than failing the
    request; the client then shows its "map unavailable" panel.
    """
    config = get_config()
    return {
        "apiBaseUrl": config["api_base_url"],
        "environment": config["environment"],
        "map": validate_map_token(config["map_token"]),
    }

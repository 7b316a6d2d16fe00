"""
Bible Map FastAPI Application

Main entry point for the Bible Map API, serving persons, locations, events,
journeys, themes and verses for the interactive map client.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from database import init_db
from logic.config import get_config
from observability import get_logger, setup_logging
from server.errors import register_error_handlers
from server.events import router as events_router
from server.journeys import router as journeys_router
from server.locations import router as locations_router
from server.meta import API_VERSION
from server.meta import router as meta_router
from server.persons import router as persons_router
from server.search import router as search_router
from server.themes import router as themes_router
from server.verses import router as verses_router

config = get_config()

setup_logging(level=config["log_level"], environment=config["environment"])
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(
        "startup",
        environment=config["environment"],
        port=config["port"],
        cors_origins=config["cors_origins"],
    )
    yield


app = FastAPI(title="Bible Map API", version=API_VERSION, lifespan=lifespan)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config["cors_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include all routers
app.include_router(meta_router)
app.include_router(persons_router)
app.include_router(locations_router)
app.include_router(events_router)
app.include_router(journeys_router)
app.include_router(themes_router)
app.include_router(verses_router)
app.include_router(search_router)


# ============================================================
# Request Logging
# ============================================================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=status,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=config["port"])

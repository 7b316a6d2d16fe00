"""
Unified search API routes.

One query string is matched, case-insensitively, against persons,
locations, events, themes and journeys. The five lookups run concurrently,
each in a worker thread with its own session, and the response is sent once
all of them have finished.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from starlette.concurrency import run_in_threadpool

from database import session_scope
from logic.validation import (
    LIKE_ESCAPE,
    MIN_SEARCH_LENGTH,
    escape_like,
    normalize_query,
    parse_int,
)
from models import Event, Journey, Location, Person, Theme
from observability import get_logger
from server.crud import text_filter
from server.errors import StoreError

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100
SUGGESTION_LIMIT = 5


def _search_persons(term: str, limit: int):
    with session_scope() as db:
        rows = (
            db.query(Person)
            .filter(text_filter([Person.name, Person.description], term))
            .order_by(Person.name)
            .limit(limit)
            .all()
        )
        return [
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "birthYear": p.birth_year,
                "deathYear": p.death_year,
                "type": "person",
            }
            for p in rows
        ]


def _search_locations(term: str, limit: int):
    with session_scope() as db:
        rows = (
            db.query(Location)
            .filter(text_filter([Location.name, Location.modern_name, Location.description], term))
            .order_by(Location.name)
            .limit(limit)
            .all()
        )
        return [
            {
                "id": loc.id,
                "name": loc.name,
                "modernName": loc.modern_name,
                "description": loc.description,
                "latitude": loc.latitude,
                "longitude": loc.longitude,
                "type": "location",
            }
            for loc in rows
        ]


def _search_events(term: str, limit: int):
    with session_scope() as db:
        rows = (
            db.query(Event)
            .filter(text_filter([Event.title, Event.description], term))
            .order_by(Event.title)
            .limit(limit)
            .all()
        )
        return [
            {
                "id": e.id,
                "title": e.title,
                "description": e.description,
                "year": e.year,
                "category": e.category,
                "type": "event",
            }
            for e in rows
        ]


def _search_themes(term: str, limit: int):
    with session_scope() as db:
        rows = (
            db.query(Theme)
            .filter(text_filter([Theme.title, Theme.description, Theme.summary], term))
            .order_by(Theme.title)
            .limit(limit)
            .all()
        )
        return [
            {
                "id": t.id,
                "title": t.title,
                "description": t.description,
                "category": t.category,
                "type": "theme",
            }
            for t in rows
        ]


def _search_journeys(term: str, limit: int):
    with session_scope() as db:
        rows = (
            db.query(Journey)
            .options(selectinload(Journey.person))
            .filter(text_filter([Journey.title, Journey.description, Journey.purpose], term))
            .order_by(Journey.title)
            .limit(limit)
            .all()
        )
        return [
            {
                "id": j.id,
                "title": j.title,
                "description": j.description,
                "person": {"name": j.person.name},
                "type": "journey",
            }
            for j in rows
        ]


def _suggest(model, term: str):
    with session_scope() as db:
        rows = (
            db.query(model)
            .filter(model.name.ilike(f"{escape_like(term)}%", escape=LIKE_ESCAPE))
            .order_by(model.name)
            .limit(SUGGESTION_LIMIT)
            .all()
        )
        return [(row.id, row.name) for row in rows]


@router.get("/api/search")
async def search(q: Optional[str] = Query(None), limit: Optional[str] = Query(None)):
    """Search every entity type at once.

    Args:
        q: Query, at least two characters after trimming.
        limit: Maximum results per entity type (default 10).

    Returns:
        Results grouped by entity type, each tagged with "type", plus
        totalResults.

    Raises:
        HTTPException: 400 if the query is too short.
    """
    term = normalize_query(q)
    if len(term) < MIN_SEARCH_LENGTH:
        raise HTTPException(400, "Search query must be at least 2 characters")

    limit = min(max(parse_int(limit, DEFAULT_SEARCH_LIMIT), 1), MAX_SEARCH_LIMIT)

    try:
        persons, locations, events, themes, journeys = await asyncio.gather(
            run_in_threadpool(_search_persons, term, limit),
            run_in_threadpool(_search_locations, term, limit),
            run_in_threadpool(_search_events, term, limit),
            run_in_threadpool(_search_themes, term, limit),
            run_in_threadpool(_search_journeys, term, limit),
        )
    except SQLAlchemyError as exc:
        logger.error("search_failed", query=term, error=str(exc), exc_info=True)
        raise StoreError("Failed to perform search") from exc

    return {
        "persons": persons,
        "locations": locations,
        "events": events,
        "themes": themes,
        "journeys": journeys,
        "totalResults": len(persons) + len(locations) + len(events) + len(themes) + len(journeys),
    }


@router.get("/api/search/suggestions")
async def suggestions(q: Optional[str] = Query(None)):
    """Name-prefix suggestions for persons and locations, five of each."""
    term = normalize_query(q)
    if not term:
        return []

    try:
        persons, locations = await asyncio.gather(
            run_in_threadpool(_suggest, Person, term),
            run_in_threadpool(_suggest, Location, term),
        )
    except SQLAlchemyError as exc:
        logger.error("suggestions_failed", query=term, error=str(exc), exc_info=True)
        raise StoreError("Failed to fetch suggestions") from exc

    return [{"id": i, "label": name, "type": "person"} for i, name in persons] + [
        {"id": i, "label": name, "type": "location"} for i, name in locations
    ]

"""
Event API routes.

CRUD for events, their person and verse links, and the century-grouped
timeline.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import Field, field_validator
from sqlalchemy.orm import Session, selectinload

from database import get_db
from logic.timeline import group_by_century
from logic.validation import parse_enum, parse_int, parse_pagination
from models import BibleVerse, Event, EventCategory, Location, Person, Testament
from server.crud import (
    CamelModel,
    apply_updates,
    ensure_exists,
    get_or_404,
    load_many,
    paginate,
    text_filter,
    year_range,
)
from server.errors import store_errors

router = APIRouter()


class EventCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    significance: str = ""
    year: Optional[int] = None
    year_range: Optional[str] = None
    testament: Testament = Testament.OLD
    category: EventCategory
    image_url: Optional[str] = None
    location_id: Optional[str] = None
    persons: List[str] = []
    verses: List[str] = []


class EventUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    significance: Optional[str] = None
    year: Optional[int] = None
    year_range: Optional[str] = None
    testament: Optional[Testament] = None
    category: Optional[EventCategory] = None
    image_url: Optional[str] = None
    location_id: Optional[str] = None
    persons: Optional[List[str]] = None
    verses: Optional[List[str]] = None

    @field_validator("title", "description", "significance", "testament", "category")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


EVENT_LOADERS = (
    selectinload(Event.location),
    selectinload(Event.persons),
    selectinload(Event.verses),
)


def event_detail(event: Event) -> dict:
    data = event.to_dict()
    data["location"] = event.location.to_brief() if event.location else None
    data["persons"] = [p.to_summary() for p in event.persons]
    data["verses"] = [v.to_dict() for v in event.verses]
    return data


def _set_relations(db: Session, event: Event, values: dict):
    if "persons" in values:
        person_ids = values.pop("persons")
        if person_ids is not None:
            event.persons = load_many(db, Person, person_ids, "person")
    if "verses" in values:
        verse_ids = values.pop("verses")
        if verse_ids is not None:
            event.verses = load_many(db, BibleVerse, verse_ids, "verse")


@router.get("/api/events")
def list_events(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    testament: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    year_from: Optional[str] = Query(None, alias="yearFrom"),
    year_to: Optional[str] = Query(None, alias="yearTo"),
    db: Session = Depends(get_db),
):
    """List events, earliest first, undated last.

    Args:
        page: Page number, 1-based.
        limit: Page size, clamped to [1, 100].
        search: Substring of title or description.
        testament: OLD, NEW or BOTH.
        category: Event category.
        year_from: Minimum year, inclusive.
        year_to: Maximum year, inclusive.

    Returns:
        Dictionary with data and pagination.
    """
    page, limit = parse_pagination(page, limit)
    query = db.query(Event).options(selectinload(Event.location), selectinload(Event.persons))

    if search and search.strip():
        query = query.filter(text_filter([Event.title, Event.description], search.strip()))

    testament = parse_enum(testament, Testament)
    if testament:
        query = query.filter(Event.testament == testament)

    category = parse_enum(category, EventCategory)
    if category:
        query = query.filter(Event.category == category)

    query = year_range(query, Event.year, parse_int(year_from), parse_int(year_to))

    rows, pagination = paginate(
        query.order_by(Event.year.is_(None), Event.year, Event.title), page, limit
    )
    data = []
    for event in rows:
        item = event.to_dict()
        item["location"] = event.location.to_brief() if event.location else None
        item["persons"] = [{"id": p.id, "name": p.name} for p in event.persons]
        data.append(item)
    return {"data": data, "pagination": pagination}


@router.get("/api/events/timeline")
def events_timeline(db: Session = Depends(get_db)):
    """Events grouped by century, e.g. "-1500s", undated under "Unknown"."""
    events = (
        db.query(Event)
        .options(selectinload(Event.location), selectinload(Event.persons))
        .all()
    )
    items = []
    for event in events:
        items.append(
            {
                "id": event.id,
                "title": event.title,
                "year": event.year,
                "yearRange": event.year_range,
                "testament": event.testament,
                "category": event.category,
                "location": (
                    {
                        "id": event.location.id,
                        "name": event.location.name,
                        "latitude": event.location.latitude,
                        "longitude": event.location.longitude,
                    }
                    if event.location
                    else None
                ),
                "persons": [{"id": p.id, "name": p.name} for p in event.persons],
            }
        )
    return group_by_century(items)


@router.get("/api/events/{event_id}")
def get_event(event_id: str, db: Session = Depends(get_db)):
    return event_detail(get_or_404(db, Event, event_id, "Event", options=EVENT_LOADERS))


@router.post("/api/events", status_code=201)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    values = payload.model_dump()
    ensure_exists(db, Location, values.get("location_id"), "location")

    with store_errors(db, "Failed to create event"):
        event = Event()
        _set_relations(db, event, values)
        apply_updates(event, values)
        db.add(event)
        db.commit()
        db.refresh(event)
    return event_detail(event)


@router.put("/api/events/{event_id}")
def update_event(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)):
    """Update an event.

    persons and verses, when given, replace the current links.
    """
    event = get_or_404(db, Event, event_id, "Event", options=EVENT_LOADERS)
    values = payload.model_dump(exclude_unset=True)
    ensure_exists(db, Location, values.get("location_id"), "location")

    with store_errors(db, "Failed to update event"):
        _set_relations(db, event, values)
        apply_updates(event, values)
        db.commit()
        db.refresh(event)
    return event_detail(event)


@router.delete("/api/events/{event_id}", status_code=204)
def delete_event(event_id: str, db: Session = Depends(get_db)):
    event = get_or_404(db, Event, event_id, "Event")
    with store_errors(db, "Failed to delete event"):
        db.delete(event)
        db.commit()
    return Response(status_code=204)

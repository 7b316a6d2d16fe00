"""
Journey API routes.

A journey is created together with its ordered stops in one transaction and
its stops are replaced wholesale on update.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import Field, field_validator
from sqlalchemy.orm import Session, selectinload

from database import get_db
from logic.geo import feature_collection, line_feature
from logic.validation import check_unique_order, parse_int, parse_pagination
from models import Journey, JourneyStop, Location, Person
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


class StopPayload(CamelModel):
    location_id: str
    order_index: int
    description: Optional[str] = None
    duration: Optional[str] = None


class JourneyCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    purpose: str = ""
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    distance: Optional[float] = None
    duration: Optional[str] = None
    person_id: str
    stops: List[StopPayload] = []

    @field_validator("stops")
    @classmethod
    def unique_order(cls, stops):
        check_unique_order(stop.order_index for stop in stops)
        return stops


class JourneyUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    purpose: Optional[str] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    distance: Optional[float] = None
    duration: Optional[str] = None
    person_id: Optional[str] = None
    stops: Optional[List[StopPayload]] = None

    @field_validator("title", "description", "purpose", "person_id")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("stops")
    @classmethod
    def unique_order(cls, stops):
        if stops is not None:
            check_unique_order(stop.order_index for stop in stops)
        return stops


JOURNEY_LOADERS = (
    selectinload(Journey.person),
    selectinload(Journey.stops).selectinload(JourneyStop.location),
)


def journey_detail(journey: Journey) -> dict:
    data = journey.to_dict()
    data["person"] = journey.person.to_summary() if journey.person else None
    data["stops"] = [
        {**stop.to_dict(), "location": stop.location.to_brief()} for stop in journey.stops
    ]
    return data


def _build_stops(db: Session, stops: List[dict]) -> List[JourneyStop]:
    load_many(db, Location, [s["location_id"] for s in stops], "location")
    return [JourneyStop(**stop) for stop in sorted(stops, key=lambda s: s["order_index"])]


@router.get("/api/journeys")
def list_journeys(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    person_id: Optional[str] = Query(None, alias="personId"),
    year_from: Optional[str] = Query(None, alias="yearFrom"),
    year_to: Optional[str] = Query(None, alias="yearTo"),
    db: Session = Depends(get_db),
):
    """List journeys by start year, undated last.

    Args:
        page: Page number, 1-based.
        limit: Page size, clamped to [1, 100].
        search: Substring of title, description or purpose.
        person_id: Only journeys of this person.
        year_from: Minimum start year, inclusive.
        year_to: Maximum start year, inclusive.

    Returns:
        Dictionary with data and pagination.
    """
    page, limit = parse_pagination(page, limit)
    query = db.query(Journey).options(*JOURNEY_LOADERS)

    if search and search.strip():
        query = query.filter(
            text_filter([Journey.title, Journey.description, Journey.purpose], search.strip())
        )
    if person_id:
        query = query.filter(Journey.person_id == person_id)

    query = year_range(query, Journey.start_year, parse_int(year_from), parse_int(year_to))

    rows, pagination = paginate(
        query.order_by(Journey.start_year.is_(None), Journey.start_year, Journey.title),
        page,
        limit,
    )
    return {"data": [journey_detail(j) for j in rows], "pagination": pagination}


@router.get("/api/journeys/map/paths")
def journey_paths(db: Session = Depends(get_db)):
    """LineString per journey with at least two stops, in stop order."""
    journeys = db.query(Journey).options(*JOURNEY_LOADERS).all()
    features = []
    for journey in journeys:
        stops = journey.stops
        if len(stops) < 2:
            continue
        features.append(
            line_feature(
                [[s.location.longitude, s.location.latitude] for s in stops],
                {
                    "id": journey.id,
                    "title": journey.title,
                    "person": journey.person.name,
                    "stops": [s.location.name for s in stops],
                },
            )
        )
    return feature_collection(features)


@router.get("/api/journeys/{journey_id}")
def get_journey(journey_id: str, db: Session = Depends(get_db)):
    return journey_detail(get_or_404(db, Journey, journey_id, "Journey", options=JOURNEY_LOADERS))


@router.post("/api/journeys", status_code=201)
def create_journey(payload: JourneyCreate, db: Session = Depends(get_db)):
    values = payload.model_dump()
    ensure_exists(db, Person, values["person_id"], "person")
    stops = _build_stops(db, values.pop("stops"))

    with store_errors(db, "Failed to create journey"):
        journey = Journey(**values)
        journey.stops = stops
        db.add(journey)
        db.commit()
        db.refresh(journey)
    return journey_detail(journey)


@router.put("/api/journeys/{journey_id}")
def update_journey(journey_id: str, payload: JourneyUpdate, db: Session = Depends(get_db)):
    """Update a journey.

    When stops are given they replace every existing stop.
    """
    journey = get_or_404(db, Journey, journey_id, "Journey", options=JOURNEY_LOADERS)
    values = payload.model_dump(exclude_unset=True)
    if "person_id" in values:
        ensure_exists(db, Person, values["person_id"], "person")

    stops = None
    if values.get("stops") is not None:
        stops = _build_stops(db, values["stops"])
    values.pop("stops", None)

    with store_errors(db, "Failed to update journey"):
        apply_updates(journey, values)
        if stops is not None:
            # Old rows must be gone before new ones reuse their order indexes.
            journey.stops.clear()
            db.flush()
            journey.stops.extend(stops)
        db.commit()
        db.refresh(journey)
    return journey_detail(journey)


@router.delete("/api/journeys/{journey_id}", status_code=204)
def delete_journey(journey_id: str, db: Session = Depends(get_db)):
    journey = get_or_404(db, Journey, journey_id, "Journey")
    with store_errors(db, "Failed to delete journey"):
        db.delete(journey)
        db.commit()
    return Response(status_code=204)

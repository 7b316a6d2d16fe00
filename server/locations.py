"""
Location registry API routes.

CRUD for places plus the GeoJSON export consumed by the overview map.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import Field, field_validator
from sqlalchemy.orm import Session, selectinload

from database import get_db
from logic.geo import feature_collection, point_feature
from logic.validation import check_latitude, check_longitude, parse_bounds, parse_pagination
from models import JourneyStop, Location
from server.crud import CamelModel, apply_updates, get_or_404, paginate, text_filter
from server.errors import store_errors

router = APIRouter()


class LocationCreate(CamelModel):
    name: str = Field(min_length=1)
    name_hebrew: Optional[str] = None
    name_greek: Optional[str] = None
    modern_name: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    location_type: Optional[str] = Field(None, alias="type")
    period: Optional[str] = None
    latitude: float
    longitude: float
    description: str = ""
    significance: str = ""
    image_url: Optional[str] = None

    @field_validator("latitude")
    @classmethod
    def latitude_in_range(cls, value):
        return check_latitude(value)

    @field_validator("longitude")
    @classmethod
    def longitude_in_range(cls, value):
        return check_longitude(value)


class LocationUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    name_hebrew: Optional[str] = None
    name_greek: Optional[str] = None
    modern_name: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    location_type: Optional[str] = Field(None, alias="type")
    period: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str] = None
    significance: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name", "latitude", "longitude", "description", "significance")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("latitude")
    @classmethod
    def latitude_in_range(cls, value):
        return check_latitude(value)

    @field_validator("longitude")
    @classmethod
    def longitude_in_range(cls, value):
        return check_longitude(value)


def location_detail(location: Location) -> dict:
    data = location.to_dict()
    data["events"] = [
        {"id": e.id, "title": e.title, "year": e.year, "category": e.category}
        for e in sorted(location.events, key=lambda e: (e.year is None, e.year or 0))
    ]
    data["birthPersons"] = [p.to_summary() for p in location.birth_persons]
    data["deathPersons"] = [p.to_summary() for p in location.death_persons]
    data["journeyStops"] = [
        {
            **stop.to_dict(),
            "journey": {"id": stop.journey.id, "title": stop.journey.title},
        }
        for stop in location.journey_stops
    ]
    return data


@router.get("/api/locations")
def list_locations(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    bounds: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List locations.

    Args:
        page: Page number, 1-based.
        limit: Page size, clamped to [1, 100].
        search: Substring of name, modern name or description.
        bounds: "minLat,minLng,maxLat,maxLng"; ignored when malformed.

    Returns:
        Dictionary with data and pagination.
    """
    page, limit = parse_pagination(page, limit)
    query = db.query(Location)

    if search and search.strip():
        query = query.filter(
            text_filter(
                [Location.name, Location.modern_name, Location.description], search.strip()
            )
        )

    box = parse_bounds(bounds)
    if box is not None:
        min_lat, min_lng, max_lat, max_lng = box
        query = query.filter(
            Location.latitude >= min_lat,
            Location.latitude <= max_lat,
            Location.longitude >= min_lng,
            Location.longitude <= max_lng,
        )

    rows, pagination = paginate(query.order_by(Location.name), page, limit)
    return {"data": [row.to_dict() for row in rows], "pagination": pagination}


@router.get("/api/locations/map/geojson")
def locations_geojson(db: Session = Depends(get_db)):
    """Every location as a GeoJSON Point, coordinates exactly as stored."""
    locations = db.query(Location).options(selectinload(Location.events)).all()
    return feature_collection(
        [
            point_feature(
                loc.longitude,
                loc.latitude,
                {
                    "id": loc.id,
                    "name": loc.name,
                    "significance": loc.significance,
                    "eventsCount": len(loc.events),
                },
            )
            for loc in locations
        ]
    )


@router.get("/api/locations/{location_id}")
def get_location(location_id: str, db: Session = Depends(get_db)):
    location = get_or_404(
        db,
        Location,
        location_id,
        "Location",
        options=(
            selectinload(Location.events),
            selectinload(Location.birth_persons),
            selectinload(Location.death_persons),
            selectinload(Location.journey_stops).selectinload(JourneyStop.journey),
        ),
    )
    return location_detail(location)


@router.post("/api/locations", status_code=201)
def create_location(payload: LocationCreate, db: Session = Depends(get_db)):
    with store_errors(db, "Failed to create location"):
        location = Location(**payload.model_dump())
        db.add(location)
        db.commit()
        db.refresh(location)
    return location.to_dict()


@router.put("/api/locations/{location_id}")
def update_location(location_id: str, payload: LocationUpdate, db: Session = Depends(get_db)):
    location = get_or_404(db, Location, location_id, "Location")
    with store_errors(db, "Failed to update location"):
        apply_updates(location, payload.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(location)
    return location.to_dict()


@router.delete("/api/locations/{location_id}", status_code=204)
def delete_location(location_id: str, db: Session = Depends(get_db)):
    """Delete a location.

    References from persons and events are cleared; journey stops at the
    location are removed.
    """
    location = get_or_404(db, Location, location_id, "Location")
    with store_errors(db, "Failed to delete location"):
        db.delete(location)
        db.commit()
    return Response(status_code=204)

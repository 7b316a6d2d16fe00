"""
Person API routes.

CRUD for persons and their relationships, plus the composed views used by
the person page: map data, simple and detailed timelines, relationship
geography and the declarative map render model.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import Field, field_validator
from sqlalchemy.orm import Session, selectinload

from database import get_db
from logic.geo import line_feature
from logic.reference_data import canonical_name, footsteps_for
from logic.render import DEFAULT_MODE, build_map_view
from logic.timeline import (
    build_location_map,
    calculate_bounds,
    compose_timeline,
    compute_stats,
    person_timeline,
)
from logic.validation import parse_enum, parse_int, parse_pagination
from models import (
    Event,
    Gender,
    Journey,
    JourneyStop,
    Location,
    Person,
    PersonRelationship,
    RelationType,
    Testament,
)
from observability import get_logger
from server.crud import (
    CamelModel,
    apply_updates,
    ensure_exists,
    get_or_404,
    paginate,
    text_filter,
    year_range,
)
from server.errors import store_errors

logger = get_logger(__name__)

router = APIRouter()


class PersonCreate(CamelModel):
    name: str = Field(min_length=1)
    name_hebrew: Optional[str] = None
    name_greek: Optional[str] = None
    description: str = ""
    significance: str = ""
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    testament: Testament = Testament.OLD
    gender: Optional[Gender] = None
    image_url: Optional[str] = None
    birth_place_id: Optional[str] = None
    death_place_id: Optional[str] = None


class PersonUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    name_hebrew: Optional[str] = None
    name_greek: Optional[str] = None
    description: Optional[str] = None
    significance: Optional[str] = None
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    testament: Optional[Testament] = None
    gender: Optional[Gender] = None
    image_url: Optional[str] = None
    birth_place_id: Optional[str] = None
    death_place_id: Optional[str] = None

    @field_validator("name", "description", "significance", "testament")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class RelationshipCreate(CamelModel):
    person_to_id: str
    relationship_type: RelationType
    description: Optional[str] = None


GRAPH_LOADERS = (
    selectinload(Person.birth_place),
    selectinload(Person.death_place),
    selectinload(Person.events).selectinload(Event.location),
    selectinload(Person.journeys).selectinload(Journey.stops).selectinload(JourneyStop.location),
)


def _brief(location: Optional[Location]) -> Optional[dict]:
    return location.to_brief() if location else None


def person_graph(person: Person) -> dict:
    """Person with places, events and journeys nested as plain dictionaries."""
    data = person.to_dict()
    data["birthPlace"] = _brief(person.birth_place)
    data["deathPlace"] = _brief(person.death_place)
    data["events"] = [
        {**event.to_dict(), "location": _brief(event.location)}
        for event in sorted(person.events, key=lambda e: (e.year is None, e.year or 0))
    ]
    data["journeys"] = [
        {
            **journey.to_dict(),
            "stops": [
                {**stop.to_dict(), "location": stop.location.to_brief()}
                for stop in journey.stops
            ],
        }
        for journey in sorted(
            person.journeys, key=lambda j: (j.start_year is None, j.start_year or 0)
        )
    ]
    return data


def compose_for(db: Session, person: Person, graph: dict):
    """Compose the footstep timeline for a person.

    Returns:
        Tuple of (timeline, undated database entries).
    """
    footsteps = footsteps_for(person.name)
    logger.info(
        "footsteps_lookup",
        person=person.name,
        canonical=canonical_name(person.name),
        found=len(footsteps),
    )
    location_map = build_location_map(loc.to_dict() for loc in db.query(Location).all())
    return compose_timeline(footsteps, graph["events"], location_map, person_name=person.name)


@router.get("/api/persons")
def list_persons(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    testament: Optional[str] = Query(None),
    year_from: Optional[str] = Query(None, alias="yearFrom"),
    year_to: Optional[str] = Query(None, alias="yearTo"),
    db: Session = Depends(get_db),
):
    """List persons ordered by name.

    Args:
        page: Page number, 1-based.
        limit: Page size, clamped to [1, 100].
        search: Substring of name or description.
        testament: OLD, NEW or BOTH.
        year_from: Minimum birth year, inclusive.
        year_to: Maximum birth year, inclusive.

    Returns:
        Dictionary with data and pagination.
    """
    page, limit = parse_pagination(page, limit)
    query = db.query(Person).options(
        selectinload(Person.birth_place), selectinload(Person.death_place)
    )

    if search and search.strip():
        query = query.filter(text_filter([Person.name, Person.description], search.strip()))

    testament = parse_enum(testament, Testament)
    if testament:
        query = query.filter(Person.testament == testament)

    query = year_range(query, Person.birth_year, parse_int(year_from), parse_int(year_to))

    rows, pagination = paginate(query.order_by(Person.name), page, limit)
    data = []
    for person in rows:
        item = person.to_dict()
        item["birthPlace"] = _brief(person.birth_place)
        item["deathPlace"] = _brief(person.death_place)
        data.append(item)
    return {"data": data, "pagination": pagination}


@router.get("/api/persons/{person_id}")
def get_person(person_id: str, db: Session = Depends(get_db)):
    person = get_or_404(
        db,
        Person,
        person_id,
        "Person",
        options=GRAPH_LOADERS
        + (
            selectinload(Person.relationships).selectinload(PersonRelationship.person_to),
            selectinload(Person.related_to).selectinload(PersonRelationship.person_from),
            selectinload(Person.verses),
        ),
    )
    data = person_graph(person)
    data["relationships"] = [
        {**rel.to_dict(), "personTo": rel.person_to.to_summary()} for rel in person.relationships
    ]
    data["relatedTo"] = [
        {**rel.to_dict(), "personFrom": rel.person_from.to_summary()} for rel in person.related_to
    ]
    data["verses"] = [v.to_dict() for v in person.verses]
    return data


@router.post("/api/persons", status_code=201)
def create_person(payload: PersonCreate, db: Session = Depends(get_db)):
    values = payload.model_dump()
    ensure_exists(db, Location, values.get("birth_place_id"), "location")
    ensure_exists(db, Location, values.get("death_place_id"), "location")

    with store_errors(db, "Failed to create person"):
        person = Person(**values)
        db.add(person)
        db.commit()
        db.refresh(person)
    return person.to_dict()


@router.put("/api/persons/{person_id}")
def update_person(person_id: str, payload: PersonUpdate, db: Session = Depends(get_db)):
    person = get_or_404(db, Person, person_id, "Person")
    values = payload.model_dump(exclude_unset=True)
    ensure_exists(db, Location, values.get("birth_place_id"), "location")
    ensure_exists(db, Location, values.get("death_place_id"), "location")

    with store_errors(db, "Failed to update person"):
        apply_updates(person, values)
        db.commit()
        db.refresh(person)
    return person.to_dict()


@router.delete("/api/persons/{person_id}", status_code=204)
def delete_person(person_id: str, db: Session = Depends(get_db)):
    """Delete a person with their journeys and relationships."""
    person = get_or_404(db, Person, person_id, "Person")
    with store_errors(db, "Failed to delete person"):
        db.delete(person)
        db.commit()
    return Response(status_code=204)


@router.post("/api/persons/{person_id}/relationships", status_code=201)
def add_relationship(person_id: str, payload: RelationshipCreate, db: Session = Depends(get_db)):
    person = get_or_404(db, Person, person_id, "Person")
    if payload.person_to_id == person.id:
        raise HTTPException(400, "A person cannot be related to themselves")
    other = ensure_exists(db, Person, payload.person_to_id, "person")

    with store_errors(db, "Failed to create relationship"):
        relationship = PersonRelationship(
            person_from=person,
            person_to=other,
            relationship_type=payload.relationship_type,
            description=payload.description,
        )
        db.add(relationship)
        db.commit()
        db.refresh(relationship)
    return {**relationship.to_dict(), "personTo": other.to_summary()}


@router.delete("/api/persons/{person_id}/relationships/{relationship_id}", status_code=204)
def remove_relationship(person_id: str, relationship_id: str, db: Session = Depends(get_db)):
    relationship = (
        db.query(PersonRelationship)
        .filter(
            PersonRelationship.id == relationship_id,
            PersonRelationship.person_from_id == person_id,
        )
        .first()
    )
    if relationship is None:
        raise HTTPException(404, "Relationship not found")

    with store_errors(db, "Failed to delete relationship"):
        db.delete(relationship)
        db.commit()
    return Response(status_code=204)


@router.get("/api/persons/{person_id}/map-data")
def person_map_data(person_id: str, db: Session = Depends(get_db)):
    """Everything needed to draw a person on the map.

    Journeys carry a GeoJSON LineString "path" through their stops; bounds
    cover every coordinate attached to the person.
    """
    person = get_or_404(db, Person, person_id, "Person", options=GRAPH_LOADERS)
    graph = person_graph(person)

    birth = graph["birthPlace"]
    death = graph["deathPlace"]
    return {
        "person": person.to_summary(),
        "locations": {
            "birth": {**birth, "type": "birth", "year": person.birth_year} if birth else None,
            "death": {**death, "type": "death", "year": person.death_year} if death else None,
        },
        "events": [
            {
                "id": e["id"],
                "title": e["title"],
                "year": e["year"],
                "yearRange": e["yearRange"],
                "location": e["location"],
            }
            for e in graph["events"]
        ],
        "journeys": [
            {
                "id": j["id"],
                "title": j["title"],
                "startYear": j["startYear"],
                "endYear": j["endYear"],
                "distance": j["distance"],
                "duration": j["duration"],
                "stops": [
                    {
                        "orderIndex": s["orderIndex"],
                        "location": s["location"],
                        "description": s["description"],
                        "duration": s["duration"],
                    }
                    for s in j["stops"]
                ],
                "path": line_feature(
                    [[s["location"]["longitude"], s["location"]["latitude"]] for s in j["stops"]],
                    {"journeyId": j["id"], "title": j["title"]},
                ),
            }
            for j in graph["journeys"]
        ],
        "bounds": calculate_bounds(graph),
    }


@router.get("/api/persons/{person_id}/timeline")
def get_person_timeline(person_id: str, db: Session = Depends(get_db)):
    person = get_or_404(db, Person, person_id, "Person", options=GRAPH_LOADERS)
    return {
        "person": {
            "id": person.id,
            "name": person.name,
            "birthYear": person.birth_year,
            "deathYear": person.death_year,
        },
        "timeline": person_timeline(person_graph(person)),
    }


@router.get("/api/persons/{person_id}/timeline/detailed")
def get_detailed_timeline(person_id: str, db: Session = Depends(get_db)):
    """Footsteps merged with the person's located events, by year.

    Undated events are left out of the sequence and counted in
    stats.undatedEvents.
    """
    person = get_or_404(db, Person, person_id, "Person", options=GRAPH_LOADERS)
    graph = person_graph(person)
    timeline, undated = compose_for(db, person, graph)
    return {
        "person": {
            "id": person.id,
            "name": person.name,
            "nameHebrew": person.name_hebrew,
            "birthYear": person.birth_year,
            "deathYear": person.death_year,
        },
        "timeline": timeline,
        "stats": compute_stats(timeline, undated),
    }


@router.get("/api/persons/{person_id}/relationships/geo")
def person_relationships_geo(person_id: str, db: Session = Depends(get_db)):
    """Relationships grouped by type with the related person's places.

    direction is "from" for edges this person owns and "to" for edges that
    point at them.
    """
    person = get_or_404(
        db,
        Person,
        person_id,
        "Person",
        options=(
            selectinload(Person.birth_place),
            selectinload(Person.relationships)
            .selectinload(PersonRelationship.person_to)
            .selectinload(Person.birth_place),
            selectinload(Person.relationships)
            .selectinload(PersonRelationship.person_to)
            .selectinload(Person.death_place),
            selectinload(Person.related_to)
            .selectinload(PersonRelationship.person_from)
            .selectinload(Person.birth_place),
            selectinload(Person.related_to)
            .selectinload(PersonRelationship.person_from)
            .selectinload(Person.death_place),
        ),
    )

    edges = [(rel.relationship_type, rel.person_to, "from") for rel in person.relationships]
    edges += [(rel.relationship_type, rel.person_from, "to") for rel in person.related_to]

    grouped = {}
    for rel_type, other, direction in edges:
        grouped.setdefault(rel_type, []).append(
            {
                "id": other.id,
                "name": other.name,
                "direction": direction,
                "locations": {
                    "birth": _brief(other.birth_place),
                    "death": _brief(other.death_place),
                },
            }
        )

    return {
        "person": {
            "id": person.id,
            "name": person.name,
            "birthPlace": _brief(person.birth_place),
        },
        "relationships": grouped,
    }


@router.get("/api/persons/{person_id}/map-view")
def person_map_view(
    person_id: str,
    mode: Optional[str] = Query(DEFAULT_MODE),
    db: Session = Depends(get_db),
):
    """Declarative map render model for the person page.

    Args:
        person_id: Person id.
        mode: "timeline", "journeys" or "overview"; unknown values fall back
            to "timeline".

    Returns:
        Dictionary with person, mode, markers, lines, labels, layers and
        bounds.
    """
    person = get_or_404(db, Person, person_id, "Person", options=GRAPH_LOADERS)
    graph = person_graph(person)
    timeline, _ = compose_for(db, person, graph)
    selection = {
        "timeline": timeline,
        "journeys": graph["journeys"],
        "bounds": calculate_bounds(graph),
    }
    return {"person": person.to_summary(), **build_map_view(selection, mode or DEFAULT_MODE)}

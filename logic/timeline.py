"""
Timeline composition.

This module merges a person's hand-authored footsteps with the events linked
to them in the store, resolves footstep place names to coordinates, and
derives the statistics, bounds and century groupings served by the person
and event endpoints.

All functions operate on plain dictionaries (the camelCase shapes produced by
``to_dict``) and never touch the database.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from logic.reference_data import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_PLACE_NAME,
    KNOWN_PLACES,
    Footstep,
)
from observability import get_logger

logger = get_logger(__name__)

BIBLICAL_EVENT = "biblical_event"
DATABASE_EVENT = "database_event"

# Israel / Palestine, used when a person has no coordinates at all.
DEFAULT_BOUNDS = {"north": 33.33, "south": 29.5, "east": 36.0, "west": 34.2}

UNKNOWN_CENTURY = "Unknown"


def build_location_map(db_locations: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Build the name -> coordinate map used to resolve footstep places.

    Known places go in first. Registry rows then overlay them: on a name
    collision the registry coordinates and id win, and the modern name falls
    back to the known one. A registry row's modern name is added as an extra
    key when nothing else claims it.

    Args:
        db_locations: Location dictionaries from the registry.

    Returns:
        Mapping of place name to {name, latitude, longitude, modernName, id?}.
    """
    location_map: Dict[str, Dict[str, Any]] = {}

    for name, place in KNOWN_PLACES.items():
        location_map[name] = {
            "name": name,
            "latitude": place.latitude,
            "longitude": place.longitude,
            "modernName": place.modern_name,
        }

    registry_count = 0
    for loc in db_locations:
        registry_count += 1
        entry = {
            "id": loc.get("id"),
            "name": loc["name"],
            "latitude": loc["latitude"],
            "longitude": loc["longitude"],
            "modernName": loc.get("modernName"),
        }

        existing = location_map.get(loc["name"])
        if existing is not None:
            entry["modernName"] = entry["modernName"] or existing.get("modernName")
        location_map[loc["name"]] = entry

        modern_name = loc.get("modernName")
        if modern_name and modern_name not in location_map:
            location_map[modern_name] = entry

    logger.debug(
        "location_map_built",
        total=len(location_map),
        known=len(KNOWN_PLACES),
        registry=registry_count,
    )
    return location_map


def resolve_location(name: str, location_map: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """Resolve a footstep place name against the location map.

    Unknown names never fail: they fall back to Jerusalem's coordinates and
    are flagged with ``resolved: False``.

    Args:
        name: Place name as written in the footstep.
        location_map: Map from build_location_map.

    Returns:
        Location dictionary for a timeline entry.
    """
    found = location_map.get(name)
    if found is None:
        return {
            "name": name,
            "latitude": DEFAULT_LATITUDE,
            "longitude": DEFAULT_LONGITUDE,
            "modernName": name,
            "resolved": False,
        }

    location = {
        "name": name,
        "latitude": found["latitude"],
        "longitude": found["longitude"],
        "modernName": found.get("modernName") or name,
        "resolved": True,
    }
    if found.get("id"):
        location["id"] = found["id"]
    return location


def sort_by_year(entries: Iterable[Dict[str, Any]], key: str = "year") -> List[Dict[str, Any]]:
    """Stable ascending sort by year with undated entries last.

    A missing year is never treated as year 0.
    """
    return sorted(entries, key=lambda e: (e.get(key) is None, e.get(key) or 0))


def compose_timeline(
    footsteps: Sequence[Footstep],
    events: Iterable[Dict[str, Any]],
    location_map: Dict[str, Dict[str, Any]],
    person_name: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Merge footsteps and database events into one chronological sequence.

    Footsteps come first in concatenation order, so on equal years a
    footstep precedes a database event. Database events without a location
    are dropped; located events without a year are returned separately.

    Args:
        footsteps: Footsteps for the person, possibly empty.
        events: Event dictionaries, each with a nested "location" or None.
        location_map: Map from build_location_map.
        person_name: Used for log context only.

    Returns:
        Tuple of (timeline sorted by year, undated database entries).
    """
    combined: List[Dict[str, Any]] = []

    for step in footsteps:
        location = resolve_location(step.location, location_map)
        if not location["resolved"]:
            logger.warning(
                "footstep_location_unresolved",
                location=step.location,
                person=person_name,
            )
        combined.append(
            {
                "type": BIBLICAL_EVENT,
                "year": step.year,
                "title": step.title,
                "description": step.description,
                "verse": step.verse,
                "location": location,
            }
        )

    undated: List[Dict[str, Any]] = []
    for event in events:
        location = event.get("location")
        if not location:
            continue
        entry = {
            "type": DATABASE_EVENT,
            "id": event.get("id"),
            "year": event.get("year"),
            "title": event["title"],
            "description": event.get("description"),
            "location": {
                "id": location.get("id"),
                "name": location["name"],
                "latitude": location["latitude"],
                "longitude": location["longitude"],
                "modernName": location.get("modernName"),
            },
        }
        if entry["year"] is None:
            undated.append(entry)
        else:
            combined.append(entry)

    return sort_by_year(combined), undated


def compute_stats(
    timeline: Sequence[Dict[str, Any]],
    undated: Sequence[Dict[str, Any]] = (),
) -> Dict[str, Any]:
    """Summary statistics for a composed timeline.

    totalEvents always equals biblicalEvents + databaseEvents. The year span
    is taken from the endpoints of the sorted timeline.
    """
    biblical = sum(1 for e in timeline if e["type"] == BIBLICAL_EVENT)
    database = sum(1 for e in timeline if e["type"] == DATABASE_EVENT)

    year_span = None
    if timeline:
        year_span = {"start": timeline[0]["year"], "end": timeline[-1]["year"]}

    return {
        "totalEvents": len(timeline),
        "biblicalEvents": biblical,
        "databaseEvents": database,
        "undatedEvents": len(undated),
        "yearSpan": year_span,
    }


def person_timeline(person: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Simple timeline from stored data only.

    Args:
        person: Person dictionary with nested "birthPlace", "deathPlace",
            "events" (each with "location") and "journeys" (each with
            "stops", each with "location").

    Returns:
        Birth, dated events, journey starts and death, sorted by year.
    """
    entries: List[Dict[str, Any]] = []

    birth_place = person.get("birthPlace")
    if person.get("birthYear") is not None and birth_place:
        entries.append(
            {
                "type": "birth",
                "year": person["birthYear"],
                "title": "Birth",
                "description": f"Born in {birth_place['name']}",
                "location": birth_place,
            }
        )

    for event in person.get("events", []):
        if event.get("year") is None:
            continue
        entries.append(
            {
                "type": "event",
                "year": event["year"],
                "title": event["title"],
                "description": event.get("description"),
                "location": event.get("location"),
            }
        )

    for journey in person.get("journeys", []):
        if journey.get("startYear") is None:
            continue
        entries.append(
            {
                "type": "journey_start",
                "year": journey["startYear"],
                "title": f"Journey: {journey['title']}",
                "description": journey.get("description"),
                "locations": [stop["location"] for stop in journey.get("stops", [])],
            }
        )

    death_place = person.get("deathPlace")
    if person.get("deathYear") is not None and death_place:
        entries.append(
            {
                "type": "death",
                "year": person["deathYear"],
                "title": "Death",
                "description": f"Died in {death_place['name']}",
                "location": death_place,
            }
        )

    return sort_by_year(entries)


def calculate_bounds(person: Dict[str, Any]) -> Dict[str, float]:
    """Bounding box over every coordinate attached to a person.

    Covers birth and death places, event locations and journey stops. Falls
    back to DEFAULT_BOUNDS when there is nothing to cover.
    """
    points = []

    for key in ("birthPlace", "deathPlace"):
        place = person.get(key)
        if place:
            points.append((place["latitude"], place["longitude"]))

    for event in person.get("events", []):
        if event.get("location"):
            points.append((event["location"]["latitude"], event["location"]["longitude"]))

    for journey in person.get("journeys", []):
        for stop in journey.get("stops", []):
            points.append((stop["location"]["latitude"], stop["location"]["longitude"]))

    if not points:
        return dict(DEFAULT_BOUNDS)

    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    return {
        "north": max(lats),
        "south": min(lats),
        "east": max(lngs),
        "west": min(lngs),
    }


def century_key(year: Optional[int]) -> str:
    """Century bucket for a year, e.g. -1446 -> "-1500s", 30 -> "0s"."""
    if year is None:
        return UNKNOWN_CENTURY
    return f"{(year // 100) * 100}s"


def group_by_century(events: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Group events by century, chronologically, with "Unknown" last."""
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for event in sort_by_year(events):
        grouped.setdefault(century_key(event.get("year")), []).append(event)
    return grouped

"""
API tests against a seeded SQLite database.
"""

import math

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

import main
import server.meta
import server.search
from database import SessionLocal, get_db
from logic.config import get_config
from logic.reference_data import FOOTSTEPS
from logic.render import visible_layers
from main import app

ENTITIES = ["persons", "locations", "events", "journeys", "themes", "verses"]


# ============================================================
# Service
# ============================================================


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_api_index_lists_endpoints(client):
    endpoints = client.get("/api").json()["endpoints"]
    assert endpoints["persons"] == "/api/persons"
    assert endpoints["search"] == "/api/search"


def test_config_reports_missing_map_token(client, monkeypatch):
    monkeypatch.setitem(get_config(), "map_token", None)
    body = client.get("/api/config").json()
    assert body["map"]["isValid"] is False
    assert body["map"]["errorMessage"]
    assert body["apiBaseUrl"]


def test_unknown_route_uses_not_found_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {
        "error": "Not Found",
        "message": "Cannot GET /api/nothing-here",
        "status": 404,
    }


# ============================================================
# Listing and pagination
# ============================================================


@pytest.mark.parametrize("entity", ENTITIES)
def test_second_page_respects_limit(client, entity):
    response = client.get(f"/api/{entity}", params={"page": 2, "limit": 10})
    assert response.status_code == 200
    body = response.json()
    pagination = body["pagination"]

    assert len(body["data"]) <= 10
    assert pagination["page"] == 2
    assert pagination["limit"] == 10
    assert pagination["pages"] == math.ceil(pagination["total"] / 10)


def test_pages_do_not_overlap(client):
    first = client.get("/api/persons", params={"page": 1, "limit": 5}).json()
    second = client.get("/api/persons", params={"page": 2, "limit": 5}).json()
    assert first["pagination"]["total"] == 12
    assert first["pagination"]["pages"] == 3
    assert not {p["id"] for p in first["data"]} & {p["id"] for p in second["data"]}


def test_malformed_query_parameters_degrade_silently(client):
    response = client.get(
        "/api/events",
        params={"page": "abc", "limit": "-5", "yearFrom": "long ago", "testament": "MIDDLE"},
    )
    assert response.status_code == 200
    pagination = response.json()["pagination"]
    assert pagination["page"] == 1
    assert pagination["limit"] == 1
    assert pagination["total"] == 12


def test_limit_is_capped(client):
    assert client.get("/api/locations", params={"limit": 1000}).json()["pagination"]["limit"] == 100


def test_persons_are_ordered_by_name(client):
    names = [p["name"] for p in client.get("/api/persons", params={"limit": 100}).json()["data"]]
    assert names == sorted(names)


def test_persons_filters(client):
    found = client.get("/api/persons", params={"search": "abraham"}).json()["data"]
    assert "Abraham" in [p["name"] for p in found]

    new = client.get("/api/persons", params={"testament": "NEW", "limit": 100}).json()["data"]
    assert new and all(p["testament"] == "NEW" for p in new)

    ranged = client.get(
        "/api/persons", params={"yearFrom": -1000, "yearTo": 0, "limit": 100}
    ).json()["data"]
    assert len(ranged) == 4
    assert all(-1000 <= p["birthYear"] <= 0 for p in ranged)


def test_location_bounds_filter(client):
    body = client.get("/api/locations", params={"bounds": "36,-10,45,30", "limit": 100}).json()
    names = {loc["name"] for loc in body["data"]}
    assert {"Rome", "Corinth", "Ephesus"} <= names
    assert "Jerusalem" not in names


def test_malformed_bounds_are_ignored(client):
    body = client.get("/api/locations", params={"bounds": "1,2,3"}).json()
    assert body["pagination"]["total"] == 28


def test_events_filters_and_undated_last(client):
    exodus = client.get("/api/events", params={"category": "exodus"}).json()
    assert exodus["pagination"]["total"] == 4

    new = client.get("/api/events", params={"testament": "NEW"}).json()
    assert new["pagination"]["total"] == 5

    events = client.get("/api/events", params={"limit": 100}).json()["data"]
    years = [e["year"] for e in events]
    assert years[-1] is None
    dated = [y for y in years if y is not None]
    assert dated == sorted(dated)


def test_journeys_filter_by_person(client, find_person):
    paul = find_person("Paul the Apostle")
    body = client.get("/api/journeys", params={"personId": paul}).json()
    assert [j["title"] for j in body["data"]] == ["First Missionary Journey"]
    assert len(body["data"][0]["stops"]) == 6


def test_themes_carry_counts(client):
    themes = client.get("/api/themes").json()["data"]
    by_title = {t["title"]: t for t in themes}
    assert by_title["Love of God"]["_count"] == {"verses": 2, "relatedThemes": 1}
    assert by_title["Covenant"]["_count"]["relatedThemes"] == 0


def test_verses_filter_by_book(client):
    body = client.get("/api/verses", params={"book": "john"}).json()
    assert [v["reference"] for v in body["data"]] == ["John 3:16"]


# ============================================================
# Create, read, update, delete
# ============================================================


def test_missing_entity_is_404_with_envelope(client):
    response = client.get("/api/persons/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Person not found", "status": 404}


@pytest.mark.parametrize("entity", ENTITIES)
def test_update_and_delete_missing_ids(client, entity):
    assert client.put(f"/api/{entity}/nope", json={}).status_code == 404
    assert client.delete(f"/api/{entity}/nope").status_code == 404


def test_location_round_trip(client):
    payload = {
        "name": "Gath",
        "modernName": "Tell es-Safi",
        "type": "city",
        "latitude": 31.7003,
        "longitude": 34.8477,
    }
    created = client.post("/api/locations", json=payload)
    assert created.status_code == 201

    fetched = client.get(f"/api/locations/{created.json()['id']}").json()
    assert fetched["name"] == "Gath"
    assert fetched["latitude"] == 31.7003
    assert fetched["longitude"] == 34.8477
    assert fetched["type"] == "city"
    assert fetched["events"] == []


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "North of north", "latitude": 91, "longitude": 0},
        {"name": "Off the edge", "latitude": 0, "longitude": -180.5},
        {"latitude": 0, "longitude": 0},
    ],
)
def test_invalid_location_is_400(client, payload):
    response = client.post("/api/locations", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["status"] == 400
    assert body["error"]


def test_location_update(client, find_location):
    capernaum = find_location("Capernaum")
    response = client.put(f"/api/locations/{capernaum}", json={"significance": "Town of Peter"})
    assert response.status_code == 200
    assert response.json()["significance"] == "Town of Peter"

    assert client.put(f"/api/locations/{capernaum}", json={"latitude": None}).status_code == 400


def test_deleting_a_location_clears_references(client, find_location, find_person):
    hebron = find_location("Hebron")
    isaac = find_person("Isaac")

    assert client.delete(f"/api/locations/{hebron}").status_code == 204
    assert client.get(f"/api/locations/{hebron}").status_code == 404

    person = client.get(f"/api/persons/{isaac}").json()
    assert person["birthPlaceId"] is None
    assert person["deathPlaceId"] is None

    event = next(e for e in person["events"] if e["title"] == "Birth of Isaac")
    assert event["locationId"] is None

    abraham = client.get(
        "/api/journeys", params={"search": "Canaan"}
    ).json()["data"][0]
    assert [s["location"]["name"] for s in abraham["stops"]] == ["Ur", "Haran", "Shechem", "Bethel"]


def test_person_crud(client, find_location):
    bethlehem = find_location("Bethlehem")
    created = client.post(
        "/api/persons",
        json={
            "name": "Ruth",
            "testament": "OLD",
            "gender": "FEMALE",
            "birthYear": -1150,
            "deathPlaceId": bethlehem,
        },
    )
    assert created.status_code == 201
    person_id = created.json()["id"]

    updated = client.put(f"/api/persons/{person_id}", json={"description": "Moabite"})
    assert updated.json()["description"] == "Moabite"
    assert updated.json()["deathPlaceId"] == bethlehem

    detail = client.get(f"/api/persons/{person_id}").json()
    assert detail["deathPlace"]["name"] == "Bethlehem"

    assert client.delete(f"/api/persons/{person_id}").status_code == 204
    assert client.get(f"/api/persons/{person_id}").status_code == 404


def test_person_rejects_unknown_enum_and_place(client):
    assert client.post("/api/persons", json={"name": "X", "testament": "MIDDLE"}).status_code == 400
    response = client.post("/api/persons", json={"name": "X", "birthPlaceId": "nowhere"})
    assert response.status_code == 400
    assert "nowhere" in response.json()["error"]


def test_deleting_a_person_removes_journeys_and_relationships(client, find_person):
    moses = find_person("Moses")
    aaron = find_person("Aaron")

    assert client.delete(f"/api/persons/{moses}").status_code == 204

    journeys = client.get("/api/journeys", params={"personId": moses}).json()
    assert journeys["pagination"]["total"] == 0
    assert client.get("/api/journeys", params={"search": "Exodus"}).json()["data"] == []

    assert client.get(f"/api/persons/{aaron}").json()["relatedTo"] == []


def test_event_crud_with_links(client, find_person, find_location):
    david = find_person("King David")
    jerusalem = find_location("Jerusalem")
    verse = client.get("/api/verses", params={"book": "Psalms"}).json()["data"][0]["id"]

    created = client.post(
        "/api/events",
        json={
            "title": "David brings the ark",
            "year": -1002,
            "testament": "OLD",
            "category": "MONARCHY",
            "locationId": jerusalem,
            "persons": [david],
            "verses": [verse],
        },
    )
    assert created.status_code == 201
    event = created.json()
    assert [p["name"] for p in event["persons"]] == ["King David"]
    assert event["location"]["name"] == "Jerusalem"
    assert event["verses"][0]["reference"] == "Psalms 23:1"

    updated = client.put(f"/api/events/{event['id']}", json={"persons": [], "year": None})
    assert updated.status_code == 200
    assert updated.json()["persons"] == []
    assert updated.json()["year"] is None
    assert len(updated.json()["verses"]) == 1

    assert client.delete(f"/api/events/{event['id']}").status_code == 204


def test_event_rejects_unknown_links(client):
    base = {"title": "Ghost", "category": "MIRACLE"}
    assert client.post("/api/events", json={**base, "persons": ["ghost"]}).status_code == 400
    assert client.post("/api/events", json={**base, "locationId": "ghost"}).status_code == 400
    assert client.post("/api/events", json={**base, "category": "PARTY"}).status_code == 400


def test_journey_with_stops_and_replacement(client, find_person, find_location):
    peter = find_person("Peter")
    jerusalem, capernaum, rome = (
        find_location("Jerusalem"),
        find_location("Capernaum"),
        find_location("Rome"),
    )

    created = client.post(
        "/api/journeys",
        json={
            "title": "To Rome",
            "personId": peter,
            "startYear": 60,
            "stops": [
                {"locationId": rome, "orderIndex": 5},
                {"locationId": jerusalem, "orderIndex": 1, "description": "Start"},
            ],
        },
    )
    assert created.status_code == 201
    journey = created.json()
    assert [s["location"]["name"] for s in journey["stops"]] == ["Jerusalem", "Rome"]
    assert [s["orderIndex"] for s in journey["stops"]] == [1, 5]

    replaced = client.put(
        f"/api/journeys/{journey['id']}",
        json={
            "stops": [
                {"locationId": capernaum, "orderIndex": 1},
                {"locationId": jerusalem, "orderIndex": 2},
                {"locationId": rome, "orderIndex": 5},
            ]
        },
    )
    assert replaced.status_code == 200
    assert [s["location"]["name"] for s in replaced.json()["stops"]] == [
        "Capernaum",
        "Jerusalem",
        "Rome",
    ]

    renamed = client.put(f"/api/journeys/{journey['id']}", json={"title": "Road to Rome"})
    assert renamed.json()["title"] == "Road to Rome"
    assert len(renamed.json()["stops"]) == 3


def test_journey_rejects_duplicate_order_index(client, find_person, find_location):
    rome = find_location("Rome")
    response = client.post(
        "/api/journeys",
        json={
            "title": "Loop",
            "personId": find_person("Peter"),
            "stops": [{"locationId": rome, "orderIndex": 1}, {"locationId": rome, "orderIndex": 1}],
        },
    )
    assert response.status_code == 400
    assert "orderIndex" in response.json()["error"]


def test_theme_crud_and_relations(client):
    themes = {t["title"]: t["id"] for t in client.get("/api/themes").json()["data"]}

    salvation = client.get(f"/api/themes/{themes['Salvation']}").json()
    assert [t["title"] for t in salvation["relatedThemes"]] == ["Faith"]
    assert [t["title"] for t in salvation["themesRelated"]] == ["Love of God"]

    created = client.post(
        "/api/themes",
        json={
            "title": "Mercy",
            "category": "MERCY",
            "applications": ["Forgive"],
            "relatedThemes": [themes["Love of God"]],
        },
    )
    assert created.status_code == 201
    mercy = created.json()
    assert mercy["applications"] == ["Forgive"]
    assert [t["title"] for t in mercy["relatedThemes"]] == ["Love of God"]

    updated = client.put(
        f"/api/themes/{mercy['id']}", json={"relatedThemes": [mercy["id"], themes["Faith"]]}
    )
    assert [t["title"] for t in updated.json()["relatedThemes"]] == ["Faith"]

    assert client.delete(f"/api/themes/{mercy['id']}").status_code == 204
    faith = client.get(f"/api/themes/{themes['Faith']}").json()
    assert "Mercy" not in [t["title"] for t in faith["themesRelated"]]


def test_theme_categories(client):
    categories = client.get("/api/themes/categories").json()
    assert {"category": "FAITH", "count": 1} in categories
    assert sum(c["count"] for c in categories) == 4


def test_verse_crud(client):
    created = client.post(
        "/api/verses",
        json={"book": "Micah", "chapter": 5, "verseStart": 2, "text": "But thou, Bethlehem"},
    )
    assert created.status_code == 201
    assert created.json()["reference"] == "Micah 5:2"
    assert created.json()["translation"] == "KJV"

    verse_id = created.json()["id"]
    updated = client.put(f"/api/verses/{verse_id}", json={"verseEnd": 3})
    assert updated.json()["reference"] == "Micah 5:2-3"
    assert client.delete(f"/api/verses/{verse_id}").status_code == 204


# ============================================================
# Map exports
# ============================================================


def test_geojson_coordinates_match_stored_locations(client):
    geojson = client.get("/api/locations/map/geojson").json()
    stored = {
        loc["id"]: loc for loc in client.get("/api/locations", params={"limit": 100}).json()["data"]
    }

    assert geojson["type"] == "FeatureCollection"
    assert len(geojson["features"]) == len(stored)
    for feature in geojson["features"]:
        loc = stored[feature["properties"]["id"]]
        assert feature["geometry"]["type"] == "Point"
        assert feature["geometry"]["coordinates"] == [loc["longitude"], loc["latitude"]]


def test_geojson_counts_events(client):
    features = client.get("/api/locations/map/geojson").json()["features"]
    sinai = next(f for f in features if f["properties"]["name"] == "Mount Sinai")
    assert sinai["properties"]["eventsCount"] == 2


def test_journey_paths(client):
    paths = client.get("/api/journeys/map/paths").json()
    assert len(paths["features"]) == 3
    exodus = next(f for f in paths["features"] if f["properties"]["title"] == "The Exodus")
    assert exodus["properties"]["person"] == "Moses"
    assert exodus["properties"]["stops"] == [
        "Egypt",
        "Red Sea",
        "Mount Sinai",
        "Kadesh Barnea",
        "Mount Nebo",
    ]
    assert exodus["geometry"]["type"] == "LineString"
    assert len(exodus["geometry"]["coordinates"]) == 5


def test_events_timeline_groups_by_century(client):
    timeline = client.get("/api/events/timeline").json()
    assert list(timeline)[-1] == "Unknown"
    assert [e["title"] for e in timeline["Unknown"]] == ["Song of Moses"]
    assert {e["title"] for e in timeline["-1500s"]} >= {"Crossing of the Red Sea", "The Burning Bush"}
    assert "-2000s" in timeline


# ============================================================
# Person views
# ============================================================


def test_detailed_timeline_for_moses(client, find_person):
    body = client.get(f"/api/persons/{find_person('Moses')}/timeline/detailed").json()
    stats = body["stats"]
    timeline = body["timeline"]

    assert stats["totalEvents"] == stats["biblicalEvents"] + stats["databaseEvents"]
    assert stats["totalEvents"] == len(timeline)
    assert stats["biblicalEvents"] == len(FOOTSTEPS["Moses"])
    assert stats["databaseEvents"] == 3
    assert stats["undatedEvents"] == 1

    years = [entry["year"] for entry in timeline]
    assert years == sorted(years)
    assert timeline[0]["year"] <= timeline[-1]["year"]
    assert stats["yearSpan"] == {"start": years[0], "end": years[-1]}

    footsteps = [e for e in timeline if e["type"] == "biblical_event"]
    assert all(e["location"]["resolved"] for e in footsteps)


def test_detailed_timeline_resolves_name_aliases(client, find_person):
    body = client.get(f"/api/persons/{find_person('Jesus Christ')}/timeline/detailed").json()
    assert body["stats"]["biblicalEvents"] == len(FOOTSTEPS["Jesus"])


def test_detailed_timeline_without_biography(client, find_person):
    body = client.get(f"/api/persons/{find_person('Solomon')}/timeline/detailed").json()
    assert body["stats"]["biblicalEvents"] == 0
    assert body["stats"]["databaseEvents"] == 1


def test_detailed_timeline_missing_person(client):
    assert client.get("/api/persons/nobody/timeline/detailed").status_code == 404


def test_simple_timeline(client, find_person):
    body = client.get(f"/api/persons/{find_person('Moses')}/timeline").json()
    types = [e["type"] for e in body["timeline"]]
    assert types[0] == "birth"
    assert types[-1] == "death"
    assert "journey_start" in types
    years = [e["year"] for e in body["timeline"]]
    assert years == sorted(years)


def test_map_data(client, find_person):
    body = client.get(f"/api/persons/{find_person('Paul the Apostle')}/map-data").json()

    assert body["locations"]["birth"]["name"] == "Tarsus"
    assert body["locations"]["birth"]["type"] == "birth"
    assert body["locations"]["death"]["year"] == 67

    journey = body["journeys"][0]
    assert journey["path"]["geometry"]["type"] == "LineString"
    assert len(journey["path"]["geometry"]["coordinates"]) == len(journey["stops"]) == 6

    bounds = body["bounds"]
    assert bounds["north"] >= bounds["south"]
    assert bounds["east"] >= bounds["west"]
    assert bounds["west"] == pytest.approx(12.4964)


def test_map_data_default_bounds(client, find_person):
    body = client.get(f"/api/persons/{find_person('John the Baptist')}/map-data").json()
    assert body["locations"] == {"birth": None, "death": None}
    assert body["bounds"]["north"] >= body["bounds"]["south"]


def test_relationships_geo(client, find_person):
    body = client.get(f"/api/persons/{find_person('Abraham')}/relationships/geo").json()
    relationships = body["relationships"]

    assert {"name": "Isaac", "direction": "from"}.items() <= relationships["PARENT"][0].items()
    assert relationships["CHILD"][0]["name"] == "Isaac"
    assert relationships["CHILD"][0]["direction"] == "to"
    assert relationships["SPOUSE"][0]["locations"]["birth"]["name"] == "Ur"


def test_relationship_create_and_delete(client, find_person):
    peter = find_person("Peter")
    paul = find_person("Paul the Apostle")

    created = client.post(
        f"/api/persons/{peter}/relationships",
        json={"personToId": paul, "relationshipType": "FRIEND", "description": "Fellow apostles"},
    )
    assert created.status_code == 201
    relationship = created.json()
    assert relationship["personTo"]["name"] == "Paul the Apostle"

    geo = client.get(f"/api/persons/{paul}/relationships/geo").json()
    assert geo["relationships"]["FRIEND"][0]["direction"] == "to"

    url = f"/api/persons/{peter}/relationships/{relationship['id']}"
    assert client.delete(url).status_code == 204
    assert client.delete(url).status_code == 404


def test_relationship_validation(client, find_person):
    peter = find_person("Peter")
    bad_type = client.post(
        f"/api/persons/{peter}/relationships",
        json={"personToId": find_person("Moses"), "relationshipType": "COUSIN"},
    )
    assert bad_type.status_code == 400

    own = client.post(
        f"/api/persons/{peter}/relationships",
        json={"personToId": peter, "relationshipType": "FRIEND"},
    )
    assert own.status_code == 400


def test_map_view_timeline_mode(client, find_person):
    body = client.get(f"/api/persons/{find_person('Moses')}/map-view").json()

    assert body["mode"] == "timeline"
    assert body["layers"] == visible_layers("timeline")
    sequences = [m["sequence"] for m in body["markers"]]
    assert sequences == list(range(1, len(sequences) + 1))
    years = [m["year"] for m in body["markers"]]
    assert years == sorted(years)

    # "Egypt" and "Nile River" share coordinates.
    egypt = [m for m in body["markers"] if m["locationName"] in ("Egypt", "Nile River")]
    positions = {(m["displayLatitude"], m["displayLongitude"]) for m in egypt}
    assert len(positions) == len(egypt)


def test_map_view_other_modes(client, find_person):
    moses = find_person("Moses")

    journeys = client.get(f"/api/persons/{moses}/map-view", params={"mode": "journeys"}).json()
    assert journeys["layers"] == visible_layers("journeys")
    assert len(journeys["markers"]) == 5
    assert len(journeys["lines"]) == 1

    fallback = client.get(f"/api/persons/{moses}/map-view", params={"mode": "3d"}).json()
    assert fallback["mode"] == "timeline"


# ============================================================
# Search
# ============================================================


def test_search_finds_abraham(client):
    body = client.get("/api/search", params={"q": "Abraham"}).json()

    persons = body["persons"]
    assert any(p["type"] == "person" and "abraham" in p["name"].lower() for p in persons)
    assert any("Abraham" in j["title"] for j in body["journeys"])
    assert body["totalResults"] == sum(
        len(body[key]) for key in ("persons", "locations", "events", "themes", "journeys")
    )


def test_search_is_case_insensitive_and_trimmed(client):
    body = client.get("/api/search", params={"q": "  jerusalem "}).json()
    names = [loc["name"] for loc in body["locations"]]
    assert "Jerusalem" in names
    # Golgotha mentions Jerusalem in its description.
    assert "Golgotha" in names
    assert all(loc["type"] == "location" for loc in body["locations"])


def test_search_limit(client):
    body = client.get("/api/search", params={"q": "the", "limit": 1}).json()
    for key in ("persons", "locations", "events", "themes", "journeys"):
        assert len(body[key]) <= 1


@pytest.mark.parametrize("query", [None, "", "a", "  b  "])
def test_search_rejects_short_queries(client, query):
    params = {} if query is None else {"q": query}
    response = client.get("/api/search", params=params)
    assert response.status_code == 400
    assert response.json() == {
        "error": "Search query must be at least 2 characters",
        "status": 400,
    }


def test_suggestions(client):
    suggestions = client.get("/api/search/suggestions", params={"q": "beth"}).json()
    labels = {(s["type"], s["label"]) for s in suggestions}
    assert labels == {("location", "Bethel"), ("location", "Bethlehem")}

    assert client.get("/api/search/suggestions", params={"q": " "}).json() == []


# ============================================================
# Store errors
# ============================================================


def test_store_failure_is_500_with_stack_in_development(client, monkeypatch):
    monkeypatch.setitem(get_config(), "environment", "development")

    def broken_db():
        db = SessionLocal()

        def fail():
            raise SQLAlchemyError("disk I/O error")

        db.commit = fail
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = broken_db
    response = client.post("/api/locations", json={"name": "X", "latitude": 0, "longitude": 0})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to create location"
    assert body["status"] == 500
    assert "disk I/O error" in body["stack"]


def test_store_failure_hides_stack_outside_development(client, monkeypatch):
    monkeypatch.setitem(get_config(), "environment", "production")

    def broken_db():
        db = SessionLocal()

        def fail():
            raise SQLAlchemyError("disk I/O error")

        db.commit = fail
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = broken_db
    response = client.post("/api/locations", json={"name": "X", "latitude": 0, "longitude": 0})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create location", "status": 500}


def test_search_failure_is_500(client, monkeypatch):
    monkeypatch.setitem(get_config(), "environment", "production")

    def broken_search(term, limit):
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(server.search, "_search_events", broken_search)
    response = client.get("/api/search", params={"q": "Moses"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to perform search", "status": 500}


def test_unexpected_error_is_500_with_stack_in_development(client, monkeypatch):
    monkeypatch.setitem(get_config(), "environment", "development")

    def broken_token_check(token):
        raise RuntimeError("token service exploded")

    monkeypatch.setattr(server.meta, "validate_map_token", broken_token_check)
    response = TestClient(app, raise_server_exceptions=False).get("/api/config")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal Server Error"
    assert body["status"] == 500
    assert "token service exploded" in body["stack"]


class RecordingLogger:
    def __init__(self):
        self.calls = []

    def info(self, event, **kwargs):
        self.calls.append((event, kwargs))

    def error(self, event, **kwargs):
        self.calls.append((event, kwargs))


def test_failed_request_is_still_logged(client, monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(main, "logger", recorder)

    def broken_token_check(token):
        raise RuntimeError("token service exploded")

    monkeypatch.setattr(server.meta, "validate_map_token", broken_token_check)
    TestClient(app, raise_server_exceptions=False).get("/api/config")

    requests = [kwargs for event, kwargs in recorder.calls if event == "request"]
    assert len(requests) == 1
    assert requests[0]["method"] == "GET"
    assert requests[0]["path"] == "/api/config"
    assert requests[0]["status"] == 500
    assert requests[0]["duration_ms"] >= 0


# ============================================================
# Wildcard characters in text queries
# ============================================================


def test_search_treats_underscore_literally(client):
    body = client.get("/api/search", params={"q": "__"}).json()
    assert body["totalResults"] == 0


def test_list_search_treats_percent_literally(client):
    body = client.get("/api/persons", params={"search": "%"}).json()
    assert body["pagination"]["total"] == 0


def test_list_search_matches_percent_in_names(client):
    created = client.post(
        "/api/locations", json={"name": "Hill 100%", "latitude": 31.0, "longitude": 35.0}
    )
    assert created.status_code == 201

    body = client.get("/api/locations", params={"search": "100%"}).json()
    assert [loc["name"] for loc in body["data"]] == ["Hill 100%"]


def test_suggestions_treat_wildcards_literally(client):
    assert client.get("/api/search/suggestions", params={"q": "_e"}).json() == []
    assert client.get("/api/search/suggestions", params={"q": "%"}).json() == []


def test_verse_book_filter_is_literal(client):
    assert client.get("/api/verses", params={"book": "J_hn"}).json()["pagination"]["total"] == 0
    assert client.get("/api/verses", params={"book": "JOHN"}).json()["pagination"]["total"] == 1

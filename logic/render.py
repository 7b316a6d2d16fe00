"""
Map render model.

This module turns composed timeline and journey data into a declarative
description of what the client map should draw: numbered markers, connecting
lines, labels and the set of application layers that are switched on. The
client hands the result to its map library's layer API as-is.

Nothing here mutates its inputs. Marker offsets are display-only and never
flow back into stored coordinates.
"""

import math
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from logic.timeline import sort_by_year

# Offset circle radius in degrees.
OVERLAP_RADIUS = 0.01
OVERLAP_PRECISION = 4

TIMELINE_MARKERS = "timeline-markers"
TIMELINE_PATH = "timeline-path"
TIMELINE_LABELS = "timeline-labels"
JOURNEY_STOPS = "journey-stops"
JOURNEY_PATHS = "journey-paths"
JOURNEY_LABELS = "journey-labels"
REGION_BOUNDS = "region-bounds"

# Every layer the application owns. Provider base-map layers are never listed
# here and are never toggled.
APP_LAYERS: Tuple[str, ...] = (
    TIMELINE_MARKERS,
    TIMELINE_PATH,
    TIMELINE_LABELS,
    JOURNEY_STOPS,
    JOURNEY_PATHS,
    JOURNEY_LABELS,
    REGION_BOUNDS,
)

DEFAULT_MODE = "timeline"

MODE_LAYERS = MappingProxyType(
    {
        "timeline": (TIMELINE_MARKERS, TIMELINE_PATH, TIMELINE_LABELS),
        "journeys": (JOURNEY_STOPS, JOURNEY_PATHS, JOURNEY_LABELS),
        "overview": (TIMELINE_MARKERS, JOURNEY_PATHS, REGION_BOUNDS),
    }
)


def resolve_mode(mode: str) -> str:
    """Return mode if known, otherwise the default timeline mode."""
    return mode if mode in MODE_LAYERS else DEFAULT_MODE


def visible_layers(mode: str) -> List[str]:
    """Layers switched on for a view mode, in APP_LAYERS order."""
    enabled = set(MODE_LAYERS[resolve_mode(mode)])
    return [layer for layer in APP_LAYERS if layer in enabled]


def coordinate_key(latitude: float, longitude: float, precision: int = OVERLAP_PRECISION) -> str:
    # -0.0 + 0.0 is 0.0, so points either side of zero share a key.
    latitude = round(latitude, precision) + 0.0
    longitude = round(longitude, precision) + 0.0
    return f"{latitude:.{precision}f},{longitude:.{precision}f}"


def spread_overlapping_points(
    points: Sequence[Dict[str, Any]],
    precision: int = OVERLAP_PRECISION,
    radius: float = OVERLAP_RADIUS,
) -> List[Dict[str, Any]]:
    """Move points that share a coordinate onto a small circle around it.

    Points are grouped by latitude/longitude rounded to ``precision``
    decimals. Member ``i`` of a group of ``n`` (in input order) is drawn at
    ``lat + radius * sin(2 pi i / n)``, ``lng + radius * cos(2 pi i / n)``.
    A point alone at its coordinate stays where it is.

    Args:
        points: Dictionaries with "latitude" and "longitude".
        precision: Decimal places used to decide that two points coincide.
        radius: Offset circle radius in degrees.

    Returns:
        New dictionaries, one per input point and in the same order, with
        "displayLatitude" and "displayLongitude" added.
    """
    groups: Dict[str, List[int]] = {}
    for index, point in enumerate(points):
        key = coordinate_key(point["latitude"], point["longitude"], precision)
        groups.setdefault(key, []).append(index)

    position: Dict[int, Tuple[int, int]] = {}
    for members in groups.values():
        for slot, index in enumerate(members):
            position[index] = (slot, len(members))

    spread = []
    for index, point in enumerate(points):
        slot, size = position[index]
        lat_offset = lng_offset = 0.0
        if size > 1:
            angle = 2 * math.pi * slot / size
            lat_offset = radius * math.sin(angle)
            lng_offset = radius * math.cos(angle)

        out = dict(point)
        out["displayLatitude"] = point["latitude"] + lat_offset
        out["displayLongitude"] = point["longitude"] + lng_offset
        spread.append(out)

    return spread


def _timeline_markers(timeline: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    points = []
    for sequence, entry in enumerate(sort_by_year(e for e in timeline if e.get("location")), start=1):
        location = entry["location"]
        points.append(
            {
                "id": f"step-{sequence}",
                "sequence": sequence,
                "layer": TIMELINE_MARKERS,
                "kind": entry.get("type"),
                "year": entry.get("year"),
                "title": entry.get("title"),
                "verse": entry.get("verse"),
                "locationName": location.get("name"),
                "latitude": location["latitude"],
                "longitude": location["longitude"],
            }
        )
    return spread_overlapping_points(points)


def _journey_markers(journeys: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    points = []
    for journey in journeys:
        stops = sorted(journey.get("stops", []), key=lambda s: s["orderIndex"])
        for sequence, stop in enumerate(stops, start=1):
            location = stop["location"]
            points.append(
                {
                    "id": f"{journey['id']}-stop-{sequence}",
                    "sequence": sequence,
                    "layer": JOURNEY_STOPS,
                    "journeyId": journey["id"],
                    "title": stop.get("description") or location.get("name"),
                    "locationName": location.get("name"),
                    "latitude": location["latitude"],
                    "longitude": location["longitude"],
                }
            )
    return spread_overlapping_points(points)


def _journey_lines(journeys: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    lines = []
    for journey in journeys:
        stops = sorted(journey.get("stops", []), key=lambda s: s["orderIndex"])
        if len(stops) < 2:
            continue
        lines.append(
            {
                "id": f"journey-{journey['id']}",
                "layer": JOURNEY_PATHS,
                "title": journey.get("title"),
                "coordinates": [
                    [s["location"]["longitude"], s["location"]["latitude"]] for s in stops
                ],
            }
        )
    return lines


def _labels(markers: Iterable[Dict[str, Any]], layer: str) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"{marker['id']}-label",
            "layer": layer,
            "text": f"{marker['sequence']}. {marker['title']}",
            "latitude": marker["displayLatitude"],
            "longitude": marker["displayLongitude"],
        }
        for marker in markers
    ]


def build_map_view(selection: Dict[str, Any], mode: str = DEFAULT_MODE) -> Dict[str, Any]:
    """Derive the complete map render model for a selection and view mode.

    Timeline markers are numbered in chronological order and offset so that
    none fully overlap. The connecting path runs through the true
    coordinates, not the offset ones. Only elements on a visible layer are
    returned.

    Args:
        selection: Dictionary with optional "timeline" (composed entries),
            "journeys" (with "stops" carrying "location") and "bounds".
        mode: "timeline", "journeys" or "overview". Anything else falls back
            to "timeline".

    Returns:
        Dictionary with mode, markers, lines, labels, layers and bounds.
    """
    mode = resolve_mode(mode)
    layers = visible_layers(mode)

    timeline_markers = _timeline_markers(selection.get("timeline", []))
    journeys = selection.get("journeys", [])
    journey_markers = _journey_markers(journeys)

    markers: List[Dict[str, Any]] = []
    lines: List[Dict[str, Any]] = []
    labels: List[Dict[str, Any]] = []

    if TIMELINE_MARKERS in layers:
        markers.extend(timeline_markers)
    if TIMELINE_PATH in layers and len(timeline_markers) > 1:
        lines.append(
            {
                "id": TIMELINE_PATH,
                "layer": TIMELINE_PATH,
                "title": "Timeline",
                "coordinates": [[m["longitude"], m["latitude"]] for m in timeline_markers],
            }
        )
    if TIMELINE_LABELS in layers:
        labels.extend(_labels(timeline_markers, TIMELINE_LABELS))

    if JOURNEY_STOPS in layers:
        markers.extend(journey_markers)
    if JOURNEY_PATHS in layers:
        lines.extend(_journey_lines(journeys))
    if JOURNEY_LABELS in layers:
        labels.extend(_labels(journey_markers, JOURNEY_LABELS))

    return {
        "mode": mode,
        "markers": markers,
        "lines": lines,
        "labels": labels,
        "layers": layers,
        "bounds": selection.get("bounds") if REGION_BOUNDS in layers else None,
    }

"""
GeoJSON helpers.

Coordinates are always [longitude, latitude], in that order.
"""

from typing import Any, Dict, List, Optional, Sequence


def point_feature(
    longitude: float, latitude: float, properties: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [longitude, latitude]},
        "properties": properties or {},
    }


def line_feature(
    coordinates: Sequence[Sequence[float]], properties: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Build a LineString feature.

    Args:
        coordinates: Sequence of [longitude, latitude] pairs.
        properties: Feature properties.

    Returns:
        GeoJSON Feature dictionary.
    """
    return {
        "type": "Feature",
        "geometry": {"type": "LineString", "coordinates": [list(c) for c in coordinates]},
        "properties": properties or {},
    }


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}

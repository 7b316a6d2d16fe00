"""
Validation and sanitization utilities.

Query-string helpers here never raise: a malformed value degrades to None
(for filters) or to the default (for pagination). Body validation lives in
the pydantic request models, which call the check_* helpers.
"""

import math
from typing import Any, Dict, Iterable, Optional, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
MIN_SEARCH_LENGTH = 2
LIKE_ESCAPE = "\\"


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Parse an integer query parameter.

    Args:
        value: Raw value, usually a string or None.
        default: Returned when the value is missing or malformed.

    Returns:
        Parsed integer or default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    if math.isnan(parsed) or math.isinf(parsed):
        return default
    return parsed


def parse_bounds(value: Optional[str]) -> Optional[Tuple[float, float, float, float]]:
    """Parse a "minLat,minLng,maxLat,maxLng" bounding box.

    Returns:
        The four floats, or None when the value is missing or malformed.
    """
    if not value:
        return None
    parts = value.split(",")
    if len(parts) != 4:
        return None
    numbers = [parse_float(part) for part in parts]
    if any(n is None for n in numbers):
        return None
    return tuple(numbers)


def parse_pagination(page: Any, limit: Any) -> Tuple[int, int]:
    """Normalise page and limit.

    page is at least 1; limit is clamped to [1, MAX_LIMIT].

    Returns:
        Tuple of (page, limit).
    """
    page = max(parse_int(page, DEFAULT_PAGE), 1)
    limit = min(max(parse_int(limit, DEFAULT_LIMIT), 1), MAX_LIMIT)
    return page, limit


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def normalize_query(value: Optional[str]) -> str:
    """Trim a free-text query; None becomes an empty string."""
    return (value or "").strip()


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term is matched literally; pair with escape=LIKE_ESCAPE."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def is_valid_latitude(value: float) -> bool:
    return -90 <= value <= 90


def is_valid_longitude(value: float) -> bool:
    return -180 <= value <= 180


def check_latitude(value: Optional[float]) -> Optional[float]:
    """Validate a latitude.

    Raises:
        ValueError: If the value lies outside [-90, 90].
    """
    if value is not None and not is_valid_latitude(value):
        raise ValueError("latitude must be between -90 and 90")
    return value


def check_longitude(value: Optional[float]) -> Optional[float]:
    """Validate a longitude.

    Raises:
        ValueError: If the value lies outside [-180, 180].
    """
    if value is not None and not is_valid_longitude(value):
        raise ValueError("longitude must be between -180 and 180")
    return value


def check_unique_order(indexes: Iterable[int]) -> None:
    """Ensure journey stop order indexes are unique.

    Raises:
        ValueError: If an index appears more than once.
    """
    seen = set()
    for index in indexes:
        if index in seen:
            raise ValueError(f"duplicate orderIndex {index}")
        seen.add(index)


def parse_enum(value: Optional[str], enum_cls) -> Optional[str]:
    """Return the enum value matching value (any case), otherwise None."""
    if not value:
        return None
    try:
        return enum_cls(value.strip().upper()).value
    except ValueError:
        return None

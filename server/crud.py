"""
Shared helpers for the entity routers.

Request models, lookups that 404, text filters and offset pagination.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from logic.validation import LIKE_ESCAPE, escape_like, pagination_meta


class CamelModel(BaseModel):
    """Request body accepting camelCase keys (snake_case also works)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )


def get_or_404(db: Session, model, entity_id: str, label: str, options: Sequence = ()):
    """Fetch one row by primary key.

    Args:
        db: Database session.
        model: Mapped class.
        entity_id: Primary key value.
        label: Entity name used in the error message.
        options: Loader options, e.g. selectinload(...).

    Returns:
        The row.

    Raises:
        HTTPException: 404 if there is no such row.
    """
    query = db.query(model)
    if options:
        query = query.options(*options)
    row = query.filter(model.id == entity_id).first()
    if row is None:
        raise HTTPException(404, f"{label} not found")
    return row


def ensure_exists(db: Session, model, entity_id: Optional[str], label: str):
    """Check that an optional reference points at an existing row.

    Raises:
        HTTPException: 400 if the id is set and unknown.
    """
    if entity_id is None:
        return None
    row = db.get(model, entity_id)
    if row is None:
        raise HTTPException(400, f"Unknown {label} id: {entity_id}")
    return row


def load_many(db: Session, model, ids: Iterable[str], label: str) -> List[Any]:
    """Load rows for a list of ids, preserving order and dropping duplicates.

    Raises:
        HTTPException: 400 if any id is unknown.
    """
    wanted = list(dict.fromkeys(ids))
    if not wanted:
        return []
    rows = {row.id: row for row in db.query(model).filter(model.id.in_(wanted)).all()}
    missing = [i for i in wanted if i not in rows]
    if missing:
        raise HTTPException(400, f"Unknown {label} id(s): {', '.join(missing)}")
    return [rows[i] for i in wanted]


def text_filter(columns: Sequence, term: Optional[str]):
    """Case-insensitive substring match against any of the columns."""
    pattern = f"%{escape_like(term)}%"
    return or_(*[column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns])


def year_range(query: Query, column, year_from: Optional[int], year_to: Optional[int]) -> Query:
    if year_from is not None:
        query = query.filter(column >= year_from)
    if year_to is not None:
        query = query.filter(column <= year_to)
    return query


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    """Run a query for one page.

    Returns:
        Tuple of (rows, pagination dictionary).
    """
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return rows, pagination_meta(page, limit, total)


def apply_updates(row, values: Dict[str, Any]):
    for key, value in values.items():
        setattr(row, key, value)
    return row

"""
Theme API routes.

CRUD for themes, their verse links and directed related-theme links, plus
per-category counts.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import Field, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from database import get_db
from logic.validation import parse_enum, parse_pagination
from models import BibleVerse, Theme, ThemeCategory
from server.crud import CamelModel, apply_updates, get_or_404, load_many, paginate, text_filter
from server.errors import store_errors

router = APIRouter()


class ThemeCreate(CamelModel):
    title: str = Field(min_length=1)
    title_hebrew: Optional[str] = None
    title_greek: Optional[str] = None
    category: ThemeCategory
    description: str = ""
    summary: str = ""
    applications: List[str] = []
    image_url: Optional[str] = None
    verses: List[str] = []
    related_themes: List[str] = []


class ThemeUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    title_hebrew: Optional[str] = None
    title_greek: Optional[str] = None
    category: Optional[ThemeCategory] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    applications: Optional[List[str]] = None
    image_url: Optional[str] = None
    verses: Optional[List[str]] = None
    related_themes: Optional[List[str]] = None

    @field_validator("title", "category", "description", "summary", "applications")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


THEME_LOADERS = (
    selectinload(Theme.verses),
    selectinload(Theme.related_themes),
    selectinload(Theme.themes_related),
)


def _brief(theme: Theme) -> dict:
    return {"id": theme.id, "title": theme.title, "category": theme.category}


def theme_detail(theme: Theme) -> dict:
    data = theme.to_dict()
    data["verses"] = [v.to_dict() for v in theme.verses]
    data["relatedThemes"] = [_brief(t) for t in theme.related_themes]
    data["themesRelated"] = [_brief(t) for t in theme.themes_related]
    return data


def _set_relations(db: Session, theme: Theme, values: dict):
    verse_ids = values.pop("verses", None)
    if verse_ids is not None:
        theme.verses = load_many(db, BibleVerse, verse_ids, "verse")

    related_ids = values.pop("related_themes", None)
    if related_ids is not None:
        # A theme never lists itself.
        related_ids = [i for i in related_ids if i != theme.id]
        theme.related_themes = load_many(db, Theme, related_ids, "theme")


@router.get("/api/themes")
def list_themes(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List themes by title, each with link counts under "_count"."""
    page, limit = parse_pagination(page, limit)
    query = db.query(Theme).options(
        selectinload(Theme.verses), selectinload(Theme.related_themes)
    )

    if search and search.strip():
        query = query.filter(
            text_filter([Theme.title, Theme.description, Theme.summary], search.strip())
        )

    category = parse_enum(category, ThemeCategory)
    if category:
        query = query.filter(Theme.category == category)

    rows, pagination = paginate(query.order_by(Theme.title), page, limit)
    data = []
    for theme in rows:
        item = theme.to_dict()
        item["_count"] = {"verses": len(theme.verses), "relatedThemes": len(theme.related_themes)}
        data.append(item)
    return {"data": data, "pagination": pagination}


@router.get("/api/themes/categories")
def theme_categories(db: Session = Depends(get_db)):
    rows = (
        db.query(Theme.category, func.count(Theme.id))
        .group_by(Theme.category)
        .order_by(Theme.category)
        .all()
    )
    return [{"category": category, "count": count} for category, count in rows]


@router.get("/api/themes/{theme_id}")
def get_theme(theme_id: str, db: Session = Depends(get_db)):
    return theme_detail(get_or_404(db, Theme, theme_id, "Theme", options=THEME_LOADERS))


@router.post("/api/themes", status_code=201)
def create_theme(payload: ThemeCreate, db: Session = Depends(get_db)):
    values = payload.model_dump()
    with store_errors(db, "Failed to create theme"):
        theme = Theme()
        _set_relations(db, theme, values)
        apply_updates(theme, values)
        db.add(theme)
        db.commit()
        db.refresh(theme)
    return theme_detail(theme)


@router.put("/api/themes/{theme_id}")
def update_theme(theme_id: str, payload: ThemeUpdate, db: Session = Depends(get_db)):
    """Update a theme.

    verses and relatedThemes, when given, replace the current links.
    """
    theme = get_or_404(db, Theme, theme_id, "Theme", options=THEME_LOADERS)
    values = payload.model_dump(exclude_unset=True)
    with store_errors(db, "Failed to update theme"):
        _set_relations(db, theme, values)
        apply_updates(theme, values)
        db.commit()
        db.refresh(theme)
    return theme_detail(theme)


@router.delete("/api/themes/{theme_id}", status_code=204)
def delete_theme(theme_id: str, db: Session = Depends(get_db)):
    theme = get_or_404(db, Theme, theme_id, "Theme", options=THEME_LOADERS)
    with store_errors(db, "Failed to delete theme"):
        db.delete(theme)
        db.commit()
    return Response(status_code=204)

"""
Bible verse API routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from database import get_db
from logic.validation import LIKE_ESCAPE, escape_like, parse_int, parse_pagination
from models import BibleVerse
from server.crud import CamelModel, apply_updates, get_or_404, paginate, text_filter
from server.errors import store_errors

router = APIRouter()


class VerseCreate(CamelModel):
    book: str = Field(min_length=1)
    chapter: int = Field(ge=1)
    verse_start: int = Field(ge=1)
    verse_end: Optional[int] = Field(None, ge=1)
    text: str = Field(min_length=1)
    text_hebrew: Optional[str] = None
    text_greek: Optional[str] = None
    translation: str = "KJV"


class VerseUpdate(CamelModel):
    book: Optional[str] = Field(None, min_length=1)
    chapter: Optional[int] = Field(None, ge=1)
    verse_start: Optional[int] = Field(None, ge=1)
    verse_end: Optional[int] = Field(None, ge=1)
    text: Optional[str] = Field(None, min_length=1)
    text_hebrew: Optional[str] = None
    text_greek: Optional[str] = None
    translation: Optional[str] = None

    @field_validator("book", "chapter", "verse_start", "text", "translation")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


@router.get("/api/verses")
def list_verses(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    book: Optional[str] = Query(None),
    chapter: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    page, limit = parse_pagination(page, limit)
    query = db.query(BibleVerse)

    if book and book.strip():
        query = query.filter(
            BibleVerse.book.ilike(escape_like(book.strip()), escape=LIKE_ESCAPE)
        )
    chapter = parse_int(chapter)
    if chapter is not None:
        query = query.filter(BibleVerse.chapter == chapter)
    if search and search.strip():
        query = query.filter(text_filter([BibleVerse.text], search.strip()))

    rows, pagination = paginate(
        query.order_by(BibleVerse.book, BibleVerse.chapter, BibleVerse.verse_start), page, limit
    )
    return {"data": [v.to_dict() for v in rows], "pagination": pagination}


@router.get("/api/verses/{verse_id}")
def get_verse(verse_id: str, db: Session = Depends(get_db)):
    return get_or_404(db, BibleVerse, verse_id, "Verse").to_dict()


@router.post("/api/verses", status_code=201)
def create_verse(payload: VerseCreate, db: Session = Depends(get_db)):
    with store_errors(db, "Failed to create verse"):
        verse = BibleVerse(**payload.model_dump())
        db.add(verse)
        db.commit()
        db.refresh(verse)
    return verse.to_dict()


@router.put("/api/verses/{verse_id}")
def update_verse(verse_id: str, payload: VerseUpdate, db: Session = Depends(get_db)):
    verse = get_or_404(db, BibleVerse, verse_id, "Verse")
    with store_errors(db, "Failed to update verse"):
        apply_updates(verse, payload.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(verse)
    return verse.to_dict()


@router.delete("/api/verses/{verse_id}", status_code=204)
def delete_verse(verse_id: str, db: Session = Depends(get_db)):
    verse = get_or_404(db, BibleVerse, verse_id, "Verse")
    with store_errors(db, "Failed to delete verse"):
        db.delete(verse)
        db.commit()
    return Response(status_code=204)

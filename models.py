"""ORM models for the Bible Map store.

Persons, locations, events, journeys (with ordered stops), themes, verses
and person-to-person relationships. Columns are snake_case; ``to_dict``
produces the camelCase shape served by the API.

Years are signed integers: negative is BCE, zero and positive are CE.
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Testament(str, Enum):
    OLD = "OLD"
    NEW = "NEW"
    BOTH = "BOTH"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class EventCategory(str, Enum):
    CREATION = "CREATION"
    PATRIARCHS = "PATRIARCHS"
    EXODUS = "EXODUS"
    CONQUEST = "CONQUEST"
    JUDGES = "JUDGES"
    MONARCHY = "MONARCHY"
    EXILE = "EXILE"
    RETURN = "RETURN"
    MINISTRY = "MINISTRY"
    MIRACLE = "MIRACLE"
    TEACHING = "TEACHING"
    CRUCIFIXION = "CRUCIFIXION"
    RESURRECTION = "RESURRECTION"
    CHURCH = "CHURCH"
    PROPHECY = "PROPHECY"


class ThemeCategory(str, Enum):
    FAITH = "FAITH"
    LOVE = "LOVE"
    SALVATION = "SALVATION"
    PRAYER = "PRAYER"
    WISDOM = "WISDOM"
    PROPHECY = "PROPHECY"
    LAW = "LAW"
    COVENANT = "COVENANT"
    KINGDOM = "KINGDOM"
    WORSHIP = "WORSHIP"
    SIN = "SIN"
    REDEMPTION = "REDEMPTION"
    HOLINESS = "HOLINESS"
    JUSTICE = "JUSTICE"
    MERCY = "MERCY"


class RelationType(str, Enum):
    PARENT = "PARENT"
    CHILD = "CHILD"
    SPOUSE = "SPOUSE"
    SIBLING = "SIBLING"
    ANCESTOR = "ANCESTOR"
    DESCENDANT = "DESCENDANT"
    MENTOR = "MENTOR"
    DISCIPLE = "DISCIPLE"
    FRIEND = "FRIEND"
    ENEMY = "ENEMY"
    ALLY = "ALLY"


event_persons = Table(
    "event_persons",
    Base.metadata,
    Column("event_id", String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("person_id", String(36), ForeignKey("persons.id", ondelete="CASCADE"), primary_key=True),
)

event_verses = Table(
    "event_verses",
    Base.metadata,
    Column("event_id", String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("verse_id", String(36), ForeignKey("verses.id", ondelete="CASCADE"), primary_key=True),
)

person_verses = Table(
    "person_verses",
    Base.metadata,
    Column("person_id", String(36), ForeignKey("persons.id", ondelete="CASCADE"), primary_key=True),
    Column("verse_id", String(36), ForeignKey("verses.id", ondelete="CASCADE"), primary_key=True),
)

theme_verses = Table(
    "theme_verses",
    Base.metadata,
    Column("theme_id", String(36), ForeignKey("themes.id", ondelete="CASCADE"), primary_key=True),
    Column("verse_id", String(36), ForeignKey("verses.id", ondelete="CASCADE"), primary_key=True),
)

# Directed edge: theme_id -> related_id. The reverse side is "themesRelated".
theme_relations = Table(
    "theme_relations",
    Base.metadata,
    Column("theme_id", String(36), ForeignKey("themes.id", ondelete="CASCADE"), primary_key=True),
    Column("related_id", String(36), ForeignKey("themes.id", ondelete="CASCADE"), primary_key=True),
)


class Location(Base):
    """A place in the location registry.

    Attributes:
        name: Common English name, used for footstep resolution.
        name_hebrew: Optional Hebrew name.
        name_greek: Optional Greek name.
        modern_name: Modern equivalent, also used for footstep resolution.
        latitude: Decimal degrees in [-90, 90].
        longitude: Decimal degrees in [-180, 180].
    """

    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_location_latitude"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_location_longitude"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, index=True)
    name_hebrew = Column(String(200), nullable=True)
    name_greek = Column(String(200), nullable=True)
    modern_name = Column(String(200), nullable=True, index=True)
    country = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    location_type = Column(String(50), nullable=True)
    period = Column(String(100), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    description = Column(Text, nullable=False, default="")
    significance = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    events = relationship("Event", back_populates="location")
    birth_persons = relationship(
        "Person", back_populates="birth_place", foreign_keys="Person.birth_place_id"
    )
    death_persons = relationship(
        "Person", back_populates="death_place", foreign_keys="Person.death_place_id"
    )
    journey_stops = relationship("JourneyStop", back_populates="location", cascade="all")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "nameHebrew": self.name_hebrew,
            "nameGreek": self.name_greek,
            "modernName": self.modern_name,
            "country": self.country,
            "region": self.region,
            "type": self.location_type,
            "period": self.period,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description,
            "significance": self.significance,
            "imageUrl": self.image_url,
        }

    def to_brief(self):
        return {
            "id": self.id,
            "name": self.name,
            "modernName": self.modern_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


class Person(Base):
    """A biblical person.

    Birth and death places are weak references: deleting the location clears
    the reference instead of deleting the person.
    """

    __tablename__ = "persons"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False, index=True)
    name_hebrew = Column(String(200), nullable=True)
    name_greek = Column(String(200), nullable=True)
    description = Column(Text, nullable=False, default="")
    significance = Column(Text, nullable=False, default="")
    birth_year = Column(Integer, nullable=True)
    death_year = Column(Integer, nullable=True)
    testament = Column(String(10), nullable=False, default=Testament.OLD.value)
    gender = Column(String(10), nullable=True)
    image_url = Column(String(500), nullable=True)
    birth_place_id = Column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    death_place_id = Column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    birth_place = relationship(
        "Location", back_populates="birth_persons", foreign_keys=[birth_place_id]
    )
    death_place = relationship(
        "Location", back_populates="death_persons", foreign_keys=[death_place_id]
    )
    events = relationship("Event", secondary=event_persons, back_populates="persons")
    journeys = relationship("Journey", back_populates="person", cascade="all")
    relationships = relationship(
        "PersonRelationship",
        back_populates="person_from",
        foreign_keys="PersonRelationship.person_from_id",
        cascade="all, delete-orphan",
    )
    related_to = relationship(
        "PersonRelationship",
        back_populates="person_to",
        foreign_keys="PersonRelationship.person_to_id",
        cascade="all",
    )
    verses = relationship("BibleVerse", secondary=person_verses)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "nameHebrew": self.name_hebrew,
            "nameGreek": self.name_greek,
            "description": self.description,
            "significance": self.significance,
            "birthYear": self.birth_year,
            "deathYear": self.death_year,
            "testament": self.testament,
            "gender": self.gender,
            "imageUrl": self.image_url,
            "birthPlaceId": self.birth_place_id,
            "deathPlaceId": self.death_place_id,
        }

    def to_summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "nameHebrew": self.name_hebrew,
            "nameGreek": self.name_greek,
            "birthYear": self.birth_year,
            "deathYear": self.death_year,
        }


class PersonRelationship(Base):
    """Directed, typed edge between two persons."""

    __tablename__ = "person_relationships"

    id = Column(String(36), primary_key=True, default=new_id)
    relationship_type = Column(String(20), nullable=False)
    description = Column(Text, nullable=True)
    person_from_id = Column(
        String(36), ForeignKey("persons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_to_id = Column(
        String(36), ForeignKey("persons.id", ondelete="CASCADE"), nullable=False, index=True
    )

    person_from = relationship(
        "Person", back_populates="relationships", foreign_keys=[person_from_id]
    )
    person_to = relationship(
        "Person", back_populates="related_to", foreign_keys=[person_to_id]
    )

    def to_dict(self):
        return {
            "id": self.id,
            "relationshipType": self.relationship_type,
            "description": self.description,
            "personFromId": self.person_from_id,
            "personToId": self.person_to_id,
        }


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(300), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    significance = Column(Text, nullable=False, default="")
    year = Column(Integer, nullable=True, index=True)
    year_range = Column(String(100), nullable=True)
    testament = Column(String(10), nullable=False, default=Testament.OLD.value)
    category = Column(String(20), nullable=False)
    image_url = Column(String(500), nullable=True)
    location_id = Column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    location = relationship("Location", back_populates="events")
    persons = relationship("Person", secondary=event_persons, back_populates="events")
    verses = relationship("BibleVerse", secondary=event_verses)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "significance": self.significance,
            "year": self.year,
            "yearRange": self.year_range,
            "testament": self.testament,
            "category": self.category,
            "imageUrl": self.image_url,
            "locationId": self.location_id,
        }


class Journey(Base):
    __tablename__ = "journeys"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(300), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    purpose = Column(Text, nullable=False, default="")
    start_year = Column(Integer, nullable=True)
    end_year = Column(Integer, nullable=True)
    distance = Column(Float, nullable=True)
    duration = Column(String(100), nullable=True)
    person_id = Column(
        String(36), ForeignKey("persons.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    person = relationship("Person", back_populates="journeys")
    stops = relationship(
        "JourneyStop",
        back_populates="journey",
        cascade="all, delete-orphan",
        order_by="JourneyStop.order_index",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "purpose": self.purpose,
            "startYear": self.start_year,
            "endYear": self.end_year,
            "distance": self.distance,
            "duration": self.duration,
            "personId": self.person_id,
        }


class JourneyStop(Base):
    """One ordered waypoint of a journey.

    order_index is unique within a journey and only used for sequencing;
    gaps are allowed.
    """

    __tablename__ = "journey_stops"
    __table_args__ = (
        UniqueConstraint("journey_id", "order_index", name="uq_journey_stop_order"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    order_index = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String(100), nullable=True)
    journey_id = Column(
        String(36), ForeignKey("journeys.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_id = Column(
        String(36), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False
    )

    journey = relationship("Journey", back_populates="stops")
    location = relationship("Location", back_populates="journey_stops")

    def to_dict(self):
        return {
            "id": self.id,
            "orderIndex": self.order_index,
            "description": self.description,
            "duration": self.duration,
            "journeyId": self.journey_id,
            "locationId": self.location_id,
        }


class Theme(Base):
    __tablename__ = "themes"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False, index=True)
    title_hebrew = Column(String(200), nullable=True)
    title_greek = Column(String(200), nullable=True)
    category = Column(String(20), nullable=False)
    description = Column(Text, nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    applications = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    verses = relationship("BibleVerse", secondary=theme_verses)
    related_themes = relationship(
        "Theme",
        secondary=theme_relations,
        primaryjoin=id == theme_relations.c.theme_id,
        secondaryjoin=id == theme_relations.c.related_id,
        back_populates="themes_related",
    )
    themes_related = relationship(
        "Theme",
        secondary=theme_relations,
        primaryjoin=id == theme_relations.c.related_id,
        secondaryjoin=id == theme_relations.c.theme_id,
        back_populates="related_themes",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "titleHebrew": self.title_hebrew,
            "titleGreek": self.title_greek,
            "category": self.category,
            "description": self.description,
            "summary": self.summary,
            "applications": list(self.applications or []),
            "imageUrl": self.image_url,
        }


class BibleVerse(Base):
    __tablename__ = "verses"

    id = Column(String(36), primary_key=True, default=new_id)
    book = Column(String(50), nullable=False, index=True)
    chapter = Column(Integer, nullable=False)
    verse_start = Column(Integer, nullable=False)
    verse_end = Column(Integer, nullable=True)
    text = Column(Text, nullable=False)
    text_hebrew = Column(Text, nullable=True)
    text_greek = Column(Text, nullable=True)
    translation = Column(String(20), nullable=False, default="KJV")

    def reference(self) -> str:
        """Human readable reference, e.g. "John 3:16-17"."""
        ref = f"{self.book} {self.chapter}:{self.verse_start}"
        if self.verse_end and self.verse_end != self.verse_start:
            ref += f"-{self.verse_end}"
        return ref

    def to_dict(self):
        return {
            "id": self.id,
            "book": self.book,
            "chapter": self.chapter,
            "verseStart": self.verse_start,
            "verseEnd": self.verse_end,
            "text": self.text,
            "textHebrew": self.text_hebrew,
            "textGreek": self.text_greek,
            "translation": self.translation,
            "reference": self.reference(),
        }

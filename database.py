"""Database setup for the Bible Map store.

This module provides the engine, session factory and declarative base used
by the models, plus the FastAPI dependency that hands a session to each
request.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from logic.config import get_config

SessionLocal = sessionmaker(autocommit=False, autoflush=False)

Base = declarative_base()

engine: Engine = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(database_url: str) -> Engine:
    """Create the engine for a database URL and bind the session factory to it.

    Args:
        database_url: SQLAlchemy database URL.

    Returns:
        The new engine.
    """
    global engine

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, connect_args=connect_args)

    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    SessionLocal.configure(bind=engine)
    return engine


def get_engine() -> Engine:
    if engine is None:
        configure_engine(get_config()["database_url"])
    return engine


def get_db():
    """Dependency for getting database session.

    Yields:
        Database session that will be closed after use.
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope():
    """Context manager for a standalone session outside a request.

    Yields:
        Database session that will be closed after use.
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize the database by creating all tables."""
    import models  # noqa: F401  registers the tables on Base.metadata

    Base.metadata.create_all(bind=get_engine())


def drop_db():
    """Drop every table known to the models."""
    import models  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())

"""
Database configuration for SQLAlchemy + SQLite.

SQLite is enough here: the only durable state is a handful of search history
entries, and it needs no extra services to run locally.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    """Base class for ORM models."""
    pass


def make_engine(sqlite_path: str) -> Engine:
    # SQLite needs check_same_thread=False for FastAPI because FastAPI uses threads.
    return create_engine(
        f"sqlite:///{sqlite_path}",
        connect_args={"check_same_thread": False},
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    """Create tables if needed and return a session factory bound to `engine`."""
    from . import models  # noqa: F401  (registers tables on Base.metadata)

    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

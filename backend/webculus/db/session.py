"""SQLAlchemy engine, session factory and declarative base.

The engine is built on first use so importing models (tests, alembic) never
opens a connection to the configured database.
"""

from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from webculus.config import settings

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None  # type: ignore[type-arg]


def get_engine() -> Engine:
    """Engine for ``settings.DATABASE_URL``, created once."""
    global _engine
    if _engine is None:
        url = make_url(settings.DATABASE_URL)
        kwargs: dict = {"echo": settings.DATABASE_ECHO, "pool_pre_ping": True}
        if url.get_backend_name() == "sqlite":
            # a local file database shared by uvicorn's worker threads
            kwargs["connect_args"] = {"check_same_thread": False}
        _engine = create_engine(url, **kwargs)
    return _engine


def get_session_factory() -> sessionmaker:  # type: ignore[type-arg]
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autocommit=False, autoflush=False)
    return _SessionLocal


class Base(DeclarativeBase):
    pass


def get_db() -> Iterator[Session]:
    """Request-scoped session; always closed when the request ends."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()

# 🔹 FILE: jobportal/db.py
# ==============================================================
# Job Portal – DB bootstrap
# - create_db_and_tables(): creates tables from SQLModel metadata
# - drop_db_and_tables(): used by tests to reset state
# - get_session(): FastAPI dependency
# - get_engine(): expose engine when needed
# ==============================================================

import logging
from typing import Generator

from sqlalchemy import event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from .config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    kwargs = {"connect_args": {"check_same_thread": False}}
    # "sqlite://" and ":memory:" live in one connection, share it across threads
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs(settings.DATABASE_URL))


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if engine.dialect.name != "sqlite":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
    class_=Session,
)

def get_engine():
    return engine

def create_db_and_tables() -> None:
    # import for side effect: registers the tables on SQLModel.metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("[DB] Tables ready (%s)", engine.dialect.name)

def drop_db_and_tables() -> None:
    SQLModel.metadata.drop_all(engine)

# 🔌 Dependency - Session
def get_session() -> Generator[Session, None, None]:
    """
    FastAPI dependency: yields a SQLModel Session.
    Example:
        @router.get("/")
        def read_items(session: Session = Depends(get_session)):
            ...
    """
    with SessionLocal() as session:
        yield session

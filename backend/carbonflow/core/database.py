"""Database engine setup."""

from sqlalchemy import Engine
from sqlmodel import SQLModel, create_engine

from carbonflow.core.config import get_settings


def create_db_engine(database_url: str | None = None, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the store database.

    SQLite connections are shared between the event loop and worker threads,
    so the same-thread check is disabled for them.
    """
    url = database_url or get_settings().database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=echo, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create all tables."""
    # Register table models on the metadata
    from carbonflow.models import AuditLog, StoreDocument  # noqa: F401

    SQLModel.metadata.create_all(engine)

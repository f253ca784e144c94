"""
Database engine, session factory and schema bootstrap.
"""
import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(url: str) -> Engine:
    """Create an engine; SQLite URLs get thread-safe settings for FastAPI's threadpool."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # in-memory databases only live as long as their single connection
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Yield a session per request and always close it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _is_already_exists(error: Exception) -> bool:
    message = str(getattr(error, "orig", error)).lower()
    return "already exists" in message


def init_db(bind: Engine = engine) -> list[str]:
    """
    Create every table, one statement at a time.

    A table that already exists is skipped; any other SQL error is raised.
    Returns the names of the tables that were created.
    """
    from . import models  # noqa: F401  register tables on Base.metadata

    created = []
    for table in Base.metadata.sorted_tables:
        try:
            with bind.begin() as conn:
                table.create(conn, checkfirst=False)
        except (OperationalError, ProgrammingError) as e:
            if not _is_already_exists(e):
                raise
            logger.debug(f"Table {table.name} already exists, skipping")
            continue
        logger.info(f"Table created: {table.name}")
        created.append(table.name)
    return created

"""SQLite database configuration with SQLAlchemy."""

from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from blogstyle.config import DATABASE_URL, DB_ECHO, SQLITE_BUSY_TIMEOUT

# Base class for models
Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _serialize_sqlite_transactions(engine: Engine) -> Engine:
    """pysqlite: BEGIN IMMEDIATE at transaction start.

    The driver otherwise defers BEGIN until the first write, so a
    read-compare-write would read outside any transaction and SELECT ... FOR
    UPDATE is ignored by SQLite. Taking the write lock up front serializes
    concurrent upserts.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(database_url: str = DATABASE_URL, echo: bool = DB_ECHO) -> Engine:
    """Create an engine for the given URL.

    The parent directory of a SQLite file is created; an in-memory URL shares a single
    connection so every session sees the same database (tests only, not for
    concurrent use). SQLite transactions take the write lock when they begin.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo)

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return _serialize_sqlite_transactions(create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        ))

    Path(make_url(database_url).database).parent.mkdir(parents=True, exist_ok=True)
    return _serialize_sqlite_transactions(create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},  # SQLite specific
        echo=echo,
    ))


def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_engine() -> Engine:
    """Process-wide engine for DATABASE_URL, created on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


def init_db(engine: Optional[Engine] = None):
    """Initialize database tables."""
    from blogstyle.models import learned_pattern  # noqa: F401
    Base.metadata.create_all(bind=engine or get_engine())


@contextmanager
def get_db_session(session_factory: Optional[sessionmaker] = None):
    """Context manager for DB session (commit on success, rollback on error)."""
    db = (session_factory or get_session_factory())()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

"""Database connection and session management."""
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from shiftdesk.config import settings


logger = logging.getLogger(__name__)

# SQLite connections are shared with the request threadpool
connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

# Create database engine
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_recycle=settings.db_pool_recycle,
    connect_args=connect_args,
    echo=settings.debug
)


def enable_sqlite_transactions(sqlite_engine: Engine) -> None:
    """
    Make SQLite open its transaction at the first statement, reads included.

    pysqlite otherwise defers BEGIN until the first write, so a
    query-then-insert sequence would not run inside one transaction.
    """
    @event.listens_for(sqlite_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


if settings.is_sqlite:
    enable_sqlite_transactions(engine)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database by creating all tables."""
    # Register models on the metadata before create_all
    import shiftdesk.models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception:
        logger.exception("Database initialization failed")
        raise

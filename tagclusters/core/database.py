"""Database configuration."""
import logging
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tagclusters.core.config import settings

logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

Base = declarative_base()


def create_db_engine(database_url: str = settings.DATABASE_URL, echo: bool = False) -> Engine:
    """Create an engine for the SQLite store.

    pysqlite opens and commits transactions on its own schedule, which breaks
    SAVEPOINT handling. The driver is switched to autocommit and SQLAlchemy
    emits BEGIN itself, as described in the SQLAlchemy SQLite dialect docs.

    Args:
        database_url: SQLAlchemy URL, defaults to the configured DB_PATH
        echo: Log every statement

    Returns:
        Configured engine
    """
    engine = create_engine(database_url, echo=echo)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _disable_pysqlite_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session bound to the configured database."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

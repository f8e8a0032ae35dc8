"""Idempotent schema changes for derived columns.

Each change is a single forward-only step that can be re-run safely: adding a
column that already exists and creating an index that already exists are both
reported as ``ALREADY_EXISTS`` instead of failing.
"""
import enum
import logging
from typing import Optional

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, Text, inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.types import TypeEngine

from tagclusters.core.exceptions import SchemaError

logger = logging.getLogger(__name__)


class SchemaChange(str, enum.Enum):
    """Outcome of an idempotent schema step."""

    ADDED = "added"
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


def _operations(connection: Connection) -> Operations:
    return Operations(MigrationContext.configure(connection))


def _is_duplicate_column(error: SQLAlchemyError) -> bool:
    # SQLite: "duplicate column name: x", MySQL: "Duplicate column name 'x'"
    return isinstance(error, DBAPIError) and "duplicate column" in str(error.orig).lower()


def ensure_column(
    engine: Engine,
    table_name: str,
    column_name: str,
    column_type: Optional[TypeEngine] = None,
) -> SchemaChange:
    """Add a nullable column, treating an existing column as success.

    Args:
        engine: Database engine
        table_name: Table to extend
        column_name: Column to add
        column_type: SQL type, defaults to TEXT

    Returns:
        SchemaChange.ADDED or SchemaChange.ALREADY_EXISTS

    Raises:
        SchemaError: If the change fails for any other reason
    """
    logger.info(f"Adding {column_name} column to {table_name} table...")
    try:
        with engine.begin() as conn:
            _operations(conn).add_column(table_name, Column(column_name, column_type or Text()))
    except SQLAlchemyError as e:
        if _is_duplicate_column(e):
            logger.info(f"✓ {column_name} column already exists")
            return SchemaChange.ALREADY_EXISTS
        raise SchemaError(f"Failed to add column {table_name}.{column_name}: {e}") from e

    logger.info(f"✓ Added {column_name} column")
    return SchemaChange.ADDED


def ensure_index(
    engine: Engine,
    table_name: str,
    column_name: str,
    index_name: Optional[str] = None,
) -> SchemaChange:
    """Create a single-column index if it does not exist yet.

    Args:
        engine: Database engine
        table_name: Indexed table
        column_name: Indexed column
        index_name: Index name, defaults to ``idx_<column_name>``

    Returns:
        SchemaChange.CREATED or SchemaChange.ALREADY_EXISTS

    Raises:
        SchemaError: If the index cannot be created
    """
    index_name = index_name or f"idx_{column_name}"
    logger.info(f"Creating index {index_name} on {table_name}({column_name})...")
    try:
        with engine.begin() as conn:
            existing = {ix["name"] for ix in inspect(conn).get_indexes(table_name)}
            _operations(conn).create_index(index_name, table_name, [column_name], if_not_exists=True)
    except SQLAlchemyError as e:
        raise SchemaError(f"Failed to create index {index_name} on {table_name}: {e}") from e

    if index_name in existing:
        logger.info(f"✓ Index {index_name} already exists")
        return SchemaChange.ALREADY_EXISTS

    logger.info(f"✓ Index {index_name} created")
    return SchemaChange.CREATED

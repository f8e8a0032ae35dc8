"""Pytest configuration and fixtures."""
import json
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tagclusters.core.database import Base, create_db_engine
from tagclusters.models import Document, RdfTriple  # noqa: F401  (registers tables)
from tagclusters.services.cluster_registry import ClusterRegistry

SAMPLE_CLUSTERS = [
    {
        "id": 1,
        "name": "Finance",
        "exemplars": ["revenue", "earnings"],
        "tags": ["revenue", "earnings", "profit", "quarterly"],
    },
    {
        "id": 2,
        "name": "Legal",
        "exemplars": ["contract"],
        "tags": ["contract", "lawsuit", "compliance"],
    },
    {
        "id": 3,
        "name": "People",
        "exemplars": ["employee"],
        "tags": ["employee", "ceo", "hiring", "profit"],
    },
]


@pytest.fixture(scope="function")
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """SQLite engine on a fresh database file."""
    test_engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    try:
        yield test_engine
    finally:
        test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine: Engine) -> Generator[Session, None, None]:
    """Session on a database with the full (post-migration) schema."""
    Base.metadata.create_all(bind=engine)
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def legacy_schema(engine: Engine) -> Engine:
    """Database with the tables as they were before any migration ran."""
    with engine.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE rdf_triples (id INTEGER PRIMARY KEY, triple_tags TEXT)")
        conn.exec_driver_sql(
            "CREATE TABLE documents (id INTEGER PRIMARY KEY, doc_id VARCHAR(255) NOT NULL, "
            "file_path VARCHAR(1000) NOT NULL)"
        )
    return engine


@pytest.fixture
def registry_path(tmp_path: Path) -> Path:
    """Registry file with three clusters and no "Misc" cluster."""
    path = tmp_path / "tag_clusters.json"
    path.write_text(json.dumps(SAMPLE_CLUSTERS, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def registry(registry_path: Path) -> ClusterRegistry:
    return ClusterRegistry(registry_path)

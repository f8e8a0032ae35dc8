"""
Assign the "Misc" cluster to unclassified triples

Triples whose top_cluster_ids is NULL or an empty list get the fallback cluster
id. Triples that already have at least one cluster are left unchanged, so the
migration can be re-run safely.

Usage:
    python -m tagclusters.migrations.add_misc_cluster
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import Text, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tagclusters.core.config import BATCH_SIZE
from tagclusters.core.exceptions import RowProcessingError
from tagclusters.core.logging_config import configure_logging
from tagclusters.models.triple import RdfTriple
from tagclusters.services.batch_updater import SKIP, BatchUpdater
from tagclusters.services.cluster_registry import ClusterRegistry
from tagclusters.services.codecs import decode_cluster_ids, encode_cluster_ids
from tagclusters.services.schema import ensure_column

logger = logging.getLogger(__name__)


def write_fallback(session: Session, triple: Any, value: str) -> None:
    """Store the fallback cluster assignment of one triple."""
    session.execute(
        update(RdfTriple).where(RdfTriple.id == triple.id).values(top_cluster_ids=value)
    )


def run(
    engine: Engine,
    registry: Optional[ClusterRegistry] = None,
    batch_size: Optional[int] = BATCH_SIZE,
) -> Dict[str, Any]:
    """
    Give every triple without a cluster assignment the fallback cluster.

    Args:
        engine: Database engine
        registry: Cluster registry, defaults to tag_clusters.json in the working directory
        batch_size: Updates per commit

    Returns:
        Summary with the fallback id and row counts
    """
    registry = registry or ClusterRegistry()
    clusters, created = registry.load()
    misc_cluster_id = registry.find_fallback(clusters).id

    ensure_column(engine, RdfTriple.__tablename__, "top_cluster_ids", Text())

    def compute_fallback(triple: Any) -> Any:
        try:
            cluster_ids = decode_cluster_ids(triple.top_cluster_ids)
        except ValueError as e:
            raise RowProcessingError(f"invalid top_cluster_ids: {e}", row_id=triple.id) from e
        if cluster_ids:
            return SKIP
        return encode_cluster_ids([misc_cluster_id])

    with Session(engine) as session:
        logger.info("Fetching all triples...")
        triples = session.execute(select(RdfTriple.id, RdfTriple.top_cluster_ids)).all()
        logger.info(f"Processing {len(triples)} triples...")

        updater = BatchUpdater(session, batch_size=batch_size, label="triples")
        result = updater.run(triples, compute_fallback, write_fallback)

    logger.info(f"✓ Completed! Updated {result.updated} triples to include \"{registry.fallback_name}\" cluster")
    logger.info(f"✓ {result.skipped} triples already had cluster assignments")
    if result.errors:
        logger.warning(f"✗ {result.errors} triples could not be processed")

    return {
        "misc_cluster_id": misc_cluster_id,
        "created_misc": created,
        "total": result.total,
        "updated": result.updated,
        "already_assigned": result.skipped,
        "errors": result.errors,
    }


def main() -> None:
    """Run the migration against the configured database."""
    from tagclusters.core.database import engine

    configure_logging()
    try:
        run(engine)
    except Exception as e:
        logger.error(f"Migration failed: {str(e)}")
        raise
    logger.info("✓ Migration complete!")


if __name__ == "__main__":
    main()

"""
Add top_cluster_ids to rdf_triples

Classifies every triple into the clusters of the tag cluster registry that
share the most tags with it and stores the top ids as a JSON list.

What it does:
1. Loads tag_clusters.json (adding the "Misc" cluster if missing)
2. Adds the top_cluster_ids column and its index if they don't exist
3. Recomputes the top 3 cluster ids of every triple in batches of 1000

Usage:
    python -m tagclusters.migrations.add_top_cluster_ids
    DB_PATH=/data/analysis.db python -m tagclusters.migrations.add_top_cluster_ids
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import Text, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tagclusters.core.config import BATCH_SIZE, TOP_N_CLUSTERS
from tagclusters.core.exceptions import RowProcessingError
from tagclusters.core.logging_config import configure_logging
from tagclusters.models.triple import RdfTriple
from tagclusters.services.batch_updater import BatchUpdater
from tagclusters.services.cluster_registry import ClusterRegistry
from tagclusters.services.codecs import decode_tags, encode_cluster_ids
from tagclusters.services.schema import ensure_column, ensure_index
from tagclusters.services.tag_classifier import TagClassifier

logger = logging.getLogger(__name__)

TABLE = RdfTriple.__tablename__
COLUMN = "top_cluster_ids"
INDEX = "idx_top_cluster_ids"


def write_top_cluster_ids(session: Session, triple: Any, value: str) -> None:
    """Store the encoded cluster ids of one triple."""
    session.execute(
        update(RdfTriple).where(RdfTriple.id == triple.id).values(top_cluster_ids=value)
    )


def run(
    engine: Engine,
    registry: Optional[ClusterRegistry] = None,
    batch_size: Optional[int] = BATCH_SIZE,
    top_n: int = TOP_N_CLUSTERS,
) -> Dict[str, Any]:
    """
    Classify every triple and store its top cluster ids.

    Args:
        engine: Database engine
        registry: Cluster registry, defaults to tag_clusters.json in the working directory
        batch_size: Updates per commit
        top_n: Cluster ids kept per triple

    Returns:
        Summary with cluster, row, update and error counts
    """
    registry = registry or ClusterRegistry()
    clusters, _ = registry.load()
    classifier = TagClassifier(clusters, top_n=top_n)

    ensure_column(engine, TABLE, COLUMN, Text())
    ensure_index(engine, TABLE, COLUMN, INDEX)

    def compute_top_clusters(triple: Any) -> str:
        try:
            tags = decode_tags(triple.triple_tags)
        except ValueError as e:
            raise RowProcessingError(f"invalid triple_tags: {e}", row_id=triple.id) from e
        return encode_cluster_ids(classifier.classify(tags))

    with Session(engine) as session:
        logger.info("Fetching all triples...")
        triples = session.execute(select(RdfTriple.id, RdfTriple.triple_tags)).all()
        logger.info(f"Processing {len(triples)} triples...")

        updater = BatchUpdater(session, batch_size=batch_size, label="triples")
        result = updater.run(triples, compute_top_clusters, write_top_cluster_ids)

    logger.info(f"✓ Completed! Processed {result.updated} triples")
    if result.errors:
        logger.warning(f"✗ {result.errors} triples could not be processed")

    return {
        "clusters": len(clusters),
        "total": result.total,
        "updated": result.updated,
        "skipped": result.skipped,
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

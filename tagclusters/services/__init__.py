"""Services package for cluster classification and migration steps."""

from tagclusters.services.batch_updater import SKIP, BatchUpdater, UpdateResult
from tagclusters.services.cluster_registry import ClusterRegistry, TagCluster
from tagclusters.services.schema import SchemaChange, ensure_column, ensure_index
from tagclusters.services.tag_classifier import TagClassifier, classify
from tagclusters.services.text_ingestion import IngestResult, ingest

__all__ = [
    "SKIP",
    "BatchUpdater",
    "UpdateResult",
    "ClusterRegistry",
    "TagCluster",
    "SchemaChange",
    "ensure_column",
    "ensure_index",
    "TagClassifier",
    "classify",
    "IngestResult",
    "ingest",
]

"""Tag classifier: rank registry clusters by how many of a triple's tags they contain."""
from typing import FrozenSet, Iterable, List, Sequence, Tuple

from tagclusters.core.config import TOP_N_CLUSTERS
from tagclusters.services.cluster_registry import TagCluster


def classify(
    tags: Iterable[str],
    clusters: Sequence[TagCluster],
    top_n: int = TOP_N_CLUSTERS,
) -> List[int]:
    """Return the ids of the best matching clusters for a tag set.

    The match count of a cluster is the size of the intersection between the
    tags and the cluster's members, so repeated tags count once. Clusters
    without a match are dropped. Ranking is by match count, descending; ties
    keep registry order.

    Args:
        tags: Tags of one triple
        clusters: Registry clusters in file order
        top_n: Maximum number of ids to return

    Returns:
        Up to top_n cluster ids, best match first
    """
    return TagClassifier(clusters, top_n=top_n).classify(tags)


class TagClassifier:
    """Classifier bound to one loaded registry, reused across every row of a run."""

    def __init__(self, clusters: Sequence[TagCluster], top_n: int = TOP_N_CLUSTERS):
        """Initialize the classifier.

        Args:
            clusters: Registry clusters in file order
            top_n: Maximum number of ids returned per triple
        """
        if top_n < 0:
            raise ValueError(f"top_n must be non-negative, got {top_n}")
        self.top_n = top_n
        self._members: List[Tuple[int, FrozenSet[str]]] = [
            (cluster.id, frozenset(cluster.tags)) for cluster in clusters
        ]

    def match_counts(self, tags: Iterable[str]) -> List[Tuple[int, int]]:
        """Return (cluster_id, match_count) for every cluster with at least one match."""
        tag_set = set(tags)
        counts = []
        for cluster_id, members in self._members:
            count = len(tag_set & members)
            if count > 0:
                counts.append((cluster_id, count))
        return counts

    def classify(self, tags: Iterable[str]) -> List[int]:
        """Return up to top_n cluster ids for the tags, best match first."""
        # sorted() is stable, so equal counts stay in registry order
        ranked = sorted(self.match_counts(tags), key=lambda item: item[1], reverse=True)
        return [cluster_id for cluster_id, _ in ranked[: self.top_n]]

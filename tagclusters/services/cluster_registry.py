"""Cluster registry backed by a JSON file."""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from tagclusters.core.config import (
    MISC_CLUSTER_EXEMPLARS,
    MISC_CLUSTER_ID,
    MISC_CLUSTER_NAME,
    TAG_CLUSTERS_FILE,
)
from tagclusters.core.exceptions import RegistryFormatError

logger = logging.getLogger(__name__)


class TagCluster(BaseModel):
    """Named group of related tags with a stable integer id."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(strict=True)
    name: str = Field(strict=True)
    exemplars: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)


_clusters_adapter = TypeAdapter(List[TagCluster])


class ClusterRegistry:
    """Loads the cluster registry and guarantees the fallback cluster exists.

    The registry file is a JSON array of ``{id, name, exemplars, tags}``
    objects. It is read fully into memory and, when modified, rewritten fully.
    """

    def __init__(
        self,
        path: Optional[Path | str] = None,
        fallback_name: str = MISC_CLUSTER_NAME,
        fallback_id: int = MISC_CLUSTER_ID,
    ):
        """Initialize the registry.

        Args:
            path: Registry file, defaults to tag_clusters.json in the working directory
            fallback_name: Name of the catch-all cluster
            fallback_id: Fixed id given to a synthesized fallback cluster
        """
        self.path = Path(path) if path is not None else Path.cwd() / TAG_CLUSTERS_FILE
        self.fallback_name = fallback_name
        self.fallback_id = fallback_id

    def read(self) -> List[TagCluster]:
        """Parse the registry file without modifying it.

        Returns:
            Clusters in file order

        Raises:
            RegistryFormatError: If the file is unreadable or not a list of cluster records
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RegistryFormatError(f"Cannot read cluster registry {self.path}: {e}") from e

        try:
            clusters = _clusters_adapter.validate_json(content)
        except ValidationError as e:
            raise RegistryFormatError(f"Invalid cluster registry {self.path}: {e}") from e

        seen: dict[int, str] = {}
        for cluster in clusters:
            if cluster.id in seen:
                raise RegistryFormatError(
                    f"Duplicate cluster id {cluster.id} ('{seen[cluster.id]}' and '{cluster.name}') in {self.path}"
                )
            seen[cluster.id] = cluster.name

        return clusters

    def load(self) -> Tuple[List[TagCluster], bool]:
        """Load the registry, creating and persisting the fallback cluster if absent.

        Returns:
            Tuple of (clusters, was_modified)

        Raises:
            RegistryFormatError: If the file is malformed, or the fixed fallback id
                is already taken by another cluster
        """
        clusters = self.read()
        logger.info(f"Loaded {len(clusters)} tag clusters from {self.path}")

        fallback = self.find_fallback(clusters)
        if fallback is not None:
            logger.info(f"✓ \"{self.fallback_name}\" cluster already exists with ID {fallback.id}")
            return clusters, False

        for cluster in clusters:
            if cluster.id == self.fallback_id:
                raise RegistryFormatError(
                    f"Cannot create \"{self.fallback_name}\" cluster: ID {self.fallback_id} "
                    f"is already used by '{cluster.name}'"
                )

        clusters.append(
            TagCluster(
                id=self.fallback_id,
                name=self.fallback_name,
                exemplars=list(MISC_CLUSTER_EXEMPLARS),
                tags=[],
            )
        )
        self.save(clusters)
        logger.info(f"✓ Created \"{self.fallback_name}\" cluster with ID {self.fallback_id}")
        return clusters, True

    def find_fallback(self, clusters: List[TagCluster]) -> Optional[TagCluster]:
        """Return the first cluster whose name is the fallback name."""
        matches = [c for c in clusters if c.name == self.fallback_name]
        if len(matches) > 1:
            logger.warning(
                f"Registry has {len(matches)} \"{self.fallback_name}\" clusters, using ID {matches[0].id}"
            )
        return matches[0] if matches else None

    def save(self, clusters: List[TagCluster]) -> None:
        """Rewrite the whole registry file.

        The content goes to a temporary file in the same directory which then
        replaces the registry, so readers never see a partial file.

        Args:
            clusters: Clusters to persist, in order
        """
        payload = [cluster.model_dump() for cluster in clusters]
        content = json.dumps(payload, indent=2, ensure_ascii=False)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info(f"Saved {len(clusters)} tag clusters to {self.path}")

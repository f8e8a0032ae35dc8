"""Tests for the cluster registry."""
import json
from pathlib import Path

import pytest

from tagclusters.core.config import MISC_CLUSTER_ID
from tagclusters.core.exceptions import RegistryFormatError
from tagclusters.services.cluster_registry import ClusterRegistry


def test_load_creates_misc_cluster(registry: ClusterRegistry, registry_path: Path) -> None:
    """A registry without "Misc" gets one with the fixed id, persisted immediately."""
    clusters, modified = registry.load()

    assert modified is True
    misc = clusters[-1]
    assert misc.id == MISC_CLUSTER_ID
    assert misc.name == "Misc"
    assert misc.exemplars == ["uncategorized", "other", "miscellaneous"]
    assert misc.tags == []

    stored = json.loads(registry_path.read_text(encoding="utf-8"))
    assert len(stored) == 4
    assert stored[-1] == {
        "id": MISC_CLUSTER_ID,
        "name": "Misc",
        "exemplars": ["uncategorized", "other", "miscellaneous"],
        "tags": [],
    }


def test_load_is_idempotent(registry: ClusterRegistry, registry_path: Path) -> None:
    """Repeated loads return the same fallback id and add at most one entry."""
    first, first_modified = registry.load()
    content_after_first = registry_path.read_text(encoding="utf-8")

    for _ in range(3):
        clusters, modified = registry.load()
        assert modified is False
        assert registry.find_fallback(clusters).id == registry.find_fallback(first).id

    assert first_modified is True
    assert registry_path.read_text(encoding="utf-8") == content_after_first
    assert len(json.loads(content_after_first)) == 4


def test_existing_misc_matched_by_name(tmp_path: Path) -> None:
    """An existing "Misc" cluster is reused even when its id is not the fixed one."""
    path = tmp_path / "tag_clusters.json"
    path.write_text(
        json.dumps([{"id": 7, "name": "Misc", "exemplars": [], "tags": ["other"]}]),
        encoding="utf-8",
    )
    before = path.read_text(encoding="utf-8")

    clusters, modified = ClusterRegistry(path).load()

    assert modified is False
    assert [c.id for c in clusters] == [7]
    assert path.read_text(encoding="utf-8") == before


def test_rewrite_uses_two_space_indent(registry: ClusterRegistry, registry_path: Path) -> None:
    registry.load()
    content = registry_path.read_text(encoding="utf-8")

    assert content.startswith('[\n  {\n    "id": 1,')
    assert not list(registry_path.parent.glob(".tag_clusters.json.*"))


def test_extra_fields_preserved(tmp_path: Path) -> None:
    """Unknown keys of a cluster record survive a rewrite."""
    path = tmp_path / "tag_clusters.json"
    path.write_text(
        json.dumps([{"id": 1, "name": "Finance", "exemplars": [], "tags": [], "size": 42}]),
        encoding="utf-8",
    )

    ClusterRegistry(path).load()

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored[0]["size"] == 42


def test_fixed_id_collision_rejected(tmp_path: Path) -> None:
    """The fallback is not synthesized over an unrelated cluster with the same id."""
    path = tmp_path / "tag_clusters.json"
    original = json.dumps([{"id": MISC_CLUSTER_ID, "name": "Science", "exemplars": [], "tags": ["lab"]}])
    path.write_text(original, encoding="utf-8")

    with pytest.raises(RegistryFormatError, match="already used"):
        ClusterRegistry(path).load()

    assert path.read_text(encoding="utf-8") == original


class TestMalformedRegistry:
    """Malformed registries fail with RegistryFormatError before anything is written."""

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            '{"id": 1, "name": "Finance"}',
            '[{"name": "Finance", "exemplars": [], "tags": []}]',
            '[{"id": 1, "name": "Finance", "exemplars": [], "tags": "revenue"}]',
            '[{"id": 1, "name": "A", "tags": []}, {"id": 1, "name": "B", "tags": []}]',
            '[{"id": "7", "name": "Finance", "exemplars": [], "tags": []}]',
            '[{"id": 1, "name": 5, "exemplars": [], "tags": []}]',
        ],
    )
    def test_invalid_content(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "tag_clusters.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(RegistryFormatError):
            ClusterRegistry(path).load()

        assert path.read_text(encoding="utf-8") == content

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryFormatError):
            ClusterRegistry(tmp_path / "missing.json").load()

    def test_non_utf8_file(self, tmp_path: Path) -> None:
        path = tmp_path / "tag_clusters.json"
        content = b'[{"id": 1, "name": "\xff", "exemplars": [], "tags": []}]'
        path.write_bytes(content)

        with pytest.raises(RegistryFormatError):
            ClusterRegistry(path).load()

        assert path.read_bytes() == content

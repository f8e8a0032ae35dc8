"""Encoding of list-valued columns stored as JSON text."""
import json
from typing import Iterable, List, Optional


def decode_tags(raw: Optional[str]) -> List[str]:
    """Decode a ``triple_tags`` value.

    Args:
        raw: JSON text or None

    Returns:
        List of tag strings, empty for NULL/empty values

    Raises:
        ValueError: If the value is not a JSON list of strings
    """
    if not raw:
        return []
    value = json.loads(raw)
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise ValueError(f"Expected a JSON list of strings, got {raw[:80]!r}")
    return value


def decode_cluster_ids(raw: Optional[str]) -> List[int]:
    """Decode a ``top_cluster_ids`` value.

    Args:
        raw: JSON text or None

    Returns:
        List of cluster ids, empty for NULL/empty values

    Raises:
        ValueError: If the value is not a JSON list of integers
    """
    if not raw:
        return []
    value = json.loads(raw)
    if not isinstance(value, list) or not all(
        isinstance(cid, int) and not isinstance(cid, bool) for cid in value
    ):
        raise ValueError(f"Expected a JSON list of integers, got {raw[:80]!r}")
    return value


def encode_cluster_ids(cluster_ids: Iterable[int]) -> str:
    """Encode cluster ids the way the column stores them (compact JSON)."""
    return json.dumps(list(cluster_ids), separators=(",", ":"))

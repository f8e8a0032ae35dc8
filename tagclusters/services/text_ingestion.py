"""
Text Ingestion Service

Reads the source text of a document from the file referenced by its stored
relative path. Failures are returned, not raised, so a caller looping over many
documents can tally them and move on.

Usage:
    result = ingest(document)
    if result.ok:
        document.full_text = result.text
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    """Outcome of reading one document's file."""

    ok: bool
    text: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "IngestResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, reason: str) -> "IngestResult":
        return cls(ok=False, reason=reason)


def resolve_path(file_path: str, base_dir: Optional[Path | str] = None) -> Path:
    """Resolve a stored path against base_dir (default: working directory).

    A leading slash does not escape base_dir; stored paths always join onto it.
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    return base / file_path.lstrip("/")


def read_text(path: Path) -> str:
    """Read a UTF-8 file verbatim.

    ``newline=""`` disables newline translation so CRLF files are stored as-is.
    """
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def ingest(document: Any, base_dir: Optional[Path | str] = None) -> IngestResult:
    """Read the text of a document from its file.

    Args:
        document: Object with a ``file_path`` attribute (ORM Document or result row)
        base_dir: Directory the stored path is relative to

    Returns:
        IngestResult.success(text) or IngestResult.failure(reason)
    """
    file_path = getattr(document, "file_path", None)
    if not file_path:
        return IngestResult.failure("document has no file_path")

    path = resolve_path(file_path, base_dir)
    try:
        text = read_text(path)
    except (OSError, ValueError) as e:
        logger.debug(f"Failed to read {path}: {e}")
        return IngestResult.failure(f"{type(e).__name__}: {e}")

    return IngestResult.success(text)

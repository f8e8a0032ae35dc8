"""
Add full_text to documents

Copies the content of each document's source file (file_path, relative to the
working directory) into the full_text column. Unreadable files are counted as
errors and the document is left unchanged.

Usage:
    python -m tagclusters.migrations.add_document_full_text
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import Text, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from tagclusters.core.config import DOCUMENT_PROGRESS_EVERY
from tagclusters.core.exceptions import FileReadError
from tagclusters.core.logging_config import configure_logging
from tagclusters.models.document import Document
from tagclusters.services.batch_updater import BatchUpdater
from tagclusters.services.schema import ensure_column
from tagclusters.services.text_ingestion import ingest

logger = logging.getLogger(__name__)


def write_full_text(session: Session, document: Any, text: str) -> None:
    """Store the ingested text of one document."""
    session.execute(update(Document).where(Document.id == document.id).values(full_text=text))


def run(engine: Engine, base_dir: Optional[Path | str] = None) -> Dict[str, Any]:
    """
    Ingest the source text of every document.

    Args:
        engine: Database engine
        base_dir: Directory file paths are relative to, defaults to the working directory

    Returns:
        Summary with total, success and error counts
    """
    ensure_column(engine, Document.__tablename__, "full_text", Text())

    def read_document(document: Any) -> str:
        result = ingest(document, base_dir=base_dir)
        if not result.ok:
            raise FileReadError(f"Failed to read {document.file_path}: {result.reason}", row_id=document.id)
        return result.text

    with Session(engine) as session:
        documents = session.execute(
            select(Document.id, Document.doc_id, Document.file_path)
        ).all()
        logger.info(f"Migrating {len(documents)} documents...")

        updater = BatchUpdater(
            session,
            batch_size=None,
            label="documents",
            log_every=DOCUMENT_PROGRESS_EVERY,
        )
        result = updater.run(documents, read_document, write_full_text)

    logger.info("✓ Migration complete!")
    logger.info(f"  Success: {result.updated} documents")
    logger.info(f"  Errors: {result.errors} documents")

    return {
        "total": result.total,
        "success": result.updated,
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


if __name__ == "__main__":
    main()

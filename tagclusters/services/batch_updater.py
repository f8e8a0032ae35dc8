"""Batched transactional updater with per-row fault isolation."""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.orm import Session

from tagclusters.core.config import BATCH_SIZE

logger = logging.getLogger(__name__)


class _Skip:
    """Sentinel returned by compute_value to leave a row untouched."""

    def __repr__(self) -> str:
        return "SKIP"


SKIP = _Skip()


@dataclass
class UpdateResult:
    """Counters reported at the end of a run."""

    total: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    commits: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "commits": self.commits,
        }


ComputeValue = Callable[[Any], Any]
WriteValue = Callable[[Session, Any, Any], None]


class BatchUpdater:
    """
    Rewrites a derived value on every row of a result set.

    Work runs inside an explicit transaction that is committed after every
    ``batch_size`` successful updates and once more after the last row. Each
    write runs in its own SAVEPOINT, so a failing row is rolled back alone and
    the batch it belongs to still commits.
    """

    def __init__(
        self,
        session: Session,
        batch_size: Optional[int] = BATCH_SIZE,
        label: str = "rows",
        log_every: Optional[int] = None,
    ):
        """Initialize the updater.

        Args:
            session: Session used for every write
            batch_size: Successful updates per commit, None commits once at the end
            label: Row kind used in log messages (e.g. "triples")
            log_every: Progress log interval in updates, defaults to batch_size
        """
        if batch_size is not None and batch_size < 1:
            raise ValueError(f"batch_size must be positive or None, got {batch_size}")
        self.session = session
        self.batch_size = batch_size
        self.label = label
        self.log_every = log_every or batch_size

    def run(
        self,
        rows: Iterable[Any],
        compute_value: ComputeValue,
        write_value: WriteValue,
        total: Optional[int] = None,
    ) -> UpdateResult:
        """Compute and write the derived value for every row.

        Args:
            rows: Rows in the order they should be processed; each needs an ``id``
            compute_value: Returns the new value for a row, or SKIP
            write_value: Persists the value for a row using the given session
            total: Expected row count for progress messages, when known

        Returns:
            UpdateResult with total, updated, skipped, errors and commits
        """
        result = UpdateResult()
        if total is None and hasattr(rows, "__len__"):
            total = len(rows)
        of_total = f"/{total}" if total is not None else ""

        self._begin()

        for row in rows:
            result.total += 1
            row_id = getattr(row, "id", None)

            try:
                value = compute_value(row)
                if value is SKIP:
                    result.skipped += 1
                    continue
                with self.session.begin_nested():
                    write_value(self.session, row, value)
            except Exception as e:
                result.errors += 1
                logger.error(f"✗ Error processing {self.label} {row_id}: {e}")
                continue

            result.updated += 1

            if self.batch_size and result.updated % self.batch_size == 0:
                self._commit(result)
                self._begin()

            if self.log_every and result.updated % self.log_every == 0:
                logger.info(f"  Updated {result.updated}{of_total} {self.label}...")

        self._commit(result)
        return result

    def _begin(self) -> None:
        if not self.session.in_transaction():
            self.session.begin()

    def _commit(self, result: UpdateResult) -> None:
        self.session.commit()
        result.commits += 1

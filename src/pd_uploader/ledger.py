"""Persistent hash ledger for content-based duplicate detection.

The ledger is a headerless two-column CSV file of ``path,digest`` rows.
It is append-only: rows are never rewritten or removed by this module, and
neither column is unique. The same digest appears once per path it was
uploaded under; the same path appears once per upload of that path.

Duplicate detection keys on the digest alone and scans every raw row
(multiset semantics). ``load_all`` offers a path-keyed view in which the
last row for a path wins; it is informational and never used to decide
whether content was already sent.

There is no locking. Two processes appending to the same ledger can
interleave rows; callers are expected to run one writer per ledger file.
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Set, Union

from .errors import LedgerError
from .hashing import compute_file_digest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerEntry:
    """One persisted ``(path, digest)`` row."""

    path: str
    digest: str


class HashLedger:
    """CSV-backed store of previously uploaded file digests.

    The ledger location is resolved by the caller (see
    ``env_manager.resolve_ledger_path``) and never looked up here. Every query
    re-reads the whole file so that appends made by earlier runs, or by
    earlier files of the same batch, are always visible.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize ledger at the given location.

        Args:
            path: Path to the ledger CSV file (created lazily)
        """
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"HashLedger({str(self.path)!r})"

    def ensure_exists(self) -> None:
        """Create an empty ledger file if none exists.

        Idempotent: an existing ledger is left untouched.

        Raises:
            LedgerError: If the file or its parent directory cannot be created
        """
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()
        except OSError as e:
            raise LedgerError(self.path, f"cannot create: {e}") from e
        logger.debug("Created empty hash ledger at %s", self.path)

    def entries(self) -> List[LedgerEntry]:
        """Read every row of the ledger in file order.

        A ledger that does not exist yet reads as empty; reading never
        creates it.

        Returns:
            List of ledger entries, duplicates included

        Raises:
            LedgerError: If the ledger cannot be read or a row is malformed
        """
        if not self.path.exists():
            return []
        rows: List[LedgerEntry] = []
        try:
            with self.path.open(newline="", encoding="utf-8") as f:
                for lineno, row in enumerate(csv.reader(f), start=1):
                    if not row:
                        continue
                    if len(row) != 2:
                        raise LedgerError(
                            self.path,
                            f"line {lineno}: expected 2 columns, got {len(row)}",
                        )
                    rows.append(LedgerEntry(path=row[0], digest=row[1]))
        except OSError as e:
            raise LedgerError(self.path, f"cannot read: {e}") from e
        except csv.Error as e:
            raise LedgerError(self.path, f"malformed CSV: {e}") from e
        return rows

    def load_all(self) -> Dict[str, str]:
        """Load the ledger as a path -> digest mapping.

        A path that was appended more than once maps to its last digest.
        """
        return {entry.path: entry.digest for entry in self.entries()}

    def digests(self) -> Set[str]:
        """Return the set of every digest recorded under any path."""
        return {entry.digest for entry in self.entries()}

    def contains_digest(self, digest: str) -> bool:
        """Check whether a digest was recorded under any path.

        Args:
            digest: 64-character lowercase hex digest

        Returns:
            True if any ledger row carries this digest
        """
        return any(entry.digest == digest for entry in self.entries())

    def is_duplicate(self, file_path: Union[str, Path]) -> bool:
        """Check whether the content at ``file_path`` was already recorded.

        This is a content check, not a path check: the same bytes recorded
        under another name still count as a duplicate.

        Args:
            file_path: File whose content should be checked

        Returns:
            True if the file's digest is already in the ledger

        Raises:
            OSError: If the file cannot be read
            LedgerError: If the ledger cannot be read
        """
        digest = compute_file_digest(file_path)
        return self.contains_digest(digest)

    def append(self, file_path: Union[str, Path], digest: str) -> None:
        """Append one ``(path, digest)`` row.

        No duplicate check is made; callers decide whether to record.

        Raises:
            LedgerError: If the row cannot be written
        """
        self.ensure_exists()
        try:
            with self.path.open("a", newline="", encoding="utf-8") as f:
                csv.writer(f, lineterminator="\n").writerow([str(file_path), digest])
        except OSError as e:
            raise LedgerError(self.path, f"cannot append: {e}") from e
        logger.debug("Ledger %s += %s %s", self.path, digest[:12], file_path)

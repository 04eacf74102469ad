# src/ragindex/stores/base.py
"""Abstract base class for vector storage."""

from abc import ABC, abstractmethod

from ragindex.exceptions import DimensionMismatchError
from ragindex.models import HealthStatus, ScoredRecord, VectorRecord


def check_dimensions(records: list[VectorRecord], expected: int | None) -> int | None:
    """Validate a batch against the collection's dimensionality.

    Returns the dimensionality the collection has after the batch is applied.

    Raises:
        DimensionMismatchError: If any embedding length differs from ``expected``,
            or (for an empty collection) from the first record of the batch.
    """
    if not records:
        return expected
    dimension = expected if expected is not None else len(records[0].embedding)
    for record in records:
        if len(record.embedding) != dimension:
            raise DimensionMismatchError(dimension, len(record.embedding), record.id)
    return dimension


def check_source(records: list[VectorRecord], source_id: str) -> None:
    """Raise ValueError if any record belongs to a source other than ``source_id``."""
    for record in records:
        if record.source_id != source_id:
            raise ValueError(
                f"Record '{record.id}' belongs to '{record.source_id}', not '{source_id}'"
            )


class VectorStore(ABC):
    """Abstract base class for a single collection of embedded chunks.

    Both backends implement identical semantics: upsert by id, idempotent
    collection deletion, and cosine-similarity queries ordered by similarity
    descending (ties keep insertion order), truncated to ``top_k`` and limited
    to similarities strictly above ``threshold``.
    """

    backend: str = "abstract"

    @abstractmethod
    def add_documents(self, records: list[VectorRecord]) -> None:
        """Upsert records by id.

        An existing id keeps its creation time and position, and gets the new
        text, embedding and metadata with a bumped update time.

        Raises:
            DimensionMismatchError: If any embedding length disagrees with the
                collection. Nothing from the batch is written.
        """
        ...

    @abstractmethod
    def replace_source(self, source_id: str, records: list[VectorRecord]) -> int:
        """Make ``records`` the only records of a source.

        The new records are upserted and the source's records whose ids are
        not in ``records`` are deleted, so a query never sees chunks from two
        indexing runs of the same source. An empty ``records`` removes the
        source. If the write fails, the source's previous records are kept.

        Returns:
            Number of previous records of the source that were removed.

        Raises:
            ValueError: If a record belongs to another source.
            DimensionMismatchError: If any embedding length disagrees with the
                collection. Nothing is written.
        """
        ...

    @abstractmethod
    def delete_collection(self) -> None:
        """Remove every record. Deleting an empty collection is a no-op."""
        ...

    @abstractmethod
    def query(
        self, query_embedding: list[float], top_k: int, threshold: float = 0.0
    ) -> list[ScoredRecord]:
        """Return up to top_k records with similarity > threshold, best first."""
        ...

    @abstractmethod
    def delete_by_source(self, source_id: str) -> int:
        """Delete all records of a source. Returns how many were removed."""
        ...

    @abstractmethod
    def get(self, record_id: str) -> VectorRecord | None:
        """Retrieve a record by id. Returns None if not found."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Count the records in the collection."""
        ...

    @abstractmethod
    def list_sources(self) -> list[str]:
        """List all unique source ids in the collection."""
        ...

    @property
    @abstractmethod
    def dimension(self) -> int | None:
        """Embedding length established by the collection, None while empty."""
        ...

    def health_check(self) -> HealthStatus:
        """Check that the backend answers and report its record count."""
        try:
            record_count = self.count()
        except Exception as e:
            return HealthStatus(backend=self.backend, connected=False, error=str(e))
        return HealthStatus(backend=self.backend, connected=True, record_count=record_count)

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""

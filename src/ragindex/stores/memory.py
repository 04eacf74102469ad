# src/ragindex/stores/memory.py
"""In-process vector store with exact cosine similarity."""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import numpy as np

from ragindex.exceptions import DimensionMismatchError, StoreUnavailableError
from ragindex.models import ScoredRecord, VectorRecord
from ragindex.models.record import utcnow
from ragindex.stores.base import VectorStore, check_dimensions, check_source

logger = logging.getLogger(__name__)


def cosine_similarities(query: list[float], matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of ``query`` against each row of ``matrix``.

    Zero vectors have no direction, so their similarity is 0.0.
    """
    q = np.asarray(query, dtype=np.float64)
    q_norm = np.linalg.norm(q)
    row_norms = np.linalg.norm(matrix, axis=1)
    denominators = row_norms * q_norm

    dots = matrix @ q
    similarities = np.zeros(len(matrix), dtype=np.float64)
    nonzero = denominators > 0
    similarities[nonzero] = dots[nonzero] / denominators[nonzero]
    return similarities


class InMemoryVectorStore(VectorStore):
    """Vector store that keeps the collection in process memory.

    Queries are an exact linear scan over all stored vectors, O(n) per query,
    which is fine for a few thousand chunks.

    Every mutation builds a new generation of the collection and swaps it in
    with a single assignment. Concurrent readers therefore see either the old
    or the new generation, never a half-applied upsert or reset.

    When ``persist_path`` is set, the collection is loaded from that JSON file
    on construction and rewritten after every mutation.
    """

    backend = "memory"

    def __init__(self, persist_path: str | None = None) -> None:
        """Initialize the store.

        Args:
            persist_path: Optional JSON file used to persist the collection.
        """
        self.persist_path = persist_path
        self._records: dict[str, VectorRecord] = {}
        if persist_path is not None:
            self._records = self._load(Path(persist_path))

    @staticmethod
    def _load(path: Path) -> dict[str, VectorRecord]:
        if not path.exists():
            return {}
        with open(path, encoding="utf-8") as f:
            rows = json.load(f)
        records = [VectorRecord.model_validate(row) for row in rows]
        check_dimensions(records, None)
        logger.info("Loaded %d records from %s", len(records), path)
        return {record.id: record for record in records}

    @contextmanager
    def _unavailable(self, action: str) -> Iterator[None]:
        """Translate persist file errors into StoreUnavailableError."""
        try:
            yield
        except OSError as e:
            raise StoreUnavailableError(
                f"Could not {action} persist file '{self.persist_path}': {e}",
                backend=self.backend,
            ) from e

    def _save(self, records: dict[str, VectorRecord]) -> None:
        if self.persist_path is None:
            return
        path = Path(self.persist_path)
        with self._unavailable("write"):
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump([r.model_dump(mode="json") for r in records.values()], f)
            tmp_path.replace(path)

    def _commit(self, records: dict[str, VectorRecord]) -> None:
        # Persist first so a failed write leaves the visible generation unchanged
        self._save(records)
        self._records = records

    @staticmethod
    def _upsert_into(target: dict[str, VectorRecord], records: list[VectorRecord]) -> None:
        now = utcnow()
        for record in records:
            existing = target.get(record.id)
            if existing is None:
                target[record.id] = record.model_copy(
                    update={"created_at": now, "updated_at": now}, deep=True
                )
            else:
                # Reassigning an existing key keeps its insertion position
                target[record.id] = record.model_copy(
                    update={"created_at": existing.created_at, "updated_at": now}, deep=True
                )

    @property
    def dimension(self) -> int | None:
        records = self._records
        if not records:
            return None
        return len(next(iter(records.values())).embedding)

    def add_documents(self, records: list[VectorRecord]) -> None:
        """Upsert records; the whole batch becomes visible at once."""
        if not records:
            return

        check_dimensions(records, self.dimension)
        updated = dict(self._records)
        self._upsert_into(updated, records)
        self._commit(updated)
        logger.debug("Upserted %d records (%d total)", len(records), len(updated))

    def replace_source(self, source_id: str, records: list[VectorRecord]) -> int:
        """Swap in the source's new records and drop its stale ones in one assignment."""
        check_source(records, source_id)
        check_dimensions(records, self.dimension)

        current = self._records
        new_ids = {record.id for record in records}
        updated = {
            rid: r for rid, r in current.items() if r.source_id != source_id or rid in new_ids
        }
        removed = len(current) - len(updated)
        if not records and not removed:
            return 0

        self._upsert_into(updated, records)
        self._commit(updated)
        logger.debug(
            "Replaced source '%s': wrote %d records, removed %d", source_id, len(records), removed
        )
        return removed

    def delete_collection(self) -> None:
        """Swap in an empty collection and remove the persisted file."""
        self._records = {}
        if self.persist_path is not None:
            with self._unavailable("delete"):
                Path(self.persist_path).unlink(missing_ok=True)
        logger.info("Deleted in-memory collection")

    def query(
        self, query_embedding: list[float], top_k: int, threshold: float = 0.0
    ) -> list[ScoredRecord]:
        """Rank every stored record by cosine similarity to the query."""
        records = list(self._records.values())
        if not records or top_k <= 0:
            return []

        dimension = len(records[0].embedding)
        if len(query_embedding) != dimension:
            raise DimensionMismatchError(dimension, len(query_embedding))

        matrix = np.asarray([r.embedding for r in records], dtype=np.float64)
        similarities = cosine_similarities(query_embedding, matrix)

        # Stable sort keeps insertion order among equal similarities
        order = np.argsort(-similarities, kind="stable")

        results: list[ScoredRecord] = []
        for idx in order:
            similarity = float(similarities[idx])
            if similarity <= threshold:
                break
            results.append(
                ScoredRecord(record=records[idx].model_copy(deep=True), similarity=similarity)
            )
            if len(results) == top_k:
                break
        return results

    def delete_by_source(self, source_id: str) -> int:
        current = self._records
        remaining = {rid: r for rid, r in current.items() if r.source_id != source_id}
        removed = len(current) - len(remaining)
        if removed:
            self._commit(remaining)
        return removed

    def get(self, record_id: str) -> VectorRecord | None:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    def count(self) -> int:
        return len(self._records)

    def list_sources(self) -> list[str]:
        return list(dict.fromkeys(r.source_id for r in self._records.values()))

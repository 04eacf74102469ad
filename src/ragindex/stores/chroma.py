# src/ragindex/stores/chroma.py
"""ChromaDB vector store implementation."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, TypedDict

import chromadb

from ragindex.exceptions import DimensionMismatchError, RagIndexError, StoreUnavailableError
from ragindex.models import ChunkMetadata, ScoredRecord, VectorRecord
from ragindex.models.record import utcnow
from ragindex.stores.base import VectorStore, check_dimensions, check_source

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "content_chunks"
DEFAULT_UPSERT_BATCH_SIZE = 100
QUERY_TIE_MARGIN = 8


class MatchRow(TypedDict):
    """One row returned by ChromaVectorStore.match_chunks."""

    id: str
    source_file: str
    chunk_index: int
    content: str
    metadata: dict[str, Any]
    similarity: float
    embedding: list[float]


class ChromaVectorStore(VectorStore):
    """ChromaDB-based vector store.

    Records are stored flat: the chunk text is the Chroma document and the
    metadata carries source id, chunk index, total chunks, ISO timestamps and a
    ``seq`` insertion counter. Ranking is done by ChromaDB's cosine HNSW index
    (similarity = 1 - cosine distance); ``seq`` breaks ties so that equal
    similarities keep insertion order.
    """

    backend = "chroma"

    def __init__(
        self,
        persist_dir: str | None = None,
        collection_name: str = DEFAULT_COLLECTION_NAME,
        host: str | None = None,
        port: int = 8000,
        upsert_batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
    ) -> None:
        """Initialize the ChromaDB store.

        Args:
            persist_dir: Directory for an embedded persistent client
            collection_name: Name of the collection holding the chunks
            host: Chroma server host; when set an HTTP client is used instead
            port: Chroma server port
            upsert_batch_size: Rows written per upsert request

        Raises:
            StoreUnavailableError: If the client or collection cannot be opened.
        """
        if persist_dir is None and host is None:
            raise ValueError("ChromaVectorStore needs either persist_dir or host")
        if upsert_batch_size < 1:
            raise ValueError(f"upsert_batch_size must be at least 1, got {upsert_batch_size}")

        self.collection_name = collection_name
        self.upsert_batch_size = upsert_batch_size

        with self._unavailable("connect"):
            if host is not None:
                self._client = chromadb.HttpClient(host=host, port=port)
            else:
                Path(persist_dir).mkdir(parents=True, exist_ok=True)  # type: ignore[arg-type]
                self._client = chromadb.PersistentClient(path=persist_dir)  # type: ignore[arg-type]
            self._collection = self._open_collection()
            self._next_seq = self._max_seq() + 1

    @contextmanager
    def _unavailable(self, action: str) -> Iterator[None]:
        """Translate backend failures into StoreUnavailableError."""
        try:
            yield
        except RagIndexError:
            raise
        except Exception as e:
            raise StoreUnavailableError(
                f"ChromaDB {action} failed for collection '{self.collection_name}': {e}",
                backend=self.backend,
            ) from e

    def _open_collection(self) -> Any:
        return self._client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def _max_seq(self) -> int:
        if self._collection.count() == 0:
            return -1
        results = self._collection.get(include=["metadatas"])
        return max(int(meta.get("seq", -1)) for meta in results["metadatas"] or [])

    def close(self) -> None:
        """Close the store and release resources.

        ChromaDB doesn't have an official close method, so we call the internal
        _system.stop() to release file handles.

        See: https://github.com/chroma-core/chroma/issues/5868
        """
        self._collection = None
        client, self._client = self._client, None
        if client is not None and hasattr(client, "_system"):
            try:
                client._system.stop()
            except Exception as e:
                logger.debug("Ignoring error while stopping ChromaDB client: %s", e)

    @property
    def dimension(self) -> int | None:
        with self._unavailable("read"):
            results = self._collection.get(limit=1, include=["embeddings"])
        embeddings = results.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        return len(embeddings[0])

    def _previous_rows(self, ids: list[str]) -> dict[str, dict[str, Any]]:
        """Current rows for ``ids``, keyed by id, for restoring after a failed write."""
        existing = self._collection.get(ids=ids, include=["documents", "metadatas", "embeddings"])
        found = existing.get("ids") or []
        documents = existing.get("documents") or [None] * len(found)
        metadatas = existing.get("metadatas") or [{}] * len(found)
        embeddings = existing.get("embeddings")
        if embeddings is None:
            embeddings = [[]] * len(found)
        return {
            rid: {
                "document": doc,
                "metadata": meta,
                "embedding": [float(x) for x in emb],
            }
            for rid, doc, meta, emb in zip(found, documents, metadatas, embeddings, strict=True)
        }

    def _metadatas(
        self, batch: list[VectorRecord], previous: dict[str, dict[str, Any]]
    ) -> list[dict[str, Any]]:
        now = utcnow().isoformat()
        metadatas: list[dict[str, Any]] = []
        for record in batch:
            prior = previous.get(record.id)
            if prior is None:
                created_at, seq = now, self._next_seq
                self._next_seq += 1
            else:
                meta = prior["metadata"]
                created_at, seq = str(meta["created_at"]), int(meta["seq"])
            metadatas.append(
                {
                    "source_id": record.metadata.source_id,
                    "chunk_index": record.metadata.chunk_index,
                    "total_chunks": record.metadata.total_chunks,
                    "created_at": created_at,
                    "updated_at": now,
                    "seq": seq,
                }
            )
        return metadatas

    def _rollback(self, written: list[str], previous: dict[str, dict[str, Any]]) -> None:
        """Undo the slices of a failed upsert: drop new rows and restore overwritten ones."""
        inserted = [rid for rid in written if rid not in previous]
        restored = [rid for rid in written if rid in previous]
        try:
            if inserted:
                self._collection.delete(ids=inserted)
            if restored:
                self._collection.upsert(
                    ids=restored,
                    embeddings=[previous[rid]["embedding"] for rid in restored],
                    documents=[previous[rid]["document"] for rid in restored],
                    metadatas=[previous[rid]["metadata"] for rid in restored],
                )
        except Exception as e:
            logger.error(
                "Rollback of %d rows in '%s' failed: %s", len(written), self.collection_name, e
            )

    def _upsert(self, records: list[VectorRecord]) -> None:
        """Upsert records in slices; a failed slice rolls back the earlier ones."""
        # Later duplicates within one batch win, as with repeated upserts
        batch = list({record.id: record for record in records}.values())

        with self._unavailable("upsert"):
            previous = self._previous_rows([r.id for r in batch])
            metadatas = self._metadatas(batch, previous)

            written: list[str] = []
            try:
                for start in range(0, len(batch), self.upsert_batch_size):
                    end = start + self.upsert_batch_size
                    ids = [r.id for r in batch[start:end]]
                    written.extend(ids)
                    self._collection.upsert(
                        ids=ids,
                        embeddings=[r.embedding for r in batch[start:end]],  # type: ignore[arg-type]
                        documents=[r.text for r in batch[start:end]],
                        metadatas=metadatas[start:end],  # type: ignore[arg-type]
                    )
            except Exception:
                self._rollback(written, previous)
                raise
        logger.debug("Upserted %d records into '%s'", len(batch), self.collection_name)

    def add_documents(self, records: list[VectorRecord]) -> None:
        """Upsert records in slices of upsert_batch_size rows.

        If a slice fails, the rows written by earlier slices are rolled back.
        """
        if not records:
            return
        check_dimensions(records, self.dimension)
        self._upsert(records)

    def replace_source(self, source_id: str, records: list[VectorRecord]) -> int:
        """Upsert the source's new records, then delete its stale rows."""
        check_source(records, source_id)
        check_dimensions(records, self.dimension)

        with self._unavailable("read"):
            old_ids = self._collection.get(where={"source_id": source_id}, include=[])["ids"]

        if records:
            self._upsert(records)

        new_ids = {record.id for record in records}
        stale = [rid for rid in old_ids if rid not in new_ids]
        if stale:
            with self._unavailable("delete"):
                self._collection.delete(ids=stale)
        logger.debug(
            "Replaced source '%s': wrote %d records, removed %d",
            source_id,
            len(records),
            len(stale),
        )
        return len(stale)

    def delete_collection(self) -> None:
        """Drop and recreate the collection."""
        with self._unavailable("delete"):
            # get_or_create first so deleting a missing collection is a no-op
            self._client.get_or_create_collection(name=self.collection_name)
            self._client.delete_collection(name=self.collection_name)
            self._collection = self._open_collection()
        self._next_seq = 0
        logger.info("Deleted ChromaDB collection '%s'", self.collection_name)

    def _nearest(self, query_embedding: list[float], match_count: int, total: int) -> tuple:
        """Query the nearest rows, widening until no tie can cross the cut-off.

        HNSW returns rows by distance only, so rows tied with the last wanted
        row may sit beyond ``n_results``. The window doubles while its farthest
        row is still as close as the ``match_count``-th row.
        """
        n_results = min(total, match_count + QUERY_TIE_MARGIN)
        while True:
            results = self._collection.query(
                query_embeddings=[query_embedding],  # type: ignore[arg-type]
                n_results=n_results,
                include=["documents", "metadatas", "distances", "embeddings"],
            )
            distances = results["distances"][0]  # type: ignore[index]
            if (
                n_results >= total
                or len(distances) < n_results
                or distances[-1] > distances[min(match_count, len(distances)) - 1]
            ):
                break
            n_results = min(total, n_results * 2)

        return (
            results["ids"][0],
            results["documents"][0],  # type: ignore[index]
            results["metadatas"][0],  # type: ignore[index]
            distances,
            results["embeddings"][0],  # type: ignore[index]
        )

    def match_chunks(
        self, query_embedding: list[float], match_threshold: float, match_count: int
    ) -> list[MatchRow]:
        """Find chunks similar to the query embedding.

        Returns at most ``match_count`` rows with similarity strictly above
        ``match_threshold``, ordered by similarity descending and then by
        insertion order.
        """
        with self._unavailable("query"):
            total = self._collection.count()
            if total == 0 or match_count <= 0:
                return []

            dimension = self.dimension
            if dimension is not None and len(query_embedding) != dimension:
                raise DimensionMismatchError(dimension, len(query_embedding))

            results = self._nearest(query_embedding, match_count, total)

        ids, documents, metadatas, distances, embeddings = results

        rows: list[MatchRow] = []
        for rid, doc, meta, dist, emb in zip(
            ids, documents, metadatas, distances, embeddings, strict=True
        ):
            similarity = 1.0 - float(dist)
            if similarity <= match_threshold:
                continue
            rows.append(
                MatchRow(
                    id=rid,
                    source_file=str(meta["source_id"]),
                    chunk_index=int(meta["chunk_index"]),
                    content=doc or "",
                    metadata=dict(meta),
                    similarity=similarity,
                    embedding=[float(x) for x in emb],
                )
            )

        rows.sort(key=lambda row: (-row["similarity"], int(row["metadata"]["seq"])))
        return rows[:match_count]

    def query(
        self, query_embedding: list[float], top_k: int, threshold: float = 0.0
    ) -> list[ScoredRecord]:
        return [
            ScoredRecord(record=self._row_to_record(row), similarity=row["similarity"])
            for row in self.match_chunks(query_embedding, threshold, top_k)
        ]

    @staticmethod
    def _row_to_record(row: MatchRow) -> VectorRecord:
        meta = row["metadata"]
        return VectorRecord(
            id=row["id"],
            text=row["content"],
            embedding=row["embedding"],
            metadata=ChunkMetadata(
                source_id=row["source_file"],
                chunk_index=row["chunk_index"],
                total_chunks=int(meta["total_chunks"]),
            ),
            created_at=datetime.fromisoformat(str(meta["created_at"])),
            updated_at=datetime.fromisoformat(str(meta["updated_at"])),
        )

    def delete_by_source(self, source_id: str) -> int:
        with self._unavailable("delete"):
            ids = self._collection.get(where={"source_id": source_id}, include=[])["ids"]
            if ids:
                self._collection.delete(ids=ids)
        return len(ids)

    def get(self, record_id: str) -> VectorRecord | None:
        with self._unavailable("read"):
            results = self._collection.get(
                ids=[record_id], include=["documents", "metadatas", "embeddings"]
            )
        if not results["ids"]:
            return None
        meta = results["metadatas"][0]  # type: ignore[index]
        return self._row_to_record(
            MatchRow(
                id=results["ids"][0],
                source_file=str(meta["source_id"]),
                chunk_index=int(meta["chunk_index"]),
                content=results["documents"][0] or "",  # type: ignore[index]
                metadata=dict(meta),
                similarity=1.0,
                embedding=[float(x) for x in results["embeddings"][0]],  # type: ignore[index]
            )
        )

    def count(self) -> int:
        with self._unavailable("count"):
            return self._collection.count()

    def list_sources(self) -> list[str]:
        with self._unavailable("read"):
            if self._collection.count() == 0:
                return []
            results = self._collection.get(include=["metadatas"])
        metadatas = sorted(results["metadatas"] or [], key=lambda meta: int(meta["seq"]))
        return list(dict.fromkeys(str(meta["source_id"]) for meta in metadatas))

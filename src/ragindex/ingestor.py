"""Indexing pipeline for ragindex."""

import logging
from collections.abc import Callable

from ragindex.chunker import Chunker
from ragindex.embedder import Embedder
from ragindex.exceptions import EmbeddingProviderError, RagIndexError
from ragindex.models import Chunk, Document, IndexFailure, IndexReport, VectorRecord
from ragindex.stores import VectorStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int, str], None]
"""Callback for indexing progress updates.

Args:
    event: Event type: "chunking", "embedding", "storing" or "document"
    current: Current progress count (0 to total)
    total: Total items to process
    message: Human-readable status message

Example:
    def on_progress(event: str, current: int, total: int, message: str) -> None:
        print(f"[{event}] {current}/{total}: {message}")
"""


def _check_unique(documents: list[Document]) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for document in documents:
        if document.source_id in seen and document.source_id not in duplicates:
            duplicates.append(document.source_id)
        seen.add(document.source_id)
    if duplicates:
        raise ValueError(f"Duplicate source ids in one indexing run: {', '.join(duplicates)}")


class Ingestor:
    """Orchestrates the indexing pipeline.

    Pipeline, per document:
    1. Strip markup and split into overlapping word chunks
    2. Embed every chunk text in one embed_batch call
    3. Replace the source's records in the VectorStore with the new chunks

    A document is the unit of atomicity: either all of its chunks replace the
    previous ones or the previous ones stay. Chunks left over from a longer
    earlier version of the document are deleted in the same step.
    """

    def __init__(self, chunker: Chunker, embedder: Embedder, store: VectorStore) -> None:
        self.chunker = chunker
        self.embedder = embedder
        self.store = store

    def _chunk(self, document: Document, progress: ProgressCallback) -> list[Chunk]:
        progress("chunking", 0, 1, f"Chunking {document.source_id}...")
        chunks = self.chunker.chunk_document(document)
        progress("chunking", 1, 1, f"Created {len(chunks)} chunks")
        return chunks

    @staticmethod
    def _records(chunks: list[Chunk], embeddings: list[list[float]]) -> list[VectorRecord]:
        return [
            VectorRecord.from_chunk(chunk.with_embedding(embedding))
            for chunk, embedding in zip(chunks, embeddings, strict=True)
        ]

    def _store(
        self, source_id: str, records: list[VectorRecord], progress: ProgressCallback
    ) -> int:
        if not records:
            # A document without text still clears its earlier chunks
            self.store.replace_source(source_id, [])
            return 0
        progress("storing", 0, 1, f"Storing {len(records)} chunks...")
        self.store.replace_source(source_id, records)
        progress("storing", 1, 1, "Storing complete")
        return len(records)

    @staticmethod
    def _progress(on_progress: ProgressCallback | None) -> ProgressCallback:
        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        return progress

    def embed_document(
        self, document: Document, on_progress: ProgressCallback | None = None
    ) -> list[VectorRecord]:
        """Chunk and embed a document without writing anything.

        Raises:
            EmbeddingProviderError: If embedding fails; ``source_id`` is set.
        """
        progress = self._progress(on_progress)
        chunks = self._chunk(document, progress)
        if not chunks:
            return []

        progress("embedding", 0, 1, f"Embedding {len(chunks)} chunks...")
        try:
            embeddings = self.embedder.embed_batch([chunk.text for chunk in chunks])
        except EmbeddingProviderError as e:
            e.source_id = document.source_id
            raise
        progress("embedding", 1, 1, "Embedding complete")
        return self._records(chunks, embeddings)

    async def aembed_document(
        self, document: Document, on_progress: ProgressCallback | None = None
    ) -> list[VectorRecord]:
        """Async variant of embed_document."""
        progress = self._progress(on_progress)
        chunks = self._chunk(document, progress)
        if not chunks:
            return []

        progress("embedding", 0, 1, f"Embedding {len(chunks)} chunks...")
        try:
            embeddings = await self.embedder.aembed_batch([chunk.text for chunk in chunks])
        except EmbeddingProviderError as e:
            e.source_id = document.source_id
            raise
        progress("embedding", 1, 1, "Embedding complete")
        return self._records(chunks, embeddings)

    def index_document(
        self, document: Document, on_progress: ProgressCallback | None = None
    ) -> int:
        """Chunk, embed and store a single document.

        Returns:
            Number of chunks written (0 for a document without text).

        Raises:
            EmbeddingProviderError: If embedding fails; ``source_id`` is set.
            DimensionMismatchError: If the embeddings disagree with the collection.
            StoreUnavailableError: If the store cannot be written.
        """
        records = self.embed_document(document, on_progress)
        return self._store(document.source_id, records, self._progress(on_progress))

    async def aindex_document(
        self, document: Document, on_progress: ProgressCallback | None = None
    ) -> int:
        """Chunk, embed and store a single document (async embedding)."""
        records = await self.aembed_document(document, on_progress)
        return self._store(document.source_id, records, self._progress(on_progress))

    def _record_failure(self, report: IndexReport, document: Document, exc: Exception) -> None:
        logger.warning("Failed to index '%s': %s", document.source_id, exc)
        report.failed.append(
            IndexFailure(
                source_id=document.source_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        )

    def index_documents(
        self, documents: list[Document], on_progress: ProgressCallback | None = None
    ) -> IndexReport:
        """Index documents one by one, continuing past per-document failures.

        Raises:
            ValueError: If two documents share a source id.
        """
        _check_unique(documents)
        progress = self._progress(on_progress)
        report = IndexReport()

        for i, document in enumerate(documents):
            try:
                report.indexed += self.index_document(document, on_progress)
                report.documents += 1
            except RagIndexError as e:
                self._record_failure(report, document, e)
            progress("document", i + 1, len(documents), f"Processed {document.source_id}")

        logger.info(
            "Indexed %d chunks from %d/%d documents",
            report.indexed,
            report.documents,
            len(documents),
        )
        return report

    async def aindex_documents(
        self, documents: list[Document], on_progress: ProgressCallback | None = None
    ) -> IndexReport:
        """Async variant of index_documents. Documents are processed in order."""
        _check_unique(documents)
        progress = self._progress(on_progress)
        report = IndexReport()

        for i, document in enumerate(documents):
            try:
                report.indexed += await self.aindex_document(document, on_progress)
                report.documents += 1
            except RagIndexError as e:
                self._record_failure(report, document, e)
            progress("document", i + 1, len(documents), f"Processed {document.source_id}")

        logger.info(
            "Indexed %d chunks from %d/%d documents",
            report.indexed,
            report.documents,
            len(documents),
        )
        return report

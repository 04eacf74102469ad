# src/ragindex/index.py
"""Central facade for ragindex."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ragindex.configuration import ProviderConfig, StorageConfig
    from ragindex.embedder import Embedder
    from ragindex.ingestor import ProgressCallback
    from ragindex.loaders import DirectoryLoader, LoaderRegistry
    from ragindex.stores import VectorStore

from ragindex.chunker import Chunker
from ragindex.ingestor import Ingestor
from ragindex.models import Document, HealthStatus, IndexReport, SearchResponse
from ragindex.retriever import Retriever
from ragindex.settings import Settings

logger = logging.getLogger(__name__)


class IndexState(str, Enum):
    """Lifecycle state of the collection behind a RagIndex."""

    EMPTY = "empty"
    INDEXING = "indexing"
    READY = "ready"


class RagIndex:
    """Index documents into a vector store and search them.

    RagIndex bundles the chunker, embedder and store so you can configure once
    and index/search from a single object. The storage backend is chosen at
    construction and never switched afterwards.

    There are two ways to create a RagIndex:

    1. With configuration objects:

        from ragindex import RagIndex, LiteLLMProvider, ChromaStorage

        index = RagIndex(
            provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
            storage=ChromaStorage(persist_dir="./data/chroma"),
        )

    2. With explicit components:

        from ragindex import RagIndex
        from ragindex.stores import InMemoryVectorStore

        index = RagIndex.from_components(embedder=my_embedder, store=InMemoryVectorStore())

    Indexing is not internally locked: callers serialize index()/reset() calls
    on one collection. Searches may run concurrently with each other.
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig | None = None,
        storage: StorageConfig | None = None,
        embedder: Embedder | None = None,
        store: VectorStore | None = None,
        settings: Settings | None = None,
        content_loader: DirectoryLoader | None = None,
        loader_registry: LoaderRegistry | None = None,
    ) -> None:
        """Create a RagIndex.

        Args:
            provider: Provider configuration (builds the embedder).
                      Mutually exclusive with ``embedder``.
            storage: Storage configuration (builds the store).
                     Mutually exclusive with ``store``.
            embedder: Explicit embedder.
            store: Explicit vector store.
            settings: Behavioral settings (chunk sizes, batch size, top-k, ...)
            content_loader: Resolves source ids to documents for reindex_source().
            loader_registry: Loader registry for index_directory(). If None, uses default.

        Raises:
            ValueError: If an embedder or store source is missing or given twice.
            ChunkingInputError: If the chunk size / overlap settings are invalid.
        """
        self._settings = settings if settings is not None else Settings()

        if (provider is None) == (embedder is None):
            raise ValueError("Provide exactly one of 'provider' or 'embedder'")
        if (storage is None) == (store is None):
            raise ValueError("Provide exactly one of 'storage' or 'store'")

        if embedder is None:
            embedder = provider.build_embedder(self._settings)  # type: ignore[union-attr]
        if store is None:
            store = storage.build_store()  # type: ignore[union-attr]

        self.embedder: Embedder = embedder
        self.store: VectorStore = store
        self.chunker = Chunker(self._settings.chunk_size, self._settings.chunk_overlap)
        self._content_loader = content_loader
        self._loader_registry = loader_registry

        self._ingestor = Ingestor(self.chunker, self.embedder, self.store)
        self._retriever = Retriever(
            self.embedder,
            self.store,
            default_k=self._settings.default_k,
            default_threshold=self._settings.similarity_threshold,
        )

        self.state = IndexState.READY if self.store.count() > 0 else IndexState.EMPTY

    @classmethod
    def from_components(
        cls,
        *,
        embedder: Embedder,
        store: VectorStore,
        settings: Settings | None = None,
        content_loader: DirectoryLoader | None = None,
        loader_registry: LoaderRegistry | None = None,
    ) -> RagIndex:
        """Create a RagIndex from an explicit embedder and store."""
        return cls(
            embedder=embedder,
            store=store,
            settings=settings,
            content_loader=content_loader,
            loader_registry=loader_registry,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def backend(self) -> str:
        return self.store.backend

    def _get_loader_registry(self) -> LoaderRegistry:
        """Get or create the loader registry."""
        if self._loader_registry is None:
            from ragindex.loaders import LoaderRegistry

            self._loader_registry = LoaderRegistry.default()
        return self._loader_registry

    def _settle(self) -> None:
        self.state = IndexState.READY if self.store.count() > 0 else IndexState.EMPTY

    def index(
        self, documents: list[Document], on_progress: ProgressCallback | None = None
    ) -> IndexReport:
        """Chunk, embed and store documents.

        Documents that fail are listed in the report; the others are indexed.

        Raises:
            ValueError: If two documents share a source id.
        """
        self.state = IndexState.INDEXING
        try:
            return self._ingestor.index_documents(documents, on_progress=on_progress)
        finally:
            self._settle()

    async def aindex(
        self, documents: list[Document], on_progress: ProgressCallback | None = None
    ) -> IndexReport:
        """Async variant of index(), with concurrent embedding sub-batches."""
        self.state = IndexState.INDEXING
        try:
            return await self._ingestor.aindex_documents(documents, on_progress=on_progress)
        finally:
            self._settle()

    def search(
        self, query: str, k: int | None = None, threshold: float | None = None
    ) -> SearchResponse:
        """Return the chunks most similar to ``query``.

        Args:
            query: Free-text query
            k: Number of results (default: settings.default_k)
            threshold: Minimum similarity, exclusive (default: settings.similarity_threshold)
        """
        if self.state is IndexState.EMPTY:
            logger.warning("Searching an empty collection; no results will be returned")
        return self._retriever.search(query, k=k, threshold=threshold)

    async def asearch(
        self, query: str, k: int | None = None, threshold: float | None = None
    ) -> SearchResponse:
        """Async variant of search()."""
        if self.state is IndexState.EMPTY:
            logger.warning("Searching an empty collection; no results will be returned")
        return await self._retriever.asearch(query, k=k, threshold=threshold)

    def reset(self) -> None:
        """Delete every record in the collection."""
        self.store.delete_collection()
        self.state = IndexState.EMPTY
        logger.info("Collection reset")

    def reindex_source(self, source_id: str, raw_text: str | None = None) -> int:
        """Replace the chunks of one source without touching the others.

        The new chunks are embedded first and then swapped in by the store's
        replace_source(), so an embedding or store failure leaves the previous
        chunks in place.

        Args:
            source_id: Source to re-index
            raw_text: New content. If None, the content loader resolves the source.

        Returns:
            Number of chunks written for the source.

        Raises:
            ValueError: If raw_text is None and no content loader is configured.
            FileNotFoundError: If the content loader has no file for the source.
        """
        if raw_text is None:
            if self._content_loader is None:
                raise ValueError(
                    f"Cannot re-index '{source_id}': no raw_text given and no content loader"
                )
            document = self._content_loader.load_source(source_id)
        else:
            document = Document(source_id=source_id, raw_text=raw_text)

        self.state = IndexState.INDEXING
        try:
            records = self._ingestor.embed_document(document)
            removed = self.store.replace_source(source_id, records)
        finally:
            self._settle()

        logger.info(
            "Re-indexed '%s': wrote %d chunks, removed %d stale", source_id, len(records), removed
        )
        return len(records)

    def index_directory(
        self,
        path: str,
        reset: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> IndexReport:
        """Load every supported file under ``path`` (or a single file) and index it.

        Args:
            path: Directory or file to index
            reset: Empty the collection first (full re-index)
            on_progress: Optional callback(event, current, total, message)

        Raises:
            FileNotFoundError: If path does not exist.
        """
        target = Path(path)
        if not target.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        registry = self._get_loader_registry()
        if target.is_dir():
            documents = registry.load_directory(str(target))
        else:
            documents = [registry.load(str(target))]

        if reset:
            self.reset()
        return self.index(documents, on_progress=on_progress)

    def count(self) -> int:
        return self.store.count()

    def list_sources(self) -> list[str]:
        return self.store.list_sources()

    def health_check(self) -> HealthStatus:
        return self.store.health_check()

    def close(self) -> None:
        self.store.close()

"""Retrieval pipeline for ragindex."""

import logging

from ragindex.embedder import Embedder
from ragindex.models import ScoredRecord, SearchResponse
from ragindex.stores import VectorStore

logger = logging.getLogger(__name__)


class Retriever:
    """Orchestrates the retrieval pipeline: embed the query, then rank."""

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        default_k: int = 5,
        default_threshold: float = 0.0,
    ) -> None:
        """Initialize the retriever.

        Args:
            embedder: Embedder for query embedding
            store: Vector store to rank against
            default_k: Default number of results to return
            default_threshold: Default minimum similarity (exclusive)
        """
        self.embedder = embedder
        self.store = store
        self.default_k = default_k
        self.default_threshold = default_threshold

    def _resolve(self, query: str, k: int | None, threshold: float | None) -> tuple[int, float]:
        if not query.strip():
            raise ValueError("Query text must not be empty")
        k = self.default_k if k is None else k
        threshold = self.default_threshold if threshold is None else threshold
        return k, threshold

    def _respond(self, query: str, results: list[ScoredRecord]) -> SearchResponse:
        logger.debug("Query returned %d results from %s", len(results), self.store.backend)
        return SearchResponse(query=query, results=results, backend=self.store.backend)

    def search(
        self, query: str, k: int | None = None, threshold: float | None = None
    ) -> SearchResponse:
        """Find the stored chunks most similar to a query.

        Args:
            query: Free-text query
            k: Number of results to return (default: self.default_k)
            threshold: Minimum similarity, exclusive (default: self.default_threshold)

        Returns:
            SearchResponse with results ordered by similarity descending

        Raises:
            ValueError: If the query is empty or whitespace only.
        """
        k, threshold = self._resolve(query, k, threshold)
        query_embedding = self.embedder.embed_text(query)
        return self._respond(query, self.store.query(query_embedding, k, threshold))

    async def asearch(
        self, query: str, k: int | None = None, threshold: float | None = None
    ) -> SearchResponse:
        """Async variant of search."""
        k, threshold = self._resolve(query, k, threshold)
        query_embedding = await self.embedder.aembed_text(query)
        return self._respond(query, self.store.query(query_embedding, k, threshold))

"""Tests for the Retriever pipeline."""

import pytest

from ragindex.chunker import Chunker
from ragindex.ingestor import Ingestor
from ragindex.models import Document, SearchResponse
from ragindex.retriever import Retriever


@pytest.fixture
def populated_store(keyword_embedder, memory_store):
    Ingestor(Chunker(chunk_size=20, overlap=5), keyword_embedder, memory_store).index_documents(
        [
            Document(source_id="greek", raw_text="alpha beta gamma"),
            Document(source_id="more", raw_text="delta epsilon"),
            Document(source_id="mixed", raw_text="alpha delta"),
        ]
    )
    return memory_store


class TestRetriever:
    def test_search_returns_response(self, keyword_embedder, populated_store):
        retriever = Retriever(keyword_embedder, populated_store)

        response = retriever.search("alpha")

        assert isinstance(response, SearchResponse)
        assert response.query == "alpha"
        assert response.backend == "memory"
        assert [r.record.source_id for r in response.results][:2] == ["mixed", "greek"]

    def test_results_ordered_descending(self, keyword_embedder, populated_store):
        response = Retriever(keyword_embedder, populated_store).search("alpha delta")
        similarities = [r.similarity for r in response.results]
        assert similarities == sorted(similarities, reverse=True)
        assert response.results[0].record.source_id == "mixed"

    def test_default_k(self, keyword_embedder, populated_store):
        response = Retriever(keyword_embedder, populated_store, default_k=1).search("alpha")
        assert len(response.results) == 1

    def test_explicit_k_overrides_default(self, keyword_embedder, populated_store):
        response = Retriever(keyword_embedder, populated_store, default_k=1).search("alpha", k=3)
        assert len(response.results) == 3

    def test_threshold(self, keyword_embedder, populated_store):
        response = Retriever(keyword_embedder, populated_store).search("alpha", threshold=0.6)
        assert all(r.similarity > 0.6 for r in response.results)
        assert "more" not in [r.record.source_id for r in response.results]

    def test_empty_store(self, keyword_embedder, memory_store):
        assert Retriever(keyword_embedder, memory_store).search("alpha").results == []

    @pytest.mark.parametrize("query", ["", "   ", "\n"])
    def test_empty_query_rejected(self, keyword_embedder, populated_store, query):
        with pytest.raises(ValueError, match="empty"):
            Retriever(keyword_embedder, populated_store).search(query)

    @pytest.mark.asyncio
    async def test_asearch(self, keyword_embedder, populated_store):
        retriever = Retriever(keyword_embedder, populated_store)

        sync_ids = [r.record.id for r in retriever.search("gamma").results]
        async_ids = [r.record.id for r in (await retriever.asearch("gamma")).results]

        assert async_ids == sync_ids

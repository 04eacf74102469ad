"""Tests for the RagIndex facade."""

import logging
import os

import pytest

from ragindex import RagIndex
from ragindex.configuration import LiteLLMProvider, MemoryStorage
from ragindex.embedder import ClientEmbedder
from ragindex.exceptions import (
    DimensionMismatchError,
    EmbeddingProviderError,
    StoreUnavailableError,
)
from ragindex.index import IndexState
from ragindex.loaders import DirectoryLoader
from ragindex.models import Document
from ragindex.settings import Settings


def text_of(n: int, words: list[str]) -> str:
    return " ".join(words[i % len(words)] for i in range(n))


@pytest.fixture
def index(keyword_embedder, memory_store):
    return RagIndex.from_components(embedder=keyword_embedder, store=memory_store)


def write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


class TestConstruction:
    def test_with_configuration_objects(self):
        index = RagIndex(
            provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
            storage=MemoryStorage(),
        )
        assert isinstance(index.embedder, ClientEmbedder)
        assert index.backend == "memory"

    def test_requires_embedder_source(self, memory_store):
        with pytest.raises(ValueError, match="provider"):
            RagIndex(store=memory_store)

    def test_rejects_two_embedder_sources(self, keyword_embedder, memory_store):
        with pytest.raises(ValueError, match="exactly one"):
            RagIndex(
                provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
                embedder=keyword_embedder,
                store=memory_store,
            )

    def test_rejects_two_store_sources(self, keyword_embedder, memory_store):
        with pytest.raises(ValueError, match="storage"):
            RagIndex(embedder=keyword_embedder, storage=MemoryStorage(), store=memory_store)

    def test_settings_drive_chunker(self, keyword_embedder, memory_store):
        index = RagIndex.from_components(
            embedder=keyword_embedder,
            store=memory_store,
            settings=Settings(chunk_size=40, chunk_overlap=10),
        )
        assert index.chunker.chunk_size == 40
        assert index.chunker.overlap == 10


class TestState:
    def test_starts_empty(self, index):
        assert index.state is IndexState.EMPTY

    def test_starts_ready_with_existing_records(self, keyword_embedder, memory_store, make_record):
        memory_store.add_documents([make_record("a", 0)])
        index = RagIndex.from_components(embedder=keyword_embedder, store=memory_store)
        assert index.state is IndexState.READY

    def test_ready_after_index(self, index):
        index.index([Document(source_id="a", raw_text="alpha beta")])
        assert index.state is IndexState.READY

    def test_indexing_state_visible_during_run(self, index):
        seen = []
        index.index(
            [Document(source_id="a", raw_text="alpha")],
            on_progress=lambda *args: seen.append(index.state),
        )
        assert seen and all(state is IndexState.INDEXING for state in seen)

    def test_empty_after_reset(self, index):
        index.index([Document(source_id="a", raw_text="alpha beta")])

        index.reset()

        assert index.state is IndexState.EMPTY
        assert index.count() == 0

    def test_stays_empty_when_every_document_fails(self, memory_store, make_fake_client):
        embedder = ClientEmbedder(make_fake_client(fail_on={0}))
        index = RagIndex.from_components(embedder=embedder, store=memory_store)

        report = index.index([Document(source_id="a", raw_text="alpha")])

        assert not report.ok
        assert index.state is IndexState.EMPTY

    def test_search_on_empty_collection_warns(self, index, caplog):
        with caplog.at_level(logging.WARNING, logger="ragindex.index"):
            response = index.search("alpha")

        assert response.results == []
        assert "empty collection" in caplog.text


class TestIndexAndSearch:
    def test_three_plus_two_chunks_query(self, index):
        report = index.index(
            [
                Document(source_id="greek", raw_text=text_of(700, ["alpha", "beta", "gamma"])),
                Document(source_id="other", raw_text=text_of(400, ["alpha", "delta"])),
            ]
        )
        assert report.indexed == 5

        stored = {
            f"{source}_chunk_{i}" for source, n in (("greek", 3), ("other", 2)) for i in range(n)
        }
        response = index.search("alpha gamma", k=4, threshold=0.2)

        assert 0 < len(response.results) <= 4
        assert all(r.similarity > 0.2 for r in response.results)
        assert {r.record.id for r in response.results} <= stored
        similarities = [r.similarity for r in response.results]
        assert similarities == sorted(similarities, reverse=True)

    def test_search_uses_settings_defaults(self, keyword_embedder, memory_store):
        index = RagIndex.from_components(
            embedder=keyword_embedder,
            store=memory_store,
            settings=Settings(default_k=1, similarity_threshold=0.5),
        )
        index.index(
            [
                Document(source_id="a", raw_text="alpha"),
                Document(source_id="b", raw_text="alpha beta"),
                Document(source_id="c", raw_text="theta"),
            ]
        )

        response = index.search("alpha")

        assert [r.record.source_id for r in response.results] == ["a"]
        assert response.backend == "memory"

    def test_duplicate_source_ids(self, index):
        with pytest.raises(ValueError):
            index.index(
                [Document(source_id="a", raw_text="x"), Document(source_id="a", raw_text="y")]
            )
        assert index.state is IndexState.EMPTY

    def test_works_with_chroma_backend(self, keyword_embedder, chroma_store):
        index = RagIndex.from_components(embedder=keyword_embedder, store=chroma_store)
        index.index(
            [
                Document(source_id="a", raw_text="alpha beta"),
                Document(source_id="b", raw_text="zeta eta"),
            ]
        )

        response = index.search("zeta")

        assert response.backend == "chroma"
        assert response.results[0].record.source_id == "b"

    @pytest.mark.asyncio
    async def test_async_index_and_search(self, index):
        report = await index.aindex([Document(source_id="a", raw_text="alpha beta")])
        response = await index.asearch("beta")

        assert report.ok
        assert index.state is IndexState.READY
        assert response.results[0].record.id == "a_chunk_0"


class TestReindexSource:
    def test_replaces_only_that_source(self, index):
        index.index(
            [
                Document(source_id="a", raw_text=text_of(700, ["alpha"])),
                Document(source_id="b", raw_text="beta"),
            ]
        )

        written = index.reindex_source("a", raw_text="gamma delta")

        assert written == 1
        assert index.count() == 2
        assert index.store.get("a_chunk_1") is None
        assert index.store.get("a_chunk_0").text == "gamma delta"
        assert index.store.get("b_chunk_0").text == "beta"

    def test_empty_text_removes_source(self, index):
        index.index([Document(source_id="a", raw_text="alpha")])

        assert index.reindex_source("a", raw_text="") == 0

        assert index.list_sources() == []
        assert index.state is IndexState.EMPTY

    def test_embedding_failure_keeps_old_chunks(self, memory_store, make_fake_client):
        embedder = ClientEmbedder(make_fake_client(fail_on={1}))
        index = RagIndex.from_components(embedder=embedder, store=memory_store)
        index.index([Document(source_id="a", raw_text="old text")])

        with pytest.raises(EmbeddingProviderError):
            index.reindex_source("a", raw_text="new text")

        assert memory_store.get("a_chunk_0").text == "old text"
        assert index.state is IndexState.READY

    def test_dimension_mismatch_keeps_old_chunks(self, index, memory_store, make_fake_client):
        index.index(
            [
                Document(source_id="a", raw_text="alpha"),
                Document(source_id="b", raw_text="beta"),
            ]
        )
        narrow = RagIndex.from_components(
            embedder=ClientEmbedder(make_fake_client(dimension=2)), store=memory_store
        )

        with pytest.raises(DimensionMismatchError):
            narrow.reindex_source("a", raw_text="gamma")

        assert memory_store.get("a_chunk_0").text == "alpha"
        assert memory_store.count() == 2
        assert narrow.state is IndexState.READY

    def test_store_failure_keeps_old_chunks(self, index, memory_store, monkeypatch):
        index.index([Document(source_id="a", raw_text="alpha beta")])

        def fail(records):
            raise StoreUnavailableError("disk full", backend="memory")

        monkeypatch.setattr(memory_store, "_save", fail)

        with pytest.raises(StoreUnavailableError):
            index.reindex_source("a", raw_text="gamma")

        assert memory_store.get("a_chunk_0").text == "alpha beta"

    def test_without_text_or_loader(self, index):
        with pytest.raises(ValueError, match="no content loader"):
            index.reindex_source("a")

    def test_uses_content_loader(self, keyword_embedder, memory_store, temp_dir):
        write(os.path.join(temp_dir, "docs", "guide.md"), "# Guide\n\nalpha beta")
        index = RagIndex.from_components(
            embedder=keyword_embedder,
            store=memory_store,
            content_loader=DirectoryLoader(temp_dir),
        )

        assert index.reindex_source("guide") == 1
        assert memory_store.get("guide_chunk_0").text == "Guide alpha beta"

    def test_content_loader_missing_source(self, keyword_embedder, memory_store, temp_dir):
        index = RagIndex.from_components(
            embedder=keyword_embedder,
            store=memory_store,
            content_loader=DirectoryLoader(temp_dir),
        )
        with pytest.raises(FileNotFoundError):
            index.reindex_source("missing")


class TestIndexDirectory:
    def test_indexes_supported_files(self, index, temp_dir):
        write(os.path.join(temp_dir, "a.md"), "alpha beta")
        write(os.path.join(temp_dir, "sub", "b.html"), "<html><body><p>gamma</p></body></html>")
        write(os.path.join(temp_dir, "image.png"), "not text")

        report = index.index_directory(temp_dir)

        assert report.documents == 2
        assert index.list_sources() == ["a", "b"]

    def test_single_file(self, index, temp_dir):
        path = os.path.join(temp_dir, "note.txt")
        write(path, "delta")

        report = index.index_directory(path)

        assert report.indexed == 1
        assert index.list_sources() == ["note"]

    def test_reset_first(self, index, temp_dir):
        index.index([Document(source_id="stale", raw_text="alpha")])
        write(os.path.join(temp_dir, "fresh.md"), "beta")

        index.index_directory(temp_dir, reset=True)

        assert index.list_sources() == ["fresh"]

    def test_missing_path(self, index, temp_dir):
        with pytest.raises(FileNotFoundError):
            index.index_directory(os.path.join(temp_dir, "nope"))


class TestInspection:
    def test_health_check(self, index):
        health = index.health_check()
        assert health.connected
        assert health.backend == "memory"

    def test_count_and_sources(self, index):
        index.index(
            [Document(source_id="b", raw_text="beta"), Document(source_id="a", raw_text="alpha")]
        )
        assert index.count() == 2
        assert index.list_sources() == ["b", "a"]

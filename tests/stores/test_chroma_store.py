"""Tests specific to the ChromaDB vector store."""

import os
from unittest.mock import MagicMock

import pytest

from ragindex.chunker import Chunker
from ragindex.exceptions import StoreUnavailableError
from ragindex.ingestor import Ingestor
from ragindex.models import Document
from ragindex.stores import ChromaVectorStore, VectorStore
from ragindex.stores.chroma import QUERY_TIE_MARGIN


class TestChromaVectorStore:
    def test_is_vector_store(self, chroma_store):
        assert isinstance(chroma_store, VectorStore)
        assert chroma_store.backend == "chroma"

    def test_requires_location(self):
        with pytest.raises(ValueError, match="persist_dir or host"):
            ChromaVectorStore()

    def test_creates_persist_dir(self, temp_dir):
        path = os.path.join(temp_dir, "nested", "chroma")
        store = ChromaVectorStore(persist_dir=path)
        assert os.path.isdir(path)
        store.close()

    def test_persists_across_instances(self, temp_dir, make_record):
        path = os.path.join(temp_dir, "chroma")
        store = ChromaVectorStore(persist_dir=path, collection_name="docs")
        store.add_documents([make_record("a", 0), make_record("b", 0)])
        store.close()

        reopened = ChromaVectorStore(persist_dir=path, collection_name="docs")
        reopened.add_documents([make_record("c", 0)])

        assert reopened.count() == 3
        # Insertion sequence continues after reopening
        assert reopened.list_sources() == ["a", "b", "c"]
        reopened.close()

    def test_upserts_in_slices(self, temp_dir, make_record):
        store = ChromaVectorStore(persist_dir=os.path.join(temp_dir, "chroma"), upsert_batch_size=2)
        collection = MagicMock(wraps=store._collection)
        store._collection = collection

        store.add_documents([make_record("a", i) for i in range(5)])

        calls = collection.upsert.call_args_list
        assert [len(call.kwargs["ids"]) for call in calls] == [2, 2, 1]
        assert store.count() == 5
        store.close()

    def test_rejects_invalid_upsert_batch_size(self, temp_dir):
        with pytest.raises(ValueError):
            ChromaVectorStore(persist_dir=os.path.join(temp_dir, "chroma"), upsert_batch_size=0)


class TestMatchChunks:
    def test_row_shape(self, chroma_store, make_record):
        chroma_store.add_documents(
            [make_record("guide", 0, embedding=[1.0, 0.0, 0.0], text="intro", total_chunks=2)]
        )

        rows = chroma_store.match_chunks([1.0, 0.0, 0.0], match_threshold=0.0, match_count=5)

        assert len(rows) == 1
        row = rows[0]
        assert row["id"] == "guide_chunk_0"
        assert row["source_file"] == "guide"
        assert row["chunk_index"] == 0
        assert row["content"] == "intro"
        assert row["metadata"]["total_chunks"] == 2
        assert row["similarity"] == pytest.approx(1.0, abs=1e-5)

    def test_match_count_and_threshold(self, chroma_store, make_record):
        chroma_store.add_documents(
            [
                make_record("a", 0, embedding=[1.0, 0.0, 0.0]),
                make_record("a", 1, embedding=[0.8, 0.6, 0.0]),
                make_record("a", 2, embedding=[0.0, 1.0, 0.0]),
            ]
        )

        rows = chroma_store.match_chunks([1.0, 0.0, 0.0], match_threshold=0.5, match_count=5)
        assert [r["id"] for r in rows] == ["a_chunk_0", "a_chunk_1"]

        rows = chroma_store.match_chunks([1.0, 0.0, 0.0], match_threshold=0.0, match_count=1)
        assert [r["id"] for r in rows] == ["a_chunk_0"]

    def test_query_window_is_bounded(self, chroma_store, make_record):
        chroma_store.add_documents(
            [make_record("a", i, embedding=[1.0, i / 10, 0.0]) for i in range(40)]
        )
        collection = MagicMock(wraps=chroma_store._collection)
        chroma_store._collection = collection

        rows = chroma_store.match_chunks([1.0, 0.0, 0.0], match_threshold=0.0, match_count=3)

        assert [r["id"] for r in rows] == ["a_chunk_0", "a_chunk_1", "a_chunk_2"]
        assert [c.kwargs["n_results"] for c in collection.query.call_args_list] == [
            3 + QUERY_TIE_MARGIN
        ]

    def test_window_widens_across_ties(self, chroma_store, make_record):
        chroma_store.add_documents(
            [make_record("t", i, embedding=[0.0, 1.0, 0.0]) for i in range(30)]
        )
        collection = MagicMock(wraps=chroma_store._collection)
        chroma_store._collection = collection

        rows = chroma_store.match_chunks([0.0, 1.0, 0.0], match_threshold=0.0, match_count=3)

        assert [r["id"] for r in rows] == ["t_chunk_0", "t_chunk_1", "t_chunk_2"]
        assert collection.query.call_args_list[-1].kwargs["n_results"] == 30


class TestBackendFailures:
    def test_count_failure_raises_store_unavailable(self, chroma_store):
        chroma_store._collection = MagicMock()
        chroma_store._collection.count.side_effect = RuntimeError("connection refused")

        with pytest.raises(StoreUnavailableError) as exc_info:
            chroma_store.count()

        assert exc_info.value.backend == "chroma"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_health_check_reports_failure(self, chroma_store):
        chroma_store._collection = MagicMock()
        chroma_store._collection.count.side_effect = RuntimeError("connection refused")

        health = chroma_store.health_check()

        assert health.connected is False
        assert "connection refused" in health.error

    def test_upsert_failure_raises_store_unavailable(self, chroma_store, make_record):
        collection = MagicMock()
        collection.get.return_value = {"ids": [], "metadatas": [], "embeddings": None}
        collection.upsert.side_effect = RuntimeError("disk full")
        chroma_store._collection = collection

        with pytest.raises(StoreUnavailableError, match="disk full"):
            chroma_store.add_documents([make_record("a", 0)])


class TestSliceRollback:
    @pytest.fixture
    def sliced_store(self, temp_dir):
        store = ChromaVectorStore(persist_dir=os.path.join(temp_dir, "chroma"), upsert_batch_size=2)
        yield store
        store.close()

    @staticmethod
    def fail_second_upsert(store):
        collection = store._collection
        calls = []

        def upsert(**kwargs):
            calls.append(kwargs["ids"])
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return collection.upsert(**kwargs)

        store._collection = MagicMock(wraps=collection)
        store._collection.upsert.side_effect = upsert

    def test_failed_slice_removes_earlier_slices(self, sliced_store, make_record):
        self.fail_second_upsert(sliced_store)

        with pytest.raises(StoreUnavailableError, match="disk full"):
            sliced_store.add_documents([make_record("a", i, total_chunks=4) for i in range(4)])

        assert sliced_store.count() == 0

    def test_failed_slice_restores_overwritten_rows(self, sliced_store, make_record):
        sliced_store.add_documents([make_record("a", 0, text="old")])
        before = sliced_store.get("a_chunk_0")
        self.fail_second_upsert(sliced_store)

        with pytest.raises(StoreUnavailableError):
            sliced_store.add_documents(
                [make_record("a", i, text="new", total_chunks=4) for i in range(4)]
            )

        assert sliced_store.count() == 1
        restored = sliced_store.get("a_chunk_0")
        assert restored.text == "old"
        assert restored.created_at == before.created_at
        assert sliced_store.list_sources() == ["a"]

    def test_failed_document_is_not_searchable(self, sliced_store, keyword_embedder):
        self.fail_second_upsert(sliced_store)
        ingestor = Ingestor(Chunker(chunk_size=4, overlap=0), keyword_embedder, sliced_store)

        report = ingestor.index_documents([Document(source_id="a", raw_text="alpha " * 16)])

        assert [f.source_id for f in report.failed] == ["a"]
        assert sliced_store.count() == 0
        assert sliced_store.query(keyword_embedder.embed_text("alpha"), top_k=10) == []

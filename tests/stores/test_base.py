# tests/stores/test_base.py
"""Tests for the VectorStore abstract base class."""

from abc import ABC

import pytest

from ragindex.exceptions import DimensionMismatchError
from ragindex.stores import VectorStore
from ragindex.stores.base import check_dimensions, check_source


class TestVectorStoreABC:
    def test_is_abstract(self):
        assert issubclass(VectorStore, ABC)

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            VectorStore()

    def test_has_required_methods(self):
        for name in (
            "add_documents",
            "replace_source",
            "delete_collection",
            "query",
            "delete_by_source",
            "get",
            "count",
            "list_sources",
            "health_check",
            "close",
        ):
            assert hasattr(VectorStore, name)


class BrokenStore(VectorStore):
    backend = "broken"

    def add_documents(self, records):
        raise NotImplementedError

    def replace_source(self, source_id, records):
        raise NotImplementedError

    def delete_collection(self):
        raise NotImplementedError

    def query(self, query_embedding, top_k, threshold=0.0):
        raise NotImplementedError

    def delete_by_source(self, source_id):
        raise NotImplementedError

    def get(self, record_id):
        raise NotImplementedError

    def count(self):
        raise ConnectionError("backend down")

    def list_sources(self):
        raise NotImplementedError

    @property
    def dimension(self):
        return None


class TestHealthCheck:
    def test_reports_disconnected_backend(self):
        health = BrokenStore().health_check()

        assert health.backend == "broken"
        assert health.connected is False
        assert health.record_count == 0
        assert "backend down" in health.error

    def test_close_is_noop_by_default(self):
        BrokenStore().close()


class TestCheckDimensions:
    def test_empty_batch(self):
        assert check_dimensions([], 3) == 3
        assert check_dimensions([], None) is None

    def test_first_batch_sets_dimension(self, make_record):
        records = [make_record("a", 0, embedding=[1.0, 2.0])]
        assert check_dimensions(records, None) == 2

    def test_mismatch_names_record(self, make_record):
        records = [
            make_record("a", 0, embedding=[1.0, 2.0, 3.0]),
            make_record("a", 1, embedding=[1.0]),
        ]

        with pytest.raises(DimensionMismatchError, match="a_chunk_1") as exc_info:
            check_dimensions(records, 3)

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 1


class TestCheckSource:
    def test_accepts_matching_records(self, make_record):
        check_source([make_record("a", 0), make_record("a", 1)], "a")
        check_source([], "a")

    def test_rejects_foreign_record(self, make_record):
        with pytest.raises(ValueError, match="b_chunk_0"):
            check_source([make_record("a", 0), make_record("b", 0)], "a")

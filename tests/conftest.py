"""Shared pytest fixtures."""

import contextlib
import logging
import os
import tempfile
import threading

import pytest
import yaml

from ragindex.embedder import Embedder
from ragindex.providers import EmbeddingClient

# Words the keyword embedder knows; one dimension each, plus a bias dimension.
VOCABULARY = ["alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta"]


def keyword_vector(text: str) -> list[float]:
    """Count vocabulary words in ``text``; the last component is a constant bias."""
    words = text.lower().split()
    return [float(words.count(term)) for term in VOCABULARY] + [0.1]


class KeywordEmbedder(Embedder):
    """Deterministic embedder: texts sharing vocabulary words are similar."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [keyword_vector(text) for text in texts]


class FakeEmbeddingClient(EmbeddingClient):
    """Embedding client that records requests and can fail selected ones.

    Args:
        dimension: Length of returned vectors
        fail_on: Request numbers (0-based) that raise ``error``
        error: Exception raised for failing requests
    """

    def __init__(
        self,
        dimension: int = 4,
        fail_on: set[int] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.dimension = dimension
        self.fail_on = fail_on or set()
        self.error = error or RuntimeError("provider exploded")
        self.requests: list[list[str]] = []
        self.timeouts: list[float | None] = []
        # Async callers run embed() in worker threads
        self._lock = threading.Lock()

    def embed(self, texts: list[str], timeout: float | None = None) -> list[list[float]]:
        with self._lock:
            request_number = len(self.requests)
            self.requests.append(list(texts))
            self.timeouts.append(timeout)
        if request_number in self.fail_on:
            raise self.error
        return [[float(len(text))] + [1.0] * (self.dimension - 1) for text in texts]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Cleanup ChromaDB's shared system cache to release file handles
        # See: https://github.com/chroma-core/chroma/issues/5868
        try:
            from chromadb.api.shared_system_client import SharedSystemClient

            # Guard against ChromaDB internal API changes
            if hasattr(SharedSystemClient, "_identifier_to_system"):
                identifiers_to_remove = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in identifiers_to_remove:
                    if identifier in SharedSystemClient._identifier_to_system:
                        system = SharedSystemClient._identifier_to_system.pop(identifier)
                        with contextlib.suppress(Exception):
                            system.stop()
        except Exception:
            pass  # Best effort cleanup - ChromaDB internals may change


@pytest.fixture
def chroma_store(temp_dir):
    """A ChromaVectorStore in a temp directory, closed after the test."""
    from ragindex.stores import ChromaVectorStore

    store = ChromaVectorStore(persist_dir=os.path.join(temp_dir, "chroma"))
    yield store
    store.close()


@pytest.fixture
def memory_store():
    from ragindex.stores import InMemoryVectorStore

    return InMemoryVectorStore()


@pytest.fixture(params=["memory", "chroma"])
def any_store(request, temp_dir):
    """Each VectorStore implementation in turn."""
    from ragindex.stores import ChromaVectorStore, InMemoryVectorStore

    if request.param == "memory":
        yield InMemoryVectorStore()
        return
    store = ChromaVectorStore(persist_dir=os.path.join(temp_dir, "chroma"))
    yield store
    store.close()


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedder()


@pytest.fixture
def fake_client():
    return FakeEmbeddingClient()


@pytest.fixture
def make_fake_client():
    """The FakeEmbeddingClient class, for tests that configure failures."""
    return FakeEmbeddingClient


@pytest.fixture
def make_record():
    """Factory for VectorRecords with sensible defaults."""
    from ragindex.models import ChunkMetadata, VectorRecord, make_chunk_id

    def _make(
        source_id: str = "doc",
        chunk_index: int = 0,
        embedding: list[float] | None = None,
        text: str | None = None,
        total_chunks: int = 1,
    ) -> VectorRecord:
        return VectorRecord(
            id=make_chunk_id(source_id, chunk_index),
            text=text if text is not None else f"{source_id} chunk {chunk_index}",
            embedding=embedding if embedding is not None else [1.0, 0.0, 0.0],
            metadata=ChunkMetadata(
                source_id=source_id,
                chunk_index=chunk_index,
                total_chunks=max(total_chunks, chunk_index + 1),
            ),
        )

    return _make


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Drop RAGINDEX_* overrides and restore the package logger after each test."""
    for key in list(os.environ):
        if key.startswith("RAGINDEX_"):
            monkeypatch.delenv(key)

    # The CLI installs its own handler and stops propagation
    logger = logging.getLogger("ragindex")
    saved = (logger.handlers[:], logger.level, logger.propagate)
    yield
    logger.handlers, logger.level, logger.propagate = saved


@pytest.fixture
def config_file(temp_dir):
    """Factory writing a ragindex.yaml that uses KeywordEmbedder and the memory backend.

    Keyword arguments override top-level config keys. Returns the file path.
    """

    def _write(**overrides) -> str:
        config = {
            "provider": "custom",
            "embedder": f"{KeywordEmbedder.__module__}.KeywordEmbedder",
            "backend": "memory",
            "data_dir": os.path.join(temp_dir, "data"),
        }
        config.update(overrides)
        path = os.path.join(temp_dir, "ragindex.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config, f)
        return path

    return _write


@pytest.fixture
def content_dir(temp_dir):
    """A small content directory: two markdown guides and one HTML page."""
    root = os.path.join(temp_dir, "content")
    os.makedirs(os.path.join(root, "guides"))
    files = {
        "intro.md": "# Intro\n\nalpha beta gamma",
        os.path.join("guides", "setup.md"): "Setup uses **delta** and epsilon.",
        "faq.html": "<html><head><title>FAQ</title></head><body><p>zeta eta</p></body></html>",
    }
    for name, content in files.items():
        with open(os.path.join(root, name), "w", encoding="utf-8") as f:
            f.write(content)
    return root

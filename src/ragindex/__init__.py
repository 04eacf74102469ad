"""ragindex - content indexing and semantic retrieval.

Splits documents into overlapping word chunks, embeds them through an
external provider and ranks them against queries by cosine similarity.

Quick Start (LiteLLM + ChromaDB):
    from ragindex import ChromaStorage, Document, LiteLLMProvider, RagIndex

    index = RagIndex(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=ChromaStorage(persist_dir="./data/chroma"),
    )

    report = index.index([Document(source_id="intro", raw_text="# Hello ...")])
    response = index.search("How do I get started?", k=5)

In-memory (tests, small corpora):
    from ragindex import MemoryStorage

    index = RagIndex(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=MemoryStorage(),
    )
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ragindex")
except PackageNotFoundError:
    # Source tree without an installed distribution
    __version__ = "unknown"

from ragindex.chunker import Chunker, chunk_words, strip_markup

# Configuration objects
from ragindex.configuration import (
    ChromaStorage,
    LiteLLMProvider,
    MemoryStorage,
    ProviderConfig,
    StorageConfig,
)
from ragindex.embedder import ClientEmbedder, Embedder
from ragindex.exceptions import (
    ChunkingInputError,
    DimensionMismatchError,
    EmbeddingProviderError,
    EmbeddingTimeoutError,
    RagIndexError,
    StoreUnavailableError,
)

# Central facade
from ragindex.index import IndexState, RagIndex

# Pipelines
from ragindex.ingestor import Ingestor, ProgressCallback

# File loading
from ragindex.loaders import DirectoryLoader, LoaderRegistry

# Core models
from ragindex.models import (
    Chunk,
    ChunkMetadata,
    Document,
    HealthStatus,
    IndexFailure,
    IndexReport,
    ScoredRecord,
    SearchResponse,
    VectorRecord,
)
from ragindex.providers import EmbeddingClient, LiteLLMEmbeddingClient
from ragindex.retriever import Retriever
from ragindex.settings import Settings
from ragindex.stores import ChromaVectorStore, InMemoryVectorStore, VectorStore

__all__ = [
    "__version__",
    # Facade
    "RagIndex",
    "IndexState",
    "Settings",
    # Configuration objects
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "MemoryStorage",
    "ChromaStorage",
    # Models
    "Document",
    "Chunk",
    "ChunkMetadata",
    "VectorRecord",
    "ScoredRecord",
    "SearchResponse",
    "IndexReport",
    "IndexFailure",
    "HealthStatus",
    # Components
    "Chunker",
    "chunk_words",
    "strip_markup",
    "Embedder",
    "ClientEmbedder",
    "EmbeddingClient",
    "LiteLLMEmbeddingClient",
    "VectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "Ingestor",
    "ProgressCallback",
    "Retriever",
    "LoaderRegistry",
    "DirectoryLoader",
    # Errors
    "RagIndexError",
    "ChunkingInputError",
    "EmbeddingProviderError",
    "EmbeddingTimeoutError",
    "DimensionMismatchError",
    "StoreUnavailableError",
]

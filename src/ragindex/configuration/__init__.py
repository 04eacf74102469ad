# src/ragindex/configuration/__init__.py
"""Configuration objects for ragindex.

Instead of factory methods, you pass configuration objects that know how to
build their components.

Provider configurations (build the embedder):
- LiteLLMProvider: Uses LiteLLM for embedding calls

Storage configurations (build the vector store):
- MemoryStorage: In-process store, optionally persisted to a JSON file
- ChromaStorage: Durable ChromaDB collection (embedded or client/server)

Example:
    from ragindex import RagIndex, LiteLLMProvider, ChromaStorage

    index = RagIndex(
        provider=LiteLLMProvider(embedding="openai/text-embedding-3-small"),
        storage=ChromaStorage(persist_dir="./data/chroma"),
    )
"""

from ragindex.configuration.base import ProviderConfig, StorageConfig
from ragindex.configuration.providers import LiteLLMProvider
from ragindex.configuration.storage import ChromaStorage, MemoryStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "LiteLLMProvider",
    "MemoryStorage",
    "ChromaStorage",
]

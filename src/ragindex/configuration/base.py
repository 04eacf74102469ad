# src/ragindex/configuration/base.py
"""Protocol definitions for configuration objects.

These protocols define the interfaces for provider and storage configurations.
Implementations use @dataclass(frozen=True) for immutability.

Protocols here give structural typing for configuration factories: any frozen
dataclass with the right method satisfies the interface without inheritance.
The components they build (Embedder, VectorStore) are ABCs and require
explicit inheritance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ragindex.embedder import Embedder
    from ragindex.settings import Settings
    from ragindex.stores import VectorStore


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Example implementation:
        @dataclass(frozen=True)
        class LiteLLMProvider:
            embedding: str

            def build_embedder(self, settings: Settings) -> Embedder: ...
    """

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build an embedder for creating vector embeddings.

        Args:
            settings: Settings containing batch size, concurrency, timeout
                      and retry configuration.
        """
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations.

    Example implementation:
        @dataclass(frozen=True)
        class MemoryStorage:
            persist_path: str | None = None

            def build_store(self) -> VectorStore: ...
    """

    def build_store(self) -> VectorStore:
        """Build the vector store holding the collection."""
        ...

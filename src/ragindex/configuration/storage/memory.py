# src/ragindex/configuration/storage/memory.py
"""In-memory storage configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ragindex.stores import VectorStore


@dataclass(frozen=True)
class MemoryStorage:
    """In-process storage with exact cosine ranking.

    Args:
        persist_path: Optional JSON file the collection is saved to after
                      every change and loaded from on startup. None keeps
                      the collection in memory only.

    Example:
        storage = MemoryStorage()
        storage = MemoryStorage(persist_path="./data/collection.json")
    """

    persist_path: str | None = None

    def build_store(self) -> VectorStore:
        from ragindex.stores import InMemoryVectorStore

        return InMemoryVectorStore(persist_path=self.persist_path)

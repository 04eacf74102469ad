# src/ragindex/stores/__init__.py
"""Vector storage backends for ragindex."""

from ragindex.stores.base import VectorStore
from ragindex.stores.chroma import ChromaVectorStore, MatchRow
from ragindex.stores.memory import InMemoryVectorStore

__all__ = [
    "VectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "MatchRow",
]

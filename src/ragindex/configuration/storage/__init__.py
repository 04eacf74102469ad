# src/ragindex/configuration/storage/__init__.py
"""Storage configurations for ragindex."""

from ragindex.configuration.storage.chroma import ChromaStorage
from ragindex.configuration.storage.memory import MemoryStorage

__all__ = ["ChromaStorage", "MemoryStorage"]

# src/ragindex/embedder/__init__.py
"""Embedding functionality for ragindex."""

from ragindex.embedder.base import Embedder
from ragindex.embedder.client import DEFAULT_BATCH_SIZE, ClientEmbedder

__all__ = ["DEFAULT_BATCH_SIZE", "ClientEmbedder", "Embedder"]

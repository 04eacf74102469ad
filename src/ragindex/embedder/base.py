# src/ragindex/embedder/base.py
"""Embedder abstract base class."""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """Abstract base class for embedding generation.

    Subclasses must implement embed_batch. Output is aligned 1:1 by position
    with the input.
    """

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts."""
        ...

    async def aembed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async).

        Default implementation calls sync embed_batch().
        """
        return self.embed_batch(texts)

    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        return self.embed_batch([text])[0]

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        result = await self.aembed_batch([text])
        return result[0]

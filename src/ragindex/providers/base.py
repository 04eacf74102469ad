# src/ragindex/providers/base.py
"""Abstract base class for embedding providers."""

import asyncio
from abc import ABC, abstractmethod


class EmbeddingClient(ABC):
    """Abstract base class for embedding providers.

    Implementations send one request per call; batching, alignment checks and
    error annotation live in ``ragindex.embedder.ClientEmbedder``.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts, timeout=None):
                return my_api.embed_batch(texts, timeout=timeout)
    """

    @abstractmethod
    def embed(self, texts: list[str], timeout: float | None = None) -> list[list[float]]:
        """Generate embedding vectors for multiple texts in a single request.

        Args:
            texts: Texts to embed.
            timeout: Optional request timeout in seconds. Implementations raise
                     the builtin ``TimeoutError`` when it expires.

        Returns:
            One embedding vector per input text, in input order.
        """
        ...

    async def aembed(self, texts: list[str], timeout: float | None = None) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (async).

        Default implementation runs the sync embed() in a worker thread, so a
        blocking request neither stalls the event loop nor serializes sibling
        requests. Override in subclasses for native async behavior.
        """
        return await asyncio.to_thread(self.embed, texts, timeout=timeout)

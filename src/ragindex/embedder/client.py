# src/ragindex/embedder/client.py
"""Client-based embedder with sub-batching and failure annotation."""

import asyncio
import logging

from ragindex.embedder.base import Embedder
from ragindex.exceptions import EmbeddingProviderError, EmbeddingTimeoutError
from ragindex.providers.base import EmbeddingClient

logger = logging.getLogger(__name__)

# Providers accept far more (OpenAI allows 2048 inputs), stay well below.
DEFAULT_BATCH_SIZE = 100


class ClientEmbedder(Embedder):
    """Embedder that splits input into sub-batches for an EmbeddingClient.

    Each sub-batch is one provider request. A failing sub-batch aborts the
    whole call; texts are never skipped, so callers either get one vector per
    input or an EmbeddingProviderError naming the failed sub-batch. There is
    no retry here.

    Example:
        from ragindex.providers.litellm import LiteLLMEmbeddingClient
        from ragindex.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")
        embedder = ClientEmbedder(embedding_client=client, batch_size=100)
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_concurrent: int = 1,
        timeout: float | None = None,
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
            batch_size: Maximum texts per provider request
            max_concurrent: Sub-batches in flight at once (async path only)
            timeout: Per-request timeout in seconds, None for no limit
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self._client = embedding_client
        self.batch_size = batch_size
        self.max_concurrent = max_concurrent
        self.timeout = timeout

    def _split(self, texts: list[str]) -> list[tuple[int, list[str]]]:
        """Split texts into (offset, sub-batch) pairs."""
        return [
            (offset, texts[offset : offset + self.batch_size])
            for offset in range(0, len(texts), self.batch_size)
        ]

    def _timeout_error(
        self, batch_index: int, total_batches: int, succeeded: int
    ) -> EmbeddingTimeoutError:
        return EmbeddingTimeoutError(
            f"Embedding sub-batch {batch_index + 1}/{total_batches} timed out "
            f"after {self.timeout}s ({succeeded} texts embedded before it)",
            batch_index=batch_index,
            succeeded=succeeded,
            timeout=self.timeout,
        )

    def _provider_error(
        self, batch_index: int, total_batches: int, succeeded: int, exc: BaseException
    ) -> EmbeddingProviderError:
        return EmbeddingProviderError(
            f"Embedding sub-batch {batch_index + 1}/{total_batches} failed "
            f"({succeeded} texts embedded before it): {exc}",
            batch_index=batch_index,
            succeeded=succeeded,
        )

    @staticmethod
    def _check_alignment(
        vectors: list[list[float]], batch: list[str], batch_index: int, succeeded: int
    ) -> None:
        if len(vectors) != len(batch):
            raise EmbeddingProviderError(
                f"Embedding sub-batch {batch_index + 1} returned {len(vectors)} vectors "
                f"for {len(batch)} texts",
                batch_index=batch_index,
                succeeded=succeeded,
            )

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts sub-batch by sub-batch, in order.

        Raises:
            EmbeddingTimeoutError: If a sub-batch exceeds the timeout.
            EmbeddingProviderError: If a sub-batch fails or returns the wrong
                number of vectors.
        """
        if not texts:
            return []

        batches = self._split(texts)
        embeddings: list[list[float]] = []

        for batch_index, (_offset, batch) in enumerate(batches):
            succeeded = len(embeddings)
            try:
                vectors = self._client.embed(batch, timeout=self.timeout)
            except TimeoutError as e:
                raise self._timeout_error(batch_index, len(batches), succeeded) from e
            except Exception as e:
                raise self._provider_error(batch_index, len(batches), succeeded, e) from e

            self._check_alignment(vectors, batch, batch_index, succeeded)
            embeddings.extend(vectors)
            logger.debug("Embedded %d/%d texts", len(embeddings), len(texts))

        return embeddings

    async def aembed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts with up to max_concurrent sub-batches in flight.

        Results are reassembled by each sub-batch's original offset, so the
        output order never depends on completion order. When several
        sub-batches fail, the error reports the lowest failing sub-batch.
        """
        if not texts:
            return []

        batches = self._split(texts)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def run(offset: int, batch: list[str]) -> tuple[int, list[list[float]]]:
            async with semaphore:
                request = self._client.aembed(batch, timeout=self.timeout)
                if self.timeout is not None:
                    vectors = await asyncio.wait_for(request, timeout=self.timeout)
                else:
                    vectors = await request
            return offset, vectors

        results = await asyncio.gather(
            *[run(offset, batch) for offset, batch in batches],
            return_exceptions=True,
        )

        succeeded = sum(
            len(batch)
            for (_offset, batch), result in zip(batches, results, strict=True)
            if not isinstance(result, BaseException) and len(result[1]) == len(batch)
        )

        embeddings: list[list[float] | None] = [None] * len(texts)
        for batch_index, ((_offset, batch), result) in enumerate(
            zip(batches, results, strict=True)
        ):
            if isinstance(result, TimeoutError):
                raise self._timeout_error(batch_index, len(batches), succeeded) from result
            if isinstance(result, BaseException):
                raise self._provider_error(batch_index, len(batches), succeeded, result) from result

            offset, vectors = result
            self._check_alignment(vectors, batch, batch_index, succeeded)
            embeddings[offset : offset + len(batch)] = vectors

        logger.debug("Embedded %d texts in %d sub-batches", len(texts), len(batches))
        return [vector for vector in embeddings if vector is not None]

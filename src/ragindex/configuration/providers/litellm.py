# src/ragindex/configuration/providers/litellm.py
"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ragindex.embedder import Embedder
    from ragindex.settings import Settings


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for embedding calls.

    LiteLLM provides a unified interface to many embedding providers including
    OpenAI, Azure, Bedrock, Gemini and Cohere. Credentials are read by LiteLLM
    from the provider's usual environment variables (e.g. OPENAI_API_KEY).

    Args:
        embedding: LiteLLM model identifier for embeddings.
                   Examples: "openai/text-embedding-3-small", "openai/text-embedding-3-large"

    Example:
        provider = LiteLLMProvider(embedding="openai/text-embedding-3-small")
    """

    embedding: str

    def build_embedder(self, settings: Settings) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client.

        Args:
            settings: Settings containing batch size, concurrency, timeout
                      and num_retries.
        """
        from ragindex.embedder import ClientEmbedder
        from ragindex.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            num_retries=settings.num_retries,
        )
        return ClientEmbedder(
            embedding_client=embedding_client,
            batch_size=settings.embedding_batch_size,
            max_concurrent=settings.max_concurrent_embeddings,
            timeout=settings.embedding_timeout,
        )

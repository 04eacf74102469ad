"""Embedding provider implementations for ragindex.

- EmbeddingClient: Abstract base class for embedding providers
- LiteLLMEmbeddingClient: LiteLLM implementation

Usage:
    from ragindex.providers import EmbeddingClient, LiteLLMEmbeddingClient
"""

from ragindex.providers.base import EmbeddingClient
from ragindex.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

__all__ = [
    "EmbeddingClient",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]

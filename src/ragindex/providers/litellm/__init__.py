"""LiteLLM provider client for ragindex.

Usage:
    from ragindex.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""

from ragindex.providers.litellm.client import LiteLLMEmbeddingClient
from ragindex.providers.litellm.models import DEFAULT_EMBEDDING_MODEL, EmbeddingModels

__all__ = [
    "DEFAULT_EMBEDDING_MODEL",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]

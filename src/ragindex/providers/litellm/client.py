"""LiteLLM client implementation for embedding APIs."""

import litellm

from ragindex.providers.base import EmbeddingClient
from ragindex.providers.litellm.models import DEFAULT_EMBEDDING_MODEL


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM. API keys are read
    by LiteLLM from the usual provider environment variables
    (``OPENAI_API_KEY``, ``GEMINI_API_KEY``, ...).

    Example:
        from ragindex.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
        embeddings = client.embed(["Hello world", "How are you?"])
    """

    def __init__(
        self,
        model: str = DEFAULT_EMBEDDING_MODEL,
        num_retries: int = 0,
        encoding_format: str = "float",
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
                   Examples: "openai/text-embedding-3-small", "gemini/gemini-embedding-001"
            num_retries: Retries LiteLLM performs on rate limit errors. Default 0:
                        retry policy belongs to the caller.
            encoding_format: Encoding requested from the provider.
        """
        self.model = model
        self.num_retries = num_retries
        self.encoding_format = encoding_format

    def _request_kwargs(self, texts: list[str], timeout: float | None) -> dict:
        kwargs = {
            "model": self.model,
            "input": texts,
            "encoding_format": self.encoding_format,
            "num_retries": self.num_retries,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        return kwargs

    @staticmethod
    def _extract(response) -> list[list[float]]:
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    def embed(self, texts: list[str], timeout: float | None = None) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []

        try:
            response = litellm.embedding(**self._request_kwargs(texts, timeout))
        except litellm.Timeout as e:
            raise TimeoutError(f"Embedding request to {self.model} timed out") from e
        return self._extract(response)

    async def aembed(self, texts: list[str], timeout: float | None = None) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []

        try:
            response = await litellm.aembedding(**self._request_kwargs(texts, timeout))
        except litellm.Timeout as e:
            raise TimeoutError(f"Embedding request to {self.model} timed out") from e
        return self._extract(response)

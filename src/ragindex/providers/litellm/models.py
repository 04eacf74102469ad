"""Curated embedding model constants for the LiteLLM provider.

Any valid LiteLLM model string can be passed instead.

Example:
    from ragindex.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient / ClientEmbedder."""

    # OpenAI
    TEXT_3_SMALL = "openai/text-embedding-3-small"  # 1536 dimensions
    TEXT_3_LARGE = "openai/text-embedding-3-large"  # 3072 dimensions
    ADA_002 = "openai/text-embedding-ada-002"  # 1536 dimensions

    # Google Gemini
    GEMINI_EMBEDDING_001 = "gemini/gemini-embedding-001"

    # AWS Bedrock
    BEDROCK_TITAN_V2 = "bedrock/amazon.titan-embed-text-v2:0"
    BEDROCK_COHERE_V3 = "bedrock/cohere.embed-english-v3"


DEFAULT_EMBEDDING_MODEL = EmbeddingModels.TEXT_3_SMALL

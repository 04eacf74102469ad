"""Configuration management for ragindex.

This module contains behavioral settings that apply regardless of which
embedding provider or vector store is used. Settings are passed
programmatically - the library does not read from environment variables.

For applications that want env-based config, read env vars at the
application layer (see ragindex.config) and pass values explicitly.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

# Rate limit profile definitions
RATE_LIMIT_PROFILES: dict[str, dict[str, int]] = {
    "aggressive": {
        "max_concurrent_embeddings": 8,
        "num_retries": 5,
    },
    "conservative": {
        "max_concurrent_embeddings": 1,
        "num_retries": 5,
    },
}


class Settings(BaseModel):
    """Behavioral settings for ragindex.

    Example:
        settings = Settings(chunk_size=200, chunk_overlap=20)

        # Or use a rate limit profile for free API tiers
        settings = Settings.with_profile("conservative")
    """

    # Chunking (sizes are in words)
    chunk_size: int = Field(default=300, ge=1)
    chunk_overlap: int = Field(default=50, ge=0)

    # Embedding
    embedding_batch_size: int = Field(default=100, ge=1)
    max_concurrent_embeddings: int = Field(default=1, ge=1)
    embedding_timeout: float | None = Field(default=None, gt=0)

    # Retry configuration (LiteLLM handles exponential backoff for RateLimitError)
    num_retries: int = Field(default=0, ge=0)

    # Retrieval
    default_k: int = Field(default=5, ge=1)
    similarity_threshold: float = 0.0

    @model_validator(mode="after")
    def _check_overlap(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self

    @classmethod
    def with_profile(
        cls,
        profile: Literal["aggressive", "conservative"],
        **overrides: Any,
    ) -> Settings:
        """Create Settings with a rate limit profile.

        Profiles bundle settings for different API tier limits:
        - "aggressive": For paid API tiers with high rate limits
        - "conservative": For free tiers or APIs with strict rate limits

        Args:
            profile: The rate limit profile to use.
            **overrides: Additional settings to override profile defaults.
        """
        if profile not in RATE_LIMIT_PROFILES:
            raise ValueError(
                f"Unknown profile '{profile}'. "
                f"Available profiles: {list(RATE_LIMIT_PROFILES.keys())}"
            )

        profile_settings: dict[str, Any] = RATE_LIMIT_PROFILES[profile].copy()
        profile_settings.update(overrides)
        return cls(**profile_settings)

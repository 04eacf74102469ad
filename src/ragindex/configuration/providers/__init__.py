# src/ragindex/configuration/providers/__init__.py
"""Provider configurations for ragindex."""

from ragindex.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]

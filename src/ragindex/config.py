# src/ragindex/config.py
"""Configuration loading utilities for ragindex.

This module provides configuration loading that can be used by:
- CLI commands
- External applications using ragindex as a library

It handles:
- Finding and loading ragindex.yaml config files
- Loading .env files for API keys
- Building Settings objects from multiple sources
- Creating RagIndex instances from configuration
"""

from __future__ import annotations

import importlib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import yaml
from pydantic import ValidationError

from ragindex.providers.litellm.models import DEFAULT_EMBEDDING_MODEL

if TYPE_CHECKING:
    from ragindex.configuration import StorageConfig
    from ragindex.index import RagIndex
    from ragindex.settings import Settings

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_DATA_DIR = "./ragindex_data"
DEFAULT_COLLECTION_NAME = "content_chunks"
CONFIG_FILES = ["ragindex.yaml", "ragindex.yml", ".ragindexrc"]
ENV_FILE = ".env"

BACKENDS = ("memory", "chroma")
MEMORY_COLLECTION_FILE = "collection.json"


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from .env file if it exists.

    Provider API keys (e.g. OPENAI_API_KEY) are usually kept here; LiteLLM
    reads them from the environment.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip("'\"")
                # Don't override existing env vars
                if key not in os.environ:
                    os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file in current directory or parent directories.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# Valid configuration keys for validation
VALID_ROOT_KEYS = {
    # Provider config
    "provider",
    "embedding_model",
    # Custom provider
    "embedder",
    "embedder_kwargs",
    # Storage config
    "backend",
    "data_dir",
    "collection_name",
    "chroma_host",
    "chroma_port",
    # Content
    "content_dir",
    # Settings section
    "settings",
}

VALID_SETTINGS_KEYS = {
    "chunk_size",
    "chunk_overlap",
    "embedding_batch_size",
    "batch_size",  # alias
    "max_concurrent_embeddings",
    "embedding_timeout",
    "num_retries",
    "default_k",
    "top_k",  # alias
    "similarity_threshold",
    "rate_limit_profile",
}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for error messages)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - VALID_SETTINGS_KEYS
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_file()

    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    for warning in validate_config(config, config_path):
        logger.warning(warning)
    return cast(dict[str, Any], config)


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer environment value: %r", value)
        return None


def _safe_float(value: str | None) -> float | None:
    """Parse float from string, returning None on invalid value."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric environment value: %r", value)
        return None


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from RAGINDEX_* environment variables.

    Returns values that were explicitly set (not defaults), to allow proper
    precedence: YAML settings are used unless overridden by env vars.
    """
    result: dict[str, Any] = {}

    int_settings = {
        "RAGINDEX_CHUNK_SIZE": "chunk_size",
        "RAGINDEX_CHUNK_OVERLAP": "chunk_overlap",
        "RAGINDEX_EMBEDDING_BATCH_SIZE": "embedding_batch_size",
        "RAGINDEX_MAX_CONCURRENT_EMBEDDINGS": "max_concurrent_embeddings",
        "RAGINDEX_NUM_RETRIES": "num_retries",
        "RAGINDEX_DEFAULT_K": "default_k",
    }
    for env_key, settings_key in int_settings.items():
        if (val := _safe_int(os.environ.get(env_key))) is not None:
            result[settings_key] = val

    if (val := _safe_float(os.environ.get("RAGINDEX_EMBEDDING_TIMEOUT"))) is not None:
        result["embedding_timeout"] = val
    if (val := _safe_float(os.environ.get("RAGINDEX_SIMILARITY_THRESHOLD"))) is not None:
        result["similarity_threshold"] = val
    if "RAGINDEX_RATE_LIMIT_PROFILE" in os.environ:
        result["rate_limit_profile"] = os.environ["RAGINDEX_RATE_LIMIT_PROFILE"]

    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract settings from the 'settings:' section of a YAML config."""
    result: dict[str, Any] = {}
    yaml_settings = config.get("settings", {}) or {}

    # Map YAML keys to Settings field names
    key_mappings = {
        "chunk_size": "chunk_size",
        "chunk_overlap": "chunk_overlap",
        "embedding_batch_size": "embedding_batch_size",
        "batch_size": "embedding_batch_size",  # alias
        "max_concurrent_embeddings": "max_concurrent_embeddings",
        "embedding_timeout": "embedding_timeout",
        "num_retries": "num_retries",
        "default_k": "default_k",
        "top_k": "default_k",  # alias
        "similarity_threshold": "similarity_threshold",
        "rate_limit_profile": "rate_limit_profile",
    }

    for yaml_key, settings_key in key_mappings.items():
        if yaml_key in yaml_settings:
            result[settings_key] = yaml_settings[yaml_key]

    return result


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables (for CI/CD override)
    2. YAML settings: section
    3. Settings class defaults

    Raises:
        pydantic.ValidationError: If the merged values are invalid
    """
    from ragindex.settings import Settings

    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    merged = {**yaml_settings, **env_settings}

    # rate_limit_profile affects multiple settings
    rate_limit_profile = merged.pop("rate_limit_profile", None)
    if rate_limit_profile:
        return Settings.with_profile(rate_limit_profile, **merged)
    return Settings(**merged)


def import_class(class_path: str) -> type[Any]:
    """Import a class from a dotted path like 'my_package.module.ClassName'."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return cast(type[Any], getattr(module, class_name))


@dataclass
class RagIndexConfig:
    """Configuration for creating a RagIndex instance."""

    provider: str
    embedding_model: str | None
    backend: str
    data_dir: str
    settings: Settings
    collection_name: str = DEFAULT_COLLECTION_NAME
    chroma_host: str | None = None
    chroma_port: int = 8000
    content_dir: str | None = None
    # Custom provider fields
    embedder_class: str | None = None
    embedder_kwargs: dict[str, Any] = field(default_factory=dict)


def _env_or(config: dict[str, Any], key: str) -> Any:
    """Config value with RAGINDEX_<KEY> taking precedence."""
    return os.environ.get(f"RAGINDEX_{key.upper()}") or config.get(key)


def get_index_config(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RagIndexConfig | ConfigError:
    """Get configuration for creating a RagIndex instance.

    This extracts configuration without creating the instance, allowing
    the caller to handle errors and missing values appropriately.

    Args:
        data_dir: Override data directory
        config_path: Override config file path

    Returns:
        RagIndexConfig with all settings, or ConfigError if invalid
    """
    try:
        config = load_config(config_path)
    except (OSError, yaml.YAMLError) as e:
        return ConfigError(
            message=f"Could not read configuration: {e}",
            suggestion="Check the path and YAML syntax of your ragindex.yaml",
        )

    try:
        settings = build_settings(config)
    except (ValidationError, ValueError) as e:
        return ConfigError(
            message=f"Invalid settings: {e}",
            suggestion="Fix the 'settings:' section or RAGINDEX_* environment variables",
        )

    backend = str(_env_or(config, "backend") or "chroma").lower()
    if backend not in BACKENDS:
        return ConfigError(
            message=f"Unknown backend '{backend}'",
            suggestion=f"Supported backends: {', '.join(BACKENDS)}",
        )

    port = _env_or(config, "chroma_port") or 8000
    try:
        chroma_port = int(port)
    except (TypeError, ValueError):
        return ConfigError(message=f"Invalid chroma_port '{port}'", suggestion="Use an integer")

    common: dict[str, Any] = {
        "backend": backend,
        "data_dir": data_dir or _env_or(config, "data_dir") or DEFAULT_DATA_DIR,
        "settings": settings,
        "collection_name": _env_or(config, "collection_name") or DEFAULT_COLLECTION_NAME,
        "chroma_host": _env_or(config, "chroma_host"),
        "chroma_port": chroma_port,
        "content_dir": _env_or(config, "content_dir"),
    }

    provider = config.get("provider", "litellm")
    if provider == "litellm":
        return RagIndexConfig(
            provider=provider,
            embedding_model=_env_or(config, "embedding_model") or DEFAULT_EMBEDDING_MODEL,
            **common,
        )

    elif provider == "custom":
        embedder_class = config.get("embedder")
        if not embedder_class:
            return ConfigError(
                message="Custom provider requires an embedder class.",
                suggestion="Add 'embedder: my_package.MyEmbedder' to ragindex.yaml",
            )
        return RagIndexConfig(
            provider=provider,
            embedding_model=None,
            embedder_class=embedder_class,
            embedder_kwargs=config.get("embedder_kwargs") or {},
            **common,
        )

    else:
        return ConfigError(
            message=f"Unknown provider '{provider}'",
            suggestion="Supported providers: litellm, custom",
        )


def build_storage(config: RagIndexConfig) -> StorageConfig:
    """Storage configuration object for the configured backend."""
    from ragindex.configuration import ChromaStorage, MemoryStorage

    if config.backend == "memory":
        return MemoryStorage(persist_path=os.path.join(config.data_dir, MEMORY_COLLECTION_FILE))
    return ChromaStorage(
        persist_dir=os.path.join(config.data_dir, "chroma"),
        collection_name=config.collection_name,
        host=config.chroma_host,
        port=config.chroma_port,
    )


def create_index(config: RagIndexConfig) -> RagIndex:
    """Create a RagIndex instance from configuration.

    Raises:
        ImportError: If a custom embedder class cannot be imported
        StoreUnavailableError: If the storage backend cannot be opened
    """
    from ragindex.configuration import LiteLLMProvider
    from ragindex.index import RagIndex
    from ragindex.loaders import DirectoryLoader

    storage = build_storage(config)
    content_loader = DirectoryLoader(config.content_dir) if config.content_dir else None

    if config.provider == "litellm":
        if not config.embedding_model:
            raise ValueError("LiteLLM provider requires embedding_model")
        return RagIndex(
            provider=LiteLLMProvider(embedding=config.embedding_model),
            storage=storage,
            settings=config.settings,
            content_loader=content_loader,
        )

    elif config.provider == "custom":
        if not config.embedder_class:
            raise ValueError("Custom provider requires an embedder class path")
        embedder_cls = import_class(config.embedder_class)
        return RagIndex(
            embedder=embedder_cls(**config.embedder_kwargs),
            store=storage.build_store(),
            settings=config.settings,
            content_loader=content_loader,
        )

    else:
        raise ValueError(f"Unknown provider: {config.provider}")


def get_index(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RagIndex | ConfigError:
    """Create a RagIndex instance based on configuration.

    Convenience wrapper around get_index_config and create_index.
    """
    config = get_index_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    return create_index(config)

# src/ragindex/commands/base.py
"""Base types for the commands layer.

This module defines the data structures used by all commands:
- Progress callbacks for long-running operations
- Confirmation callbacks for destructive commands
- Result types for each command
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from ragindex.config import ConfigError, create_index, get_index_config

if TYPE_CHECKING:
    from ragindex.index import RagIndex


class CommandStage(Enum):
    """Stages of command execution for progress reporting."""

    # Index stages
    CHUNKING = "Chunking"
    EMBEDDING = "Embedding"
    STORING = "Storing"
    DOCUMENT = "Document"

    # General stages
    LOADING = "Loading"
    PROCESSING = "Processing"
    COMPLETE = "Complete"


@dataclass
class ProgressUpdate:
    """Progress update for long-running operations.

    Attributes:
        stage: Current stage of the operation
        current: Current item number
        total: Total number of items (0 for indeterminate)
        message: Optional status message
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None

    @property
    def is_indeterminate(self) -> bool:
        """True if progress is indeterminate (total unknown)."""
        return self.total == 0

    @property
    def percentage(self) -> int:
        """Progress as percentage (0-100). Returns 0 if indeterminate."""
        if self.total == 0:
            return 0
        return int(100 * self.current / self.total)


# Callback type for progress updates
ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class ConfirmRequest:
    """Request for a yes/no confirmation before a destructive operation."""

    message: str
    details: str | None = None


# Callback type for confirmations - returns True to proceed
ConfirmCallback = Callable[[ConfirmRequest], bool]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class IndexFailureInfo:
    """A document that failed to index."""

    source_id: str
    error: str


@dataclass
class IndexResult(CommandResult):
    """Result of the index command.

    Attributes:
        documents_indexed: Documents whose chunks were all written
        documents_failed: Documents that failed
        total_chunks: Total chunks written
        backend: Storage backend that was written to
        failures: Per-document failures
    """

    documents_indexed: int = 0
    documents_failed: int = 0
    total_chunks: int = 0
    backend: str = ""
    failures: list[IndexFailureInfo] = field(default_factory=list)


@dataclass
class SearchHit:
    """A single search result."""

    source_id: str
    chunk_id: str
    chunk_index: int
    content: str
    similarity: float


@dataclass
class SearchResult(CommandResult):
    """Result of the search command."""

    query: str = ""
    backend: str = ""
    results: list[SearchHit] = field(default_factory=list)


@dataclass
class ReindexResult(CommandResult):
    """Result of the reindex command."""

    source_id: str = ""
    chunks: int = 0


@dataclass
class ResetResult(CommandResult):
    """Result of the reset command."""

    records_deleted: int = 0


@dataclass
class StatusResult(CommandResult):
    """Result of the status command.

    Attributes:
        backend: Storage backend name
        connected: Whether the backend answered
        total_chunks: Records in the collection
        state: Collection state (empty/indexing/ready)
        sources: Source ids present in the collection
    """

    backend: str = ""
    connected: bool = False
    total_chunks: int = 0
    state: str = ""
    sources: list[str] = field(default_factory=list)


def open_index(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> RagIndex | ConfigError:
    """Build a RagIndex from configuration, reporting failures as ConfigError."""
    config = get_index_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return config
    try:
        return create_index(config)
    except Exception as e:
        return ConfigError(message=f"Failed to open index: {e}")

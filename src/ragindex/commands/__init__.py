# src/ragindex/commands/__init__.py
"""UI-agnostic command layer for ragindex.

Command functions return data structures, allowing UIs to render results
appropriately.

Usage:
    from ragindex.commands import index, search, status

    result = index.index("./content", on_progress=my_callback)
    result = search.search("How does authentication work?")
    result = status.status()
"""

from ragindex.commands import index, reindex, reset, search, status
from ragindex.commands.base import (
    CommandResult,
    CommandStage,
    ConfirmCallback,
    ConfirmRequest,
    IndexFailureInfo,
    IndexResult,
    ProgressCallback,
    ProgressUpdate,
    ReindexResult,
    ResetResult,
    SearchHit,
    SearchResult,
    StatusResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "ConfirmRequest",
    "ConfirmCallback",
    "CommandResult",
    # Result types
    "IndexResult",
    "IndexFailureInfo",
    "SearchResult",
    "SearchHit",
    "ReindexResult",
    "ResetResult",
    "StatusResult",
    # Command modules
    "index",
    "search",
    "reindex",
    "reset",
    "status",
]

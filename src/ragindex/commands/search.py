# src/ragindex/commands/search.py
"""Search command - rank stored chunks against a query."""

from __future__ import annotations

from pathlib import Path

from ragindex.commands.base import SearchHit, SearchResult, open_index
from ragindex.config import ConfigError


def search(
    query: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    k: int | None = None,
    threshold: float | None = None,
) -> SearchResult:
    """Search the collection.

    Args:
        query: Free-text query
        data_dir: Override data directory
        config_path: Override config file path
        k: Number of results to return (None for default)
        threshold: Minimum similarity (None for default)
    """
    rag = open_index(data_dir, config_path)
    if isinstance(rag, ConfigError):
        return SearchResult(success=False, query=query, error=rag.message)

    try:
        response = rag.search(query, k=k, threshold=threshold)
    except Exception as e:
        return SearchResult(success=False, query=query, error=f"Search failed: {e}")
    finally:
        rag.close()

    return SearchResult(
        success=True,
        query=query,
        backend=response.backend,
        results=[
            SearchHit(
                source_id=hit.record.source_id,
                chunk_id=hit.record.id,
                chunk_index=hit.record.metadata.chunk_index,
                content=hit.record.text,
                similarity=hit.similarity,
            )
            for hit in response.results
        ],
    )

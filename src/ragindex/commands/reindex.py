# src/ragindex/commands/reindex.py
"""Reindex command - replace the chunks of a single source."""

from __future__ import annotations

from pathlib import Path

from ragindex.commands.base import ReindexResult, open_index
from ragindex.config import ConfigError


def reindex(
    source_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    content_dir: str | None = None,
) -> ReindexResult:
    """Re-index one source from the content directory.

    Args:
        source_id: Source to re-index (file name without extension)
        data_dir: Override data directory
        config_path: Override config file path
        content_dir: Directory holding the source files (overrides config)
    """
    rag = open_index(data_dir, config_path)
    if isinstance(rag, ConfigError):
        return ReindexResult(success=False, source_id=source_id, error=rag.message)

    try:
        if content_dir is not None:
            from ragindex.loaders import DirectoryLoader

            document = DirectoryLoader(content_dir).load_source(source_id)
            chunks = rag.reindex_source(source_id, raw_text=document.raw_text)
        else:
            chunks = rag.reindex_source(source_id)
    except Exception as e:
        return ReindexResult(
            success=False, source_id=source_id, error=f"Re-index of '{source_id}' failed: {e}"
        )
    finally:
        rag.close()

    return ReindexResult(success=True, source_id=source_id, chunks=chunks)

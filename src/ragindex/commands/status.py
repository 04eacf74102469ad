# src/ragindex/commands/status.py
"""Status command - report backend health and collection contents."""

from __future__ import annotations

from pathlib import Path

from ragindex.commands.base import StatusResult, open_index
from ragindex.config import ConfigError


def status(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
) -> StatusResult:
    rag = open_index(data_dir, config_path)
    if isinstance(rag, ConfigError):
        return StatusResult(success=False, error=rag.message)

    try:
        health = rag.health_check()
        sources = rag.list_sources() if health.connected else []
    except Exception as e:
        return StatusResult(success=False, backend=rag.backend, error=f"Status failed: {e}")
    finally:
        rag.close()

    return StatusResult(
        success=health.connected,
        error=health.error,
        backend=health.backend,
        connected=health.connected,
        total_chunks=health.record_count,
        state=rag.state.value,
        sources=sources,
    )

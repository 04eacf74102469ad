# src/ragindex/commands/index.py
"""Index command - load files and index them into the collection."""

from __future__ import annotations

from pathlib import Path

from ragindex.commands.base import (
    CommandStage,
    IndexFailureInfo,
    IndexResult,
    ProgressCallback,
    ProgressUpdate,
    open_index,
)
from ragindex.config import ConfigError

# Map pipeline event names to CommandStage
STAGE_MAP = {
    "chunking": CommandStage.CHUNKING,
    "embedding": CommandStage.EMBEDDING,
    "storing": CommandStage.STORING,
    "document": CommandStage.DOCUMENT,
}


def index(
    path: str | Path,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    reset: bool = False,
    on_progress: ProgressCallback | None = None,
) -> IndexResult:
    """Index a file or every supported file under a directory.

    Args:
        path: File or directory to index
        data_dir: Override data directory
        config_path: Override config file path
        reset: Empty the collection before indexing (full re-index)
        on_progress: Callback for progress updates

    Returns:
        IndexResult with aggregated statistics and per-document failures
    """
    path = Path(path)
    if not path.exists():
        return IndexResult(success=False, error=f"Path not found: {path}")

    rag = open_index(data_dir, config_path)
    if isinstance(rag, ConfigError):
        return IndexResult(success=False, error=rag.message)

    def progress_adapter(event: str, current: int, total: int, message: str) -> None:
        if on_progress:
            on_progress(
                ProgressUpdate(
                    stage=STAGE_MAP.get(event, CommandStage.PROCESSING),
                    current=current,
                    total=total,
                    message=message,
                )
            )

    try:
        report = rag.index_directory(
            str(path),
            reset=reset,
            on_progress=progress_adapter if on_progress else None,
        )
    except Exception as e:
        return IndexResult(success=False, error=f"Indexing failed: {e}", backend=rag.backend)
    finally:
        rag.close()

    return IndexResult(
        # Partial success: some documents made it in
        success=report.ok or report.documents > 0,
        documents_indexed=report.documents,
        documents_failed=len(report.failed),
        total_chunks=report.indexed,
        backend=rag.backend,
        failures=[IndexFailureInfo(source_id=f.source_id, error=f.error) for f in report.failed],
    )

# src/ragindex/commands/reset.py
"""Reset command - empty the collection.

Uses a callback for confirmation, allowing each UI to implement its own
confirmation method.
"""

from __future__ import annotations

from pathlib import Path

from ragindex.commands.base import ConfirmCallback, ConfirmRequest, ResetResult, open_index
from ragindex.config import ConfigError


def reset(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    on_confirm: ConfirmCallback | None = None,
) -> ResetResult:
    """Delete every record in the collection.

    Args:
        data_dir: Override data directory
        config_path: Override config file path
        on_confirm: Optional confirmation callback. Return True to proceed.
            If None, the reset proceeds without confirmation.
    """
    rag = open_index(data_dir, config_path)
    if isinstance(rag, ConfigError):
        return ResetResult(success=False, error=rag.message)

    try:
        count = rag.count()
        if on_confirm is not None:
            request = ConfirmRequest(
                message=f"Reset the {rag.backend} collection?",
                details=f"This will remove {count} chunks.",
            )
            if not on_confirm(request):
                return ResetResult(success=False, error="Cancelled.")
        rag.reset()
    except Exception as e:
        return ResetResult(success=False, error=f"Reset failed: {e}")
    finally:
        rag.close()

    return ResetResult(success=True, records_deleted=count)

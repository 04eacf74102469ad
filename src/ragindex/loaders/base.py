# src/ragindex/loaders/base.py
"""Loader abstract base class."""

from abc import ABC, abstractmethod
from pathlib import Path

from ragindex.models import Document


def default_source_id(path: str) -> str:
    """Source id used when none is given: the file name without its extension."""
    return Path(path).stem


class Loader(ABC):
    """Abstract base class for file loading."""

    @abstractmethod
    def load(self, path: str, source_id: str | None = None) -> Document:
        """Load a file and return its text as a Document.

        Args:
            path: Path to the file to load
            source_id: Optional custom source identifier. If not provided,
                      the file name without its extension is used.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        ...

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Check if this loader supports the given path."""
        ...

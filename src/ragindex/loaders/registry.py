# src/ragindex/loaders/registry.py
"""Loader registry for auto-selecting file loaders."""

import logging
from pathlib import Path

from ragindex.loaders.base import Loader
from ragindex.loaders.html import HTMLLoader
from ragindex.loaders.text import TextLoader
from ragindex.models import Document

logger = logging.getLogger(__name__)


class LoaderRegistry:
    """Registry for file loaders.

    Automatically selects the appropriate loader based on file extension.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._loaders: list[Loader] = []

    def register(self, loader: Loader) -> None:
        """Register a loader."""
        self._loaders.append(loader)

    def find_loader(self, path: str) -> Loader | None:
        """Find a loader that supports the given path."""
        for loader in self._loaders:
            if loader.supports(path):
                return loader
        return None

    def supports(self, path: str) -> bool:
        return self.find_loader(path) is not None

    def load(self, path: str, source_id: str | None = None) -> Document:
        """Load a file using the appropriate loader.

        Raises:
            ValueError: If no loader supports the file type
        """
        loader = self.find_loader(path)
        if loader is None:
            raise ValueError(f"No loader found for: {path}")
        return loader.load(path, source_id)

    def supported_files(self, directory: str) -> list[Path]:
        """All supported files below ``directory``, in sorted path order."""
        root = Path(directory)
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")
        return [p for p in sorted(root.rglob("*")) if p.is_file() and self.supports(str(p))]

    def load_directory(self, directory: str) -> list[Document]:
        """Load every supported file below a directory, skipping the rest."""
        documents = [self.load(str(path)) for path in self.supported_files(directory)]
        logger.info("Loaded %d documents from %s", len(documents), directory)
        return documents

    @classmethod
    def default(cls) -> "LoaderRegistry":
        """Create a registry with TextLoader and HTMLLoader registered."""
        registry = cls()
        registry.register(TextLoader())
        registry.register(HTMLLoader())
        return registry

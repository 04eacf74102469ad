# src/ragindex/loaders/directory.py
"""Content directory loader."""

from ragindex.loaders.base import default_source_id
from ragindex.loaders.registry import LoaderRegistry
from ragindex.models import Document


class DirectoryLoader:
    """Resolve documents from a content directory by source id.

    A file's source id is its name without extension, so ``guides/intro.md``
    is the source ``intro``.

    Example:
        loader = DirectoryLoader("./content")
        documents = loader.load_all()
        intro = loader.load_source("intro")
    """

    def __init__(self, root: str, registry: LoaderRegistry | None = None) -> None:
        self.root = root
        self.registry = registry or LoaderRegistry.default()

    def load_all(self) -> list[Document]:
        return self.registry.load_directory(self.root)

    def load_source(self, source_id: str) -> Document:
        """Load the single file whose source id is ``source_id``.

        Raises:
            FileNotFoundError: If no supported file has that source id.
            ValueError: If several files share that source id.
        """
        matches = [
            path
            for path in self.registry.supported_files(self.root)
            if default_source_id(str(path)) == source_id
        ]
        if not matches:
            raise FileNotFoundError(f"No content file for source '{source_id}' in {self.root}")
        if len(matches) > 1:
            names = ", ".join(str(p) for p in matches)
            raise ValueError(f"Source id '{source_id}' is ambiguous: {names}")
        return self.registry.load(str(matches[0]), source_id)

# src/ragindex/loaders/text.py
"""Text and Markdown file loader."""

from pathlib import Path

from ragindex.loaders.base import Loader, default_source_id
from ragindex.models import Document


class TextLoader(Loader):
    """Load plain text and markdown files.

    Markup is kept as-is; the chunker strips it before splitting.
    """

    SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown", ".text"}

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file."""
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str, source_id: str | None = None) -> Document:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        content = file_path.read_text(encoding="utf-8")
        return Document(source_id=source_id or default_source_id(path), raw_text=content)

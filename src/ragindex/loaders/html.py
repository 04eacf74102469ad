# src/ragindex/loaders/html.py
"""HTML file loader."""

from pathlib import Path

from bs4 import BeautifulSoup

from ragindex.loaders.base import Loader, default_source_id
from ragindex.models import Document


class HTMLLoader(Loader):
    """Load HTML files as plain text.

    Removes scripts, styles, and navigation elements before extracting the
    visible text, so page chrome does not end up in the chunks.
    """

    SUPPORTED_EXTENSIONS = {".html", ".htm"}

    # Tags to remove entirely (including their content)
    REMOVE_TAGS = ["script", "style", "nav", "footer", "header", "aside", "noscript"]

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file."""
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str, source_id: str | None = None) -> Document:
        """Load an HTML file and return its visible text.

        Args:
            path: Path to the HTML file
            source_id: Optional custom source identifier. If not provided,
                      the file name without its extension is used.

        Raises:
            FileNotFoundError: If file does not exist
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        source = source_id or default_source_id(path)
        content = file_path.read_text(encoding="utf-8")
        if not content.strip():
            return Document(source_id=source, raw_text="")

        soup = BeautifulSoup(content, "html.parser")

        # Extract title before cleaning
        title = soup.title.get_text(strip=True) if soup.title else None

        for tag in soup(self.REMOVE_TAGS):
            tag.decompose()
        if soup.title:
            soup.title.decompose()

        body = soup.get_text("\n", strip=True)
        text = f"{title}\n\n{body}" if title else body
        return Document(source_id=source, raw_text=text)

# src/ragindex/configuration/storage/chroma.py
"""ChromaDB storage configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ragindex.stores import VectorStore


@dataclass(frozen=True)
class ChromaStorage:
    """Durable storage in a ChromaDB collection.

    Uses an embedded persistent client in ``persist_dir``, or a Chroma server
    when ``host`` is given.

    Args:
        persist_dir: Directory for the embedded database. Created if it
                     doesn't exist.
        collection_name: Collection holding the chunks.
        host: Chroma server host (client/server mode).
        port: Chroma server port.

    Example:
        storage = ChromaStorage(persist_dir="./data/chroma")
        storage = ChromaStorage(host="localhost", port=8000)
    """

    persist_dir: str | None = None
    collection_name: str = "content_chunks"
    host: str | None = None
    port: int = 8000

    def build_store(self) -> VectorStore:
        from ragindex.stores import ChromaVectorStore

        return ChromaVectorStore(
            persist_dir=self.persist_dir,
            collection_name=self.collection_name,
            host=self.host,
            port=self.port,
        )

# src/ragindex/models/chunk.py
"""Chunk data models."""

from pydantic import BaseModel, Field


def make_chunk_id(source_id: str, chunk_index: int) -> str:
    """Build the deterministic id of a chunk within its source."""
    return f"{source_id}_chunk_{chunk_index}"


class ChunkMetadata(BaseModel):
    """Position of a chunk within its source document."""

    source_id: str
    chunk_index: int = Field(ge=0)
    total_chunks: int = Field(ge=1)


class Chunk(BaseModel):
    """A bounded, overlapping word window of a document.

    The embedding is absent until the embedding stage has run.
    """

    id: str
    text: str
    metadata: ChunkMetadata
    embedding: list[float] | None = None

    @property
    def source_id(self) -> str:
        return self.metadata.source_id

    def with_embedding(self, embedding: list[float]) -> "Chunk":
        """Return a copy of this chunk carrying the given embedding."""
        return self.model_copy(update={"embedding": list(embedding)})

# src/ragindex/models/record.py
"""Stored vector record model."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from ragindex.models.chunk import Chunk, ChunkMetadata


def utcnow() -> datetime:
    return datetime.now(UTC)


class VectorRecord(BaseModel):
    """A chunk as persisted by a vector store, with storage bookkeeping."""

    id: str
    text: str
    embedding: list[float]
    metadata: ChunkMetadata
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def source_id(self) -> str:
        return self.metadata.source_id

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "VectorRecord":
        """Build a record from an embedded chunk.

        Raises:
            ValueError: If the chunk has not been embedded yet.
        """
        if chunk.embedding is None:
            raise ValueError(f"Chunk '{chunk.id}' has no embedding")
        return cls(
            id=chunk.id,
            text=chunk.text,
            embedding=list(chunk.embedding),
            metadata=chunk.metadata,
        )

    def same_content(self, other: "VectorRecord") -> bool:
        """True if both records hold the same text, embedding and metadata."""
        return (
            self.id == other.id
            and self.text == other.text
            and self.embedding == other.embedding
            and self.metadata == other.metadata
        )

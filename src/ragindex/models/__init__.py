"""Data models for ragindex."""

from ragindex.models.chunk import Chunk, ChunkMetadata, make_chunk_id
from ragindex.models.document import Document
from ragindex.models.record import VectorRecord
from ragindex.models.results import (
    HealthStatus,
    IndexFailure,
    IndexReport,
    ScoredRecord,
    SearchResponse,
)

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "Document",
    "HealthStatus",
    "IndexFailure",
    "IndexReport",
    "ScoredRecord",
    "SearchResponse",
    "VectorRecord",
    "make_chunk_id",
]

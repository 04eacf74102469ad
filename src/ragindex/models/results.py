# src/ragindex/models/results.py
"""Result data models for indexing runs and queries."""

from pydantic import BaseModel, Field

from ragindex.models.record import VectorRecord


class ScoredRecord(BaseModel):
    """A stored record and its cosine similarity to the query."""

    record: VectorRecord
    similarity: float


class SearchResponse(BaseModel):
    """Ranked results of a query plus the backend that served it."""

    query: str
    results: list[ScoredRecord]
    backend: str


class IndexFailure(BaseModel):
    """A document that could not be indexed."""

    source_id: str
    error: str
    error_type: str


class IndexReport(BaseModel):
    """Summary of an indexing run.

    Documents indexed before a failing document stay indexed; failures are
    listed rather than rolled back.
    """

    indexed: int = 0  # Total chunks written
    documents: int = 0  # Documents fully indexed
    failed: list[IndexFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "IndexReport") -> "IndexReport":
        return IndexReport(
            indexed=self.indexed + other.indexed,
            documents=self.documents + other.documents,
            failed=[*self.failed, *other.failed],
        )


class HealthStatus(BaseModel):
    """Result of a vector store health check."""

    backend: str
    connected: bool
    record_count: int = 0
    error: str | None = None

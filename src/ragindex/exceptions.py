# src/ragindex/exceptions.py
"""Exceptions raised by the indexing and retrieval pipeline."""


class RagIndexError(Exception):
    """Base class for all ragindex errors."""


class ChunkingInputError(RagIndexError, ValueError):
    """Raised when the chunk size / overlap configuration is invalid.

    Not retryable: the same configuration will always fail.
    """


class EmbeddingProviderError(RagIndexError):
    """Raised when a call to the embedding provider fails.

    Attributes:
        batch_index: Index of the sub-batch that failed.
        succeeded: Number of texts embedded by earlier sub-batches of the same call.
        source_id: Document being indexed when the failure happened, if known.
    """

    def __init__(
        self,
        message: str,
        batch_index: int | None = None,
        succeeded: int = 0,
        source_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.batch_index = batch_index
        self.succeeded = succeeded
        self.source_id = source_id


class EmbeddingTimeoutError(EmbeddingProviderError):
    """Raised when an embedding call exceeds the caller-supplied timeout.

    Attributes:
        timeout: The timeout in seconds that expired.
    """

    def __init__(
        self,
        message: str,
        batch_index: int | None = None,
        succeeded: int = 0,
        source_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(message, batch_index=batch_index, succeeded=succeeded, source_id=source_id)
        self.timeout = timeout


class DimensionMismatchError(RagIndexError):
    """Raised when an embedding length disagrees with the collection's dimensionality.

    Attributes:
        expected: Dimensionality established by the collection.
        actual: Length of the offending embedding.
        record_id: Id of the offending record (None for query embeddings).
    """

    def __init__(self, expected: int, actual: int, record_id: str | None = None) -> None:
        target = f"record '{record_id}'" if record_id else "query embedding"
        super().__init__(
            f"Embedding dimension mismatch for {target}: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual
        self.record_id = record_id


class StoreUnavailableError(RagIndexError):
    """Raised when the vector store backend cannot be reached.

    Attributes:
        backend: Name of the backend that failed.
    """

    def __init__(self, message: str, backend: str | None = None) -> None:
        super().__init__(message)
        self.backend = backend

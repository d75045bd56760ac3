"""Custom exception hierarchy for lexrag.

All library exceptions inherit from :class:`LexRagError`, which carries an
optional ``provider_name`` so error handlers can identify which external
service (e.g. "gemini_embedding", "openai_embedding") caused the failure.

The hierarchy is organized by retrieval-pipeline concern:

    LexRagError  (base -- catch-all for any lexrag error)
    +-- ConfigurationError          (startup / missing config)
    |   +-- InvalidConfigurationError  (chunking parameters out of range)
    +-- RemoteServiceError          (embedding service call failed)
    +-- DimensionMismatchError      (embedding length differs from the store)
    +-- IngestionError              (source document could not be read)

Callers are expected to fix parameters on InvalidConfigurationError, decide
on their own retry policy for RemoteServiceError, and treat
DimensionMismatchError as a sign that the embedding model changed under a
live store.
"""

from __future__ import annotations

_MAX_BODY_CHARS = 500


class LexRagError(Exception):
    """Base exception for all lexrag errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[gemini_embedding] Request timed out``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(LexRagError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidConfigurationError(ConfigurationError):
    """Raised when chunking parameters violate ``0 <= overlap < chunk_size``.

    Not retryable: the caller must fix the parameters first.
    """

    def __init__(
        self,
        message: str = "Invalid chunking parameters",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Embedding service errors
# ---------------------------------------------------------------------------

class RemoteServiceError(LexRagError):
    """Raised when an embedding call fails.

    Covers network errors, timeouts, non-success HTTP responses and
    malformed payloads.  The optional fields give the UI layer enough detail
    to render an actionable message:

    Parameters
    ----------
    chunk_index:
        Position of the chunk whose embedding failed inside an insert batch.
        ``None`` for single-text calls (queries).
    status_code:
        HTTP status returned by the service, when there was one.
    response_body:
        The (truncated) payload the service returned, when there was one.
    """

    def __init__(
        self,
        message: str = "Embedding service call failed",
        provider_name: str | None = None,
        chunk_index: int | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._chunk_index = chunk_index
        self._status_code = status_code
        if response_body is not None and len(response_body) > _MAX_BODY_CHARS:
            response_body = response_body[:_MAX_BODY_CHARS] + "..."
        self._response_body = response_body

    @property
    def chunk_index(self) -> int | None:
        return self._chunk_index

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def response_body(self) -> str | None:
        return self._response_body

    def with_chunk_index(self, chunk_index: int) -> RemoteServiceError:
        """Return a copy of this error annotated with the failing chunk index."""
        return RemoteServiceError(
            message=f"{self.message} (chunk {chunk_index})",
            provider_name=self.provider_name,
            chunk_index=chunk_index,
            status_code=self.status_code,
            response_body=self.response_body,
        )


# ---------------------------------------------------------------------------
# Vector store errors
# ---------------------------------------------------------------------------

class DimensionMismatchError(LexRagError):
    """Raised when an embedding's length differs from the store's dimension.

    Comparing vectors of different lengths silently corrupts similarity
    scores, so the store refuses them instead.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        chunk_index: int | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._expected = expected
        self._actual = actual
        self._chunk_index = chunk_index
        location = f" at chunk {chunk_index}" if chunk_index is not None else ""
        super().__init__(
            message=(
                f"Embedding dimension mismatch{location}: "
                f"expected {expected}, got {actual}"
            ),
            provider_name=provider_name,
        )

    @property
    def expected(self) -> int:
        return self._expected

    @property
    def actual(self) -> int:
        return self._actual

    @property
    def chunk_index(self) -> int | None:
        return self._chunk_index


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class IngestionError(LexRagError):
    """Raised when a source document cannot be read into plain text."""

    def __init__(
        self,
        message: str = "Failed to process document",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

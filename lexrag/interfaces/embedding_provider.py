"""Abstract base class for text-embedding service providers.

Defines the narrow capability the vector store depends on: turn text into a
dense vector.  Implementations wrap Google's Gemini ``text-embedding-004``
or any OpenAI-compatible embeddings endpoint; tests inject a deterministic
fake so chunking and ranking can be verified without a network.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations (lexrag/providers/embedding/):
#   GeminiEmbeddingProvider  - text-embedding-004 over the REST API (httpx)
#   OpenAIEmbeddingProvider  - text-embedding-3-small or compatible (openai SDK)
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the vector store.

    Each call is one or more network round trips; all methods that talk to
    the service are coroutines so callers yield while waiting.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.  Implementations handle
            batching internally if the underlying API has a per-call limit.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.

        Raises
        ------
        lexrag.utils.errors.RemoteServiceError
            If the call fails, times out, or the payload is malformed.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Raises
        ------
        lexrag.utils.errors.RemoteServiceError
            If the call fails, times out, or the payload is malformed.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality the provider's model is documented to produce.

        Informational only: the vector store validates against the vectors
        it has actually stored, not against this value.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"gemini_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials present)."""

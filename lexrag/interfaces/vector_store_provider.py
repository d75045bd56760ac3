"""Abstract base class for vector-store providers.

Defines the contract for storing embedded chunks and answering similarity
queries.  The only implementation today is a linear-scan in-memory store,
which suits the few hundred chunks a user uploads in one session.  An
approximate-nearest-neighbour index can replace it behind this same
interface without touching ingestion or prompt augmentation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from lexrag.models.rag import CorpusStats, RetrievedEntry, VectorEntry


# Concrete implementation: InMemoryVectorStore (lexrag/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for vector stores used by ingestion and research.

    Query and mutation methods are async because embedding the inserted or
    queried text is a network call.
    """

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Embed *text* with the store's embedding provider.

        Raises
        ------
        lexrag.utils.errors.RemoteServiceError
            If the embedding call fails.
        """

    @abstractmethod
    async def insert(
        self,
        chunks: Sequence[str],
        metadata: dict[str, Any] | None = None,
    ) -> list[VectorEntry]:
        """Embed and store *chunks*, all or nothing.

        Parameters
        ----------
        chunks:
            Chunk texts, typically the output of the chunker.
        metadata:
            Metadata copied onto every new entry (e.g. ``file_name``).

        Returns
        -------
        list[VectorEntry]
            The new entries, in the same order as *chunks*.

        Raises
        ------
        lexrag.utils.errors.RemoteServiceError
            If embedding any chunk fails; ``chunk_index`` names which one.
        lexrag.utils.errors.DimensionMismatchError
            If an embedding's length differs from the stored dimension.
        """

    @abstractmethod
    async def query(self, query_text: str, top_k: int = 3) -> list[RetrievedEntry]:
        """Return the *top_k* stored entries most similar to *query_text*.

        Results are ordered by descending cosine similarity; equal scores
        keep insertion order.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry.  Calling it on an empty store is a no-op."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored entries."""

    @abstractmethod
    async def get_stats(self) -> CorpusStats:
        """Return a snapshot of the store's size and composition."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"in_memory"``."""

"""In-memory vector store with cosine-similarity search.

Implements :class:`IVectorStoreProvider` as a linear scan over entries held
in process memory.  Nothing is persisted: the store lives as long as the
object that owns it, so every session (or test) can build its own.

Concurrency model
-----------------
* All network I/O (embedding) happens *before* any state is touched.
* Mutations (``insert`` commit, ``clear``) serialise on an ``asyncio.Lock``
  and replace the whole snapshot in one assignment (copy-on-write).
* Queries read whichever snapshot is current when they start and never
  lock, so they always see a consistent set of entries.

Because the commit happens in a single step after every await, an insert
that fails or is cancelled while waiting on the embedding service leaves
the store exactly as it was.
"""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections import Counter
from typing import Any, NamedTuple, Sequence

import numpy as np
import structlog

from lexrag.interfaces.embedding_provider import IEmbeddingProvider
from lexrag.interfaces.vector_store_provider import IVectorStoreProvider
from lexrag.models.rag import CorpusStats, RetrievedEntry, VectorEntry
from lexrag.utils.concurrency import throttled_gather
from lexrag.utils.errors import DimensionMismatchError, RemoteServiceError

logger = structlog.get_logger(logger_name=__name__)

# Metadata key used to group entries by originating document in stats.
SOURCE_METADATA_KEY = "file_name"


# ---------------------------------------------------------------------------
# Similarity math
# ---------------------------------------------------------------------------


def _rescale(vec: np.ndarray) -> np.ndarray:
    """Divide *vec* by its largest absolute component (zero vectors pass through)."""
    peak = float(np.max(np.abs(vec))) if vec.size else 0.0
    return vec / peak if peak > 0.0 else vec


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Return ``dot(a, b) / (|a| * |b|)``.

    A zero-norm vector has no direction, so any comparison involving one
    scores ``0.0``.  Both vectors are rescaled to a peak magnitude of 1
    first, so very large or very small components neither overflow nor
    underflow the norms.  Non-finite results score ``0.0`` and the rest
    are clipped into ``[-1, 1]``.

    Raises
    ------
    DimensionMismatchError
        If the vectors have different lengths.
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(expected=len(vec_a), actual=len(vec_b))

    a = _rescale(np.asarray(vec_a, dtype=np.float64))
    b = _rescale(np.asarray(vec_b, dtype=np.float64))
    denom = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if denom == 0.0:
        return 0.0
    score = float(np.dot(a, b) / denom)
    if not np.isfinite(score):
        return 0.0
    return float(np.clip(score, -1.0, 1.0))


def cosine_similarities(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """Score every row of *matrix* against *query* (zero-norm rows score 0)."""
    q = _rescale(np.asarray(query, dtype=np.float64))
    peaks = np.max(np.abs(matrix), axis=1, keepdims=True)
    rows = np.divide(matrix, peaks, out=np.zeros_like(matrix, dtype=np.float64), where=peaks > 0)
    dots = rows @ q
    denom = np.linalg.norm(rows, axis=1) * np.linalg.norm(q)
    scores = np.divide(dots, denom, out=np.zeros_like(dots), where=denom > 0)
    scores[~np.isfinite(scores)] = 0.0
    return np.clip(scores, -1.0, 1.0)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class _Snapshot(NamedTuple):
    """Immutable view of the store: entries plus their stacked embeddings."""

    entries: tuple[VectorEntry, ...]
    matrix: np.ndarray | None

    @property
    def dimension(self) -> int | None:
        return None if self.matrix is None else int(self.matrix.shape[1])


_EMPTY = _Snapshot(entries=(), matrix=None)


def _detached(entry: VectorEntry) -> VectorEntry:
    """Copy of *entry* whose metadata the caller may mutate without touching the store."""
    return entry.model_copy(update={"metadata": copy.deepcopy(entry.metadata)})


class InMemoryVectorStore(IVectorStoreProvider):
    """Vector store that keeps embedded chunks in process memory.

    Parameters
    ----------
    embedding_provider:
        Turns chunk and query text into vectors.
    max_concurrency:
        How many embedding requests one ``insert`` may have in flight.
        ``1`` (the default) embeds chunks one after another in order.
    """

    def __init__(self, embedding_provider: IEmbeddingProvider, max_concurrency: int = 1) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
        self._embedding_provider = embedding_provider
        self._max_concurrency = max_concurrency
        self._snapshot: _Snapshot = _EMPTY
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[VectorEntry, ...]:
        """The currently stored entries, in insertion order."""
        return tuple(_detached(entry) for entry in self._snapshot.entries)

    @property
    def dimension(self) -> int | None:
        """Embedding length shared by all entries, or ``None`` while empty."""
        return self._snapshot.dimension

    def count(self) -> int:
        return len(self._snapshot.entries)

    def get_provider_name(self) -> str:
        return "in_memory"

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> list[float]:
        """Embed *text* with the injected provider (one network round trip)."""
        return await self._embedding_provider.embed_single(text)

    async def insert(
        self,
        chunks: Sequence[str],
        metadata: dict[str, Any] | None = None,
    ) -> list[VectorEntry]:
        """Embed every chunk, then commit the whole batch atomically.

        Raises
        ------
        RemoteServiceError
            If any chunk fails to embed.  ``chunk_index`` is the failing
            position (the lowest one when embedding concurrently).  Nothing
            is stored.
        DimensionMismatchError
            If any embedding's length differs from the store's dimension
            (or, for an empty store, from the batch's first embedding).
            Nothing is stored.
        """
        if not chunks:
            return []

        embeddings = await self._embed_batch(chunks)
        shared_metadata = copy.deepcopy(dict(metadata or {}))

        async with self._write_lock:
            current = self._snapshot
            expected = current.dimension
            if expected is None:
                expected = len(embeddings[0])
            for idx, embedding in enumerate(embeddings):
                if len(embedding) != expected:
                    logger.warning(
                        "vector_store_dimension_mismatch",
                        expected=expected,
                        actual=len(embedding),
                        chunk_index=idx,
                    )
                    raise DimensionMismatchError(
                        expected=expected,
                        actual=len(embedding),
                        chunk_index=idx,
                        provider_name=self._embedding_provider.get_provider_name(),
                    )

            taken = {entry.entry_id for entry in current.entries}
            new_entries: list[VectorEntry] = []
            for chunk, embedding in zip(chunks, embeddings):
                entry_id = self._new_entry_id(taken)
                taken.add(entry_id)
                new_entries.append(
                    VectorEntry(
                        entry_id=entry_id,
                        text=chunk,
                        embedding=tuple(float(v) for v in embedding),
                        metadata=shared_metadata,
                    )
                )

            new_rows = np.asarray([e.embedding for e in new_entries], dtype=np.float64)
            matrix = new_rows if current.matrix is None else np.vstack([current.matrix, new_rows])
            self._snapshot = _Snapshot(entries=current.entries + tuple(new_entries), matrix=matrix)

        logger.info(
            "vector_store_insert",
            inserted=len(new_entries),
            total=len(self._snapshot.entries),
            dimension=expected,
        )
        return [_detached(entry) for entry in new_entries]

    async def query(self, query_text: str, top_k: int = 3) -> list[RetrievedEntry]:
        """Rank stored entries against *query_text* by cosine similarity.

        The query is embedded before the store is inspected, so an empty
        store still costs one embedding call (and still surfaces an
        embedding failure to the caller).

        Raises
        ------
        ValueError
            If *top_k* is negative.
        RemoteServiceError
            If embedding the query fails.
        DimensionMismatchError
            If the query embedding's length differs from the stored entries.
        """
        if top_k < 0:
            raise ValueError(f"top_k must be non-negative, got {top_k}")

        query_embedding = await self.embed(query_text)

        snapshot = self._snapshot
        if not snapshot.entries or top_k == 0:
            logger.debug("vector_store_query_empty", entries=len(snapshot.entries), top_k=top_k)
            return []

        if len(query_embedding) != snapshot.dimension:
            raise DimensionMismatchError(
                expected=snapshot.dimension,
                actual=len(query_embedding),
                provider_name=self._embedding_provider.get_provider_name(),
            )

        scores = cosine_similarities(query_embedding, snapshot.matrix)
        # Stable sort on the negated scores keeps insertion order for ties.
        ranked = np.argsort(-scores, kind="stable")[:top_k]
        results = [
            RetrievedEntry(entry=_detached(snapshot.entries[i]), similarity=float(scores[i]))
            for i in ranked
        ]

        logger.debug(
            "vector_store_query",
            candidates=len(snapshot.entries),
            returned=len(results),
            top_score=results[0].similarity,
        )
        return results

    async def clear(self) -> None:
        async with self._write_lock:
            removed = len(self._snapshot.entries)
            self._snapshot = _EMPTY
        logger.info("vector_store_cleared", removed=removed)

    async def get_stats(self) -> CorpusStats:
        snapshot = self._snapshot
        by_source = Counter(
            str(entry.metadata[SOURCE_METADATA_KEY])
            for entry in snapshot.entries
            if SOURCE_METADATA_KEY in entry.metadata
        )
        return CorpusStats(
            total_entries=len(snapshot.entries),
            dimension=snapshot.dimension,
            entries_by_source=dict(sorted(by_source.items())),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _embed_batch(self, chunks: Sequence[str]) -> list[list[float]]:
        """Embed *chunks* in order, tagging failures with their chunk index."""
        if self._max_concurrency == 1:
            embeddings: list[list[float]] = []
            for idx, chunk in enumerate(chunks):
                try:
                    embeddings.append(await self.embed(chunk))
                except RemoteServiceError as exc:
                    self._log_embed_failure(idx, len(chunks), exc)
                    raise exc.with_chunk_index(idx) from exc
            return embeddings

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await throttled_gather(
            [self.embed(chunk) for chunk in chunks],
            semaphore=semaphore,
            return_exceptions=True,
        )
        for idx, result in enumerate(results):
            if isinstance(result, RemoteServiceError):
                self._log_embed_failure(idx, len(chunks), result)
                raise result.with_chunk_index(idx) from result
            if isinstance(result, BaseException):
                raise result
        return results  # type: ignore[return-value]

    @staticmethod
    def _log_embed_failure(idx: int, total: int, exc: RemoteServiceError) -> None:
        logger.warning(
            "vector_store_insert_aborted",
            chunk_index=idx,
            batch_size=total,
            error=str(exc),
        )

    @staticmethod
    def _new_entry_id(taken: set[str]) -> str:
        entry_id = uuid.uuid4().hex
        while entry_id in taken:
            entry_id = uuid.uuid4().hex
        return entry_id

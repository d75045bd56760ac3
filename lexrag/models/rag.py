"""Retrieval data models for the lexrag document lookup.

Defines Pydantic v2 models for text chunks, stored vector entries, ranked
retrieval results, ingestion summaries and store statistics.  All models use
frozen config so that a chunk or entry cannot change after it is created.

RAG overview:
    1. INGESTION: the text of an uploaded document is split into
       overlapping fixed-size windows (services/ingestion/chunker.py).
    2. EMBEDDING: each window is turned into a dense vector by an external
       embedding service (providers/embedding/).
    3. STORAGE: windows + vectors live in an in-memory store for the
       lifetime of the process (providers/vector_store/).
    4. RETRIEVAL: a user question is embedded the same way and the closest
       windows by cosine similarity are returned.
    5. GENERATION: the retrieved text is placed into a prompt for a
       text-generation model (services/research_service.py builds it).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# TextChunk - a window of a source document.
# ---------------------------------------------------------------------------
class TextChunk(BaseModel):
    """A contiguous substring ``source[start:end]`` of a source document."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, description="Start offset within the source text (inclusive).")
    end: int = Field(ge=0, description="End offset within the source text (exclusive).")
    text: str = Field(description="The chunk's textual content.")

    @model_validator(mode="after")
    def _check_offsets(self) -> TextChunk:
        if self.end - self.start != len(self.text):
            raise ValueError(
                f"offset range [{self.start}, {self.end}) does not match "
                f"text length {len(self.text)}"
            )
        return self

    @property
    def length(self) -> int:
        return self.end - self.start


# ---------------------------------------------------------------------------
# VectorEntry - an embedded chunk held by the vector store.
# ---------------------------------------------------------------------------
class VectorEntry(BaseModel):
    """A stored, embedded chunk.

    Created by :meth:`InMemoryVectorStore.insert`; lives until the store is
    cleared.  The embedding is a tuple so the frozen model is immutable all
    the way down.  The store hands out copies, so editing the metadata of a
    returned entry does not change what is stored.
    """

    model_config = ConfigDict(frozen=True)

    entry_id: str = Field(description="Opaque identifier, unique within the store.")
    text: str = Field(description="The original chunk text.")
    embedding: tuple[float, ...] = Field(description="Dense embedding vector.")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description='Free-form metadata, e.g. {"file_name": "lease.txt"}.',
    )

    @property
    def dimension(self) -> int:
        return len(self.embedding)


# ---------------------------------------------------------------------------
# RetrievedEntry - one ranked query result.
# ---------------------------------------------------------------------------
class RetrievedEntry(BaseModel):
    """A vector entry returned from a query together with its score.

    Prompt augmentation only relies on :attr:`text` and :attr:`similarity`.
    """

    model_config = ConfigDict(frozen=True)

    entry: VectorEntry = Field(description="The matching stored entry.")
    similarity: float = Field(
        description="Cosine similarity between the query and the entry, in [-1, 1].",
    )

    @property
    def text(self) -> str:
        return self.entry.text

    @property
    def entry_id(self) -> str:
        return self.entry.entry_id

    @property
    def metadata(self) -> dict[str, Any]:
        return self.entry.metadata


# ---------------------------------------------------------------------------
# IngestionResult - output of ingesting one document.
# ---------------------------------------------------------------------------
class IngestionResult(BaseModel):
    """Summary of a single document ingestion run."""

    model_config = ConfigDict(frozen=True)

    source_name: str = Field(description="File name or label of the ingested document.")
    chunks_created: int = Field(default=0, ge=0, description="Number of entries stored.")
    characters: int = Field(default=0, ge=0, description="Length of the ingested text.")
    ingestion_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Wall-clock time in seconds for the ingestion run.",
    )


# ---------------------------------------------------------------------------
# CorpusStats - snapshot of the store's contents.
# ---------------------------------------------------------------------------
class CorpusStats(BaseModel):
    """Aggregate statistics for an in-memory vector store."""

    model_config = ConfigDict(frozen=True)

    total_entries: int = Field(default=0, ge=0, description="Number of stored entries.")
    dimension: int | None = Field(
        default=None,
        description="Embedding dimensionality, or None while the store is empty.",
    )
    entries_by_source: dict[str, int] = Field(
        default_factory=dict,
        description='Entry count per "file_name" metadata value.',
    )

    @property
    def total_sources(self) -> int:
        return len(self.entries_by_source)

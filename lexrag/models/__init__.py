"""lexrag data models - re-exports all public model classes.

Import models from ``lexrag.models`` rather than from ``lexrag.models.rag``
directly.  If you add a new model class, remember to add it to ``__all__``.
"""

from __future__ import annotations

from lexrag.models.rag import (
    CorpusStats,
    IngestionResult,
    RetrievedEntry,
    TextChunk,
    VectorEntry,
)

__all__ = [
    "CorpusStats",
    "IngestionResult",
    "RetrievedEntry",
    "TextChunk",
    "VectorEntry",
]

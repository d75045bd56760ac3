"""Vector store provider implementations.

InMemoryVectorStore is the sole implementation: embedded chunks live in
process memory and are ranked by a linear cosine-similarity scan.  To use an
approximate-nearest-neighbour index instead, implement IVectorStoreProvider
and wire it in main.py.
"""

from lexrag.providers.vector_store.memory_vector_store import (
    InMemoryVectorStore,
    cosine_similarity,
)

__all__ = ["InMemoryVectorStore", "cosine_similarity"]

"""Public interface definitions for lexrag's pluggable collaborators.

The embedding service and the vector store are reached exclusively through
the abstract base classes in this package.  Concrete adapters live in
``lexrag/providers/`` and are wired together in ``lexrag/main.py``, so tests
can inject fakes and a different embedding backend is a one-line change.

CONCRETE PROVIDER MAP:
    Interface               →  Concrete implementations (in lexrag/providers/)
    ─────────────────────────────────────────────────────────────────────
    IEmbeddingProvider      →  GeminiEmbeddingProvider, OpenAIEmbeddingProvider
    IVectorStoreProvider    →  InMemoryVectorStore
"""

from lexrag.interfaces.embedding_provider import IEmbeddingProvider
from lexrag.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IEmbeddingProvider",
    "IVectorStoreProvider",
]

"""Embedding provider implementations.

Embeddings convert text into numeric vectors that capture semantic meaning.
The vector store compares them by cosine similarity to find the passages of
uploaded documents that best match a research question.

Two implementations of IEmbeddingProvider (in selection priority order):
    1. GeminiEmbeddingProvider  - text-embedding-004 (768 dims) via REST.
    2. OpenAIEmbeddingProvider  - text-embedding-3-small (1536 dims) or any
       OpenAI-compatible endpoint.
"""

from lexrag.providers.embedding.gemini_embedding_provider import GeminiEmbeddingProvider
from lexrag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["GeminiEmbeddingProvider", "OpenAIEmbeddingProvider"]

"""Dependency assembly for lexrag.

Selects the embedding provider from the configured API keys and wires the
chunker, vector store, ingestion service and research service together.
The CLI and any embedding application (web handler, notebook, worker) use
:func:`build_retrieval` instead of constructing the pieces by hand.
"""

from __future__ import annotations

from typing import Any

import structlog

from lexrag.config.settings import Settings
from lexrag.interfaces.embedding_provider import IEmbeddingProvider
from lexrag.providers.vector_store.memory_vector_store import InMemoryVectorStore
from lexrag.services.ingestion.chunker import TextChunker
from lexrag.services.ingestion.ingestion_service import IngestionService
from lexrag.services.research_service import ResearchService
from lexrag.utils.errors import ConfigurationError
from lexrag.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Embedding provider selection
# ---------------------------------------------------------------------------


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider | None:
    """Select the first available embedding provider.

    Priority: Gemini (if API key set) -> OpenAI/OpenAI-compatible (if API
    key set).  Returns ``None`` if neither is configured.
    """
    if app_settings.gemini_api_key:
        from lexrag.providers.embedding.gemini_embedding_provider import (
            GeminiEmbeddingProvider,
        )

        provider: IEmbeddingProvider = GeminiEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider

    if app_settings.openai_api_key:
        from lexrag.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        provider = OpenAIEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider

    return None


# ---------------------------------------------------------------------------
# Full assembly
# ---------------------------------------------------------------------------


def build_retrieval(
    custom_settings: Settings | None = None,
    embedding_provider: IEmbeddingProvider | None = None,
    context_separator: str = "\n\n",
) -> dict[str, Any]:
    """Construct the retrieval components with injected dependencies.

    Parameters
    ----------
    custom_settings:
        Application settings.  Read from the environment when omitted.
    embedding_provider:
        Use this provider instead of selecting one from the settings.
    context_separator:
        Placed between retrieved passages in research prompts.

    Returns
    -------
    dict
        Components keyed by role: ``chunker``, ``embedding_provider``,
        ``vector_store``, ``ingestion_service``, ``research_service``,
        ``settings``.

    Raises
    ------
    ConfigurationError
        If no embedding provider is configured.
    lexrag.utils.errors.InvalidConfigurationError
        If the chunking settings are out of range.
    """
    s = custom_settings or Settings()

    provider = embedding_provider or _build_embedding_provider(s)
    if provider is None:
        raise ConfigurationError(
            "No embedding provider available. Set GEMINI_API_KEY "
            "(text-embedding-004) or OPENAI_API_KEY (text-embedding-3-small)."
        )

    chunker = TextChunker(chunk_size=s.chunk_size, overlap=s.chunk_overlap)
    vector_store = InMemoryVectorStore(
        embedding_provider=provider,
        max_concurrency=max(1, s.embed_concurrency),
    )
    ingestion_service = IngestionService(chunker=chunker, vector_store=vector_store)
    research_service = ResearchService(
        vector_store=vector_store,
        top_k=s.rag_top_k,
        separator=context_separator,
    )

    _logger.info(
        "retrieval_assembled",
        embedding_provider=provider.get_provider_name(),
        vector_store=vector_store.get_provider_name(),
        chunk_size=chunker.chunk_size,
        overlap=chunker.overlap,
    )

    return {
        "chunker": chunker,
        "embedding_provider": provider,
        "vector_store": vector_store,
        "ingestion_service": ingestion_service,
        "research_service": research_service,
        "settings": s,
    }

"""Shared pytest fixtures for the lexrag test suite."""

from __future__ import annotations

import asyncio
import hashlib
import re
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from lexrag.config.settings import Settings
from lexrag.interfaces.embedding_provider import IEmbeddingProvider
from lexrag.providers.vector_store.memory_vector_store import InMemoryVectorStore
from lexrag.services.ingestion.chunker import TextChunker
from lexrag.utils.errors import RemoteServiceError

# Loggers must not cache the stdout of the test that first used them.
structlog.configure(cache_logger_on_first_use=False)

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides) -> Settings:
    """Build a Settings instance with no API keys and default retrieval knobs.

    Every field that could leak in from the developer's environment is
    pinned explicitly.
    """
    defaults = {
        "gemini_api_key": "",
        "gemini_base_url": "https://generativelanguage.googleapis.com/v1beta",
        "gemini_embedding_model": "text-embedding-004",
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_embedding_model": "",
        "embedding_timeout": 5.0,
        "chunk_size": 1000,
        "chunk_overlap": 200,
        "rag_top_k": 3,
        "embed_concurrency": 1,
        "app_env": "test",
        "log_level": "INFO",
    }
    defaults.update(overrides)
    return Settings(**defaults)


# ---------------------------------------------------------------------------
# Embedding fakes
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 64
_WORD_RE = re.compile(r"[a-z0-9]+")


def _bag_of_words_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Deterministic bag-of-words vector: one SHA-256 bucket per word.

    Texts sharing vocabulary point in similar directions, which is enough
    for ranking assertions.  Text with no words maps to the zero vector.
    """
    vector = [0.0] * dim
    for word in _WORD_RE.findall(text.lower()):
        bucket = int.from_bytes(hashlib.sha256(word.encode("utf-8")).digest()[:4], "big") % dim
        vector[bucket] += 1.0
    return vector


class FakeEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider for tests.

    Parameters
    ----------
    vectors:
        Fixed embeddings for specific texts; anything else is embedded as a
        bag-of-words vector.
    fail_on:
        Texts whose embedding raises :class:`RemoteServiceError`.
    delays:
        Seconds to sleep before answering for specific texts, to shuffle
        completion order under concurrency.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        fail_on: set[str] | None = None,
        delays: dict[str, float] | None = None,
        dimension: int = _EMBEDDING_DIM,
    ) -> None:
        self.vectors = dict(vectors or {})
        self.fail_on = set(fail_on or ())
        self.delays = dict(delays or {})
        self.dimension = dimension
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_single(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(text, 0.0)
            if delay:
                await asyncio.sleep(delay)
            if text in self.fail_on:
                raise RemoteServiceError(
                    message="Embedding service unavailable",
                    provider_name=self.get_provider_name(),
                    status_code=503,
                    response_body='{"error": "unavailable"}',
                )
            if text in self.vectors:
                return list(self.vectors[text])
            return _bag_of_words_vector(text, self.dimension)
        finally:
            self.in_flight -= 1

    def get_dimension(self) -> int:
        return self.dimension

    def get_provider_name(self) -> str:
        return "fake_embedding"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def vector_store(fake_embedder: FakeEmbeddingProvider) -> InMemoryVectorStore:
    """A fresh, empty store backed by the bag-of-words fake."""
    return InMemoryVectorStore(embedding_provider=fake_embedder)


@pytest.fixture
def chunker() -> TextChunker:
    return TextChunker(chunk_size=1000, overlap=200)


@pytest.fixture
def mock_embedding_provider() -> MagicMock:
    """A MagicMock satisfying IEmbeddingProvider with async embed methods."""
    provider = MagicMock(spec=IEmbeddingProvider)
    provider.embed = AsyncMock(return_value=[[0.1, 0.2, 0.3]])
    provider.embed_single = AsyncMock(return_value=[0.1, 0.2, 0.3])
    provider.get_dimension.return_value = 3
    provider.get_provider_name.return_value = "mock_embedding"
    provider.is_available.return_value = True
    return provider


_LEASE_CLAUSES = [
    "1. Term. The lease term begins on the commencement date and runs for "
    "twenty four months unless terminated earlier under this agreement.",
    "2. Rent. The tenant shall pay monthly rent in advance on the first day of "
    "each month by bank transfer to the account nominated by the landlord.",
    "3. Security deposit. The tenant shall deposit an amount equal to two "
    "months rent which the landlord holds as security for performance.",
    "4. Termination. Either party may terminate this lease by giving the other "
    "party at least ninety days written notice of termination.",
    "5. Indemnity. The tenant shall indemnify the landlord against all claims "
    "arising from the tenant's use of the premises, capped at the annual rent.",
    "6. Governing law. This lease is governed by the laws of the state in which "
    "the premises are located and the parties submit to its courts.",
]


@pytest.fixture
def sample_lease_text() -> str:
    """A multi-clause lease long enough to produce several 300-char windows."""
    return "\n\n".join(_LEASE_CLAUSES)


@pytest.fixture
def sample_lease_file(tmp_path: Path, sample_lease_text: str) -> Path:
    path = tmp_path / "lease.txt"
    path.write_text(sample_lease_text, encoding="utf-8")
    return path

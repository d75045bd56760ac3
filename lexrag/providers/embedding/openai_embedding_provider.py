"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Supports both real OpenAI and OpenAI-compatible providers (TogetherAI,
Ollama's ``/v1`` endpoint, ...) via custom ``base_url`` and model settings.
"""

from __future__ import annotations

from typing import Any

import openai
import structlog

from lexrag.config.settings import Settings
from lexrag.interfaces.embedding_provider import IEmbeddingProvider
from lexrag.utils.errors import RemoteServiceError

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "nomic-embed-text": 768,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-3-small`` (1536 dims) by default.  When
    ``openai_base_url`` is configured the client points at that URL and
    uses ``openai_embedding_model`` if set.  Inputs larger than the
    per-call limit are split into several requests.
    """

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.openai_api_key

        client_kwargs: dict[str, Any] = {
            "api_key": self._api_key,
            "timeout": settings.embedding_timeout,
            # Retry policy belongs to the caller, not the SDK.
            "max_retries": 0,
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or "text-embedding-3-small"
        self._dimension = _MODEL_DIMENSIONS.get(self._model, 1536)
        self._provider_label = (
            "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
        )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts."""
        if not texts:
            return []

        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), _OPENAI_BATCH_LIMIT):
            batch = texts[start : start + _OPENAI_BATCH_LIMIT]
            try:
                response = await self._client.embeddings.create(
                    input=batch,
                    model=self._model,
                )
            except openai.APIStatusError as exc:
                raise RemoteServiceError(
                    message=f"{self._provider_label} API returned HTTP {exc.status_code}",
                    provider_name=self.get_provider_name(),
                    status_code=exc.status_code,
                    response_body=exc.response.text,
                ) from exc
            except openai.APIError as exc:
                raise RemoteServiceError(
                    message=f"{self._provider_label} API error: {exc}",
                    provider_name=self.get_provider_name(),
                ) from exc

            data = getattr(response, "data", None)
            if not isinstance(data, list) or len(data) != len(batch):
                raise RemoteServiceError(
                    message=(
                        f"Malformed {self._provider_label} response: expected "
                        f"{len(batch)} embeddings"
                    ),
                    provider_name=self.get_provider_name(),
                    response_body=str(data),
                )
            all_embeddings.extend(self._values(item) for item in data)
            logger.info(
                "openai_embedding_batch",
                model=self._model,
                provider=self._provider_label,
                batch_size=len(batch),
                tokens=response.usage.total_tokens if response.usage else None,
            )
        return all_embeddings

    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        result = await self.embed([text])
        return result[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    def _values(self, item: Any) -> list[float]:
        values = getattr(item, "embedding", None)
        if not isinstance(values, list) or not values:
            raise RemoteServiceError(
                message=f"Malformed {self._provider_label} response: missing embedding",
                provider_name=self.get_provider_name(),
                response_body=str(item),
            )
        return [float(v) for v in values]

"""Google Gemini embedding provider adapter.

Calls the Generative Language REST API directly with ``httpx`` to implement
:class:`IEmbeddingProvider` using ``text-embedding-004`` (768 dimensions).
Single texts go through ``:embedContent``; batches through
``:batchEmbedContents`` in groups of at most 100 requests.

Every request carries a bounded timeout.  Timeouts, transport errors,
non-2xx responses and payloads without a numeric ``values`` array all
surface as :class:`RemoteServiceError`; retrying is left to the caller.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from lexrag.config.settings import Settings
from lexrag.interfaces.embedding_provider import IEmbeddingProvider
from lexrag.utils.errors import RemoteServiceError

logger = structlog.get_logger(logger_name=__name__)

_GEMINI_BATCH_LIMIT = 100

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-004": 768,
    "embedding-001": 768,
    "gemini-embedding-001": 3072,
}


class GeminiEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by the Gemini ``embedContent`` API.

    Parameters
    ----------
    settings:
        Supplies the API key, base URL, model name and request timeout.
    http_client:
        Optional shared client.  When omitted the provider owns one and
        :meth:`aclose` closes it.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._api_key = settings.gemini_api_key
        self._base_url = settings.gemini_base_url.rstrip("/")
        self._model = settings.gemini_embedding_model or "text-embedding-004"
        self._dimension = _MODEL_DIMENSIONS.get(self._model, 768)
        self._timeout = settings.embedding_timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self._timeout)

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts, preserving order."""
        if not texts:
            return []

        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), _GEMINI_BATCH_LIMIT):
            batch = texts[start : start + _GEMINI_BATCH_LIMIT]
            payload = await self._post(
                "batchEmbedContents",
                {"requests": [self._content_request(t) for t in batch]},
            )
            items = payload.get("embeddings")
            if not isinstance(items, list) or len(items) != len(batch):
                raise self._malformed(
                    f"expected {len(batch)} embeddings, "
                    f"got {len(items) if isinstance(items, list) else 'none'}",
                    payload,
                )
            all_embeddings.extend(self._values(item, payload) for item in items)
            logger.info("gemini_embedding_batch", model=self._model, batch_size=len(batch))
        return all_embeddings

    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        payload = await self._post("embedContent", self._content_request(text))
        return self._values(payload.get("embedding"), payload)

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "gemini_embedding"

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _content_request(self, text: str) -> dict[str, Any]:
        return {
            "model": f"models/{self._model}",
            "content": {"parts": [{"text": text}]},
        }

    async def _post(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST *body* to ``models/{model}:{method}`` and return the JSON object."""
        url = f"{self._base_url}/models/{self._model}:{method}"
        try:
            response = await self._client.post(
                url,
                json=body,
                headers={"x-goog-api-key": self._api_key},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("embedding_request_failed", method=method, error="timeout")
            raise RemoteServiceError(
                message=f"Gemini {method} timed out after {self._timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "embedding_request_failed",
                method=method,
                status_code=exc.response.status_code,
            )
            raise RemoteServiceError(
                message=f"Gemini {method} returned HTTP {exc.response.status_code}",
                provider_name=self.get_provider_name(),
                status_code=exc.response.status_code,
                response_body=exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("embedding_request_failed", method=method, error=str(exc))
            raise RemoteServiceError(
                message=f"Gemini {method} request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteServiceError(
                message=f"Gemini {method} returned a non-JSON body",
                provider_name=self.get_provider_name(),
                status_code=response.status_code,
                response_body=response.text,
            ) from exc
        if not isinstance(payload, dict):
            raise self._malformed("response is not a JSON object", payload)
        return payload

    # ------------------------------------------------------------------
    # Payload validation
    # ------------------------------------------------------------------

    def _values(self, embedding: Any, payload: Any) -> list[float]:
        """Extract ``embedding.values`` as a list of floats or raise."""
        values = embedding.get("values") if isinstance(embedding, dict) else None
        if not isinstance(values, list) or not values:
            raise self._malformed("missing embedding values", payload)
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
            raise self._malformed("embedding values are not numeric", payload)
        return [float(v) for v in values]

    def _malformed(self, reason: str, payload: Any) -> RemoteServiceError:
        logger.warning("embedding_payload_malformed", reason=reason)
        return RemoteServiceError(
            message=f"Malformed Gemini embedding response: {reason}",
            provider_name=self.get_provider_name(),
            response_body=str(payload),
        )

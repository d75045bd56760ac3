"""Utility modules for lexrag.

- **errors** -- Exception hierarchy rooted at LexRagError; each failure
  mode of the retrieval pipeline has its own subclass so callers can react
  without broad ``except Exception`` blocks.
- **concurrency** -- semaphore-bounded ``asyncio.gather`` used to embed
  insert batches in parallel while preserving order.
- **logging** -- structlog setup with console output in development and
  JSON in production.
"""

from lexrag.utils.concurrency import throttled_gather
from lexrag.utils.errors import (
    ConfigurationError,
    DimensionMismatchError,
    IngestionError,
    InvalidConfigurationError,
    LexRagError,
    RemoteServiceError,
)
from lexrag.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "DimensionMismatchError",
    "IngestionError",
    "InvalidConfigurationError",
    "LexRagError",
    "RemoteServiceError",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]

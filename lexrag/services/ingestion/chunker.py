"""Fixed-size overlapping text windows for embedding.

Splits extracted document text into windows of ``chunk_size`` characters
where consecutive windows share ``overlap`` characters, so a clause that
straddles a boundary is still fully contained in at least one window.

Splitting is deterministic and lossless: every window but possibly the last
is exactly ``chunk_size`` long, and dropping the first ``overlap``
characters of every window after the first and concatenating gives back the
original text (:meth:`TextChunker.reassemble`).
"""

from __future__ import annotations

from typing import Sequence

import structlog

from lexrag.models.rag import TextChunk
from lexrag.utils.errors import InvalidConfigurationError

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_OVERLAP = 200


def _validate(chunk_size: int, overlap: int) -> None:
    """Fail fast on parameters that would stall or break the window loop."""
    for name, value in (("chunk_size", chunk_size), ("overlap", overlap)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfigurationError(
                f"{name} must be an integer, got {type(value).__name__}"
            )
    if chunk_size <= 0:
        raise InvalidConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if not 0 <= overlap < chunk_size:
        raise InvalidConfigurationError(
            f"overlap must satisfy 0 <= overlap < chunk_size, "
            f"got overlap={overlap}, chunk_size={chunk_size}"
        )


def _windows(length: int, chunk_size: int, overlap: int) -> list[tuple[int, int]]:
    """Return ``(start, end)`` offsets of every window over a text of *length*."""
    step = chunk_size - overlap
    spans: list[tuple[int, int]] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        spans.append((start, end))
        # A window that already reaches the end covers everything after it.
        if end == length:
            break
        start += step
    return spans


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> list[str]:
    """Split *text* into overlapping windows.

    Parameters
    ----------
    text:
        The full document text.
    chunk_size:
        Maximum window length in characters.
    overlap:
        Characters shared by consecutive windows.

    Returns
    -------
    list[str]
        Windows in document order.  Empty text yields ``[]``; text no longer
        than *chunk_size* yields a single window equal to the text.

    Raises
    ------
    InvalidConfigurationError
        If ``chunk_size <= 0`` or ``overlap`` is outside ``[0, chunk_size)``.
    """
    return TextChunker(chunk_size=chunk_size, overlap=overlap).split(text)


class TextChunker:
    """Splits text into fixed-size overlapping windows.

    Parameters
    ----------
    chunk_size:
        Maximum window length in characters (default 1000).
    overlap:
        Characters shared by consecutive windows (default 200).

    Raises
    ------
    InvalidConfigurationError
        At construction, if the parameters are out of range.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE, overlap: int = DEFAULT_OVERLAP) -> None:
        _validate(chunk_size, overlap)
        self._chunk_size = chunk_size
        self._overlap = overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def split(self, text: str) -> list[str]:
        """Return the window texts of *text* in document order."""
        chunks = [text[start:end] for start, end in self._spans(text)]
        logger.debug(
            "chunking_complete",
            num_chunks=len(chunks),
            text_length=len(text),
            chunk_size=self._chunk_size,
            overlap=self._overlap,
        )
        return chunks

    def chunk(self, text: str) -> list[TextChunk]:
        """Return the windows of *text* with their source offsets."""
        return [
            TextChunk(start=start, end=end, text=text[start:end])
            for start, end in self._spans(text)
        ]

    def reassemble(self, chunks: Sequence[str]) -> str:
        """Rebuild the source text from windows produced by :meth:`split`."""
        if not chunks:
            return ""
        return chunks[0] + "".join(c[self._overlap :] for c in chunks[1:])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _spans(self, text: str) -> list[tuple[int, int]]:
        return _windows(len(text), self._chunk_size, self._overlap)

"""Source processor for plain-text documents.

Reads an uploaded ``.txt`` / ``.md`` file as UTF-8 and returns its full
text.  This is the only extraction path the library owns: scanned
documents and images need an OCR step upstream, which hands its output to
:meth:`IngestionService.ingest_text` directly.

Note: This processor returns the whole document.  Splitting into
embedding-sized windows happens downstream in
:class:`~lexrag.services.ingestion.chunker.TextChunker`.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from lexrag.utils.errors import IngestionError

logger = structlog.get_logger(logger_name=__name__)

SUPPORTED_SUFFIXES = frozenset({".txt", ".text", ".md"})


class PlainTextProcessor:
    """Reads plain-text documents from disk."""

    def supports(self, file_path: str | Path) -> bool:
        """Return ``True`` if *file_path* has a supported extension."""
        return Path(file_path).suffix.lower() in SUPPORTED_SUFFIXES

    def process(self, file_path: str | Path) -> str:
        """Return the text content of *file_path*.

        A leading UTF-8 byte-order mark is stripped.

        Raises
        ------
        IngestionError
            If the file does not exist, has an unsupported extension, or
            is not valid UTF-8.
        """
        path = Path(file_path)
        if not path.is_file():
            raise IngestionError(f"Document not found: {path}")
        if not self.supports(path):
            raise IngestionError(
                f"Unsupported document type '{path.suffix or path.name}'. "
                "Please try a text file."
            )

        try:
            text = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            raise IngestionError(
                f"Failed to process document {path.name}: not valid UTF-8 text"
            ) from exc
        except OSError as exc:
            raise IngestionError(f"Failed to read document {path.name}: {exc}") from exc

        logger.debug("text_document_read", file=path.name, characters=len(text))
        return text

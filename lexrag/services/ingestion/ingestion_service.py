"""Orchestrator for document ingestion.

Pipeline stages: **read -> chunk -> embed + store**.

:class:`IngestionService` coordinates three collaborators that know nothing
about each other:

    1. PlainTextProcessor -- reads an uploaded file into text
    2. TextChunker -- splits the text into overlapping fixed-size windows
    3. IVectorStoreProvider -- embeds every window and stores the batch

All dependencies are injected via the constructor, so the embedding backend
or the store can be swapped without touching this class.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from lexrag.models.rag import CorpusStats, IngestionResult
from lexrag.services.ingestion.chunker import TextChunker
from lexrag.services.ingestion.source_processors.text_processor import PlainTextProcessor
from lexrag.utils.errors import IngestionError, LexRagError

if TYPE_CHECKING:
    from lexrag.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)


class IngestionService:
    """Reads, chunks and stores documents for later retrieval.

    Parameters
    ----------
    chunker:
        Splits document text into overlapping windows.
    vector_store:
        Embeds and stores the windows.
    text_processor:
        Reads files from disk.  Defaults to :class:`PlainTextProcessor`.
    """

    def __init__(
        self,
        chunker: TextChunker,
        vector_store: IVectorStoreProvider,
        text_processor: PlainTextProcessor | None = None,
    ) -> None:
        self._chunker = chunker
        self._vector_store = vector_store
        self._text_processor = text_processor or PlainTextProcessor()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest_text(
        self,
        text: str,
        source_name: str,
        metadata: dict[str, Any] | None = None,
    ) -> IngestionResult:
        """Chunk *text* and store every window with shared metadata.

        ``file_name`` in the stored metadata defaults to *source_name*.
        Errors from the vector store propagate unchanged; a failed batch
        stores nothing.
        """
        start = time.monotonic()
        entry_metadata = {"file_name": source_name, **(metadata or {})}

        chunks = self._chunker.split(text)
        if not chunks:
            logger.info("ingestion_skipped_empty", source_name=source_name)
            return IngestionResult(source_name=source_name)

        entries = await self._vector_store.insert(chunks, entry_metadata)

        result = IngestionResult(
            source_name=source_name,
            chunks_created=len(entries),
            characters=len(text),
            ingestion_time=round(time.monotonic() - start, 3),
        )
        logger.info(
            "ingestion_complete",
            source_name=source_name,
            chunks=result.chunks_created,
            characters=result.characters,
            time_s=result.ingestion_time,
        )
        return result

    async def ingest_file(
        self,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
    ) -> IngestionResult:
        """Read a plain-text file and ingest it under its file name.

        Raises
        ------
        IngestionError
            If the file cannot be read as text.
        """
        path = Path(file_path)
        text = self._text_processor.process(path)
        return await self.ingest_text(text, source_name=path.name, metadata=metadata)

    async def ingest_directory(self, dir_path: str | Path) -> list[IngestionResult]:
        """Ingest every supported file in *dir_path* (non-recursive, by name).

        A file that fails is logged and skipped so one bad upload does not
        block the rest; the returned list only covers stored documents.

        Raises
        ------
        IngestionError
            If *dir_path* is not a directory.
        """
        directory = Path(dir_path)
        if not directory.is_dir():
            raise IngestionError(f"Not a directory: {directory}")

        files = sorted(
            p for p in directory.iterdir() if p.is_file() and self._text_processor.supports(p)
        )
        results: list[IngestionResult] = []
        for file_path in files:
            try:
                results.append(await self.ingest_file(file_path))
            except LexRagError as exc:
                logger.warning("ingestion_file_failed", file=file_path.name, error=str(exc))

        logger.info(
            "ingestion_directory_complete",
            dir_path=str(directory),
            files_found=len(files),
            files_ingested=len(results),
        )
        return results

    async def get_corpus_stats(self) -> CorpusStats:
        """Return aggregate statistics about the vector store."""
        return await self._vector_store.get_stats()

"""Source processors for the lexrag ingestion pipeline.

Each processor turns a stored document into plain text for the chunker.

- **PlainTextProcessor** -- UTF-8 ``.txt`` / ``.text`` / ``.md`` files
"""

from lexrag.services.ingestion.source_processors.text_processor import PlainTextProcessor

__all__ = ["PlainTextProcessor"]

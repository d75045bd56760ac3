"""Document ingestion for the lexrag retrieval store.

Pipeline stages:

1. **Read** (source_processors/) -- turn an uploaded file into plain text.
2. **Chunk** (chunker.py / TextChunker) -- split the text into fixed-size
   windows that overlap by a configured number of characters.
3. **Embed + store** (via IVectorStoreProvider) -- embed every window and
   commit the batch to the store in one step.

IngestionService runs the three stages for raw text, single files and
whole directories.
"""

from lexrag.services.ingestion.chunker import TextChunker, split_text
from lexrag.services.ingestion.ingestion_service import IngestionService

__all__ = [
    "IngestionService",
    "TextChunker",
    "split_text",
]

"""lexrag: document chunking and in-memory semantic retrieval for legal drafting."""

__version__ = "0.1.0"

"""Application services: document ingestion and retrieval-augmented research."""

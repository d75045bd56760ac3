# =============================================================================
# lexrag/cli/search.py - Research-your-documents CLI
# =============================================================================
#
# The vector store lives in process memory, so every invocation starts empty:
# the documents named on the command line are ingested first, then the query
# runs against them.
#
# Subcommands:
#
#   search - ingest files/directories, query, print ranked passages
#   chunk  - show how a file would be split (no embedding calls)
#
# Usage examples:
#   python -m lexrag.cli search "termination notice period" \
#       --file lease.txt --file addendum.txt --top-k 3
#   python -m lexrag.cli search "indemnity cap" --directory ./contracts --show-prompt
#   python -m lexrag.cli chunk --file lease.txt --chunk-size 1000 --overlap 200
# =============================================================================

"""Standalone CLI for searching a set of plain-text documents.

Usage::

    python -m lexrag.cli search "QUERY" --file a.txt [--file b.txt] [--top-k 3]

    python -m lexrag.cli chunk --file a.txt
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from lexrag.config.loader import load_config
from lexrag.config.settings import Settings
from lexrag.main import build_retrieval
from lexrag.services.ingestion.chunker import TextChunker
from lexrag.services.ingestion.source_processors.text_processor import PlainTextProcessor
from lexrag.utils.errors import LexRagError
from lexrag.utils.logging import configure_logging

_PREVIEW_CHARS = 240


def _apply_overrides(app_settings: Settings, args: argparse.Namespace) -> Settings:
    """Return *app_settings* with any chunking/top-k flags applied."""
    updates = {
        field: value
        for field, value in (
            ("chunk_size", args.chunk_size),
            ("chunk_overlap", args.overlap),
            ("rag_top_k", getattr(args, "top_k", None)),
        )
        if value is not None
    }
    return app_settings.model_copy(update=updates) if updates else app_settings


def _preview(text: str) -> str:
    flat = " ".join(text.split())
    if len(flat) <= _PREVIEW_CHARS:
        return flat
    return flat[:_PREVIEW_CHARS].rstrip() + "..."


async def _handle_search(args: argparse.Namespace, app_settings: Settings, config: dict) -> int:
    """Ingest the requested documents, run the query and print the results."""
    separator = config.get("rag", {}).get("context_separator", "\n\n")
    components = build_retrieval(app_settings, context_separator=separator)
    provider = components["embedding_provider"]
    try:
        return await _run_search(args, components)
    finally:
        aclose = getattr(provider, "aclose", None)
        if aclose is not None:
            await aclose()


async def _run_search(args: argparse.Namespace, components: dict) -> int:
    ingestion_service = components["ingestion_service"]
    research_service = components["research_service"]

    for file_path in args.file or []:
        result = await ingestion_service.ingest_file(file_path)
        print(f"Ingested {result.source_name}: {result.chunks_created} chunks")
    for dir_path in args.directory or []:
        results = await ingestion_service.ingest_directory(dir_path)
        print(f"Ingested {len(results)} documents from {dir_path}")

    stats = await ingestion_service.get_corpus_stats()
    print(f"Corpus: {stats.total_entries} chunks from {stats.total_sources} documents")
    print()

    research = await research_service.research(args.query)
    if not research.results:
        print("No matching passages.")
    for rank, result in enumerate(research.results, start=1):
        source = result.metadata.get("file_name", "?")
        print(f"{rank}. [{result.similarity:.3f}] {source}")
        print(f"   {_preview(result.text)}")

    if args.show_prompt:
        print()
        print("=" * 40)
        print(research.prompt)
    return 0


def _handle_chunk(args: argparse.Namespace, app_settings: Settings) -> int:
    """Print the window layout of a file without embedding it."""
    chunker = TextChunker(chunk_size=app_settings.chunk_size, overlap=app_settings.chunk_overlap)
    text = PlainTextProcessor().process(args.file)
    chunks = chunker.chunk(text)

    print(f"{args.file}: {len(text)} characters -> {len(chunks)} chunks")
    for idx, chunk in enumerate(chunks):
        print(f"  {idx:>3}  [{chunk.start}, {chunk.end})  len={chunk.length}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexrag",
        description="Search your own legal documents with embedding similarity.",
    )
    parser.add_argument(
        "--config", default="config/config.yaml", help="Path to the YAML config file"
    )
    subparsers = parser.add_subparsers(dest="command")

    search_parser = subparsers.add_parser("search", help="Ingest documents and run a query")
    search_parser.add_argument("query", help="The research question")
    search_parser.add_argument(
        "--file", action="append", help="Plain-text document to ingest (repeatable)"
    )
    search_parser.add_argument(
        "--directory", action="append", help="Directory of documents to ingest (repeatable)"
    )
    search_parser.add_argument("--top-k", type=int, default=None, help="Passages to return")
    search_parser.add_argument("--chunk-size", type=int, default=None, help="Window size")
    search_parser.add_argument("--overlap", type=int, default=None, help="Window overlap")
    search_parser.add_argument(
        "--show-prompt", action="store_true", help="Print the augmented prompt"
    )

    chunk_parser = subparsers.add_parser("chunk", help="Show how a document is split")
    chunk_parser.add_argument("--file", required=True, help="Plain-text document")
    chunk_parser.add_argument("--chunk-size", type=int, default=None, help="Window size")
    chunk_parser.add_argument("--overlap", type=int, default=None, help="Window overlap")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Settings come from the environment / .env file, the YAML config fills
    in presentation defaults, and command-line flags override both.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = _apply_overrides(Settings(), args)
    config = load_config(args.config, settings=app_settings)
    configure_logging(
        log_level=config.get("logging", {}).get("level", "INFO"),
        json_output=(app_settings.app_env == "production"),
    )

    try:
        if args.command == "search":
            if not args.file and not args.directory:
                parser.error("search needs at least one --file or --directory")
            if not args.query.strip():
                parser.error("search query must not be blank")
            exit_code = asyncio.run(_handle_search(args, app_settings, config))
        elif args.command == "chunk":
            exit_code = _handle_chunk(args, app_settings)
        else:
            parser.print_help()
            exit_code = 1
    except LexRagError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()

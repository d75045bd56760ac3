# =============================================================================
# lexrag/cli/__init__.py - CLI Module Overview
# =============================================================================
#
# Command-line access to the retrieval pipeline without a web frontend:
#
#   search.py - ingest plain-text documents into a fresh in-memory store,
#               run a research query, print ranked passages and optionally
#               the augmented prompt.  Also `chunk` for inspecting how a
#               document is split.
#
# Run via `python -m lexrag.cli` or the `lexrag` console script.
# =============================================================================

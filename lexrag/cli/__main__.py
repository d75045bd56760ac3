# =============================================================================
# lexrag/cli/__main__.py - Package Entry Point
# =============================================================================
#
# Enables `python -m lexrag.cli`, delegating to the search CLI.
# =============================================================================

"""Allow ``python -m lexrag.cli`` execution."""

from lexrag.cli.search import main

main()

"""Prompt augmentation for "research your own documents".

Takes a lawyer's question, retrieves the closest passages from the
documents uploaded in the session, and assembles the retrieval-augmented
prompt that is sent to a text-generation model.  Generation itself happens
elsewhere; this service stops at the prompt.

Data flow:
  1. RETRIEVE -- ``vector_store.query`` embeds the question and returns the
                 top-K entries by cosine similarity.
  2. CONTEXT  -- the ``.text`` of each result, in ranked order, joined into
                 one context block.
  3. PROMPT   -- context and question are placed into the legal-expert
                 template below.

Retrieval errors propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field

from lexrag.interfaces.vector_store_provider import IVectorStoreProvider
from lexrag.models.rag import RetrievedEntry
from lexrag.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_SEPARATOR = "\n\n"

_RAG_PROMPT_TEMPLATE = (
    "You are a legal expert. Use the following retrieved context from legal "
    "documents to answer the user's query.\n"
    "If the answer is not in the context, say you don't know based on the "
    "provided documents, but offer general legal knowledge if applicable.\n"
    "\n"
    "Context:\n"
    "{context}\n"
    "\n"
    "User Query:\n"
    "{query}\n"
    "\n"
    "Answer in a professional, authoritative tone.\n"
)


def build_context(results: Sequence[RetrievedEntry], separator: str = DEFAULT_SEPARATOR) -> str:
    """Join the text of *results* in ranked order."""
    return separator.join(result.text for result in results)


def build_rag_prompt(query: str, context: str) -> str:
    """Place *context* and *query* into the legal-expert RAG prompt."""
    return _RAG_PROMPT_TEMPLATE.format(context=context, query=query)


class ResearchContext(BaseModel):
    """Everything the generation step needs for one research question."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(description="The question as asked.")
    results: list[RetrievedEntry] = Field(
        default_factory=list, description="Ranked retrieval results."
    )
    context: str = Field(default="", description="Concatenated result text.")
    prompt: str = Field(description="Retrieval-augmented prompt for the generator.")


class ResearchService:
    """Builds retrieval-augmented prompts from the session's vector store.

    Parameters
    ----------
    vector_store:
        Store holding the session's uploaded documents.
    top_k:
        Number of passages to retrieve when :meth:`research` is not told
        otherwise.
    separator:
        String placed between passages in the context block.
    max_context_chars:
        Upper bound on the context block; longer blocks are cut.  ``0``
        disables the limit.
    """

    def __init__(
        self,
        vector_store: IVectorStoreProvider,
        top_k: int = 3,
        separator: str = DEFAULT_SEPARATOR,
        max_context_chars: int = 0,
    ) -> None:
        self._vector_store = vector_store
        self._top_k = top_k
        self._separator = separator
        self._max_context_chars = max_context_chars

    async def research(self, query: str, top_k: int | None = None) -> ResearchContext:
        """Retrieve passages for *query* and build the augmented prompt.

        Raises
        ------
        ValueError
            If *query* is blank.
        lexrag.utils.errors.RemoteServiceError
            If the query cannot be embedded.
        """
        if not query or not query.strip():
            raise ValueError("query must not be blank")

        k = self._top_k if top_k is None else top_k
        results = await self._vector_store.query(query, top_k=k)

        context = build_context(results, self._separator)
        if self._max_context_chars and len(context) > self._max_context_chars:
            logger.info(
                "research_context_truncated",
                original_chars=len(context),
                max_chars=self._max_context_chars,
            )
            context = context[: self._max_context_chars]

        logger.info(
            "research_context_built",
            top_k=k,
            passages=len(results),
            context_chars=len(context),
        )
        return ResearchContext(
            query=query,
            results=results,
            context=context,
            prompt=build_rag_prompt(query, context),
        )

from __future__ import annotations

"""Lexical relevance ranking of document chunks."""

import re
from typing import Iterable, Sequence

from study_assistant.rag.types import Chunk, RelevantChunk

DEFAULT_TOP_K = 3

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class RetrievalConfigError(ValueError):
    """Raised when retrieval settings are invalid."""
    pass


def tokenize(text: str) -> set[str]:
    """Return the set of lowercase alphanumeric tokens in text."""
    return set(_TOKEN_RE.findall((text or "").lower()))


def score_chunk(chunk: Chunk, query_terms: Iterable[str]) -> int:
    """Count query terms that occur at least once in the chunk."""
    chunk_terms = tokenize(chunk.content)
    return sum(1 for term in set(query_terms) if term in chunk_terms)


def find_relevant_chunks(
    chunks: Sequence[Chunk],
    query: str,
    top_k: int = DEFAULT_TOP_K,
) -> list[RelevantChunk]:
    """Rank chunks by query term overlap and return the best ``top_k``.

    Score is the number of distinct query terms present in a chunk, not their
    frequency. Ties keep document order (lower ``chunk_index`` first). Only
    chunks with a positive score are returned.

    When no chunk shares a term with the query, the first ``top_k`` chunks in
    document order are returned with score 0 so callers always get some
    context. This is a deliberate degradation for paraphrased questions.
    """
    if top_k <= 0:
        raise RetrievalConfigError(f"top_k must be positive, got {top_k}")
    if not chunks:
        return []

    query_terms = tokenize(query)
    scored = [
        RelevantChunk(chunk=chunk, score=score_chunk(chunk, query_terms))
        for chunk in chunks
    ]
    matches = [item for item in scored if item.score > 0]
    if not matches:
        ordered = sorted(chunks, key=lambda chunk: chunk.chunk_index)
        return [RelevantChunk(chunk=chunk, score=0) for chunk in ordered[:top_k]]
    matches.sort(key=lambda item: (-item.score, item.chunk_index))
    return matches[:top_k]

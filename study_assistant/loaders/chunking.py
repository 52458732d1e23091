from __future__ import annotations

"""Word-based text chunking with overlapping windows."""

import re
from typing import Iterable, Iterator

from study_assistant.rag.types import Chunk, ExtractedPage

DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 50

_WHITESPACE_RE = re.compile(r"\s+")


class ChunkingConfigError(ValueError):
    """Raised when chunk size or overlap settings are invalid."""
    pass


def normalize_text(text: str) -> str:
    """Normalize whitespace and line endings in text."""
    return _WHITESPACE_RE.sub(" ", text.replace("\r\n", "\n")).strip()


def split_words(text: str) -> list[str]:
    """Split text into whitespace-delimited words."""
    return text.split()


def validate_chunking(chunk_size: int, overlap: int) -> None:
    """Reject window settings that cannot advance through the text."""
    if chunk_size <= 0:
        raise ChunkingConfigError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ChunkingConfigError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ChunkingConfigError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def _windows(length: int, chunk_size: int, overlap: int) -> Iterator[tuple[int, int]]:
    """Yield (start, end) word offsets for each chunk window."""
    step = chunk_size - overlap
    start = 0
    while start < length:
        end = min(length, start + chunk_size)
        yield start, end
        if end >= length:
            break
        start += step


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[Chunk]:
    """Split text into overlapping word windows.

    Each chunk holds up to ``chunk_size`` words joined by single spaces and the
    next chunk starts ``chunk_size - overlap`` words later, so adjacent chunks
    share ``overlap`` words. The last chunk may be shorter. Text without words
    yields no chunks. All chunks are attributed to page 0.
    """
    validate_chunking(chunk_size, overlap)
    words = split_words(text or "")
    return [
        Chunk(content=" ".join(words[start:end]), chunk_index=idx, page_number=0)
        for idx, (start, end) in enumerate(_windows(len(words), chunk_size, overlap))
    ]


def chunk_pages(
    pages: Iterable[ExtractedPage],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[Chunk]:
    """Chunk per-page text spans, attributing each chunk to its first word's page.

    Windows run over the concatenated word stream and may cross page
    boundaries, so contents and indices match ``chunk_text`` over the joined
    page texts.
    """
    validate_chunking(chunk_size, overlap)
    words: list[str] = []
    word_pages: list[int] = []
    for page in pages:
        page_words = split_words(page.text or "")
        words.extend(page_words)
        word_pages.extend([page.page_number] * len(page_words))
    return [
        Chunk(
            content=" ".join(words[start:end]),
            chunk_index=idx,
            page_number=word_pages[start],
        )
        for idx, (start, end) in enumerate(_windows(len(words), chunk_size, overlap))
    ]

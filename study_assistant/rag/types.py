from __future__ import annotations

"""Core data types for chunks, retrieval and generated study material."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Chunk:
    """Contiguous slice of a document's extracted text."""
    content: str
    chunk_index: int
    page_number: int = 0


@dataclass(frozen=True)
class RelevantChunk:
    """Chunk with its lexical relevance score for one query."""
    chunk: Chunk
    score: int

    @property
    def content(self) -> str:
        return self.chunk.content

    @property
    def chunk_index(self) -> int:
        return self.chunk.chunk_index

    @property
    def page_number(self) -> int:
        return self.chunk.page_number


@dataclass(frozen=True)
class ExtractedPage:
    """Text of a single page, numbered from 1."""
    page_number: int
    text: str


@dataclass(frozen=True)
class ExtractedText:
    """Raw extraction result handed to the chunker."""
    text: str
    pages: list[ExtractedPage] = field(default_factory=list)
    page_count: int = 0
    info: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Flashcard:
    question: str
    answer: str
    difficulty: str = "medium"


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: list[str]
    correct_answer: str
    explanation: str = ""
    difficulty: str = "medium"


STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class StoredDocument:
    """Document record as held by a document store."""
    document_id: str
    title: str
    status: str = STATUS_PROCESSING
    extracted_text: str = ""
    chunks: list[Chunk] = field(default_factory=list)
    error: str | None = None

from __future__ import annotations

"""Document processing: extract text, chunk it, and hand chunks to storage."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from study_assistant.app.metrics import record_document
from study_assistant.loaders.chunking import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    chunk_pages,
    chunk_text,
    validate_chunking,
)
from study_assistant.rag.types import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PROCESSING,
    Chunk,
    ExtractedText,
    StoredDocument,
)

logger = logging.getLogger(__name__)

Extractor = Callable[[], ExtractedText]


class DocumentNotFoundError(LookupError):
    """Raised when a document id is unknown to the store."""
    pass


class DocumentNotReadyError(RuntimeError):
    """Raised when a document cannot be used for study material yet."""
    pass


class DocumentStore(Protocol):
    """Storage collaborator holding documents and their ordered chunks."""

    def create(self, title: str, document_id: str | None = None) -> StoredDocument:
        raise NotImplementedError

    def get(self, document_id: str) -> StoredDocument | None:
        raise NotImplementedError

    def save_extraction(
        self, document_id: str, extracted_text: str, chunks: list[Chunk]
    ) -> StoredDocument:
        raise NotImplementedError

    def set_status(
        self, document_id: str, status: str, error: str | None = None
    ) -> StoredDocument:
        raise NotImplementedError

    def get_chunks(self, document_id: str) -> list[Chunk]:
        raise NotImplementedError

    def delete(self, document_id: str) -> bool:
        raise NotImplementedError


def build_chunks(extracted: ExtractedText, chunk_size: int, overlap: int) -> list[Chunk]:
    """Chunk an extraction, using page spans when the extractor supplied them."""
    if extracted.pages:
        return chunk_pages(extracted.pages, chunk_size=chunk_size, overlap=overlap)
    return chunk_text(extracted.text, chunk_size=chunk_size, overlap=overlap)


def _log_deleted(document_id: str) -> None:
    logger.warning("document_deleted_during_processing", extra={"document_id": document_id})


@dataclass
class DocumentPipeline:
    store: DocumentStore
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP

    def __post_init__(self) -> None:
        validate_chunking(self.chunk_size, self.chunk_overlap)

    async def process(self, document_id: str, extract: Extractor) -> StoredDocument | None:
        """Extract and chunk a document, recording completion or failure.

        Runs as a background task: extraction errors mark the document failed
        and are not re-raised. Re-running replaces the stored chunks.
        """
        try:
            extracted = await asyncio.to_thread(extract)
            chunks = build_chunks(extracted, self.chunk_size, self.chunk_overlap)
        except Exception as exc:
            logger.exception(
                "document_processing_failed",
                extra={"document_id": document_id, "error": type(exc).__name__},
            )
            record_document(STATUS_FAILED)
            try:
                return self.store.set_status(document_id, STATUS_FAILED, error=str(exc))
            except DocumentNotFoundError:
                _log_deleted(document_id)
                return None
        try:
            document = self.store.save_extraction(document_id, extracted.text, chunks)
        except DocumentNotFoundError:
            _log_deleted(document_id)
            return None
        record_document(STATUS_COMPLETED)
        logger.info(
            "document_processed",
            extra={
                "document_id": document_id,
                "chunks": len(chunks),
                "pages": extracted.page_count,
            },
        )
        return document


def ensure_ready(store: DocumentStore, document_id: str) -> StoredDocument:
    """Return a usable document or raise with a user-facing reason."""
    document = store.get(document_id)
    if document is None:
        raise DocumentNotFoundError(f"Document not found: {document_id}")
    if document.status != STATUS_COMPLETED and document.chunks:
        document = store.set_status(document_id, STATUS_COMPLETED)
    if document.status == STATUS_PROCESSING:
        raise DocumentNotReadyError("AI is still reading this document. Please wait 10-20 seconds.")
    if document.status == STATUS_FAILED:
        raise DocumentNotReadyError("Analysis failed for this document. Try re-uploading it.")
    return document


def document_text(document: StoredDocument) -> str:
    """Return extracted text, falling back to joined chunk contents."""
    if document.extracted_text.strip():
        return document.extracted_text
    return "\n\n".join(chunk.content for chunk in document.chunks)

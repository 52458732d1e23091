from __future__ import annotations

"""In-memory document store for local runs and tests."""

import uuid
from dataclasses import dataclass, field, replace

from study_assistant.rag.pipeline import DocumentNotFoundError
from study_assistant.rag.types import STATUS_COMPLETED, Chunk, StoredDocument


@dataclass
class InMemoryDocumentStore:
    """Keeps documents keyed by id; each save replaces the whole record."""
    documents: dict[str, StoredDocument] = field(default_factory=dict)

    def create(self, title: str, document_id: str | None = None) -> StoredDocument:
        """Register a new document in the processing state."""
        resolved_id = document_id or uuid.uuid4().hex
        document = StoredDocument(document_id=resolved_id, title=title)
        self.documents[resolved_id] = document
        return document

    def get(self, document_id: str) -> StoredDocument | None:
        return self.documents.get(document_id)

    def _require(self, document_id: str) -> StoredDocument:
        document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        return document

    def save_extraction(
        self, document_id: str, extracted_text: str, chunks: list[Chunk]
    ) -> StoredDocument:
        """Replace text and chunks and mark the document completed."""
        ordered = sorted(chunks, key=lambda chunk: chunk.chunk_index)
        document = replace(
            self._require(document_id),
            status=STATUS_COMPLETED,
            extracted_text=extracted_text,
            chunks=ordered,
            error=None,
        )
        self.documents[document_id] = document
        return document

    def set_status(
        self, document_id: str, status: str, error: str | None = None
    ) -> StoredDocument:
        document = replace(self._require(document_id), status=status, error=error)
        self.documents[document_id] = document
        return document

    def get_chunks(self, document_id: str) -> list[Chunk]:
        return list(self._require(document_id).chunks)

    def delete(self, document_id: str) -> bool:
        """Drop a document together with its chunks."""
        return self.documents.pop(document_id, None) is not None

    def stats(self) -> dict[str, int | str]:
        """Return basic stats for the store."""
        return {
            "backend": "memory",
            "document_count": len(self.documents),
            "chunk_count": sum(len(doc.chunks) for doc in self.documents.values()),
        }

from __future__ import annotations

"""Study material generation grounded in a document's chunks."""

import logging
from dataclasses import dataclass

from study_assistant.rag.llm import Generator, LLMError, LLMRateLimitError
from study_assistant.rag.parsers import parse_flashcards, parse_quiz
from study_assistant.rag.pipeline import DocumentStore, document_text, ensure_ready
from study_assistant.rag.prompts import (
    build_chat_prompt,
    build_explain_prompt,
    build_flashcard_prompt,
    build_quiz_prompt,
    build_summary_prompt,
)
from study_assistant.rag.retrieval import DEFAULT_TOP_K, find_relevant_chunks
from study_assistant.rag.types import Flashcard, QuizQuestion, RelevantChunk

logger = logging.getLogger(__name__)

USAGE_LIMIT_MESSAGE = (
    "AI usage limit reached for today. Please try again later or upgrade your plan."
)


class AssistantError(RuntimeError):
    """Raised when study material cannot be generated."""
    pass


@dataclass(frozen=True)
class ChatAnswer:
    question: str
    answer: str
    relevant_chunks: list[int]


@dataclass(frozen=True)
class ConceptExplanation:
    concept: str
    explanation: str
    relevant_chunks: list[int]


@dataclass
class StudyAssistant:
    store: DocumentStore
    generator: Generator
    top_k: int = DEFAULT_TOP_K

    async def _generate(self, prompt: str, failure_message: str) -> str:
        try:
            return await self.generator.generate(prompt)
        except LLMRateLimitError as exc:
            raise AssistantError(USAGE_LIMIT_MESSAGE) from exc
        except LLMError as exc:
            logger.warning("generation_failed", extra={"error": str(exc)})
            raise AssistantError(f"{failure_message}: {exc}") from exc

    def _document_content(self, document_id: str, kind: str) -> str:
        text = document_text(ensure_ready(self.store, document_id))
        if not text.strip():
            raise AssistantError(f"Document content is empty. Cannot generate {kind}.")
        return text

    def _relevant(self, document_id: str, query: str) -> list[RelevantChunk]:
        document = ensure_ready(self.store, document_id)
        if not document.chunks:
            raise AssistantError(
                "Document has no content chunks. Please re-upload the document."
            )
        relevant = find_relevant_chunks(document.chunks, query, top_k=self.top_k)
        if all(item.score == 0 for item in relevant):
            logger.info(
                "retrieval_fallback",
                extra={"document_id": document_id, "chunks": len(relevant)},
            )
        return relevant

    async def generate_flashcards(self, document_id: str, count: int = 10) -> list[Flashcard]:
        text = self._document_content(document_id, "flashcards")
        output = await self._generate(
            build_flashcard_prompt(text, count), "Failed to generate flashcards"
        )
        return parse_flashcards(output, limit=count)

    async def generate_quiz(self, document_id: str, num_questions: int = 5) -> list[QuizQuestion]:
        text = self._document_content(document_id, "quiz")
        output = await self._generate(
            build_quiz_prompt(text, num_questions), "Failed to generate quiz"
        )
        return parse_quiz(output, limit=num_questions)

    async def generate_summary(self, document_id: str) -> str:
        text = self._document_content(document_id, "summary")
        return await self._generate(build_summary_prompt(text), "Failed to generate summary")

    async def chat(self, document_id: str, question: str) -> ChatAnswer:
        """Answer a question from the chunks that best match it."""
        if not question.strip():
            raise AssistantError("Please provide a question")
        relevant = self._relevant(document_id, question)
        answer = await self._generate(
            build_chat_prompt(question, relevant), "Failed to process chat request"
        )
        return ChatAnswer(
            question=question,
            answer=answer,
            relevant_chunks=[item.chunk_index for item in relevant],
        )

    async def explain_concept(self, document_id: str, concept: str) -> ConceptExplanation:
        """Explain a concept using the chunks that mention it."""
        if not concept.strip():
            raise AssistantError("Please provide a concept")
        relevant = self._relevant(document_id, concept)
        explanation = await self._generate(
            build_explain_prompt(concept, relevant), "Failed to explain concept"
        )
        return ConceptExplanation(
            concept=concept,
            explanation=explanation,
            relevant_chunks=[item.chunk_index for item in relevant],
        )

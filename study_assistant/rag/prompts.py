from __future__ import annotations

"""Prompt builders for study material generation."""

from typing import Sequence

from study_assistant.rag.types import RelevantChunk

FLASHCARD_TEXT_LIMIT = 15000
QUIZ_TEXT_LIMIT = 15000
SUMMARY_TEXT_LIMIT = 30000
EXPLAIN_CONTEXT_LIMIT = 10000

_MARKDOWN_RULES = (
    "1. Structure your answer in a clear, point-by-point format using Markdown bullet points (*).\n"
    "2. Use bold text (**) for key terms and headings.\n"
    "3. Ensure there is a newline between each point."
)


def build_flashcard_prompt(text: str, count: int) -> str:
    return (
        f"Generate exactly {count} educational flashcards from the following text.\n"
        "Format each flashcard as:\n"
        "Q: [Clear, specific question]\n"
        "A: [Concise, accurate answer]\n"
        "D: [Difficulty level: Easy, Medium, or Hard]\n\n"
        'Separate each flashcard with "---"\n\n'
        f"Text:\n{text[:FLASHCARD_TEXT_LIMIT]}"
    )


def build_quiz_prompt(text: str, num_questions: int) -> str:
    return (
        f"Generate exactly {num_questions} multiple choice questions from the following text.\n"
        "Format each question as:\n"
        "Q: [Question]\n"
        "O1: [Option 1]\n"
        "O2: [Option 2]\n"
        "O3: [Option 3]\n"
        "O4: [Option 4]\n"
        "C: [Correct Option - exactly as written above]\n"
        "E: [Brief Explanation]\n"
        "D: [Difficulty: Easy, Medium, or Hard]\n"
        'Separate each question with "---"\n\n'
        f"Text:\n{text[:QUIZ_TEXT_LIMIT]}"
    )


def build_summary_prompt(text: str) -> str:
    return (
        "Provide a concise summary of the following text, highlighting the key concepts, "
        "main ideas and important points.\n\n"
        f"IMPORTANT:\n{_MARKDOWN_RULES}\n"
        "4. Keep the summary clear and structured.\n\n"
        f"Text:\n{text[:SUMMARY_TEXT_LIMIT]}"
    )


def build_context_block(chunks: Sequence[RelevantChunk]) -> str:
    """Join chunk contents, tagging each with its 1-based position."""
    return "\n\n".join(
        f"[Chunk {idx}]\n{item.content}" for idx, item in enumerate(chunks, start=1)
    )


def build_chat_prompt(question: str, chunks: Sequence[RelevantChunk]) -> str:
    return (
        "Based on the following context from a document, analyze the context and "
        "answer the user's question.\n\n"
        f"IMPORTANT INSTRUCTIONS:\n{_MARKDOWN_RULES}\n"
        "4. If the answer is not in the context, say so clearly.\n\n"
        f"Context:\n{build_context_block(chunks)}\n\n"
        f"Question:\n{question}\n\n"
        "Answer: "
    )


def build_explain_prompt(concept: str, chunks: Sequence[RelevantChunk]) -> str:
    context = "\n\n".join(item.content for item in chunks)
    return (
        f'Explain the concept of "{concept}" based on the following context.\n\n'
        f"IMPORTANT:\n{_MARKDOWN_RULES}\n"
        "4. Provide a clear, educational explanation that's easy to understand.\n"
        "5. Include examples if relevant.\n\n"
        f"Context:\n{context[:EXPLAIN_CONTEXT_LIMIT]}"
    )

from __future__ import annotations

"""Parsers for line-tagged flashcard and quiz model output."""

import re

from study_assistant.rag.types import Flashcard, QuizQuestion

_BLOCK_SEPARATOR = "---"
_OPTION_RE = re.compile(r"^O\d:")
_DIFFICULTIES = {"easy", "medium", "hard"}


def _blocks(content: str) -> list[list[str]]:
    """Split output into non-empty blocks of stripped lines."""
    blocks: list[list[str]] = []
    for block in content.split(_BLOCK_SEPARATOR):
        if not block.strip():
            continue
        blocks.append([line.strip() for line in block.strip().splitlines()])
    return blocks


def _difficulty(raw: str, default: str = "medium") -> str:
    value = raw.strip().lower()
    return value if value in _DIFFICULTIES else default


def parse_flashcards(content: str, limit: int | None = None) -> list[Flashcard]:
    """Parse ``Q:``/``A:``/``D:`` blocks, dropping cards without Q and A."""
    cards: list[Flashcard] = []
    for lines in _blocks(content):
        question = ""
        answer = ""
        difficulty = "medium"
        for line in lines:
            if line.startswith("Q:"):
                question = line[2:].strip()
            elif line.startswith("A:"):
                answer = line[2:].strip()
            elif line.startswith("D:"):
                difficulty = _difficulty(line[2:], difficulty)
        if question and answer:
            cards.append(Flashcard(question=question, answer=answer, difficulty=difficulty))
    return cards[:limit] if limit is not None else cards


def parse_quiz(content: str, limit: int | None = None) -> list[QuizQuestion]:
    """Parse multiple choice blocks; needs a question, two options and an answer."""
    questions: list[QuizQuestion] = []
    for lines in _blocks(content):
        question = ""
        options: list[str] = []
        correct_answer = ""
        explanation = ""
        difficulty = "medium"
        for line in lines:
            if line.startswith("Q:"):
                question = line[2:].strip()
            elif _OPTION_RE.match(line):
                options.append(line[3:].strip())
            elif line.startswith("C:"):
                correct_answer = line[2:].strip()
            elif line.startswith("E:"):
                explanation = line[2:].strip()
            elif line.startswith("D:"):
                difficulty = _difficulty(line[2:], difficulty)
        if question and len(options) >= 2 and correct_answer:
            questions.append(
                QuizQuestion(
                    question=question,
                    options=options,
                    correct_answer=correct_answer,
                    explanation=explanation,
                    difficulty=difficulty,
                )
            )
    return questions[:limit] if limit is not None else questions

from __future__ import annotations

from study_assistant.rag.parsers import parse_flashcards, parse_quiz
from study_assistant.rag.types import Flashcard, QuizQuestion

FLASHCARD_OUTPUT = """
Q: What does chlorophyll absorb?
A: Red and blue light.
D: Easy
---
Q: Where does respiration happen?
A: In the mitochondria.
D: extreme
---
Q: Missing answer card
D: Hard
---
"""

QUIZ_OUTPUT = """
Q: Which organelle releases energy from glucose?
O1: Chloroplast
O2: Mitochondrion
O3: Nucleus
O4: Ribosome
C: Mitochondrion
E: Cellular respiration happens in the mitochondria.
D: Medium
---
Q: Only one option
O1: Yes
C: Yes
---
Q: What pigment is green?
O1: Chlorophyll
O2: Carotene
C: Chlorophyll
D: HARD
"""


def test_parse_flashcards_keeps_complete_cards() -> None:
    cards = parse_flashcards(FLASHCARD_OUTPUT)

    assert cards == [
        Flashcard(
            question="What does chlorophyll absorb?",
            answer="Red and blue light.",
            difficulty="easy",
        ),
        Flashcard(
            question="Where does respiration happen?",
            answer="In the mitochondria.",
            difficulty="medium",
        ),
    ]


def test_parse_flashcards_respects_limit() -> None:
    assert len(parse_flashcards(FLASHCARD_OUTPUT, limit=1)) == 1


def test_parse_flashcards_handles_empty_output() -> None:
    assert parse_flashcards("") == []
    assert parse_flashcards("---\n---") == []


def test_parse_quiz_requires_two_options_and_answer() -> None:
    questions = parse_quiz(QUIZ_OUTPUT)

    assert questions[0] == QuizQuestion(
        question="Which organelle releases energy from glucose?",
        options=["Chloroplast", "Mitochondrion", "Nucleus", "Ribosome"],
        correct_answer="Mitochondrion",
        explanation="Cellular respiration happens in the mitochondria.",
        difficulty="medium",
    )
    assert [question.question for question in questions] == [
        "Which organelle releases energy from glucose?",
        "What pigment is green?",
    ]
    assert questions[1].difficulty == "hard"
    assert questions[1].explanation == ""


def test_parse_quiz_respects_limit() -> None:
    assert len(parse_quiz(QUIZ_OUTPUT, limit=1)) == 1

from __future__ import annotations

import pytest

from study_assistant.rag.retrieval import (
    RetrievalConfigError,
    find_relevant_chunks,
    score_chunk,
    tokenize,
)
from study_assistant.rag.types import Chunk


def test_tokenize_lowercases_and_splits_on_non_alphanumerics() -> None:
    assert tokenize("What's the ATP-yield, per Glucose?") == {
        "what",
        "s",
        "the",
        "atp",
        "yield",
        "per",
        "glucose",
    }
    assert tokenize("") == set()


def test_score_counts_presence_not_frequency() -> None:
    chunk = Chunk(content="energy energy energy light", chunk_index=0)

    assert score_chunk(chunk, {"energy"}) == 1
    assert score_chunk(chunk, {"energy", "light", "water"}) == 2


def test_ranks_by_distinct_term_overlap(lesson_chunks: list[Chunk]) -> None:
    results = find_relevant_chunks(lesson_chunks, "Where does cellular respiration happen?", 2)

    assert [item.chunk_index for item in results] == [2, 3]
    assert [item.score for item in results] == [2, 2]


def test_higher_score_wins_over_position(lesson_chunks: list[Chunk]) -> None:
    results = find_relevant_chunks(lesson_chunks, "mitochondria cellular respiration", 3)

    assert results[0].chunk_index == 3
    assert results[0].score == 3
    assert results[1].chunk_index == 2


def test_tie_breaks_by_lower_chunk_index() -> None:
    chunks = [
        Chunk(content="the enzyme binds", chunk_index=5),
        Chunk(content="an enzyme works", chunk_index=2),
        Chunk(content="enzyme kinetics", chunk_index=9),
    ]

    results = find_relevant_chunks(chunks, "enzyme", 3)

    assert [item.chunk_index for item in results] == [2, 5, 9]


def test_only_matching_chunks_are_returned(lesson_chunks: list[Chunk]) -> None:
    results = find_relevant_chunks(lesson_chunks, "chlorophyll", 3)

    assert [item.chunk_index for item in results] == [1]


def test_falls_back_to_document_order_without_overlap() -> None:
    chunks = [
        Chunk(content="alpha text", chunk_index=0),
        Chunk(content="beta text", chunk_index=1),
        Chunk(content="gamma text", chunk_index=2),
    ]

    results = find_relevant_chunks(chunks, "unrelated question", 2)

    assert [item.chunk for item in results] == chunks[:2]
    assert all(item.score == 0 for item in results)


def test_query_without_tokens_uses_fallback(lesson_chunks: list[Chunk]) -> None:
    results = find_relevant_chunks(lesson_chunks, "?!  ...", 3)

    assert [item.chunk_index for item in results] == [0, 1, 2]


def test_fallback_orders_by_chunk_index() -> None:
    chunks = [
        Chunk(content="second", chunk_index=1),
        Chunk(content="first", chunk_index=0),
    ]

    results = find_relevant_chunks(chunks, "nothing", 1)

    assert results[0].content == "first"


def test_empty_chunk_list_returns_nothing() -> None:
    assert find_relevant_chunks([], "anything", 3) == []


@pytest.mark.parametrize("top_k", [1, 2, 3, 4, 10])
def test_never_returns_more_than_top_k(lesson_chunks: list[Chunk], top_k: int) -> None:
    for query in ("energy", "light energy respiration", "zebra"):
        results = find_relevant_chunks(lesson_chunks, query, top_k)
        assert len(results) <= min(top_k, len(lesson_chunks))


def test_repeated_calls_are_identical(lesson_chunks: list[Chunk]) -> None:
    first = find_relevant_chunks(lesson_chunks, "light energy in the leaf", 3)
    second = find_relevant_chunks(lesson_chunks, "light energy in the leaf", 3)

    assert first == second


@pytest.mark.parametrize("top_k", [0, -1])
def test_non_positive_top_k_is_rejected(lesson_chunks: list[Chunk], top_k: int) -> None:
    with pytest.raises(RetrievalConfigError):
        find_relevant_chunks(lesson_chunks, "energy", top_k)


def test_default_top_k_is_three(lesson_chunks: list[Chunk]) -> None:
    results = find_relevant_chunks(lesson_chunks, "energy light cellular")

    assert len(results) == 3

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from study_assistant.app.dependencies import get_generator, get_pipeline, reset_caches
from study_assistant.app.metrics import metrics_payload
from study_assistant.rag.llm import OllamaGenerator
from tools.study_cli import _preview, main

LESSON = (
    "Photosynthesis converts light energy into chemical energy. "
    "Chlorophyll absorbs red and blue light. "
    "Mitochondria are the site of cellular respiration."
)


@pytest.fixture(autouse=True)
def fresh_dependencies():
    reset_caches()
    yield
    reset_caches()


def run_cli(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["study_cli", *argv])
    main()


def test_preview_cuts_on_word_boundary() -> None:
    assert _preview("short text") == "short text"
    assert _preview("alpha beta gamma delta", limit=12) == "alpha beta..."


def test_dependencies_follow_settings() -> None:
    assert isinstance(get_generator(), OllamaGenerator)
    assert get_pipeline().chunk_size == 500
    assert get_pipeline() is get_pipeline()


def test_chunk_command_prints_chunks(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "lesson.txt"
    path.write_text(LESSON, encoding="utf-8")

    run_cli(monkeypatch, "chunk", str(path))

    output = capsys.readouterr().out
    assert output.startswith("lesson: 1 chunks")
    assert "#0 page=0 words=20" in output


def test_ask_command_ranks_chunks(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "lesson.txt"
    path.write_text(LESSON, encoding="utf-8")

    run_cli(monkeypatch, "--show-metrics", "ask", str(path), "cellular respiration")

    output = capsys.readouterr().out
    assert "#0 score=2" in output
    assert "study_documents_processed_total" in output


class PromptRecorder:
    provider = "recorder"

    def __init__(self) -> None:
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return "Energy flows through every chunk."


def _energy_notes(path: Path) -> Path:
    words = ["energy" if idx % 10 == 0 else f"w{idx}" for idx in range(1500)]
    path.write_text(" ".join(words), encoding="utf-8")
    return path


def test_ask_generate_uses_requested_top_k(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    recorder = PromptRecorder()
    monkeypatch.setattr("study_assistant.app.dependencies.get_generator", lambda: recorder)
    path = _energy_notes(tmp_path / "notes.txt")

    run_cli(monkeypatch, "ask", str(path), "energy", "--top-k", "2", "--generate")

    output = capsys.readouterr().out
    printed = [line for line in output.splitlines() if line.startswith("#")]
    assert len(printed) == 2
    assert recorder.prompts[0].count("[Chunk ") == 2
    assert "Energy flows through every chunk." in output


def test_ask_rejects_non_positive_top_k(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _energy_notes(tmp_path / "notes.txt")

    with pytest.raises(SystemExit, match="top_k"):
        run_cli(monkeypatch, "ask", str(path), "energy", "--top-k", "0")


def test_missing_file_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit, match="Could not process"):
        run_cli(monkeypatch, "chunk", str(tmp_path / "missing.txt"))


def test_metrics_payload_is_prometheus_text() -> None:
    payload, content_type = metrics_payload()

    assert content_type.startswith("text/plain")
    assert b"study_generation_requests_total" in payload

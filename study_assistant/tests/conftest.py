from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["STUDY_LLM_PROVIDER"] = "ollama"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.setdefault("STUDY_CHUNK_SIZE", "500")
os.environ.setdefault("STUDY_CHUNK_OVERLAP", "50")
os.environ.setdefault("STUDY_TOP_K", "3")

from study_assistant.rag.types import Chunk  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def lesson_chunks() -> list[Chunk]:
    return [
        Chunk(content="Photosynthesis converts light energy into chemical energy.", chunk_index=0),
        Chunk(content="Chlorophyll absorbs red and blue light in the leaf.", chunk_index=1),
        Chunk(content="Cellular respiration releases energy stored in glucose.", chunk_index=2),
        Chunk(content="Mitochondria are the site of cellular respiration.", chunk_index=3),
    ]

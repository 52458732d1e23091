from __future__ import annotations

from functools import lru_cache

from study_assistant.app.settings import settings
from study_assistant.rag.assistant import StudyAssistant
from study_assistant.rag.llm import GeminiGenerator, OllamaGenerator, RetryPolicy, build_generator
from study_assistant.rag.pipeline import DocumentPipeline
from study_assistant.store.inmemory import InMemoryDocumentStore


@lru_cache
def get_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@lru_cache
def get_pipeline() -> DocumentPipeline:
    return DocumentPipeline(
        store=get_store(),
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )


@lru_cache
def get_generator() -> GeminiGenerator | OllamaGenerator:
    retry = RetryPolicy(
        max_attempts=settings.llm_max_retries,
        base_delay=settings.llm_retry_base_delay,
        max_jitter=settings.llm_retry_jitter,
    )
    return build_generator(
        settings.llm_provider,
        gemini_api_key=settings.gemini_api_key,
        gemini_model=settings.gemini_model,
        ollama_base_url=settings.ollama_base_url,
        ollama_model=settings.ollama_model,
        timeout=settings.llm_timeout,
        retry=retry,
    )


@lru_cache
def get_assistant() -> StudyAssistant:
    return StudyAssistant(store=get_store(), generator=get_generator(), top_k=settings.top_k)


def reset_caches() -> None:
    get_assistant.cache_clear()
    get_generator.cache_clear()
    get_pipeline.cache_clear()
    get_store.cache_clear()

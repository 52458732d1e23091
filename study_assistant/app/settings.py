from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    chunk_size: int = int(os.getenv("STUDY_CHUNK_SIZE", "500"))
    chunk_overlap: int = int(os.getenv("STUDY_CHUNK_OVERLAP", "50"))
    top_k: int = int(os.getenv("STUDY_TOP_K", "3"))
    llm_provider: str = os.getenv("STUDY_LLM_PROVIDER", "gemini")
    llm_timeout: float = float(os.getenv("STUDY_LLM_TIMEOUT", "60"))
    llm_max_retries: int = int(os.getenv("STUDY_LLM_MAX_RETRIES", "3"))
    llm_retry_base_delay: float = float(os.getenv("STUDY_LLM_RETRY_BASE_DELAY", "2.0"))
    llm_retry_jitter: float = float(os.getenv("STUDY_LLM_RETRY_JITTER", "1.0"))
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-flash-latest")
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1")
    log_level: str = os.getenv("STUDY_LOG_LEVEL", "INFO")
    metrics_enabled: bool = os.getenv("STUDY_METRICS_ENABLED", "true").lower() in {
        "1",
        "true",
        "yes",
    }


settings = Settings()

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

from study_assistant.app.settings import settings

GENERATION_REQUESTS = Counter(
    "study_generation_requests_total",
    "Text generation calls by provider and outcome",
    ["provider", "outcome"],
)
GENERATION_RETRIES = Counter(
    "study_generation_retries_total",
    "Text generation retries by provider and status code",
    ["provider", "status"],
)
DOCUMENTS_PROCESSED = Counter(
    "study_documents_processed_total",
    "Document processing runs by final status",
    ["status"],
)


def record_generation(provider: str, outcome: str) -> None:
    if settings.metrics_enabled:
        GENERATION_REQUESTS.labels(provider, outcome).inc()


def record_retry(provider: str, status: int | None) -> None:
    if settings.metrics_enabled:
        GENERATION_RETRIES.labels(provider, str(status)).inc()


def record_document(status: str) -> None:
    if settings.metrics_enabled:
        DOCUMENTS_PROCESSED.labels(status).inc()


def metrics_payload() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST

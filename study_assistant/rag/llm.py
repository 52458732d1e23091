from __future__ import annotations

"""Text generation clients with rate-limit aware retries."""

from dataclasses import dataclass, field
import asyncio
import logging
import random
from typing import Awaitable, Callable, ClassVar, Protocol

import httpx

from study_assistant.app.metrics import record_generation, record_retry


class LLMError(RuntimeError):
    """Raised when generation requests fail or responses are invalid."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class LLMRateLimitError(LLMError):
    """Raised when the provider keeps answering 429 after all retries."""
    pass


class LLMUnavailableError(LLMError):
    """Raised when the provider keeps answering 503 after all retries."""
    pass


logger = logging.getLogger(__name__)

_RETRYABLE: dict[int, type[LLMError]] = {
    429: LLMRateLimitError,
    503: LLMUnavailableError,
}

Sleeper = Callable[[float], Awaitable[None]]


class Generator(Protocol):
    """Protocol for prompt-in, text-out generation services."""
    provider: ClassVar[str]

    async def generate(self, prompt: str) -> str:
        """Return generated text for the prompt."""
        raise NotImplementedError


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff with jitter for 429/503 responses."""
    max_attempts: int = 3
    base_delay: float = 2.0
    max_jitter: float = 1.0
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_jitter < 0:
            raise ValueError("retry delays must not be negative")

    def delay(self, attempt: int, rng: random.Random) -> float:
        """Return the wait before retrying after 0-based ``attempt``."""
        return self.base_delay * (2**attempt) + rng.uniform(0, self.max_jitter)


def _status_code(exc: BaseException) -> int | None:
    """Best-effort HTTP status from provider SDK exceptions."""
    for attr in ("code", "status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return int(value)
    return None


async def generate_with_retry(
    request: Callable[[], Awaitable[str]],
    *,
    provider: str,
    policy: RetryPolicy,
    sleep: Sleeper = asyncio.sleep,
) -> str:
    """Run ``request`` and retry rate-limit and unavailable failures."""
    rng = random.Random(policy.seed)
    last_error: LLMError | None = None
    for attempt in range(policy.max_attempts):
        try:
            text = await request()
        except LLMError as exc:
            if exc.status not in _RETRYABLE:
                record_generation(provider, "error")
                raise
            last_error = exc
            if attempt + 1 >= policy.max_attempts:
                break
            wait = policy.delay(attempt, rng)
            logger.warning(
                "llm_retry",
                extra={
                    "provider": provider,
                    "status": exc.status,
                    "attempt": attempt + 1,
                    "max_attempts": policy.max_attempts,
                    "delay_seconds": round(wait, 3),
                },
            )
            record_retry(provider, exc.status)
            await sleep(wait)
            continue
        if not text or not text.strip():
            record_generation(provider, "empty")
            raise LLMError("AI returned an empty response.")
        record_generation(provider, "ok")
        return text

    assert last_error is not None
    record_generation(provider, "exhausted")
    error_cls = _RETRYABLE[last_error.status or 0]
    raise error_cls(
        f"{provider} request failed after {policy.max_attempts} attempts: {last_error}",
        status=last_error.status,
    ) from last_error


@dataclass(frozen=True)
class GeminiGenerator:
    """Generator backed by Gemini generative models."""
    provider: ClassVar[str] = "gemini"
    api_key: str
    model: str = "gemini-flash-latest"
    timeout: float = 60.0
    temperature: float | None = None
    max_tokens: int | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    sleep: Sleeper = asyncio.sleep

    async def generate(self, prompt: str) -> str:
        """Generate text with Gemini, retrying transient failures."""
        try:
            import google.generativeai as genai
        except ImportError as exc:
            raise LLMError("google-generativeai is required for GeminiGenerator") from exc

        generation_config: dict[str, float | int] = {}
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        if self.max_tokens is not None:
            generation_config["max_output_tokens"] = self.max_tokens

        def _run() -> str:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(self.model)
            response = model.generate_content(
                prompt,
                generation_config=generation_config or None,
            )
            return getattr(response, "text", "") or ""

        async def _request() -> str:
            try:
                return await asyncio.wait_for(asyncio.to_thread(_run), timeout=self.timeout)
            except asyncio.TimeoutError as exc:
                raise LLMError(f"Gemini request timed out after {self.timeout}s") from exc
            except Exception as exc:
                raise LLMError(str(exc), status=_status_code(exc)) from exc

        return await generate_with_retry(
            _request, provider=self.provider, policy=self.retry, sleep=self.sleep
        )


@dataclass(frozen=True)
class OllamaGenerator:
    """Generator backed by the Ollama generate API."""
    provider: ClassVar[str] = "ollama"
    base_url: str
    model: str
    timeout: float = 60.0
    temperature: float | None = None
    max_tokens: int | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    sleep: Sleeper = asyncio.sleep
    transport: httpx.AsyncBaseTransport | None = None

    async def generate(self, prompt: str) -> str:
        """Generate text with Ollama, retrying transient failures."""
        options: dict[str, float | int] = {}
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }

        async def _request() -> str:
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self.transport
                ) as client:
                    response = await client.post(f"{self.base_url}/api/generate", json=payload)
                    response.raise_for_status()
                    data = response.json()
            except httpx.HTTPStatusError as exc:
                raise LLMError(str(exc), status=exc.response.status_code) from exc
            except httpx.HTTPError as exc:
                raise LLMError(str(exc)) from exc
            content = data.get("response")
            if not isinstance(content, str):
                raise LLMError("Invalid Ollama response")
            return content

        return await generate_with_retry(
            _request, provider=self.provider, policy=self.retry, sleep=self.sleep
        )


def build_generator(
    provider: str,
    *,
    gemini_api_key: str | None,
    gemini_model: str,
    ollama_base_url: str,
    ollama_model: str,
    timeout: float,
    retry: RetryPolicy | None = None,
) -> GeminiGenerator | OllamaGenerator:
    """Factory for generators based on provider."""
    policy = retry or RetryPolicy()
    normalized = provider.strip().lower()
    if normalized in {"gemini", "google"}:
        if not gemini_api_key:
            raise LLMError("GEMINI_API_KEY is required for Gemini provider")
        return GeminiGenerator(
            api_key=gemini_api_key,
            model=gemini_model,
            timeout=timeout,
            retry=policy,
        )
    if normalized == "ollama":
        return OllamaGenerator(
            base_url=ollama_base_url.rstrip("/"),
            model=ollama_model,
            timeout=timeout,
            retry=policy,
        )
    raise LLMError(f"Unsupported LLM provider: {provider}")

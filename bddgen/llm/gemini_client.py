from __future__ import annotations

import time
from typing import Any

import httpx

from bddgen.config.settings import settings
from bddgen.core.logger import get_logger
from bddgen.schemas.gemini import GeminiResponse

logger = get_logger(__name__)

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
BLOCK_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"

# Finish reasons after which any partial text must be discarded.
BLOCKED_FINISH_REASONS = frozenset(
    {"SAFETY", "RECITATION", "LANGUAGE", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}
)

SAFETY_SETTINGS: list[dict[str, str]] = [
    {"category": category, "threshold": BLOCK_THRESHOLD} for category in HARM_CATEGORIES
]


class MissingCredentialError(RuntimeError):
    pass


class GenerationFailedError(RuntimeError):
    def __init__(self, message: str, diagnostics: dict[str, Any] | None = None):
        super().__init__(message)
        self.diagnostics = diagnostics or {}


def generation_config() -> dict[str, Any]:
    return {
        "temperature": settings.GEMINI_TEMPERATURE,
        "topK": settings.GEMINI_TOP_K,
        "topP": settings.GEMINI_TOP_P,
        "maxOutputTokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
    }


def build_request_payload(prompt: str) -> dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": generation_config(),
        "safetySettings": [dict(item) for item in SAFETY_SETTINGS],
    }


def resolve_api_key(api_key: str | None = None) -> str:
    key = str(api_key if api_key is not None else settings.GEMINI_API_KEY or "").strip()
    if not key:
        raise MissingCredentialError(
            "GEMINI_API_KEY not found. Make sure it's set in your .env file or environment variables."
        )
    return key


def assert_generation_ok(response: GeminiResponse) -> str:
    """Return the generated text, or raise when it is missing or was cut off by a block."""
    if response.prompt_feedback is not None and response.prompt_feedback.block_reason:
        raise GenerationFailedError("Prompt blocked by Gemini API.", response.diagnostics())
    if response.finish_reason() in BLOCKED_FINISH_REASONS:
        raise GenerationFailedError(
            f"Generation stopped early: {response.finish_reason()}.", response.diagnostics()
        )
    text = response.text()
    if not text.strip():
        raise GenerationFailedError("No code generated by Gemini API.", response.diagnostics())
    return text


async def _post_generate(client: httpx.AsyncClient, key: str, payload: dict[str, Any]) -> dict[str, Any]:
    response = await client.post(
        settings.gemini_generate_url,
        headers={
            "x-goog-api-key": key,
            "Content-Type": "application/json",
        },
        json=payload,
    )
    response.raise_for_status()
    return response.json()


async def invoke_gemini(
    prompt: str,
    *,
    api_key: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> GeminiResponse:
    """Send one ``generateContent`` request and return the parsed response.

    No retries. The only timeout is the HTTP client's (``GEMINI_TIMEOUT``).
    The credential is checked before any connection is opened.
    """
    key = resolve_api_key(api_key)
    payload = build_request_payload(prompt)
    model = settings.GEMINI_MODEL

    started = time.time()
    logger.info("llm.gemini.request", model=model, prompt_len=len(prompt))
    if client is not None:
        body = await _post_generate(client, key, payload)
    else:
        async with httpx.AsyncClient(timeout=float(settings.GEMINI_TIMEOUT)) as owned_client:
            body = await _post_generate(owned_client, key, payload)
    latency_ms = (time.time() - started) * 1000.0

    parsed = GeminiResponse.model_validate(body if isinstance(body, dict) else {})
    usage = parsed.usage_metadata
    logger.info(
        "llm.gemini.response",
        model=model,
        content_len=len(parsed.text()),
        finish_reason=parsed.finish_reason(),
        prompt_tokens=usage.prompt_token_count if usage else 0,
        completion_tokens=usage.candidates_token_count if usage else 0,
        latency_ms=round(latency_ms, 2),
    )
    return parsed

# core/llm_interface.py
"""
Handles all direct interactions with the remote text-generation providers.

Each provider client translates a generic (system, user) prompt pair into
its own wire shape and reconstructs plain text from its reply envelope.
``LLMService`` performs exactly one HTTP round trip per call and maps every
failure onto the ``core.errors`` taxonomy. Nothing is retried or cached here.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from config import settings
from core.errors import (
    BadStatusError,
    DecodeFailureError,
    EmptyReplyError,
    GenerationError,
    InvalidEndpointError,
    ProviderUnreachableError,
)
from models import Provider, ProviderSettings

logger = structlog.get_logger(__name__)

CONNECTION_TEST_SYSTEM = "You are a connectivity test endpoint."
CONNECTION_TEST_USER = "Reply with exactly: OK"


def parse_base_url(base_url: str) -> httpx.URL:
    """Validate a provider base URL before any network call is made."""
    trimmed = base_url.strip()
    try:
        url = httpx.URL(trimmed)
    except httpx.InvalidURL as exc:
        raise InvalidEndpointError() from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidEndpointError()
    return url


def _append_path(url: httpx.URL, suffix: str) -> httpx.URL:
    return url.copy_with(path=url.path.rstrip("/") + suffix)


class ProviderClient(Protocol):
    """Wire-shape translation for one provider."""

    def build_request(
        self, base_url: httpx.URL, model: str, api_key: str, system: str, user: str
    ) -> tuple[httpx.URL, dict[str, str], dict[str, Any]]: ...

    def parse_reply(self, body: bytes) -> tuple[str, dict[str, int] | None]: ...


# --- Gemini ---


class _GeminiPart(BaseModel):
    text: str | None = None


class _GeminiContent(BaseModel):
    parts: list[_GeminiPart] | None = None


class _GeminiCandidate(BaseModel):
    content: _GeminiContent | None = None


class _GeminiUsage(BaseModel):
    promptTokenCount: int | None = None
    candidatesTokenCount: int | None = None
    totalTokenCount: int | None = None


class _GeminiResponse(BaseModel):
    candidates: list[_GeminiCandidate] | None = None
    usageMetadata: _GeminiUsage | None = None


class GeminiClient:
    """``generateContent`` API; system and user text share a single turn."""

    def __init__(self, temperature: float, max_output_tokens: int) -> None:
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    def build_request(
        self, base_url: httpx.URL, model: str, api_key: str, system: str, user: str
    ) -> tuple[httpx.URL, dict[str, str], dict[str, Any]]:
        if base_url.path.rstrip("/").endswith("/v1beta"):
            url = _append_path(base_url, f"/models/{model}:generateContent")
        else:
            url = _append_path(base_url, f"/v1beta/models/{model}:generateContent")
        headers = {
            "Content-Type": "application/json",
            "X-goog-api-key": api_key,
        }
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": system + "\n\n" + user}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }
        return url, headers, payload

    def parse_reply(self, body: bytes) -> tuple[str, dict[str, int] | None]:
        decoded = _GeminiResponse.model_validate_json(body)
        text = ""
        if decoded.candidates:
            content = decoded.candidates[0].content
            if content and content.parts:
                text = "".join(part.text for part in content.parts if part.text)
        usage = None
        if decoded.usageMetadata:
            usage = {
                "prompt_tokens": decoded.usageMetadata.promptTokenCount or 0,
                "completion_tokens": decoded.usageMetadata.candidatesTokenCount or 0,
                "total_tokens": decoded.usageMetadata.totalTokenCount or 0,
            }
        return text, usage


# --- DeepSeek (OpenAI-compatible chat completions) ---


class _ChatMessage(BaseModel):
    content: str | None = None


class _ChatChoice(BaseModel):
    message: _ChatMessage | None = None


class _ChatResponse(BaseModel):
    choices: list[_ChatChoice] | None = None
    usage: dict[str, Any] | None = None


class DeepSeekClient:
    """Chat completions API with separate system and user messages."""

    def __init__(self, temperature: float) -> None:
        self.temperature = temperature

    def build_request(
        self, base_url: httpx.URL, model: str, api_key: str, system: str, user: str
    ) -> tuple[httpx.URL, dict[str, str], dict[str, Any]]:
        url = _append_path(base_url, "/v1/chat/completions")
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self.temperature,
        }
        return url, headers, payload

    def parse_reply(self, body: bytes) -> tuple[str, dict[str, int] | None]:
        decoded = _ChatResponse.model_validate_json(body)
        text = ""
        if decoded.choices:
            message = decoded.choices[0].message
            if message and message.content:
                text = message.content
        usage = None
        if decoded.usage:
            # Nested detail objects are dropped; only the flat counters matter.
            usage = {k: v for k, v in decoded.usage.items() if isinstance(v, int)}
        return text, usage


def default_provider_clients() -> dict[Provider, ProviderClient]:
    return {
        Provider.GEMINI: GeminiClient(
            temperature=settings.LLM_TEMPERATURE,
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
        ),
        Provider.DEEPSEEK: DeepSeekClient(temperature=settings.LLM_TEMPERATURE),
    }


class LLMService:
    """Utility class for sending prompts to the configured provider."""

    def __init__(
        self,
        timeout: float = settings.HTTPX_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        clients: dict[Provider, ProviderClient] | None = None,
    ):
        # Use a single async client for all requests to reuse connections
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._clients = clients or default_provider_clients()
        self.request_count = 0

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def _log_llm_usage(
        self, provider: Provider, model_name: str, usage: dict[str, int] | None
    ) -> None:
        """Helper to log LLM token usage if available in the response."""
        if usage:
            logger.info(
                "LLM usage",
                provider=provider.value,
                model=model_name,
                prompt_tokens=usage.get("prompt_tokens", "N/A"),
                completion_tokens=usage.get("completion_tokens", "N/A"),
                total_tokens=usage.get("total_tokens", "N/A"),
            )
        else:
            logger.debug(
                "LLM response missing usage information.",
                provider=provider.value,
                model=model_name,
            )

    async def generate(
        self,
        provider: Provider,
        base_url: str,
        model: str,
        api_key: str,
        system: str,
        user: str,
    ) -> str:
        """Send one prompt and return the trimmed reply text."""
        client = self._clients[provider]
        url, headers, payload = client.build_request(
            parse_base_url(base_url), model, api_key, system, user
        )

        logger.debug(
            "Calling LLM",
            provider=provider.value,
            model=model,
            system_chars=len(system),
            user_chars=len(user),
        )
        self.request_count += 1
        try:
            response = await self._client.post(url, json=payload, headers=headers)
        except httpx.RequestError as exc:
            logger.warning(
                "LLM request failed before a response was received.",
                provider=provider.value,
                error=str(exc),
            )
            raise ProviderUnreachableError(
                f"Could not reach the provider: {exc}"
            ) from exc

        if not response.is_success:
            logger.warning(
                "LLM returned non-success status.",
                provider=provider.value,
                status_code=response.status_code,
            )
            raise BadStatusError(
                response.status_code,
                response.text,
                snippet_limit=settings.ERROR_BODY_SNIPPET_CHARS,
            )

        try:
            text, usage = client.parse_reply(response.content)
        except ValidationError as exc:
            logger.warning(
                "LLM response could not be decoded.",
                provider=provider.value,
                body=response.text[:200],
            )
            raise DecodeFailureError() from exc

        self._log_llm_usage(provider, model, usage)
        text = text.strip()
        if not text:
            raise EmptyReplyError()
        return text

    async def test_connection(self, provider_settings: ProviderSettings) -> str:
        """Send a trivial prompt and describe the outcome."""
        try:
            raw = await self.generate(
                provider_settings.provider,
                provider_settings.base_url,
                provider_settings.model,
                provider_settings.api_key,
                CONNECTION_TEST_SYSTEM,
                CONNECTION_TEST_USER,
            )
        except GenerationError as exc:
            logger.info("Connection test failed.", error=str(exc))
            return str(exc)
        if "OK" in raw.upper():
            return "Connection OK."
        return "Connected, but got unexpected reply."


# Instantiate the service for other modules to import and use
llm_service = LLMService()

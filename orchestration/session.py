# orchestration/session.py
"""Caller-side state for one user session: in-flight guard, retry and history."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

import structlog

from config import settings
from models import GenerationConfig, HistoryEntry, ParsedOutput, ProviderSettings

from orchestration.generation_orchestrator import GenerationOrchestrator
from orchestration.history import HistoryRecorder, InMemoryHistory

logger = structlog.get_logger(__name__)


class RequestValidationError(ValueError):
    """The request cannot be sent as given (empty input, missing key)."""


@dataclass(frozen=True)
class LastRequest:
    text: str
    config: GenerationConfig
    provider_settings: ProviderSettings


class GenerationSession:
    """Owns the single in-flight flag and the latest result.

    A ``generate`` call made while another is outstanding is rejected and
    returns ``None``; it is never queued.
    """

    def __init__(
        self,
        orchestrator: GenerationOrchestrator | None = None,
        history: HistoryRecorder | None = None,
        config: GenerationConfig | None = None,
        provider_settings: ProviderSettings | None = None,
    ) -> None:
        self.orchestrator = orchestrator or GenerationOrchestrator()
        self.history = history if history is not None else InMemoryHistory()
        self.config = config or settings.generation_config()
        self.provider_settings = (
            provider_settings or settings.provider_settings()
        ).sanitized()
        self.last_result: ParsedOutput | None = None
        self._last_request: LastRequest | None = None
        self._in_flight = False

    @property
    def is_generating(self) -> bool:
        return self._in_flight

    @property
    def can_retry_last(self) -> bool:
        return self._last_request is not None

    def _prepare(
        self,
        text: str,
        config: GenerationConfig | None,
        provider_settings: ProviderSettings | None,
    ) -> LastRequest:
        cleaned = text.strip()
        if not cleaned:
            raise RequestValidationError("Input is empty.")
        resolved_provider = (provider_settings or self.provider_settings).sanitized()
        if not resolved_provider.api_key:
            raise RequestValidationError("Missing API key.")
        return LastRequest(
            text=cleaned,
            config=config or self.config,
            provider_settings=resolved_provider,
        )

    async def generate(
        self,
        text: str,
        config: GenerationConfig | None = None,
        provider_settings: ProviderSettings | None = None,
    ) -> ParsedOutput | None:
        """Run one generation, or return ``None`` if one is already running."""
        if self._in_flight:
            logger.warning("Generation already in progress; request rejected.")
            return None
        request = self._prepare(text, config, provider_settings)
        return await self._execute(request)

    async def retry_last(self) -> ParsedOutput | None:
        """Re-run the last request with its original snapshot."""
        if self._last_request is None:
            logger.info("Nothing to retry.")
            return None
        if self._in_flight:
            logger.warning("Generation already in progress; retry rejected.")
            return None
        return await self._execute(self._last_request)

    async def _execute(self, request: LastRequest) -> ParsedOutput:
        self._in_flight = True
        self._last_request = request
        self.last_result = None
        try:
            result = await self.orchestrator.run(
                request.text, request.config, request.provider_settings
            )
        finally:
            self._in_flight = False

        self.last_result = result
        self._record_history(request, result)
        return result

    def _record_history(self, request: LastRequest, result: ParsedOutput) -> None:
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            provider=request.provider_settings.provider,
            model=request.provider_settings.model,
            input=request.text,
            spoken=result.spoken,
            formal=result.formal,
            domains=sorted(request.config.domains, key=lambda d: d.value),
            jargon_level=request.config.jargon_level,
            voice_style=request.config.voice_style,
        )
        try:
            self.history.add(entry)
        except Exception as exc:
            # History is best-effort and never fails a generation.
            logger.error("Failed to record history entry.", error=str(exc), exc_info=True)

    async def test_connection(
        self, provider_settings: ProviderSettings | None = None
    ) -> str:
        resolved = (provider_settings or self.provider_settings).sanitized()
        if not resolved.api_key:
            return "Missing API key."
        return await self.orchestrator.llm.test_connection(resolved)

# orchestration/generation_orchestrator.py
"""Drive one generation request, including missing-section recovery."""

from __future__ import annotations

import dataclasses

import structlog

from core.errors import GenerationError
from core.llm_interface import LLMService, llm_service
from models import (
    GenerationConfig,
    MissingSection,
    OutputMode,
    ParsedOutput,
    Prompt,
    ProviderSettings,
)
from parsing import parse_output
from prompt_builder import build_missing_section_prompt, build_prompt

logger = structlog.get_logger(__name__)


class GenerationOrchestrator:
    """Build, send, parse and (in ``both`` mode) patch up missing sections.

    Calls are strictly sequential: the initial request, then at most one
    follow-up for ``formal`` and one for ``spoken``.
    """

    def __init__(self, llm: LLMService | None = None) -> None:
        self.llm = llm or llm_service

    async def _send(self, prompt: Prompt, provider_settings: ProviderSettings) -> str:
        return await self.llm.generate(
            provider_settings.provider,
            provider_settings.base_url,
            provider_settings.model,
            provider_settings.api_key,
            prompt.system,
            prompt.user,
        )

    async def run(
        self,
        text: str,
        config: GenerationConfig,
        provider_settings: ProviderSettings,
    ) -> ParsedOutput:
        """Generate spoken/formal rewrites for ``text``.

        Errors from the initial call propagate unchanged. Follow-up failures
        leave the corresponding section empty.
        """
        prompt = build_prompt(text, config)
        raw = await self._send(prompt, provider_settings)
        parsed = parse_output(raw)

        if config.output_mode is not OutputMode.BOTH:
            return parsed

        for missing in parsed.missing_sections():
            recovered = await self._recover_section(
                text, config, provider_settings, missing
            )
            if recovered:
                parsed = dataclasses.replace(parsed, **{missing.value: recovered})
        return parsed

    async def _recover_section(
        self,
        text: str,
        config: GenerationConfig,
        provider_settings: ProviderSettings,
        missing: MissingSection,
    ) -> str:
        """Ask for a single section again; return it or an empty string."""
        logger.info("Requesting missing section.", section=missing.value)
        prompt = build_missing_section_prompt(text, config, missing)
        try:
            raw = await self._send(prompt, provider_settings)
        except GenerationError as exc:
            logger.warning(
                "Follow-up request failed; section left empty.",
                section=missing.value,
                error=str(exc),
            )
            return ""
        follow_up = parse_output(raw)
        recovered = getattr(follow_up, missing.value).strip()
        if not recovered:
            logger.info("Follow-up produced no content.", section=missing.value)
        return recovered

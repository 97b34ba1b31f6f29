# orchestration/cli_runner.py
"""Command-line runner for a single generation."""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog
from config import load_glossary_text, settings
from core.errors import GenerationError
from models import (
    Domain,
    GenerationConfig,
    OutputMode,
    Provider,
    ProviderSettings,
    VoiceStyle,
)
from parsing import format_tagged
from ui.rich_display import RichDisplayManager
from utils.logging import setup_logging

from orchestration.error_hints import suggestion_for
from orchestration.session import GenerationSession, RequestValidationError

logger = structlog.get_logger(__name__)


def build_generation_config(
    args: argparse.Namespace, base: GenerationConfig
) -> GenerationConfig:
    """Apply command-line overrides to the configured defaults."""
    updates: dict[str, object] = {}
    if args.mode:
        updates["output_mode"] = OutputMode(args.mode)
    if args.notes is not None:
        updates["show_notes"] = args.notes
    if args.domain:
        updates["domains"] = frozenset(Domain(value) for value in args.domain)
    if args.jargon is not None:
        updates["jargon_level"] = args.jargon
    if args.voice:
        updates["voice_style"] = VoiceStyle(args.voice)
    if args.glossary_file:
        updates["glossary_text"] = load_glossary_text(args.glossary_file)
    return base.model_copy(update=updates)


def build_provider_settings(
    args: argparse.Namespace, base: ProviderSettings
) -> ProviderSettings:
    updates: dict[str, object] = {}
    if args.provider and Provider(args.provider) is not base.provider:
        # Switching provider drops the previous provider's endpoint and model.
        updates.update(provider=Provider(args.provider), base_url="", model="")
    if args.base_url:
        updates["base_url"] = args.base_url
    if args.model:
        updates["model"] = args.model
    return base.model_copy(update=updates).sanitized()


def read_input_text(args: argparse.Namespace) -> str:
    if args.text is None or args.text == "-":
        return sys.stdin.read()
    return args.text


async def _run(
    args: argparse.Namespace,
    session: GenerationSession,
    display: RichDisplayManager,
) -> int:
    if args.test_connection:
        display.show_message(await session.test_connection())
        return 0

    try:
        result = await session.generate(read_input_text(args))
    except RequestValidationError as exc:
        display.show_error(str(exc))
        return 1
    except GenerationError as exc:
        logger.error("Generation failed.", error=str(exc))
        display.show_error(str(exc), suggestion_for(exc))
        return 1

    if result is None:
        return 1
    if args.tagged:
        display.show_message(format_tagged(result.spoken, result.formal, result.notes))
    else:
        display.show_result(result)
    return 0


def run(args: argparse.Namespace) -> int:
    """Build a session from settings plus overrides and run the request."""
    setup_logging()
    session = GenerationSession(
        config=build_generation_config(args, settings.generation_config()),
        provider_settings=build_provider_settings(args, settings.provider_settings()),
    )
    display = RichDisplayManager()

    async def _main() -> int:
        try:
            return await _run(args, session, display)
        finally:
            await session.orchestrator.llm.aclose()

    try:
        return asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down.")
        return 130

# config.py
"""Configuration settings for englearn.
Uses Pydantic BaseSettings for automatic environment variable loading.
"""

from __future__ import annotations

import os

import structlog
from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models import (
    DEFAULT_DOMAINS,
    Domain,
    GenerationConfig,
    OutputMode,
    Provider,
    ProviderSettings,
    VoiceStyle,
)

load_dotenv()

logger = structlog.get_logger()


def load_glossary_text(file_path: str | None) -> str:
    """Read a glossary file, returning an empty glossary when unavailable."""
    if not file_path:
        return ""
    try:
        if os.path.exists(file_path):
            with open(file_path, encoding="utf-8") as f:
                return f.read()
        logger.warning("Glossary file not found. Using no glossary.", file_path=file_path)
        return ""
    except OSError:
        logger.error(
            "Error reading glossary file. Using no glossary.",
            file_path=file_path,
            exc_info=True,
        )
        return ""


class EnglearnSettings(BaseSettings):
    """Full configuration for englearn."""

    # Provider selection and credentials
    LLM_PROVIDER: Provider = Provider.GEMINI
    LLM_BASE_URL: str = ""
    LLM_MODEL: str = ""
    LLM_API_KEY: str = ""

    # Transport and request shape
    HTTPX_TIMEOUT: float = 120.0
    LLM_TEMPERATURE: float = 0.6
    GEMINI_MAX_OUTPUT_TOKENS: int = 2048
    ERROR_BODY_SNIPPET_CHARS: int = 220

    # Generation defaults
    DEFAULT_DOMAINS: list[Domain] = Field(
        default_factory=lambda: sorted(DEFAULT_DOMAINS, key=lambda d: d.value)
    )
    DEFAULT_JARGON_LEVEL: int = 2
    DEFAULT_VOICE_STYLE: VoiceStyle = VoiceStyle.TRADFI
    DEFAULT_OUTPUT_MODE: OutputMode = OutputMode.BOTH
    SHOW_NOTES: bool = False
    GLOSSARY_FILE: str | None = None

    # History
    HISTORY_LIMIT: int = 50

    # Logging & UI
    LOG_LEVEL_STR: str = Field("INFO", alias="ENGLEARN_LOG_LEVEL")
    LOG_FORMAT: str = (
        "%(asctime)s - %(levelname)s - [%(name)s:%(funcName)s:%(lineno)d] - %(message)s"
    )
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
    LOG_FILE: str | None = None
    ENABLE_RICH_LOGGING: bool = True

    @model_validator(mode="after")
    def apply_provider_defaults(self) -> EnglearnSettings:
        sanitized = ProviderSettings(
            provider=self.LLM_PROVIDER,
            base_url=self.LLM_BASE_URL,
            model=self.LLM_MODEL,
            api_key=self.LLM_API_KEY,
        ).sanitized()
        base_url = self.LLM_BASE_URL.strip()
        model = self.LLM_MODEL.strip()
        if (base_url and base_url != sanitized.base_url) or (
            model and model != sanitized.model
        ):
            logger.warning(
                "Provider settings adjusted to match the selected provider.",
                provider=self.LLM_PROVIDER.value,
                base_url=sanitized.base_url,
                model=sanitized.model,
            )
        self.LLM_BASE_URL = sanitized.base_url
        self.LLM_MODEL = sanitized.model
        self.LLM_API_KEY = sanitized.api_key
        return self

    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", extra="ignore", populate_by_name=True
    )

    def provider_settings(self) -> ProviderSettings:
        return ProviderSettings(
            provider=self.LLM_PROVIDER,
            base_url=self.LLM_BASE_URL,
            model=self.LLM_MODEL,
            api_key=self.LLM_API_KEY,
        )

    def generation_config(self, glossary_text: str | None = None) -> GenerationConfig:
        """Snapshot the generation defaults into an immutable config."""
        if glossary_text is None:
            glossary_text = load_glossary_text(self.GLOSSARY_FILE)
        return GenerationConfig(
            domains=frozenset(self.DEFAULT_DOMAINS),
            jargon_level=self.DEFAULT_JARGON_LEVEL,
            voice_style=self.DEFAULT_VOICE_STYLE,
            output_mode=self.DEFAULT_OUTPUT_MODE,
            show_notes=self.SHOW_NOTES,
            glossary_text=glossary_text,
        )


settings = EnglearnSettings()

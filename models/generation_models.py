# models/generation_models.py
"""Data structures shared by the prompt builder, parser and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """Remote text-generation backends."""

    GEMINI = "gemini"
    DEEPSEEK = "deepseek"

    @property
    def display_name(self) -> str:
        return {Provider.GEMINI: "Gemini", Provider.DEEPSEEK: "DeepSeek"}[self]

    @property
    def default_base_url(self) -> str:
        if self is Provider.GEMINI:
            return "https://generativelanguage.googleapis.com"
        return "https://api.deepseek.com"

    @property
    def default_model(self) -> str:
        if self is Provider.GEMINI:
            return "gemini-3-flash-preview"
        return "deepseek-chat"


class Domain(str, Enum):
    """Topic tags used to steer terminology."""

    LIFE = "life"
    FOOD = "food"
    FITNESS = "fitness"
    AI = "ai"
    WEB3 = "web3"
    READING = "reading"
    INVESTING = "investing"

    @property
    def display_name(self) -> str:
        if self is Domain.AI:
            return "AI"
        if self is Domain.WEB3:
            return "Web3"
        return self.value.capitalize()


class VoiceStyle(str, Enum):
    TRADFI = "tradfi"
    CRYPTOTWITTER = "cryptotwitter"

    @property
    def display_name(self) -> str:
        if self is VoiceStyle.TRADFI:
            return "TradFi / Research"
        return "Crypto Twitter"


class OutputMode(str, Enum):
    BOTH = "both"
    SPOKEN_ONLY = "spokenOnly"
    FORMAL_ONLY = "formalOnly"


class MissingSection(str, Enum):
    SPOKEN = "spoken"
    FORMAL = "formal"

    @property
    def output_mode(self) -> OutputMode:
        if self is MissingSection.SPOKEN:
            return OutputMode.SPOKEN_ONLY
        return OutputMode.FORMAL_ONLY


DEFAULT_DOMAINS = frozenset({Domain.AI, Domain.WEB3, Domain.INVESTING})


class GenerationConfig(BaseModel):
    """Immutable generation settings for a single request."""

    model_config = ConfigDict(frozen=True)

    domains: frozenset[Domain] = DEFAULT_DOMAINS
    jargon_level: int = 2
    voice_style: VoiceStyle = VoiceStyle.TRADFI
    output_mode: OutputMode = OutputMode.BOTH
    show_notes: bool = False
    glossary_text: str = ""


class ProviderSettings(BaseModel):
    """Endpoint, model and credential for one provider."""

    model_config = ConfigDict(frozen=True)

    provider: Provider = Provider.GEMINI
    base_url: str = ""
    model: str = ""
    api_key: str = ""

    def sanitized(self) -> ProviderSettings:
        """Return a trimmed copy with defaults filled and cross-provider values reset."""
        base_url = self.base_url.strip() or self.provider.default_base_url
        model = self.model.strip() or self.provider.default_model

        # Values copied over from the other provider are replaced wholesale.
        if self.provider is Provider.DEEPSEEK and (
            "googleapis.com" in base_url or model.startswith("gemini-")
        ):
            base_url = self.provider.default_base_url
            model = self.provider.default_model
        if self.provider is Provider.GEMINI and (
            "deepseek" in base_url or model.startswith("deepseek-")
        ):
            base_url = self.provider.default_base_url
            model = self.provider.default_model

        return self.model_copy(
            update={
                "base_url": base_url,
                "model": model,
                "api_key": self.api_key.strip(),
            }
        )


@dataclass(frozen=True)
class GlossaryEntry:
    term: str
    preferred: str


@dataclass(frozen=True)
class Prompt:
    """System and user instruction pair sent to a provider."""

    system: str
    user: str


@dataclass(frozen=True)
class ParsedOutput:
    """Structured result recovered from a provider reply."""

    spoken: str = ""
    formal: str = ""
    notes: tuple[str, ...] = field(default_factory=tuple)

    def missing_sections(self) -> list[MissingSection]:
        """Primary sections that are empty after trimming, formal first."""
        missing: list[MissingSection] = []
        if not self.formal.strip():
            missing.append(MissingSection.FORMAL)
        if not self.spoken.strip():
            missing.append(MissingSection.SPOKEN)
        return missing


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryEntry(BaseModel):
    """A completed generation as handed to the history collaborator."""

    id: str
    created_at: datetime = Field(default_factory=_utcnow)
    provider: Provider
    model: str
    input: str
    spoken: str
    formal: str
    domains: list[Domain] = Field(default_factory=list)
    jargon_level: int
    voice_style: VoiceStyle

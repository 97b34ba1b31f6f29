"""Central package for englearn data models."""

from .generation_models import (
    DEFAULT_DOMAINS,
    Domain,
    GenerationConfig,
    GlossaryEntry,
    HistoryEntry,
    MissingSection,
    OutputMode,
    ParsedOutput,
    Prompt,
    Provider,
    ProviderSettings,
    VoiceStyle,
)

__all__ = [
    "DEFAULT_DOMAINS",
    "Domain",
    "GenerationConfig",
    "GlossaryEntry",
    "HistoryEntry",
    "MissingSection",
    "OutputMode",
    "ParsedOutput",
    "Prompt",
    "Provider",
    "ProviderSettings",
    "VoiceStyle",
]

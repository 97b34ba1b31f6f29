# utils/text_processing.py
"""Input-side text helpers: language detection, glossary and domain formatting."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from models import Domain, GlossaryEntry

logger = structlog.get_logger(__name__)

JARGON_LEVEL_MIN = 0
JARGON_LEVEL_MAX = 3

# CJK Unified Ideographs and Extension A.
_CJK_RANGES = ((0x4E00, 0x9FFF), (0x3400, 0x4DBF))


def contains_chinese_characters(text: str) -> bool:
    """Return True if ``text`` contains at least one CJK ideograph."""
    for char in text:
        code_point = ord(char)
        for low, high in _CJK_RANGES:
            if low <= code_point <= high:
                return True
    return False


def parse_glossary(text: str) -> list[GlossaryEntry]:
    """Parse ``term = preferred`` lines into glossary entries.

    Lines without ``=`` or with an empty side are dropped. Only the first
    ``=`` splits, so the preferred phrasing may itself contain one.
    """
    entries: list[GlossaryEntry] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        term, sep, preferred = line.partition("=")
        if not sep:
            logger.debug("Skipping glossary line without '='.", line=line)
            continue
        term = term.strip()
        preferred = preferred.strip()
        if not term or not preferred:
            logger.debug("Skipping incomplete glossary line.", line=line)
            continue
        entries.append(GlossaryEntry(term=term, preferred=preferred))
    return entries


def describe_domains(domains: Iterable[Domain]) -> str:
    """Render selected domains in declaration order, ``General`` when empty."""
    selected = set(domains)
    names = [domain.display_name for domain in Domain if domain in selected]
    return ", ".join(names) if names else "General"


def clamp_jargon_level(level: int) -> int:
    return max(JARGON_LEVEL_MIN, min(JARGON_LEVEL_MAX, level))

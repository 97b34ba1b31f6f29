# parsing/output_parser.py
"""Recover spoken/formal/notes sections from a provider reply.

``parse_output`` runs a cascade of independent stages. Each stage takes the
trimmed reply and returns a ``ParsedOutput`` or ``None``; the first result
wins and the raw fallback always succeeds, so parsing never raises.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

import structlog
from pydantic import BaseModel, ValidationError

from models import ParsedOutput

logger = structlog.get_logger(__name__)

SECTION_NAMES = ("spoken", "formal", "notes")

_STRAY_TAG_RE = re.compile(r"\[/?(?:spoken|formal|notes)\]", re.IGNORECASE)

# Heading fallback candidates, per primary section.
_HEADERS: dict[str, tuple[str, ...]] = {
    "spoken": ("spoken", "spoken script"),
    "formal": ("formal", "formal writing"),
}


def _open_pattern(name: str) -> re.Pattern[str]:
    return re.compile(re.escape(f"[{name}]"), re.IGNORECASE)


def _close_pattern(name: str) -> re.Pattern[str]:
    return re.compile(re.escape(f"[/{name}]"), re.IGNORECASE)


def strip_stray_tags(text: str) -> str:
    """Remove echoed section markers and trim."""
    return _STRAY_TAG_RE.sub("", text).strip()


def split_bullets(text: str) -> tuple[str, ...]:
    """Split a notes block into bullets, dropping leading dashes and blanks."""
    bullets = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("-"):
            line = line[1:].strip()
        if line:
            bullets.append(line)
    return tuple(bullets)


def extract_tag(name: str, text: str) -> str | None:
    """Return the raw content of ``[name]`` or ``None`` when it never opens.

    Without a closing marker the section runs to the next opening marker of
    another section, or to the end of the text.
    """
    opening = _open_pattern(name).search(text)
    if opening is None:
        return None
    start = opening.end()

    closing = _close_pattern(name).search(text, start)
    if closing is not None:
        return text[start : closing.start()]

    end = len(text)
    for other in SECTION_NAMES:
        if other == name:
            continue
        next_open = _open_pattern(other).search(text, start)
        if next_open is not None and next_open.start() < end:
            end = next_open.start()
    logger.debug("Section missing closing tag; truncated at next section.", section=name)
    return text[start:end]


def parse_tagged(text: str) -> ParsedOutput | None:
    spoken = extract_tag("spoken", text)
    formal = extract_tag("formal", text)
    if spoken is None and formal is None:
        return None

    notes_text = extract_tag("notes", text)
    notes = split_bullets(strip_stray_tags(notes_text)) if notes_text else ()
    return ParsedOutput(
        spoken=strip_stray_tags(spoken or ""),
        formal=strip_stray_tags(formal or ""),
        notes=notes,
    )


class _GeneratedReply(BaseModel):
    """JSON shape some providers fall back to."""

    spoken: str
    formal: str
    notes: list[str] | None = None


def _decode_reply(candidate: str) -> _GeneratedReply | None:
    try:
        return _GeneratedReply.model_validate_json(candidate)
    except ValidationError:
        return None


def parse_json(text: str) -> ParsedOutput | None:
    decoded = _decode_reply(text)
    if decoded is None:
        # Tolerate prose or code fences around the payload.
        first = text.find("{")
        last = text.rfind("}")
        if first == -1 or last == -1 or first >= last:
            return None
        decoded = _decode_reply(text[first : last + 1])
    if decoded is None:
        return None
    notes = tuple(decoded.notes or ())
    return ParsedOutput(
        spoken=decoded.spoken.strip(),
        formal=decoded.formal.strip(),
        notes=notes,
    )


def _is_header(line: str, candidates: Iterable[str]) -> bool:
    normalized = line.strip().lower()
    return any(
        normalized == header
        or normalized.startswith(header + ":")
        or normalized.startswith("# " + header)
        or normalized.startswith("## " + header)
        for header in candidates
    )


def parse_headings(text: str) -> ParsedOutput | None:
    lowered = text.lower()
    if "spoken" not in lowered or "formal" not in lowered:
        return None

    lines = text.split("\n")
    header_lines = {
        section: [i for i, line in enumerate(lines) if _is_header(line, candidates)]
        for section, candidates in _HEADERS.items()
    }
    boundaries = sorted({i for indices in header_lines.values() for i in indices})

    def body(section: str) -> str:
        # The header line itself is never part of the body.
        if not header_lines[section]:
            return ""
        start = header_lines[section][0]
        end = next((b for b in boundaries if b > start), len(lines))
        return "\n".join(lines[start + 1 : end]).strip()

    spoken = body("spoken")
    formal = body("formal")
    if not spoken and not formal:
        return None
    return ParsedOutput(spoken=spoken, formal=formal, notes=())


def parse_raw(text: str) -> ParsedOutput:
    return ParsedOutput(spoken=text, formal="", notes=())


PARSE_STAGES: tuple[Callable[[str], ParsedOutput | None], ...] = (
    parse_tagged,
    parse_json,
    parse_headings,
)


def parse_output(raw: str) -> ParsedOutput:
    """Parse a provider reply into a ``ParsedOutput``."""
    text = raw.strip()
    for stage in PARSE_STAGES:
        parsed = stage(text)
        if parsed is not None:
            logger.debug("Parsed provider reply.", stage=stage.__name__)
            return parsed
    logger.info("No structure found in provider reply; using raw text.")
    return parse_raw(text)


def format_tagged(spoken: str, formal: str, notes: Iterable[str] = ()) -> str:
    """Render sections in the canonical tagged layout."""
    blocks = [f"[spoken]\n{spoken}\n[/spoken]", f"[formal]\n{formal}\n[/formal]"]
    notes = list(notes)
    if notes:
        bullets = "\n".join(f"- {note}" for note in notes)
        blocks.append(f"[notes]\n{bullets}\n[/notes]")
    return "\n\n".join(blocks)

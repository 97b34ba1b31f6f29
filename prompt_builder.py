# prompt_builder.py
"""Assemble system and user instructions for a generation request.

Everything here is pure: the same input text and ``GenerationConfig`` always
produce the same ``Prompt``. The output-format block is the tag contract that
``parsing.output_parser`` inverts.
"""

from __future__ import annotations

from models import (
    GenerationConfig,
    GlossaryEntry,
    MissingSection,
    OutputMode,
    Prompt,
    VoiceStyle,
)
from prompt_renderer import render_prompt
from utils.text_processing import (
    JARGON_LEVEL_MAX,
    JARGON_LEVEL_MIN,
    clamp_jargon_level,
    contains_chinese_characters,
    describe_domains,
    parse_glossary,
)

NO_GLOSSARY_LINE = "No glossary provided."
FORMAL_STYLE_LINE = (
    "Formal style: concise, professional writing (memo / research note tone)."
)

# (is_chinese, mode) -> task sentence
_TASK_LINES: dict[tuple[bool, OutputMode], str] = {
    (True, OutputMode.BOTH): (
        "Translate the input Chinese into English in two variants (spoken + formal)."
    ),
    (True, OutputMode.SPOKEN_ONLY): (
        "Translate the input Chinese into English (spoken script only)."
    ),
    (True, OutputMode.FORMAL_ONLY): (
        "Translate the input Chinese into English (formal writing only)."
    ),
    (False, OutputMode.BOTH): (
        "Fix grammar, clarity, and coherence of the input English, "
        "then produce two variants (spoken + formal)."
    ),
    (False, OutputMode.SPOKEN_ONLY): (
        "Fix grammar, clarity, and coherence of the input English, "
        "then produce a spoken script only."
    ),
    (False, OutputMode.FORMAL_ONLY): (
        "Fix grammar, clarity, and coherence of the input English, "
        "then produce formal writing only."
    ),
}

_SPOKEN_STYLES: dict[VoiceStyle, str] = {
    VoiceStyle.TRADFI: (
        "Spoken style: first-person, natural but professional; like explaining "
        "to a colleague. Use short sentences, contractions, and light connectors "
        "(e.g., “so”, “anyway”, “to be fair”) when helpful. Avoid cheesy phrases "
        "like “as we all know”."
    ),
    VoiceStyle.CRYPTOTWITTER: (
        "Spoken style: first-person, casual crypto-native tone; still clear. "
        "Short sentences, some slang is OK, but avoid meme spam."
    ),
}


def required_sections(mode: OutputMode) -> list[str]:
    """Primary tag names the given mode asks the provider for."""
    if mode is OutputMode.SPOKEN_ONLY:
        return ["spoken"]
    if mode is OutputMode.FORMAL_ONLY:
        return ["formal"]
    return ["spoken", "formal"]


def task_line(is_chinese: bool, mode: OutputMode) -> str:
    return _TASK_LINES[(is_chinese, mode)]


def render_output_format(mode: OutputMode, show_notes: bool) -> str:
    """Render the tag pairs the reply must contain for ``mode``."""
    return render_prompt(
        "output_format.j2",
        {"sections": required_sections(mode), "include_notes": show_notes},
    ).strip()


def render_glossary_block(entries: list[GlossaryEntry]) -> str:
    if not entries:
        return NO_GLOSSARY_LINE
    return "\n".join(f"- {entry.term}: {entry.preferred}" for entry in entries)


def build_prompt(text: str, config: GenerationConfig) -> Prompt:
    """Build the system/user prompt pair for ``text`` under ``config``."""
    is_chinese = contains_chinese_characters(text)
    glossary = parse_glossary(config.glossary_text)

    system = render_prompt(
        "system.j2",
        {
            "domains": describe_domains(config.domains),
            "include_notes": config.show_notes,
            "output_format": render_output_format(
                config.output_mode, config.show_notes
            ),
            "glossary_block": render_glossary_block(glossary),
        },
    )
    user = render_prompt(
        "user.j2",
        {
            "task_line": task_line(is_chinese, config.output_mode),
            "spoken_style": _SPOKEN_STYLES[config.voice_style],
            "formal_style": FORMAL_STYLE_LINE,
            "jargon_level": clamp_jargon_level(config.jargon_level),
            "jargon_min": JARGON_LEVEL_MIN,
            "jargon_max": JARGON_LEVEL_MAX,
            "input_text": text,
        },
    )
    return Prompt(system=system, user=user)


def build_missing_section_prompt(
    text: str, config: GenerationConfig, missing: MissingSection
) -> Prompt:
    """Build a follow-up prompt that asks for ``missing`` only."""
    narrowed = config.model_copy(update={"output_mode": missing.output_mode})
    base = build_prompt(text, narrowed)
    if narrowed.show_notes:
        scope = f"the [{missing.value}] section and the [notes] section"
    else:
        scope = f"the [{missing.value}] section"
    system = (
        base.system
        + f"\n\nAdditional rule: Only output {scope} using the same tag format."
    )
    return Prompt(system=system, user=base.user)

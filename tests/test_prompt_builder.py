# tests/test_prompt_builder.py

import pytest

import prompt_builder
from models import Domain, GenerationConfig, MissingSection, OutputMode, VoiceStyle
from prompt_builder import (
    NO_GLOSSARY_LINE,
    build_missing_section_prompt,
    build_prompt,
    render_output_format,
)

CHINESE_INPUT = "我们下周发布新模型"
ENGLISH_INPUT = "we ship the new model next week"


@pytest.mark.parametrize(
    ("text", "mode", "expected"),
    [
        (CHINESE_INPUT, OutputMode.BOTH, "Translate the input Chinese into English in two variants"),
        (CHINESE_INPUT, OutputMode.SPOKEN_ONLY, "(spoken script only)"),
        (CHINESE_INPUT, OutputMode.FORMAL_ONLY, "(formal writing only)"),
        (ENGLISH_INPUT, OutputMode.BOTH, "then produce two variants (spoken + formal)"),
        (ENGLISH_INPUT, OutputMode.SPOKEN_ONLY, "then produce a spoken script only"),
        (ENGLISH_INPUT, OutputMode.FORMAL_ONLY, "then produce formal writing only"),
    ],
)
def test_task_line_matrix(text, mode, expected):
    prompt = build_prompt(text, GenerationConfig(output_mode=mode))
    first_line = prompt.user.splitlines()[0]
    assert first_line.startswith("Task: ")
    assert expected in first_line


def test_user_prompt_ends_with_input():
    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig())
    assert prompt.user.endswith("Input:\n" + ENGLISH_INPUT)


def test_build_is_deterministic():
    config = GenerationConfig(show_notes=True, glossary_text="TVL = total value locked")
    assert build_prompt(CHINESE_INPUT, config) == build_prompt(CHINESE_INPUT, config)


def test_output_format_matches_mode():
    both = render_output_format(OutputMode.BOTH, show_notes=False)
    assert "[spoken]" in both and "[/spoken]" in both
    assert "[formal]" in both and "[/formal]" in both
    assert "[notes]" not in both

    spoken_only = render_output_format(OutputMode.SPOKEN_ONLY, show_notes=True)
    assert "[spoken]" in spoken_only
    assert "[formal]" not in spoken_only
    assert "[notes]" in spoken_only and "[/notes]" in spoken_only

    formal_only = render_output_format(OutputMode.FORMAL_ONLY, show_notes=False)
    assert "[formal]" in formal_only
    assert "[spoken]" not in formal_only


def test_output_format_block_is_in_system_prompt():
    config = GenerationConfig(show_notes=True)
    prompt = build_prompt(ENGLISH_INPUT, config)
    assert render_output_format(OutputMode.BOTH, True) in prompt.system
    assert "7) Always include 2–5 bullets in [notes]." in prompt.system


def test_notes_rule_absent_without_notes():
    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig(show_notes=False))
    assert "7)" not in prompt.system
    assert "6) If a section is unavailable" in prompt.system


def test_domains_and_general_fallback():
    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig(domains=frozenset()))
    assert "terminology for: General." in prompt.system

    prompt = build_prompt(
        ENGLISH_INPUT, GenerationConfig(domains=frozenset({Domain.WEB3, Domain.AI}))
    )
    assert "terminology for: AI, Web3." in prompt.system


def test_jargon_level_is_clamped():
    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig(jargon_level=42))
    assert "Jargon level: 3 (0 = plain, 3 = industry-native)" in prompt.user

    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig(jargon_level=-1))
    assert "Jargon level: 0 " in prompt.user


def test_glossary_block():
    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig())
    assert prompt.system.endswith("Glossary:\n" + NO_GLOSSARY_LINE)

    config = GenerationConfig(glossary_text="TVL = total value locked\nbad line\nalpha=edge")
    prompt = build_prompt(ENGLISH_INPUT, config)
    assert prompt.system.endswith(
        "Glossary:\n- TVL: total value locked\n- alpha: edge"
    )


def test_voice_style_changes_spoken_style():
    tradfi = build_prompt(ENGLISH_INPUT, GenerationConfig(voice_style=VoiceStyle.TRADFI))
    casual = build_prompt(
        ENGLISH_INPUT, GenerationConfig(voice_style=VoiceStyle.CRYPTOTWITTER)
    )
    assert "like explaining to a colleague" in tradfi.user
    assert "crypto-native" in casual.user
    assert tradfi.system == casual.system


def test_system_rules_present():
    prompt = build_prompt(ENGLISH_INPUT, GenerationConfig())
    assert "Preserve meaning. Do NOT add facts." in prompt.system
    assert "Always include BOTH opening and closing tags" in prompt.system
    assert "leave it empty but still include its tags" in prompt.system


def test_missing_section_prompt_forces_single_section():
    config = GenerationConfig(output_mode=OutputMode.BOTH, show_notes=False)
    prompt = build_missing_section_prompt(ENGLISH_INPUT, config, MissingSection.FORMAL)

    assert "then produce formal writing only" in prompt.user
    assert "[formal]" in prompt.system
    assert "[spoken]" not in prompt.system
    assert prompt.system.endswith(
        "Additional rule: Only output the [formal] section using the same tag format."
    )
    # The caller's snapshot is untouched.
    assert config.output_mode is OutputMode.BOTH


def test_missing_section_prompt_mentions_notes_when_enabled():
    config = GenerationConfig(show_notes=True)
    prompt = build_missing_section_prompt(CHINESE_INPUT, config, MissingSection.SPOKEN)
    assert "(spoken script only)" in prompt.user
    assert "Only output the [spoken] section and the [notes] section" in prompt.system


def test_required_sections():
    assert prompt_builder.required_sections(OutputMode.BOTH) == ["spoken", "formal"]
    assert prompt_builder.required_sections(OutputMode.SPOKEN_ONLY) == ["spoken"]

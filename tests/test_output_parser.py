# tests/test_output_parser.py

import pytest

from models import ParsedOutput
from parsing import (
    extract_tag,
    format_tagged,
    parse_headings,
    parse_json,
    parse_output,
    parse_tagged,
    split_bullets,
)


def test_parse_well_formed_tagged_reply():
    raw = """
[spoken]
So basically we're shipping next week.
[/spoken]

[formal]
The release is scheduled for next week.
[/formal]

[notes]
- Use "ship" for product releases.
-   Keep tense consistent.

[/notes]
"""
    result = parse_output(raw)
    assert result == ParsedOutput(
        spoken="So basically we're shipping next week.",
        formal="The release is scheduled for next week.",
        notes=('Use "ship" for product releases.', "Keep tense consistent."),
    )


@pytest.mark.parametrize(
    ("spoken", "formal"),
    [
        ("Hey, quick update.", "Please find a brief update below."),
        ("Line one\nline two", "Paragraph one.\n\nParagraph two."),
        ("  padded  ", "x"),
    ],
)
def test_tag_round_trip(spoken, formal):
    result = parse_output(format_tagged(spoken, formal))
    assert result.spoken == spoken.strip()
    assert result.formal == formal.strip()
    assert result.notes == ()


def test_round_trip_with_notes():
    block = format_tagged("Hi", "Hello", ["one", "two"])
    assert parse_output(block).notes == ("one", "two")


def test_missing_closing_tag_tolerance():
    result = parse_output("[spoken]Hello there[formal]Good day[/formal]")
    assert result.spoken == "Hello there"
    assert result.formal == "Good day"


def test_truncated_reply_runs_to_end():
    result = parse_output("[spoken]\nHi all\n[/spoken]\n[formal]\nDear all, the rep")
    assert result.spoken == "Hi all"
    assert result.formal == "Dear all, the rep"


def test_tags_are_case_insensitive():
    result = parse_output("[SPOKEN]yo[/Spoken]\n[Formal]Greetings[/FORMAL]")
    assert result.spoken == "yo"
    assert result.formal == "Greetings"


def test_stray_tag_echoes_are_stripped():
    raw = "[spoken]\nHey [notes] there[/notes]\n[/spoken]\n[formal]Good day[/formal]"
    result = parse_output(raw)
    assert result.spoken == "Hey  there"
    assert "[" not in result.spoken
    assert result.formal == "Good day"


def test_only_one_primary_section_still_wins():
    result = parse_output('[formal]Regards.[/formal] {"spoken": "x", "formal": "y"}')
    assert result.spoken == ""
    assert result.formal == 'Regards.'


def test_notes_without_closing_tag_stop_at_next_section():
    raw = "[notes]\n- tip\n[spoken]hi[/spoken][formal]hello[/formal]"
    result = parse_output(raw)
    assert result.notes == ("tip",)
    assert result.spoken == "hi"


def test_parse_tagged_returns_none_without_primary_tags():
    assert parse_tagged("[notes]\n- a\n[/notes]") is None
    assert extract_tag("spoken", "nothing here") is None


def test_json_fallback_with_prose_and_fence():
    raw = 'Sure! ```{"spoken":"Hi","formal":"Greetings"}```'
    result = parse_output(raw)
    assert result.spoken == "Hi"
    assert result.formal == "Greetings"
    assert result.notes == ()


def test_json_fallback_whole_text_with_notes():
    raw = '{"spoken": " Hi ", "formal": "Greetings", "notes": ["a", " b "]}'
    result = parse_json(raw)
    assert result == ParsedOutput(spoken="Hi", formal="Greetings", notes=("a", " b "))


def test_json_missing_required_field_is_rejected():
    assert parse_json('{"spoken": "Hi"}') is None
    assert parse_json('{"spoken": 1, "formal": "x"}') is None
    assert parse_json("} backwards {") is None


def test_heading_fallback():
    result = parse_output("Spoken:\nHey!\n\nFormal:\nGood afternoon.")
    assert result.spoken == "Hey!"
    assert result.formal == "Good afternoon."
    assert result.notes == ()


def test_heading_fallback_markdown_headers():
    raw = "## Spoken script\nHey all!\n# Formal writing\nDear all.\nRegards."
    result = parse_headings(raw)
    assert result.spoken == "Hey all!"
    assert result.formal == "Dear all.\nRegards."
    assert result.notes == ()


@pytest.mark.parametrize(
    "raw",
    [
        "Spoken: Hey\nFormal: Good day",
        "# Spoken: Hey\n# Formal: Good day",
        "## spoken - Hey\n## formal - Good day",
    ],
)
def test_heading_line_text_is_not_section_body(raw):
    assert parse_headings(raw) is None
    assert parse_output(raw) == ParsedOutput(spoken=raw, formal="", notes=())


def test_notes_line_does_not_split_heading_sections():
    raw = "Spoken:\nHi\nFormal:\nDear team,\nNotes\nthe meeting moved."
    result = parse_output(raw)
    assert result.spoken == "Hi"
    assert result.formal == "Dear team,\nNotes\nthe meeting moved."
    assert result.notes == ()


def test_heading_fallback_requires_both_words():
    assert parse_headings("Spoken:\nHey!") is None


def test_heading_fallback_with_no_bodies_falls_through():
    raw = "The spoken and formal versions are below."
    assert parse_headings(raw) is None
    assert parse_output(raw).spoken == raw


def test_json_is_tried_before_headings():
    raw = 'Spoken:\nnope\nFormal:\nnope\n{"spoken": "json", "formal": "wins"}'
    result = parse_output(raw)
    assert result.spoken == "json"
    assert result.formal == "wins"


def test_total_fallback():
    result = parse_output("just some unrelated text")
    assert result == ParsedOutput(spoken="just some unrelated text", formal="", notes=())


def test_empty_reply_parses_to_empty_output():
    assert parse_output("   ") == ParsedOutput()


def test_split_bullets():
    assert split_bullets("- a\n\n-b\n  c  \n-\n") == ("a", "b", "c")

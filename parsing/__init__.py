# parsing/__init__.py
"""Parsing of provider replies into structured output."""

from .output_parser import (
    PARSE_STAGES,
    extract_tag,
    format_tagged,
    parse_headings,
    parse_json,
    parse_output,
    parse_raw,
    parse_tagged,
    split_bullets,
    strip_stray_tags,
)

__all__ = [
    "PARSE_STAGES",
    "extract_tag",
    "format_tagged",
    "parse_headings",
    "parse_json",
    "parse_output",
    "parse_raw",
    "parse_tagged",
    "split_bullets",
    "strip_stray_tags",
]

# utils/__init__.py
"""General utility functions for englearn."""

from .logging import setup_logging
from .text_processing import (
    JARGON_LEVEL_MAX,
    JARGON_LEVEL_MIN,
    clamp_jargon_level,
    contains_chinese_characters,
    describe_domains,
    parse_glossary,
)

__all__ = [
    "JARGON_LEVEL_MAX",
    "JARGON_LEVEL_MIN",
    "clamp_jargon_level",
    "contains_chinese_characters",
    "describe_domains",
    "parse_glossary",
    "setup_logging",
]

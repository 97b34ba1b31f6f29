# main.py
"""CLI entry point for englearn."""

from __future__ import annotations

import argparse
import sys

from models import Domain, OutputMode, Provider, VoiceStyle
from orchestration.cli_runner import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="englearn",
        description="Rewrite English or Chinese text into spoken and formal English.",
    )
    parser.add_argument(
        "text", nargs="?", default=None, help="Input text ('-' or omitted reads stdin)"
    )
    parser.add_argument("--mode", choices=[m.value for m in OutputMode])
    parser.add_argument(
        "--notes",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Ask for learning notes",
    )
    parser.add_argument(
        "--domain",
        action="append",
        choices=[d.value for d in Domain],
        help="Topic tag; repeat for several",
    )
    parser.add_argument("--jargon", type=int, default=None, help="Jargon level 0-3")
    parser.add_argument("--voice", choices=[v.value for v in VoiceStyle])
    parser.add_argument("--glossary-file", default=None, help="'term = preferred' lines")
    parser.add_argument("--provider", choices=[p.value for p in Provider])
    parser.add_argument("--model", default=None)
    parser.add_argument("--base-url", default=None)
    parser.add_argument(
        "--tagged", action="store_true", help="Print the result in tagged form"
    )
    parser.add_argument(
        "--test-connection", action="store_true", help="Check provider connectivity"
    )
    return parser


def main() -> None:
    """Parse command-line arguments and run englearn."""
    args = build_parser().parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    main()

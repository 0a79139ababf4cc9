"""Search results and their terminal rendering."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

_RED = "\033[31m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class Match:
    """A matching line with one line of context on either side."""

    file_path: str
    line_number: int
    line: str
    before: str = ""
    after: str = ""
    is_match: bool = True


def highlight_match(line: str) -> str:
    """Wrap the whole line in ANSI red colour codes."""
    return f"{_RED}{line}{_RESET}"


def format_match(match: Match) -> str:
    """Render a match in a grep-like layout with context lines."""
    parts = [f"\n{match.file_path}:\n"]
    if match.before:
        parts.append(f"{match.line_number - 1}-  {match.before}\n")
    parts.append(f"{match.line_number}:  {highlight_match(match.line)}\n")
    if match.after:
        parts.append(f"{match.line_number + 1}+  {match.after}\n")
    return "".join(parts)


def print_match(match: Match, out: TextIO | None = None) -> None:
    """Write a rendered match to ``out`` (standard output by default)."""
    stream = sys.stdout if out is None else out
    stream.write(format_match(match))
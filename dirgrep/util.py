"""Small helpers for directory traversal, path expansion and binary detection."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

_SKIPPED_DIRECTORIES = frozenset({".idea", ".vscode"})

_SAMPLE_SIZE = 512


def should_skip_directory(dir_name: str) -> bool:
    """Return True if a directory with this name should not be searched."""
    return dir_name in _SKIPPED_DIRECTORIES


def expand_tilde(path: str) -> str:
    """Expand a leading ``~`` or ``~/`` to the current user's home directory.

    Other paths, including ``~user`` forms, are returned unchanged.
    Raises RuntimeError if the home directory cannot be determined.
    """
    if not path.startswith("~"):
        return path
    if path == "~":
        return str(Path.home())
    if path.startswith("~/"):
        return os.path.normpath(os.path.join(str(Path.home()), path[2:]))
    return path


def is_likely_text_file(file: BinaryIO) -> bool:
    """Guess whether a binary file object holds text.

    Reads up to 512 bytes from the current position and treats the data as
    binary when at least 1% of the sample is NUL bytes.
    Raises EOFError if nothing could be read.
    """
    sample = file.read(_SAMPLE_SIZE)
    if not sample:
        raise EOFError("EOF")
    null_count = sample.count(0)
    return null_count * 100 // len(sample) < 1
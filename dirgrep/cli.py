"""Command-line entry point: search a directory tree for a regular expression."""

from __future__ import annotations

import os
import re
import signal
import sys
import threading
from concurrent.futures import CancelledError
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Pattern, Sequence

from dirgrep.search import DirSearch
from dirgrep.util import expand_tilde

MAX_WORKERS = 100
_PROG = "dirgrep"
_VERBOSE_FLAG = "-v"


@dataclass(frozen=True)
class SearchArgs:
    """Parsed command-line options."""

    search_dir: str
    glob: str
    pattern: Pattern[str]
    verbose: bool = False


def _split_path_pattern(path_pattern: str) -> tuple[str, str]:
    """Split ``dir/glob`` into its directory and its last element."""
    directory = os.path.dirname(path_pattern)
    directory = os.path.normpath(directory) if directory else "."
    base = os.path.basename(path_pattern) or "."
    return directory, base


def parse_args(argv: Sequence[str] | None = None) -> SearchArgs:
    """Parse ``[-v] <path_pattern> <regex_pattern>``.

    A path pattern ending in ``/`` searches every file in that directory;
    otherwise its last element is a glob for file names. Raises ValueError
    on a usage error and ``re.error`` on an invalid regular expression.
    """
    raw = list(sys.argv[1:] if argv is None else argv)
    verbose = _VERBOSE_FLAG in raw
    args = [arg for arg in raw if arg != _VERBOSE_FLAG]

    if len(args) < 2:
        raise ValueError(f"usage: {_PROG} [-v] <path_pattern> <regex_pattern>")

    path_pattern = args[0]
    if path_pattern.endswith("/"):
        search_dir = expand_tilde(path_pattern[:-1])
        glob = "*"
    else:
        directory, glob = _split_path_pattern(path_pattern)
        search_dir = expand_tilde(directory)

    pattern = re.compile(args[1])
    return SearchArgs(search_dir=search_dir, glob=glob, pattern=pattern, verbose=verbose)


@contextmanager
def _cancel_on_signals(cancel: threading.Event) -> Iterator[None]:
    """Set ``cancel`` on SIGINT or SIGTERM while the block runs."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def handler(signum, frame):  # noqa: ARG001 - signature fixed by signal module
        print("Signal received, cancelling...", flush=True)
        cancel.set()

    signals = [signal.SIGINT, signal.SIGTERM]
    previous = {signum: signal.signal(signum, handler) for signum in signals}
    try:
        yield
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, CancelledError):
        return "context canceled"
    return str(exc) or type(exc).__name__


def main(argv: Sequence[str] | None = None) -> int:
    """Run the search and return the process exit status."""
    try:
        options = parse_args(argv)
        search = DirSearch(
            options.search_dir,
            options.glob,
            options.pattern,
            MAX_WORKERS,
            options.verbose,
        )
        cancel = threading.Event()
        with _cancel_on_signals(cancel):
            search.run(cancel)
    except (Exception, CancelledError) as exc:
        message = _describe(exc)
        if message == "EOF":
            return 0
        sys.stderr.write(f"Error: {message}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
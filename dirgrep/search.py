"""Concurrent regular-expression search over a directory tree."""

from __future__ import annotations

import os
import queue
import re
import stat
import sys
import threading
from concurrent.futures import CancelledError, ThreadPoolExecutor
from fnmatch import fnmatchcase
from typing import Callable, Pattern, TextIO

from dirgrep.output import Match, print_match
from dirgrep.util import is_likely_text_file, should_skip_directory

_MAX_FILE_SIZE = 50 * 1024 * 1024
_MAX_LINE_SIZE = 1024 * 1024
_POLL_INTERVAL = 0.05
_DONE = object()


class DirSearch:
    """Search files under a directory whose names match a glob for a pattern.

    Files are searched in parallel by at most ``max_workers`` threads; matches
    are written by a single output thread so that they never interleave.
    """

    def __init__(
        self,
        search_dir: str,
        glob: str,
        pattern: Pattern[str] | str,
        max_workers: int = 100,
        verbose: bool = False,
        out: TextIO | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.search_dir = search_dir
        self.glob = glob
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.max_workers = max_workers
        self.verbose = verbose
        self.out = out
        self._write_lock = threading.Lock()

    @property
    def _stream(self) -> TextIO:
        return sys.stdout if self.out is None else self.out

    def _trace(self, message: str) -> None:
        if self.verbose:
            with self._write_lock:
                self._stream.write(f"[TRACE] {message}\n")

    def _emit(self, match: Match) -> None:
        with self._write_lock:
            print_match(match, self._stream)

    def run(self, cancel: threading.Event | None = None) -> None:
        """Run the search to completion.

        Setting ``cancel`` stops the search early; it then raises
        ``concurrent.futures.CancelledError``. The first error met by any
        worker is re-raised here.
        """
        self._trace(
            f"Starting search in {self.search_dir} with pattern {self.pattern.pattern}"
        )
        _SearchRun(self, cancel if cancel is not None else threading.Event()).execute()


class _SearchRun:
    """State shared by the threads of one search."""

    def __init__(self, search: DirSearch, cancel: threading.Event) -> None:
        self.search = search
        self.cancel = cancel
        self.failed = threading.Event()
        self.error: BaseException | None = None
        self.error_lock = threading.Lock()
        self.matches: queue.Queue = queue.Queue(maxsize=search.max_workers)

    def cancelled(self) -> bool:
        return self.cancel.is_set() or self.failed.is_set()

    def check(self) -> None:
        if self.cancelled():
            raise CancelledError()

    def fail(self, exc: BaseException) -> None:
        with self.error_lock:
            if self.error is None:
                self.error = exc
        self.failed.set()

    def guard(self, func: Callable[..., None], *args: object) -> None:
        try:
            func(*args)
        except Exception as exc:  # noqa: BLE001 - first error is reported by run()
            self.fail(exc)

    def execute(self) -> None:
        trace = self.search._trace
        trace("Starting output handler goroutine")
        output = threading.Thread(
            target=self.guard, args=(self.output_handler,), daemon=True
        )
        output.start()

        trace("Starting search goroutine")
        try:
            with ThreadPoolExecutor(max_workers=self.search.max_workers) as pool:
                self.guard(self.search_directory, pool, self.search.search_dir)
        finally:
            trace("Closing match channel")
            self.close_matches(output)

        trace("Waiting for all goroutines to complete")
        output.join()
        trace("All goroutines completed")

        if self.error is not None:
            raise self.error

    def close_matches(self, output: threading.Thread) -> None:
        while output.is_alive():
            try:
                self.matches.put(_DONE, timeout=_POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def search_directory(self, pool: ThreadPoolExecutor, directory: str) -> None:
        trace = self.search._trace
        trace(f"Entering directory: {directory}")
        if self.cancelled():
            trace(f"Context cancelled in directory: {directory}")
            raise CancelledError()

        try:
            with os.scandir(directory) as scan:
                entries = sorted(scan, key=lambda entry: entry.name)
        except OSError as exc:
            trace(f"Cannot read directory {directory}: {exc}")
            return

        trace(f"Found {len(entries)} entries in {directory}")
        try:
            self.process_entries(pool, directory, entries)
        except Exception as exc:
            trace(f"Error processing entries in {directory}: {exc}")
            raise
        trace(f"Finished directory: {directory}")

    def process_entries(
        self, pool: ThreadPoolExecutor, directory: str, entries: list[os.DirEntry]
    ) -> None:
        for entry in entries:
            self.check()
            full_path = os.path.join(directory, entry.name)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            if is_dir:
                if not should_skip_directory(entry.name):
                    self.search_directory(pool, full_path)
                continue

            if fnmatchcase(entry.name, self.search.glob):
                pool.submit(self.guard, self.search_file, full_path)

    def search_file(self, file_path: str) -> None:
        trace = self.search._trace
        trace(f"Searching file: {file_path}")
        if self.cancelled():
            trace(f"Context cancelled for file: {file_path}")
            raise CancelledError()

        try:
            info = os.stat(file_path)
        except OSError as exc:
            trace(f"Cannot stat file {file_path}: {exc}")
            return
        if stat.S_ISDIR(info.st_mode):
            trace(f"Skipping directory misidentified as file: {file_path}")
            return
        if info.st_size > _MAX_FILE_SIZE:
            trace(f"Skipping large file: {file_path} ({info.st_size} bytes)")
            return

        try:
            handle = open(file_path, "rb")
        except OSError as exc:
            trace(f"Cannot open file {file_path}: {exc}")
            return

        with handle:
            try:
                is_text = is_likely_text_file(handle)
            except (EOFError, OSError) as exc:
                trace(f"Error checking if {file_path} is text: {exc}")
                return
            if not is_text:
                trace(f"Skipping binary file: {file_path}")
                return
            handle.seek(0)
            self.scan_lines(file_path, handle)

        trace(f"Finished searching file: {file_path}")

    def scan_lines(self, file_path: str, handle) -> None:
        trace = self.search._trace
        previous = ""
        for line_number, raw in enumerate(handle, start=1):
            if self.cancelled():
                trace(f"Context cancelled while scanning file: {file_path}")
                raise CancelledError()
            content = raw[:-1] if raw.endswith(b"\n") else raw
            if content.endswith(b"\r"):
                content = content[:-1]
            if len(content) >= _MAX_LINE_SIZE:
                trace(f"Scanner error for {file_path}: token too long")
                raise ValueError(f"{file_path}: token too long")
            line = content.decode("utf-8", errors="replace")

            if self.search.pattern.search(line):
                trace(f"Found match in {file_path} at line {line_number}")
                # Only lines already read are known, so no following line is attached.
                self.send(
                    Match(
                        file_path=file_path,
                        line_number=line_number,
                        line=line,
                        before=previous,
                    )
                )
            previous = line

    def send(self, match: Match) -> None:
        while True:
            self.check()
            try:
                self.matches.put(match, timeout=_POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def output_handler(self) -> None:
        trace = self.search._trace
        trace("Output handler started")
        try:
            while True:
                try:
                    item = self.matches.get(timeout=_POLL_INTERVAL)
                except queue.Empty:
                    if self.cancelled():
                        trace("Output handler context cancelled")
                        raise CancelledError() from None
                    continue
                if item is _DONE:
                    trace("Match channel closed, output handler exiting")
                    return
                trace(f"Received match from {item.file_path}:{item.line_number}")
                try:
                    self.search._emit(item)
                except Exception as exc:
                    trace(f"Error printing match: {exc}")
                    raise
        finally:
            trace("Output handler finished")
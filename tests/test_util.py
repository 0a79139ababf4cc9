import io
import os

import pytest

from dirgrep.util import expand_tilde, is_likely_text_file, should_skip_directory


@pytest.mark.parametrize("name", [".idea", ".vscode"])
def test_ide_directories_are_skipped(name):
    assert should_skip_directory(name) is True


@pytest.mark.parametrize("name", ["src", "docs", ""])
def test_ordinary_directories_are_searched(name):
    assert should_skip_directory(name) is False


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return str(tmp_path)


def test_bare_tilde_is_home(home):
    assert expand_tilde("~") == home


def test_tilde_slash_joins_home(home):
    assert expand_tilde("~/projects/code") == os.path.join(home, "projects", "code")


def test_tilde_slash_alone_is_home(home):
    assert expand_tilde("~/") == os.path.normpath(home)


def test_tilde_path_is_cleaned(home):
    assert expand_tilde("~/a/../b") == os.path.join(home, "b")


@pytest.mark.parametrize("path", ["/usr/local", "relative/dir", "~other/dir", ""])
def test_other_paths_unchanged(home, path):
    assert expand_tilde(path) == path


def test_plain_text_is_text():
    assert is_likely_text_file(io.BytesIO(b"hello world\nsecond line\n")) is True


def test_all_nulls_is_binary():
    assert is_likely_text_file(io.BytesIO(bytes(64))) is False


def test_empty_file_raises_eof():
    with pytest.raises(EOFError):
        is_likely_text_file(io.BytesIO(b""))


def test_just_below_threshold_is_text():
    data = b"\x00" + b"a" * 199
    assert is_likely_text_file(io.BytesIO(data)) is True


def test_at_threshold_is_binary():
    data = b"\x00" + b"a" * 99
    assert is_likely_text_file(io.BytesIO(data)) is False


def test_only_first_sample_is_examined():
    stream = io.BytesIO(b"a" * 512 + bytes(512))
    assert is_likely_text_file(stream) is True
    assert stream.tell() == 512
from __future__ import annotations

from pathlib import Path

import pytest

from explicit_folding.exceptions import LineTooLongError
from explicit_folding.filesystem import (
    DocumentFileError,
    check_line_lengths,
    get_max_file_size,
    get_max_line_length,
    load_document,
    normalize_filepath,
)


def test_load_document_returns_lines_without_terminators(tmp_path: Path):
    target = tmp_path / "doc.txt"
    target.write_text("a {\r\nb\n}\n", encoding="utf-8")

    document = load_document(target)

    assert document.lines == ["a {", "b", "}"]
    assert document.path == str(target)


def test_load_document_rejects_long_lines(tmp_path: Path):
    target = tmp_path / "doc.txt"
    target.write_text("short\n" + "x" * 11 + "\n", encoding="utf-8")

    with pytest.raises(DocumentFileError, match="line at line 2"):
        load_document(target, 10)


def test_load_document_allows_lines_at_limit(tmp_path: Path):
    target = tmp_path / "doc.txt"
    target.write_text("x" * 10 + "\r\n", encoding="utf-8")

    assert load_document(target, 10).line_count == 1


def test_load_document_rejects_non_positive_override(tmp_path: Path):
    target = tmp_path / "doc.txt"
    target.write_text("{\n}\n", encoding="utf-8")

    with pytest.raises(DocumentFileError):
        load_document(target, 0)


def test_load_document_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "doc.txt"
    target.write_bytes(b"\xff\xfe{\n")

    with pytest.raises(DocumentFileError, match="Invalid UTF-8"):
        load_document(target)


def test_load_document_reports_missing_file(tmp_path: Path):
    with pytest.raises(DocumentFileError):
        load_document(tmp_path / "missing.txt")


def test_check_line_lengths_reports_first_offender():
    with pytest.raises(LineTooLongError) as excinfo:
        check_line_lengths(["ok", "toolong", "alsotoolong"], 4)

    assert excinfo.value.line_number == 2
    assert excinfo.value.max_line_length == 4


def test_env_limits(monkeypatch):
    monkeypatch.delenv("EXPLICIT_FOLDING_MAX_FILE_SIZE", raising=False)
    monkeypatch.setenv("EXPLICIT_FOLDING_MAX_LINE_LENGTH", "120")

    assert get_max_file_size(default=7) == 7
    assert get_max_line_length(default=7) == 120


@pytest.mark.parametrize("value", ["0", "-5", "many"])
def test_env_limits_must_be_positive_integers(monkeypatch, value):
    monkeypatch.setenv("EXPLICIT_FOLDING_MAX_LINE_LENGTH", value)

    with pytest.raises(ValueError):
        get_max_line_length()


def test_normalize_filepath_rejects_directories(tmp_path: Path):
    with pytest.raises(ValueError, match="not a regular file"):
        normalize_filepath(str(tmp_path), tmp_path)


def test_normalize_filepath_resolves_relative_paths(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "doc.txt").write_text("", encoding="utf-8")

    assert normalize_filepath("doc.txt", tmp_path.resolve()) == (tmp_path / "doc.txt").resolve()

"""Tests for buildview.output.diagnostic."""

from __future__ import annotations

import logging

import pytest

from buildview.output.diagnostic import (
    DEFAULT_PATTERNS,
    NO_DIAGNOSTIC,
    DiagnosticParser,
    classify_kind,
    classify_line,
    parse_diagnostic,
)
from buildview.output.line import LineKind


# ---------------------------------------------------------------------------
# Location parsing
# ---------------------------------------------------------------------------


class TestParseDiagnostic:
    def test_gcc_style(self) -> None:
        diag = parse_diagnostic("/a/b.c:42:7: error: x")
        assert diag.valid
        assert (diag.filename, diag.line, diag.column) == ("/a/b.c", 42, 7)

    def test_without_column(self) -> None:
        diag = parse_diagnostic("main.c:10: warning: unused variable 'x'")
        assert (diag.filename, diag.line, diag.column) == ("main.c", 10, 0)

    def test_mypy(self) -> None:
        diag = parse_diagnostic("app/models.py:3: error: Incompatible types")
        assert (diag.filename, diag.line) == ("app/models.py", 3)

    def test_rustc_arrow(self) -> None:
        diag = parse_diagnostic("  --> src/main.rs:4:5")
        assert (diag.filename, diag.line, diag.column) == ("src/main.rs", 4, 5)

    def test_make_recipe(self) -> None:
        diag = parse_diagnostic("make: *** [Makefile:12: all] Error 1")
        assert (diag.filename, diag.line) == ("Makefile", 12)

    def test_python_traceback(self) -> None:
        diag = parse_diagnostic('  File "pkg/mod.py", line 12, in func')
        assert (diag.filename, diag.line, diag.column) == ("pkg/mod.py", 12, 0)

    def test_traceback_path_with_spaces(self) -> None:
        diag = parse_diagnostic('  File "/home/me/my project/run.py", line 3, in <module>')
        assert diag.filename == "/home/me/my project/run.py"

    def test_timestamp_rejected(self) -> None:
        assert not parse_diagnostic("12:30:45 starting build").valid

    def test_url_rejected(self) -> None:
        assert not parse_diagnostic("see http://example.com:8080/docs").valid

    def test_no_location(self) -> None:
        diag = parse_diagnostic("Compiling foo v0.1.0")
        assert diag == NO_DIAGNOSTIC
        assert not diag.valid

    def test_empty(self) -> None:
        assert not parse_diagnostic("").valid


# ---------------------------------------------------------------------------
# Configurable patterns
# ---------------------------------------------------------------------------


class TestDiagnosticParser:
    def test_defaults(self) -> None:
        assert DiagnosticParser().patterns == list(DEFAULT_PATTERNS)

    def test_extra_pattern_tried_first(self) -> None:
        parser = DiagnosticParser([r"at (?P<file>\S+) line (?P<line>\d+)"])
        diag = parser.parse("died at foo.pl line 7.")
        assert (diag.filename, diag.line) == ("foo.pl", 7)
        assert parser.patterns[-len(DEFAULT_PATTERNS) :] == list(DEFAULT_PATTERNS)

    def test_extra_pattern_with_column(self) -> None:
        parser = DiagnosticParser([r"(?P<file>\S+)\((?P<line>\d+),(?P<col>\d+)\)"])
        diag = parser.parse("Program.cs(10,5): error CS1002: ; expected")
        assert (diag.filename, diag.line, diag.column) == ("Program.cs", 10, 5)

    def test_invalid_regex_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            parser = DiagnosticParser(["(unclosed"])
        assert parser.patterns == list(DEFAULT_PATTERNS)
        assert "invalid diagnostic pattern" in caplog.text

    def test_pattern_without_groups_rejected(self) -> None:
        parser = DiagnosticParser()
        assert parser.add_pattern(r"(\S+):(\d+)") is False
        assert parser.add_pattern(r"(?P<file>\S+)#(?P<line>\d+)") is True
        assert parser.parse("x.c#4").line == 4


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize(
        "text",
        [
            "main.c:1:2: error: expected ';'",
            "fatal error: stdio.h: No such file or directory",
            "error[E0308]: mismatched types",
            "make: *** [Makefile:12: all] Error 2",
            "Traceback (most recent call last):",
            "ValueError: invalid literal for int()",
            "ERROR: tests failed",
        ],
    )
    def test_errors(self, text: str) -> None:
        assert classify_kind(text) is LineKind.ERROR

    @pytest.mark.parametrize(
        "text",
        [
            "main.c:5:1: warning: unused variable 'y' [-Wunused-variable]",
            "warning: `foo` is never used",
            "Warning[W0612]: unused",
        ],
    )
    def test_warnings(self, text: str) -> None:
        assert classify_kind(text) is LineKind.WARNING

    @pytest.mark.parametrize(
        "text",
        [
            "gcc -c main.c -o main.o",
            "Build finished with 0 errors",
            "compiling error_handler.c",
            "",
        ],
    )
    def test_plain(self, text: str) -> None:
        assert classify_kind(text) is LineKind.PLAIN

    def test_classify_line_attaches_location(self) -> None:
        line = classify_line("/a/b.c:42:7: error: x")
        assert line.kind is LineKind.ERROR
        assert (line.filename, line.line, line.column) == ("/a/b.c", 42, 7)
        assert line.is_navigable

    def test_classify_line_plain_with_location(self) -> None:
        line = classify_line("In file included from foo.h:3,")
        assert line.kind is LineKind.PLAIN
        assert (line.filename, line.line) == ("foo.h", 3)
        assert line.is_navigable

    def test_classify_line_without_location(self) -> None:
        line = classify_line("error: linker command failed")
        assert line.kind is LineKind.ERROR
        assert line.filename == ""
        assert not line.is_navigable

    def test_classify_line_custom_parser(self) -> None:
        parser = DiagnosticParser([r"at (?P<file>\S+) line (?P<line>\d+)"])
        line = classify_line("Died at foo.pl line 7.", parser)
        assert (line.filename, line.line) == ("foo.pl", 7)

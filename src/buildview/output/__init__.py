"""Build output: classified lines, the output log, and the runner that fills it.

The runner spawns the build in its own process group, cleans each line
(ANSI stripping, control-char removal, tab expansion), classifies it as
error/warning/plain with any ``file:line[:col]`` location attached, and
appends it to the log.
"""

from buildview.output.diagnostic import (
    Diagnostic,
    DiagnosticParser,
    classify_line,
    parse_diagnostic,
)
from buildview.output.line import LineKind, OutputLine
from buildview.output.log import OutputLog
from buildview.output.runner import BuildRunner, BuildStatus

__all__ = [
    "BuildRunner",
    "BuildStatus",
    "Diagnostic",
    "DiagnosticParser",
    "LineKind",
    "OutputLine",
    "OutputLog",
    "classify_line",
    "parse_diagnostic",
]

"""Bridge between BuildRunner callbacks and the Wire event bus.

The runner calls back on the event loop it runs on; these factories turn
those calls into WireEvents so the UI (or the plain CLI printer) picks
them up through its own subscription:

- OUTPUT fires for every line appended to the log (via on_line)
- BUILD_END fires once the log is complete (via on_exit), carrying the
  exit code and the final error/warning counts
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from buildview.output.line import OutputLine
from buildview.output.runner import BuildRunner
from buildview.session.wire import Wire


def make_on_line(wire: Wire) -> Callable[[OutputLine], None]:
    """Create an on_line callback that emits OUTPUT events."""

    def on_line(line: OutputLine) -> None:
        wire.send_output(1, line.kind.value, line.text)

    return on_line


def make_on_exit(wire: Wire) -> Callable[[BuildRunner, int | None], None]:
    """Create an on_exit callback that emits BUILD_END with the final counts."""

    def on_exit(runner: BuildRunner, exit_code: int | None) -> None:
        wire.send_build_end(
            exit_code,
            errors=runner.log.error_count,
            warnings=runner.log.warning_count,
        )

    return on_exit


@dataclass
class RunnerCallbacks:
    """Both runner callbacks, ready to install with ``attach()``."""

    on_line: Callable[[OutputLine], None]
    on_exit: Callable[[BuildRunner, int | None], None]

    def attach(self, runner: BuildRunner) -> None:
        runner.set_on_line(self.on_line)
        runner.set_on_exit(self.on_exit)


def make_runner_callbacks(wire: Wire) -> RunnerCallbacks:
    return RunnerCallbacks(on_line=make_on_line(wire), on_exit=make_on_exit(wire))

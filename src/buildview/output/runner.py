"""Build runner: spawns the build command and streams its output into a log."""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import signal
from dataclasses import dataclass, field
from typing import Callable

from buildview.output.diagnostic import DiagnosticParser, classify_line
from buildview.output.line import OutputLine
from buildview.output.log import OutputLog
from buildview.output.sanitize import clean_line

logger = logging.getLogger(__name__)

# StreamReader limit; longer lines are replaced by a placeholder
MAX_LINE_BYTES = 1024 * 1024

OVERLONG_LINE_TEXT = "[output line too long, skipped]"


class BuildStatus(enum.Enum):
    """Lifecycle states for a build."""

    IDLE = "idle"
    RUNNING = "running"
    KILLING = "killing"  # Kill requested, waiting for the reader to drain
    KILLED = "killed"
    EXITED = "exited"  # Process exited on its own


@dataclass
class BuildRunner:
    """Runs one build command and feeds its output to an ``OutputLog``.

    - The command runs through the shell with stderr merged into stdout
    - Process group isolation (start_new_session) for safe tree-killing
    - Each line is ANSI-stripped, sanitized, classified and appended
    - ``on_line`` fires per appended line, ``on_exit`` once at the end
      (also after ``kill()``)

    The runner owns the log for the duration of the build; views only
    borrow it.
    """

    command: str
    cwd: str = field(default_factory=os.getcwd)
    env: dict[str, str] = field(default_factory=dict)
    log: OutputLog = field(default_factory=OutputLog)
    parser: DiagnosticParser | None = None

    # Internal state
    _proc: asyncio.subprocess.Process | None = field(default=None, init=False)
    _pgid: int = field(default=0, init=False)
    _reader_task: asyncio.Task | None = field(default=None, init=False)
    _status: BuildStatus = field(default=BuildStatus.IDLE, init=False)
    _exit_code: int | None = field(default=None, init=False)
    _done: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _on_line: Callable[[OutputLine], None] | None = field(default=None, init=False)
    _on_exit: Callable[[BuildRunner, int | None], None] | None = field(
        default=None, init=False
    )

    def set_on_line(self, callback: Callable[[OutputLine], None]) -> None:
        """Set a callback invoked for every line appended to the log."""
        self._on_line = callback

    def set_on_exit(self, callback: Callable[[BuildRunner, int | None], None]) -> None:
        """Set a callback invoked once the build is over.

        The callback receives (runner, exit_code). It runs after the log
        has been marked complete.
        """
        self._on_exit = callback

    async def start(self) -> None:
        """Spawn the command in its own process group and start reading.

        Raises:
            RuntimeError: if this runner is already running.
            OSError: if the shell cannot be spawned.
        """
        if self._status in (BuildStatus.RUNNING, BuildStatus.KILLING):
            raise RuntimeError(f"Build already running: {self.command}")

        env = {**os.environ, **self.env}
        env["TERM"] = "dumb"  # Minimize ANSI escape sequences

        self.log.start()
        self._done = asyncio.Event()
        self._exit_code = None
        try:
            self._proc = await asyncio.create_subprocess_shell(
                self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=self.cwd,
                env=env,
                start_new_session=True,  # Creates new process group
                limit=MAX_LINE_BYTES,
            )
        except OSError:
            self._status = BuildStatus.EXITED
            self.log.finish(None)
            self._done.set()
            raise

        # start_new_session makes the child its own group leader
        self._pgid = self._proc.pid
        self._status = BuildStatus.RUNNING
        self._reader_task = asyncio.create_task(self._read_loop())

        logger.info(
            "Build started: pid=%d cwd=%s cmd=%s",
            self._proc.pid,
            self.cwd,
            self.command,
        )

    async def run(self) -> int | None:
        """Start the build and wait for it to finish."""
        await self.start()
        return await self.wait()

    async def _read_loop(self) -> None:
        """Read output lines until EOF, then record the exit code."""
        assert self._proc is not None and self._proc.stdout is not None
        exit_code: int | None = None
        try:
            await self._pump(self._proc.stdout)
            exit_code = await self._proc.wait()
        except asyncio.CancelledError:
            self.kill()
            raise
        except Exception:
            logger.exception("Build reader failed: %s", self.command)
        finally:
            if exit_code is None:
                exit_code = self._proc.returncode
            self._finalize(exit_code)

    async def _pump(self, stdout: asyncio.StreamReader) -> None:
        while True:
            try:
                raw = await stdout.readline()
            except ValueError:
                # readline() discards the overlong chunk before raising
                logger.warning("Skipping output line longer than %d bytes", MAX_LINE_BYTES)
                self._emit(OutputLine(text=OVERLONG_LINE_TEXT))
                continue
            if not raw:
                break
            text = clean_line(raw.decode("utf-8", errors="replace"))
            self._emit(classify_line(text, self.parser))

    def _emit(self, line: OutputLine) -> None:
        self.log.append(line)
        if self._on_line:
            try:
                self._on_line(line)
            except Exception:
                logger.exception("Error in on_line callback for build %r", self.command)

    def _finalize(self, exit_code: int | None) -> None:
        if self._status == BuildStatus.KILLING:
            self._status = BuildStatus.KILLED
        else:
            self._status = BuildStatus.EXITED
        self._exit_code = exit_code
        self.log.finish(exit_code)
        logger.info(
            "Build %s (code=%s, errors=%d, warnings=%d)",
            self._status.value,
            exit_code,
            self.log.error_count,
            self.log.warning_count,
        )
        if self._on_exit:
            try:
                self._on_exit(self, exit_code)
            except Exception:
                logger.exception("Error in on_exit callback for build %r", self.command)
        self._done.set()

    def kill(self) -> None:
        """Kill the entire process tree. The reader finishes the bookkeeping."""
        if self._status != BuildStatus.RUNNING:
            return

        self._status = BuildStatus.KILLING
        try:
            os.killpg(self._pgid, signal.SIGKILL)
            logger.info("Killed build (pgid=%d)", self._pgid)
        except ProcessLookupError:
            logger.debug("Process group already gone: %d", self._pgid)
        except OSError as e:
            logger.warning("Error killing build %r: %s", self.command, e)

    async def wait(self, timeout: float | None = None) -> int | None:
        """Wait for the build to finish. Returns exit code or None on timeout."""
        if self._status == BuildStatus.IDLE:
            return None
        try:
            await asyncio.wait_for(self._done.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return None
        return self._exit_code

    @property
    def alive(self) -> bool:
        return self._status in (BuildStatus.RUNNING, BuildStatus.KILLING)

    @property
    def status(self) -> BuildStatus:
        return self._status

    @property
    def exit_code(self) -> int | None:
        return self._exit_code

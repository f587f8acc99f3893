"""CLI entry point for buildview."""

from __future__ import annotations

import asyncio
import logging
import os

import typer

from buildview.config import BuildViewConfig
from buildview.output.diagnostic import DiagnosticParser, classify_line
from buildview.output.line import LineKind
from buildview.output.log import OutputLog
from buildview.output.runner import BuildRunner
from buildview.output.sanitize import clean_line
from buildview.session.wire import EventType, Wire
from buildview.view.locator import NO_PATTERN_MESSAGE
from buildview.view.render import KIND_MARKERS, format_title

app = typer.Typer(
    name="buildview",
    help="Run a build and jump from its errors to the source.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _setup_tui_logging(verbose: bool = False) -> None:
    # No stderr handler here: it would corrupt the Textual display. The
    # app installs its own handler on mount that routes logs to the
    # status bar.
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    for h in root.handlers[:]:
        root.removeHandler(h)


def _resolve_cwd(cwd: str | None, config: BuildViewConfig) -> str:
    path = os.path.abspath(os.path.expanduser(cwd or config.build.cwd or os.getcwd()))
    if not os.path.isdir(path):
        typer.echo(f"Error: Directory not found: {path}", err=True)
        raise typer.Exit(1)
    return path


def _make_runner(
    command: str | None, cwd: str | None, config: BuildViewConfig
) -> BuildRunner:
    """Runner and log for one build, shared between the plain and TUI modes."""
    parser = DiagnosticParser(config.diagnostics.patterns)
    return BuildRunner(
        command=command or config.build.command,
        cwd=_resolve_cwd(cwd, config),
        log=OutputLog(config.build.max_lines, parser),
        parser=parser,
    )


@app.command()
def run(
    command: str | None = typer.Argument(
        None, help="Build command (default: from env/config, 'make')."
    ),
    cwd: str | None = typer.Option(
        None, "--cwd", "-C", help="Directory to run the build in."
    ),
    follow: bool | None = typer.Option(
        None, "--follow/--no-follow", help="Select the newest line as output arrives."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Run a build in the interactive TUI."""
    _setup_tui_logging(verbose)

    config = BuildViewConfig.load(config_file)
    if follow is not None:
        config.build.follow_output = follow
    runner = _make_runner(command, cwd, config)

    from buildview.tui.app import BuildViewerApp

    tui_app = BuildViewerApp(config=config, wire=Wire(), runner=runner)
    tui_app.run()


@app.command()
def show(
    command: str | None = typer.Argument(
        None, help="Build command (default: from env/config, 'make')."
    ),
    cwd: str | None = typer.Option(
        None, "--cwd", "-C", help="Directory to run the build in."
    ),
    errors: bool = typer.Option(
        False, "--errors", "-e", help="Only print error and warning lines."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Run a build with plain output; the exit code mirrors the build's."""
    setup_logging(verbose)

    config = BuildViewConfig.load(config_file)
    runner = _make_runner(command, cwd, config)

    try:
        exit_code = asyncio.run(_run_plain(runner, errors_only=errors))
    except OSError as e:
        typer.echo(f"Error: Cannot run {runner.command!r}: {e}", err=True)
        raise typer.Exit(1)

    if exit_code is None:
        raise typer.Exit(1)
    if exit_code < 0:
        # Killed by a signal: report it the way a shell does
        raise typer.Exit(128 - exit_code)
    if exit_code != 0:
        raise typer.Exit(exit_code)


async def _run_plain(runner: BuildRunner, errors_only: bool = False) -> int | None:
    """Run the build, printing each line with its kind marker."""
    from buildview.tui.bridge import make_runner_callbacks

    wire = Wire()

    # --- Wire consumer (async background task) ---
    async def _consume_wire() -> None:
        queue = wire.subscribe()
        while True:
            event = await queue.get()
            if event is None:
                break

            d = event.data

            if event.type == EventType.OUTPUT:
                kind = LineKind(d.get("kind", "plain"))
                if errors_only and kind is LineKind.PLAIN:
                    continue
                print(f"{KIND_MARKERS[kind]}{d.get('text', '')}", flush=True)

            elif event.type == EventType.BUILD_END:
                title = format_title(
                    running=False,
                    complete=True,
                    error_count=d.get("errors", 0),
                    warning_count=d.get("warnings", 0),
                )
                code = d.get("exit_code")
                code_str = str(code) if code is not None else "?"
                print(f"---\n{title} (exit code {code_str})", flush=True)

            elif event.type == EventType.ERROR:
                print(f"\nERROR: {d.get('error', 'Unknown error')}", flush=True)

        wire.unsubscribe(queue)

    consumer_task = asyncio.create_task(_consume_wire())
    make_runner_callbacks(wire).attach(runner)

    typer.echo(f"Running: {runner.command}")
    typer.echo(f"In: {runner.cwd}")
    typer.echo("---")

    try:
        exit_code = await runner.run()
    finally:
        # Signal wire close and wait for consumer to finish
        wire.close()
        await consumer_task

    return exit_code


def load_log_file(path: str, parser: DiagnosticParser, max_lines: int) -> OutputLog:
    """Read a saved build log into a completed OutputLog."""
    log = OutputLog(max_lines, parser)
    log.start()
    with open(path, encoding="utf-8", errors="replace") as f:
        for raw in f:
            log.append(classify_line(clean_line(raw), parser))
    log.finish(None)
    return log


@app.command()
def view(
    logfile: str = typer.Argument(help="Saved build output to browse."),
    cwd: str | None = typer.Option(
        None, "--cwd", "-C", help="Directory relative paths in the log refer to."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Browse a saved build log in the TUI."""
    _setup_tui_logging(verbose)

    log_path = os.path.abspath(logfile)
    if not os.path.isfile(log_path):
        typer.echo(f"Error: Log file not found: {log_path}", err=True)
        raise typer.Exit(1)

    config = BuildViewConfig.load(config_file)
    parser = DiagnosticParser(config.diagnostics.patterns)
    try:
        log = load_log_file(log_path, parser, config.build.max_lines)
    except OSError as e:
        typer.echo(f"Error: Cannot read {log_path}: {e}", err=True)
        raise typer.Exit(1)

    from buildview.tui.app import BuildViewerApp

    tui_app = BuildViewerApp(
        config=config,
        wire=Wire(),
        log=log,
        base_dir=_resolve_cwd(cwd, config),
    )
    tui_app.run()


@app.command()
def locate(
    text: str = typer.Argument(help="A line of build output."),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Print the file:line:column a diagnostic line points at."""
    config = BuildViewConfig.load(config_file)
    diag = DiagnosticParser(config.diagnostics.patterns).parse(text)
    if not diag.valid:
        typer.echo(NO_PATTERN_MESSAGE, err=True)
        raise typer.Exit(1)
    typer.echo(f"{diag.filename}:{diag.line}:{diag.column}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

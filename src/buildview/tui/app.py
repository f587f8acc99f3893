"""Main Textual application for the buildview TUI."""

from __future__ import annotations

import asyncio
import logging
import os

from rich.markup import escape
from rich.text import Text

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import Footer, Header, Static, TextArea

from buildview.config import BuildViewConfig
from buildview.editor import Document, DocumentEditorView, DocumentRegistry
from buildview.output.diagnostic import DiagnosticParser
from buildview.output.log import OutputLog
from buildview.output.runner import BuildRunner
from buildview.session.wire import EventType, Wire, WireEvent
from buildview.tui.bridge import make_runner_callbacks
from buildview.view.keys import KeyAction, KeyOutcome
from buildview.view.locator import DiagnosticLocator, NavigationResult
from buildview.view.modal import BuildView
from buildview.view.render import (
    ASCII_SELECTION_INDICATOR,
    SELECTION_INDICATOR,
    format_title,
)
from buildview.view.surface import CanvasSurface

logger = logging.getLogger(__name__)


class TUILogHandler(logging.Handler):
    """Logging handler that captures the last log message for the TUI status bar.

    Writing to stderr would corrupt the Textual display, so the handler
    keeps the most recent record and asks the app to refresh its status bar.
    """

    def __init__(self, app: BuildViewerApp) -> None:
        super().__init__()
        self._app = app
        self.last_message: str = ""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.last_message = self.format(record)
            try:
                self._app.call_from_thread(self._app._update_status)
            except RuntimeError:
                # Already on the app's thread (or the app is not running yet)
                self._app._update_status()
        except Exception:
            self.handleError(record)


class BuildCanvas(Static):
    """Shows the frame region of the modal's canvas surface."""

    DEFAULT_CSS = """
    BuildCanvas {
        width: auto;
        height: auto;
    }
    """

    def __init__(self, view: BuildView, surface: CanvasSurface) -> None:
        super().__init__(id="build-canvas", markup=False)
        self._view = view
        self._surface = surface

    def paint(self) -> None:
        geo = self._view.geometry
        rows = self._surface.region(
            geo.frame_top, geo.frame_left, geo.frame_bottom, geo.frame_right
        )
        self.styles.offset = (geo.frame_left, geo.frame_top)
        self.styles.width = geo.frame_width
        self.styles.height = geo.frame_height
        self.update(Text("\n", end="").join(rows))


class BuildModalScreen(ModalScreen[None]):
    """The build output modal. Captures navigation keys until dismissed."""

    DEFAULT_CSS = """
    BuildModalScreen {
        overflow: hidden hidden;
    }
    """

    def __init__(self, view: BuildView, surface: CanvasSurface) -> None:
        super().__init__(id="build-modal")
        self._view = view
        self._surface = surface

    def compose(self) -> ComposeResult:
        yield BuildCanvas(self._view, self._surface)

    def on_mount(self) -> None:
        self._view.set_visible(True)
        self.repaint()

    def on_unmount(self) -> None:
        self._view.set_visible(False)

    def repaint(self) -> None:
        self._view.redraw()
        try:
            self.query_one(BuildCanvas).paint()
        except NoMatches:
            return

    def on_key(self, event: events.Key) -> None:
        action = KeyAction.from_key(event.key)
        if action is None:
            return
        event.stop()
        event.prevent_default()

        outcome = self._view.route_key_action(action)
        if outcome is KeyOutcome.REDRAWN:
            self.query_one(BuildCanvas).paint()
        elif outcome is KeyOutcome.GOTO:
            app = self.app
            assert isinstance(app, BuildViewerApp)
            result = app.goto_selected()
            if result.ok:
                self.dismiss()
            else:
                self.repaint()
        elif outcome is KeyOutcome.CLOSE:
            self.dismiss()


class BuildViewerApp(App):
    """buildview TUI: build output modal over a read-only source view."""

    TITLE = "buildview"
    CSS = """
    #source {
        height: 1fr;
        border: solid $primary;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+b", "toggle_build", "Build output"),
        Binding("ctrl+r", "rerun", "Rebuild"),
        Binding("ctrl+g", "goto_error", "Goto error"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: BuildViewConfig,
        wire: Wire,
        runner: BuildRunner | None = None,
        log: OutputLog | None = None,
        base_dir: str | None = None,
        show_build: bool = True,
    ) -> None:
        super().__init__()
        self.config = config
        self.wire = wire
        self._runner = runner
        if runner is not None:
            make_runner_callbacks(wire).attach(runner)
            log = runner.log
        self.output = log if log is not None else OutputLog(config.build.max_lines)
        self._show_build = show_build

        self.registry = DocumentRegistry(config.diagnostics.max_file_bytes)
        self.editor = DocumentEditorView(self.registry, on_refresh=self._show_document)
        parser = runner.parser if runner and runner.parser else None
        self.locator = DiagnosticLocator(
            parser or DiagnosticParser(config.diagnostics.patterns),
            self.registry,
            self.editor,
            base_dir=base_dir or (runner.cwd if runner else os.getcwd()),
        )

        self.surface = CanvasSurface(24, 80)
        indicator = (
            ASCII_SELECTION_INDICATOR
            if config.view.ascii_indicator
            else SELECTION_INDICATOR
        )
        self.view = BuildView(self.output, self.surface, config.colors, indicator)

        self._log_handler: TUILogHandler | None = None
        self._spinner_timer: Timer | None = None
        self._shown_path: str | None = None
        self._status_message = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield TextArea(
            "",
            read_only=True,
            show_line_numbers=True,
            soft_wrap=False,
            id="source",
        )
        yield Static(id="status-bar", markup=True)
        yield Footer()

    def on_mount(self) -> None:
        if self._runner is not None:
            self.sub_title = self._runner.command
        self._install_log_handler()

        self.surface.resize(self.size.height, self.size.width)
        self.view.recalc_geometry(self.size.height, self.size.width)

        self._update_status()
        # Subscribe before the build worker can send anything
        self._listen_wire(self.wire.subscribe())

        if self._runner is not None:
            self._run_build()
        if self._show_build:
            self.action_toggle_build()

    def on_unmount(self) -> None:
        if self._runner is not None and self._runner.alive:
            self._runner.kill()
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None

    def _install_log_handler(self) -> None:
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        self._log_handler = TUILogHandler(self)
        self._log_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(self._log_handler)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    def on_resize(self, event: events.Resize) -> None:
        self.surface.resize(event.size.height, event.size.width)
        self.view.recalc_geometry(event.size.height, event.size.width)
        self._repaint_modal()

    # --- Modal ---

    def _modal(self) -> BuildModalScreen | None:
        stack = self.screen_stack
        if stack and isinstance(stack[-1], BuildModalScreen):
            return stack[-1]
        return None

    def _repaint_modal(self) -> None:
        modal = self._modal()
        if modal is not None:
            modal.repaint()

    def action_toggle_build(self) -> None:
        modal = self._modal()
        if modal is not None:
            modal.dismiss()
        else:
            self.push_screen(BuildModalScreen(self.view, self.surface))

    def action_goto_error(self) -> None:
        self.goto_selected()

    def action_rerun(self) -> None:
        if self._runner is None:
            self._set_status("No build command (viewing a saved log)")
            return
        if self._runner.alive:
            self._set_status("Build already running")
            return
        self._run_build()

    def goto_selected(self) -> NavigationResult:
        """Jump to the diagnostic on the selected output line.

        While the modal is hidden this is the line that was selected when
        it was last closed.
        """
        view = self.view
        line = view.get_selected_line() if view.visible else view.last_selection
        result = self.locator.locate_line(line)
        self._set_status(result.message)
        return result

    # --- Source view ---

    def _show_document(self, doc: Document) -> None:
        try:
            area = self.query_one("#source", TextArea)
        except NoMatches:
            return
        if doc.path != self._shown_path:
            area.load_text(doc.text)
            self._shown_path = doc.path
            self.sub_title = doc.name
        area.move_cursor((doc.cursor_line, doc.cursor_column), center=True)

    # --- Status bar ---

    def _set_status(self, message: str) -> None:
        self._status_message = message
        self._update_status()

    def _update_status(self) -> None:
        try:
            status = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        log = self.output
        parts = [
            escape(
                format_title(
                    log.running,
                    log.complete,
                    log.error_count,
                    log.warning_count,
                    self.view.spinner.glyph,
                )
            ),
            f"Lines: {log.total_lines:,}",
        ]
        if self._status_message:
            parts.append(escape(self._status_message))
        if self._log_handler and self._log_handler.last_message:
            last_log = self._log_handler.last_message
            if len(last_log) > 80:
                last_log = last_log[:77] + "..."
            parts.append(f"[dim]{escape(last_log)}[/dim]")
        status.update(" | ".join(parts))

    def _start_spinner(self) -> None:
        self.view.spinner.reset()
        if self._spinner_timer is None:
            self._spinner_timer = self.set_interval(
                self.config.view.spinner_interval, self._tick_spinner
            )

    def _stop_spinner(self) -> None:
        if self._spinner_timer is not None:
            self._spinner_timer.stop()
            self._spinner_timer = None

    def _tick_spinner(self) -> None:
        self.view.advance_spinner()
        self._repaint_modal()
        self._update_status()

    # --- Wire event loop ---

    @work(exclusive=True, group="wire")
    async def _listen_wire(self, queue: asyncio.Queue[WireEvent | None]) -> None:
        try:
            while True:
                event = await queue.get()
                if event is None:
                    self._stop_spinner()
                    break
                self._handle_event(event)
                # Repaint once per burst of queued events
                if queue.empty():
                    self._repaint_modal()
                    self._update_status()
        finally:
            self.wire.unsubscribe(queue)

    @work(exclusive=True, group="build")
    async def _run_build(self) -> None:
        runner = self._runner
        assert runner is not None, "_run_build called without a runner"
        self.wire.send_build_begin(runner.command)
        try:
            await runner.run()
        except Exception as e:
            logger.exception("Build failed to start: %s", runner.command)
            self.wire.send_error(str(e))

    # --- Event dispatch ---

    def _handle_event(self, event: WireEvent) -> None:
        handlers = {
            EventType.BUILD_BEGIN: self._on_build_begin,
            EventType.OUTPUT: self._on_output,
            EventType.BUILD_END: self._on_build_end,
            EventType.STATUS: self._on_status,
            EventType.ERROR: self._on_error,
        }
        handler = handlers.get(event.type)
        if handler:
            handler(event.data)

    def _on_build_begin(self, data: dict) -> None:
        self.view.reset_selection()
        self._set_status(f"Running: {data.get('command', '')}")
        self._start_spinner()

    def _on_output(self, data: dict) -> None:
        if self.config.build.follow_output:
            self.view.scroll_to_end()

    def _on_build_end(self, data: dict) -> None:
        self._stop_spinner()
        exit_code = data.get("exit_code")
        code_str = str(exit_code) if exit_code is not None else "?"
        self._set_status(f"Build finished (code={code_str})")

    def _on_status(self, data: dict) -> None:
        self._set_status(data.get("message", ""))

    def _on_error(self, data: dict) -> None:
        self._stop_spinner()
        self._set_status(f"ERROR: {data.get('error', 'Unknown error')}")

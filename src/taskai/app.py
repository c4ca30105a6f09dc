"""taskai - Main Textual application."""

import argparse
import logging
import threading

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Input, Label, Static

from taskai.client import ModelClient
from taskai.config import build_client, configure_logging, load_settings
from taskai.errors import ConfigError
from taskai.pipeline import CommandPipeline
from taskai.snapshot import capture, render_summary
from taskai.system import ProcessTable, PsutilProcessTable

logger = logging.getLogger(__name__)

IDLE_TEXT = "Type a command and press Enter."
WORKING_TITLE = "Working"


class ResultPanel(Static):
    """Shows the report of the last command."""

    DEFAULT_CSS = """
    ResultPanel {
        height: auto;
        min-height: 3;
        padding: 1;
        border: round $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ResultPanel."""
        super().__init__(*args, **kwargs)
        self.last_title: str = ""
        self.last_text: str = ""

    def show(self, text: str, title: str) -> None:
        """Replace the panel contents with a titled message."""
        self.last_title = title
        self.last_text = text
        self.border_title = title
        self.update(text)


class SummaryPanel(Static):
    """Memory-ranked list of what is running, as the model sees it."""

    DEFAULT_CSS = """
    SummaryPanel {
        height: 1fr;
        padding: 0 1;
        border: solid $secondary;
        overflow-y: auto;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize SummaryPanel."""
        super().__init__(*args, **kwargs)
        self.summary: str = ""

    def set_summary(self, summary: str) -> None:
        self.summary = summary
        self.update(summary or "Loading process list...")


class ConfirmScreen(ModalScreen[bool]):
    """Yes/No dialog shown before anything is killed."""

    DEFAULT_CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick $warning;
        background: $surface;
    }

    #buttons {
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    #buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        ("y", "answer(True)", "Yes"),
        ("n", "answer(False)", "No"),
        ("escape", "answer(False)", "Cancel"),
    ]

    def __init__(self, text: str, title: str) -> None:
        """Initialize ConfirmScreen."""
        super().__init__()
        self._text = text
        self._title = title

    def compose(self) -> ComposeResult:
        """Compose the dialog."""
        with Vertical(id="dialog") as dialog:
            dialog.border_title = self._title
            yield Label(self._text, id="question", markup=False)
            with Horizontal(id="buttons"):
                yield Button("Yes", id="yes", variant="error")
                yield Button("No", id="no", variant="primary")

    def on_mount(self) -> None:
        """Default to the safe answer."""
        self.query_one("#no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dismiss with the chosen answer."""
        self.dismiss(event.button.id == "yes")

    def action_answer(self, answer: bool) -> None:
        """Handle y/n/escape keys."""
        self.dismiss(answer)


class TextualDisplay:
    """
    Display adapter used by the pipeline from a worker thread.

    Messages are marshalled onto the app thread; ask_yes_no blocks the worker
    until the confirmation dialog is dismissed.
    """

    def __init__(self, app: "TaskAIApp") -> None:
        self._app = app

    def show_message(self, text: str, title: str) -> None:
        self._app.call_from_thread(self._app.show_result, text, title)

    def ask_yes_no(self, text: str, title: str) -> bool:
        done = threading.Event()
        answer: list[bool] = []

        def on_dismiss(result: bool | None) -> None:
            answer.append(bool(result))
            done.set()

        self._app.call_from_thread(self._app.push_screen, ConfirmScreen(text, title), on_dismiss)

        while not done.wait(timeout=0.1):
            if not self._app.is_running:
                # App closed with the dialog open, treat as "no"
                return False
        return answer[0]


class TaskAIApp(App):
    """Main taskai application."""

    TITLE = "taskai"
    SUB_TITLE = "Close programs by asking"

    CSS = """
    Screen {
        layout: vertical;
    }

    #command {
        dock: top;
        margin: 1 1 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("f5", "refresh_summary", "Refresh"),
    ]

    def __init__(
        self,
        client: ModelClient,
        table: ProcessTable | None = None,
        refresh_rate: float = 5.0,
    ) -> None:
        """
        Initialize the TaskAIApp.

        Args:
            client: Model client that interprets commands.
            table: Process table to read and kill from. Defaults to psutil.
            refresh_rate: How often to refresh the process summary (seconds).
        """
        super().__init__()
        self._table = table or PsutilProcessTable()
        self._refresh_rate = refresh_rate
        self._pipeline = CommandPipeline(client, self._table, TextualDisplay(self))
        self._busy = False

    @property
    def busy(self) -> bool:
        """True while a command is being handled."""
        return self._busy

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Input(placeholder="Tell me what to close, e.g. 'close Chrome'", id="command")
        yield ResultPanel(IDLE_TEXT, id="result", markup=False)
        yield SummaryPanel(id="summary", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        """Load the process summary and keep it fresh."""
        self.action_refresh_summary()
        self.set_interval(self._refresh_rate, self.action_refresh_summary)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Start a run for the submitted command."""
        text = event.value.strip()
        if not text or self._busy:
            return
        event.input.clear()
        self._set_busy(True)
        self.show_result("Thinking...", WORKING_TITLE)
        self._run_command(text)

    @work(thread=True, exclusive=True, group="command")
    def _run_command(self, text: str) -> None:
        """Run the pipeline off the UI thread."""
        try:
            self._pipeline.submit_command(text)
        finally:
            self.call_from_thread(self._set_busy, False)

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        command = self.query_one("#command", Input)
        command.disabled = busy
        if not busy:
            result = self.query_one("#result", ResultPanel)
            if result.last_title == WORKING_TITLE:
                # Run ended without a report (declined)
                result.show(IDLE_TEXT, "")
            command.focus()
            self.action_refresh_summary()

    def show_result(self, text: str, title: str) -> None:
        """Show a report in the result panel."""
        self.query_one("#result", ResultPanel).show(text, title)

    def action_refresh_summary(self) -> None:
        """Re-read the process table for the summary panel."""
        self._refresh_summary()

    @work(thread=True, exclusive=True, group="summary")
    def _refresh_summary(self) -> None:
        summary = render_summary(capture(self._table))
        self.call_from_thread(self._update_summary, summary)

    def _update_summary(self, summary: str) -> None:
        self.query_one("#summary", SummaryPanel).set_summary(summary)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskai", description="Close programs by asking in plain language.")
    parser.add_argument("--env-file", help="Path to a .env file with TASKAI_* settings")
    parser.add_argument("--log-file", help="Where to write the log (default: taskai.log)")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for taskai application."""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.env_file)
        configure_logging(args.log_file or settings.log_file, (args.log_level or settings.log_level).upper())
        client = build_client(settings)
    except (ConfigError, ValueError) as exc:
        raise SystemExit(f"taskai: {exc}") from exc

    logger.info("Starting taskai with model %s", settings.model)
    app = TaskAIApp(client)
    app.run()


if __name__ == "__main__":
    main()

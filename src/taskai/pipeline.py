"""The command pipeline: interpret, filter, resolve, confirm, terminate."""

import logging
from enum import Enum
from typing import Protocol

from taskai.client import ModelClient
from taskai.errors import ModelClientError
from taskai.executor import DONE_TITLE, TerminationExecutor, outcome_report
from taskai.models import KillDirective, PlainMessage
from taskai.parser import parse_reply
from taskai.resolver import resolve
from taskai.safety import filter_names
from taskai.snapshot import capture, render_summary
from taskai.system import ProcessTable

logger = logging.getLogger(__name__)

RESPONSE_TITLE = "AI Response"
PROTECTED_TITLE = "Protected Process Filter"
NO_MATCH_TITLE = "No Processes Found"
ERROR_TITLE = "Error"

NO_SAFE_PROCESSES_TEXT = "No safe processes found to kill."
NO_MATCHES_TEXT = "No matching processes found running."


class Display(Protocol):
    """Where the pipeline shows results and asks for confirmation."""

    def show_message(self, text: str, title: str) -> None: ...

    def ask_yes_no(self, text: str, title: str) -> bool: ...


class RunState(Enum):
    """How a run ended."""

    IGNORED = "ignored"
    PLAIN_MESSAGE = "plain_message"
    NO_SAFE_PROCESSES = "no_safe_processes"
    NO_MATCHES = "no_matches"
    DECLINED = "declined"
    EXECUTED = "executed"
    FAILED = "failed"


class CommandPipeline:
    """
    Runs one user command from text to termination report.

    Each call to submit_command is a single sequential run. The process table
    is read twice: once to describe the system to the model and again when
    resolving names, since processes may come and go in between.
    """

    def __init__(self, client: ModelClient, table: ProcessTable, display: Display) -> None:
        self._client = client
        self._table = table
        self._display = display
        self._executor = TerminationExecutor(table, display.ask_yes_no)

    def submit_command(self, text: str) -> RunState:
        """Handle one command; exactly one report is shown unless the user declines."""
        command = (text or "").strip()
        if not command:
            return RunState.IGNORED

        logger.info("Command received: %r", command)
        try:
            return self._run(command)
        except ModelClientError as exc:
            self._display.show_message(f"Error: {exc}", ERROR_TITLE)
            return RunState.FAILED
        except Exception as exc:
            logger.exception("Run failed for %r", command)
            self._display.show_message(f"Error: {exc}", ERROR_TITLE)
            return RunState.FAILED

    def _run(self, command: str) -> RunState:
        summary = render_summary(capture(self._table))
        reply = self._client.interpret(command, summary)

        result = parse_reply(reply)
        if isinstance(result, PlainMessage):
            logger.info("Reply is a plain message")
            self._display.show_message(result.text, RESPONSE_TITLE)
            return RunState.PLAIN_MESSAGE

        return self._handle_directive(result)

    def _handle_directive(self, directive: KillDirective) -> RunState:
        logger.info("Model asked to kill %s", list(directive.requested_names))

        approved = filter_names(directive.requested_names)
        if not approved:
            self._display.show_message(NO_SAFE_PROCESSES_TEXT, PROTECTED_TITLE)
            return RunState.NO_SAFE_PROCESSES

        targets = resolve(approved, self._table.list_processes())
        if not targets:
            self._display.show_message(NO_MATCHES_TEXT, NO_MATCH_TITLE)
            return RunState.NO_MATCHES

        if not self._executor.confirm(targets):
            return RunState.DECLINED

        outcome = self._executor.execute(targets)
        self._display.show_message(outcome_report(outcome), DONE_TITLE)
        return RunState.EXECUTED

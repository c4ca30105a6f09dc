"""Confirm and carry out a batch of process terminations."""

import logging
from typing import Callable

from taskai.errors import TerminationError
from taskai.models import (
    FailureReason,
    TerminationFailure,
    TerminationOutcome,
    TerminationTarget,
)
from taskai.resolver import target_names
from taskai.snapshot import format_bytes
from taskai.system import ProcessTable

logger = logging.getLogger(__name__)

CONFIRM_TITLE = "Confirm Kill"
DONE_TITLE = "Done"


def confirmation_text(targets: list[TerminationTarget]) -> str:
    """Confirmation prompt listing each target name once."""
    return "The assistant suggests killing the following processes:\n\n" + "\n".join(
        target_names(targets)
    )


def outcome_report(outcome: TerminationOutcome) -> str:
    """Final user-visible summary of an executed batch."""
    report = f"Killed {outcome.killed_count} process(es)."
    if outcome.killed_count > 0 and outcome.total_memory_freed > 0:
        report += f"\nMemory freed: {format_bytes(outcome.total_memory_freed)}"
    return report


class TerminationExecutor:
    """
    Terminates targets one at a time once the user has agreed.

    Every target ends up either counted as killed or recorded as a failure,
    so killed_count + len(failures) always equals the number of targets.
    """

    def __init__(self, table: ProcessTable, ask_yes_no: Callable[[str, str], bool]) -> None:
        """
        Initialize the TerminationExecutor.

        Args:
            table: Process table used to kill processes.
            ask_yes_no: Callback showing (text, title) and returning the answer.
        """
        self._table = table
        self._ask_yes_no = ask_yes_no

    def confirm(self, targets: list[TerminationTarget]) -> bool:
        """Ask the user to approve the batch. Nothing is killed here."""
        if not targets:
            return False
        approved = bool(self._ask_yes_no(confirmation_text(targets), CONFIRM_TITLE))
        logger.info("User %s killing %d target(s)", "approved" if approved else "declined", len(targets))
        return approved

    def execute(self, targets: list[TerminationTarget]) -> TerminationOutcome:
        """Kill each target, recording failures without stopping the batch."""
        outcome = TerminationOutcome()
        attempted_pids: set[int] = set()

        for target in targets:
            if target.pid in attempted_pids:
                outcome.failures.append(TerminationFailure(target, FailureReason.ALREADY_TERMINATED))
                continue
            attempted_pids.add(target.pid)

            try:
                self._table.terminate(target.record)
            except TerminationError as exc:
                logger.warning(
                    "Could not kill %s (pid %d): %s", target.name, target.pid, exc.reason.value
                )
                outcome.failures.append(TerminationFailure(target, exc.reason))
                continue

            outcome.killed_count += 1
            outcome.total_memory_freed += target.pre_kill_memory
            logger.info(
                "Killed %s (pid %d, %s, %.1fs cpu)",
                target.name,
                target.pid,
                format_bytes(target.pre_kill_memory),
                target.pre_kill_cpu,
            )

        logger.info(
            "Killed %d of %d target(s), freed %s",
            outcome.killed_count,
            len(targets),
            format_bytes(outcome.total_memory_freed),
        )
        return outcome

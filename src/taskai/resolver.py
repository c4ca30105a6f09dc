"""Match approved names against the live process list."""

import logging

from taskai.models import ProcessRecord, TerminationTarget

logger = logging.getLogger(__name__)


def matches(process_name: str, approved_name: str) -> bool:
    """True when process_name equals or contains approved_name, ignoring case."""
    process_name = process_name.lower()
    approved_name = approved_name.lower()
    return process_name == approved_name or approved_name in process_name


def resolve(approved_names: list[str], live_processes: list[ProcessRecord]) -> list[TerminationTarget]:
    """
    Build termination targets for every live process matching an approved name.

    Targets are ordered by approved name, then by enumeration order. A process
    matched by two names appears twice; execution kills it only once.
    """
    targets: list[TerminationTarget] = []
    for approved in approved_names:
        if not approved:
            continue
        found = [
            TerminationTarget.from_record(record)
            for record in live_processes
            if record.name and matches(record.name, approved)
        ]
        logger.info("Name %r matched %d running process(es)", approved, len(found))
        targets.extend(found)
    return targets


def target_names(targets: list[TerminationTarget]) -> list[str]:
    """Distinct process names of targets, in first-seen order."""
    return list(dict.fromkeys(target.name for target in targets))

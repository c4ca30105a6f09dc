"""Shared fakes for taskai tests."""

import pytest

from taskai.errors import ProcessGone, TerminationError
from taskai.models import FailureReason, ProcessRecord

MB = 1024 * 1024


class FakeProcessTable:
    """In-memory process table that records terminate calls."""

    def __init__(self, records=None, failures=None):
        self.records = list(records or [])
        self.failures = dict(failures or {})  # pid -> FailureReason
        self.terminated: list[int] = []
        self.list_calls = 0

    def list_processes(self):
        self.list_calls += 1
        return list(self.records)

    def terminate(self, record):
        reason = self.failures.get(record.pid)
        if reason is FailureReason.NO_SUCH_PROCESS:
            raise ProcessGone()
        if reason is not None:
            raise TerminationError(reason)
        self.terminated.append(record.pid)
        self.records = [r for r in self.records if r.pid != record.pid]


class FakeClient:
    """Model client returning a canned reply (or raising)."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def interpret(self, prompt_text, process_summary):
        self.calls.append((prompt_text, process_summary))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeDisplay:
    """Display that records messages and answers confirmations with a fixed value."""

    def __init__(self, answer=True, events=None):
        self.answer = answer
        self.messages: list[tuple[str, str]] = []
        self.questions: list[tuple[str, str]] = []
        self.events = events if events is not None else []

    def show_message(self, text, title):
        self.messages.append((text, title))
        self.events.append("show")

    def ask_yes_no(self, text, title):
        self.questions.append((text, title))
        self.events.append("ask")
        return self.answer


def record(pid, name, memory=MB, cpu=0.5):
    return ProcessRecord(pid=pid, name=name, memory_rss=memory, cpu_time=cpu)


@pytest.fixture
def table():
    return FakeProcessTable(
        [
            record(10, "chrome", 300 * MB),
            record(11, "chrome", 200 * MB),
            record(20, "Notepad", 10 * MB),
            record(30, "explorer", 80 * MB),
            record(40, "python3", 50 * MB),
        ]
    )

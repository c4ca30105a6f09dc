"""Data models for taskai."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable snapshot of a process, valid for a single pipeline run."""

    pid: int
    name: str
    memory_rss: int  # Bytes
    cpu_time: float = 0.0  # Seconds, user + system
    create_time: float | None = None  # Used to detect pid reuse


@dataclass(slots=True, frozen=True)
class ProcessGroup:
    """Processes sharing a name, aggregated for the prompt summary."""

    name: str
    instance_count: int
    total_memory: int  # Bytes


@dataclass(slots=True, frozen=True)
class PlainMessage:
    """A model reply that is just text to show the user."""

    text: str


@dataclass(slots=True, frozen=True)
class KillDirective:
    """A model reply asking for processes to be terminated."""

    requested_names: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.requested_names:
            raise ValueError("KillDirective needs at least one name")


InterpretedResult = PlainMessage | KillDirective


@dataclass(slots=True, frozen=True)
class TerminationTarget:
    """A live process selected for termination, with its pre-kill usage."""

    record: ProcessRecord
    pre_kill_memory: int
    pre_kill_cpu: float

    @classmethod
    def from_record(cls, record: ProcessRecord) -> "TerminationTarget":
        return cls(record=record, pre_kill_memory=record.memory_rss, pre_kill_cpu=record.cpu_time)

    @property
    def pid(self) -> int:
        return self.record.pid

    @property
    def name(self) -> str:
        return self.record.name


class FailureReason(Enum):
    """Why a single target could not be terminated."""

    NO_SUCH_PROCESS = "no_such_process"
    ACCESS_DENIED = "access_denied"
    PID_REUSED = "pid_reused"
    ALREADY_TERMINATED = "already_terminated"
    OS_ERROR = "os_error"


@dataclass(slots=True, frozen=True)
class TerminationFailure:
    """A target that was not terminated."""

    target: TerminationTarget
    reason: FailureReason


@dataclass(slots=True)
class TerminationOutcome:
    """Result of executing a batch of termination targets."""

    killed_count: int = 0
    total_memory_freed: int = 0  # Bytes
    failures: list[TerminationFailure] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        """Number of targets accounted for (killed or failed)."""
        return self.killed_count + len(self.failures)

"""Exception types for taskai."""

from taskai.models import FailureReason


class TaskAIError(Exception):
    """Base class for all taskai errors."""


class ConfigError(TaskAIError):
    """Raised when settings are missing or invalid."""


class ModelClientError(TaskAIError):
    """Raised when the language model could not be reached or understood."""


class TerminationError(TaskAIError):
    """Raised when a single process could not be terminated."""

    def __init__(self, reason: FailureReason, message: str = "") -> None:
        super().__init__(message or reason.value)
        self.reason = reason


class ProcessGone(TerminationError):
    """Raised when the target process no longer exists (or its pid was reused)."""

    def __init__(self, reason: FailureReason = FailureReason.NO_SUCH_PROCESS, message: str = "") -> None:
        super().__init__(reason, message)

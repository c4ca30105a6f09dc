"""Operating system process table backed by psutil."""

import logging
from typing import Protocol

import psutil

from taskai.errors import ProcessGone, TerminationError
from taskai.models import FailureReason, ProcessRecord

logger = logging.getLogger(__name__)

# Tolerance when comparing create_time, psutil reports it as a float
_CREATE_TIME_TOLERANCE = 0.01


class ProcessTable(Protocol):
    """Read and terminate live processes."""

    def list_processes(self) -> list[ProcessRecord]: ...

    def terminate(self, record: ProcessRecord) -> None: ...


class PsutilProcessTable:
    """
    Process table that reads and kills processes using psutil.

    Enumeration handles AccessDenied, ZombieProcess and NoSuchProcess errors
    gracefully: processes whose name cannot be read are skipped, and fields
    that cannot be read fall back to zero.
    """

    def __init__(self, wait_timeout: float = 1.0) -> None:
        """
        Initialize the PsutilProcessTable.

        Args:
            wait_timeout: How long to wait for a killed process to exit (seconds).
        """
        self._wait_timeout = wait_timeout

    def list_processes(self) -> list[ProcessRecord]:
        """Collect a record for every running process, in enumeration order."""
        records: list[ProcessRecord] = []

        attrs = ["pid", "name", "memory_info", "cpu_times", "create_time"]

        for proc in psutil.process_iter(attrs=attrs, ad_value=None):
            try:
                info = proc.info
                name = info.get("name")
                if not name:
                    continue

                mem_info = info.get("memory_info")
                memory_rss = mem_info.rss if mem_info else 0

                cpu_times = info.get("cpu_times")
                cpu_time = cpu_times.user + cpu_times.system if cpu_times else 0.0

                records.append(
                    ProcessRecord(
                        pid=info["pid"],
                        name=name,
                        memory_rss=memory_rss,
                        cpu_time=cpu_time,
                        create_time=info.get("create_time"),
                    )
                )

            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Process exited mid-poll or is off limits, leave it out
                continue

        return records

    def terminate(self, record: ProcessRecord) -> None:
        """
        Kill the process described by record.

        Raises:
            ProcessGone: The process has exited, or its pid now belongs to a
                different process.
            TerminationError: The OS refused to kill the process.
        """
        try:
            proc = psutil.Process(record.pid)
            if record.create_time is not None:
                if abs(proc.create_time() - record.create_time) > _CREATE_TIME_TOLERANCE:
                    raise ProcessGone(FailureReason.PID_REUSED, f"pid {record.pid} was reused")
            proc.kill()
        except psutil.NoSuchProcess as exc:
            raise ProcessGone(message=str(exc)) from exc
        except psutil.AccessDenied as exc:
            raise TerminationError(FailureReason.ACCESS_DENIED, str(exc)) from exc
        except psutil.Error as exc:
            raise TerminationError(FailureReason.OS_ERROR, str(exc)) from exc
        except OSError as exc:
            raise TerminationError(FailureReason.OS_ERROR, str(exc)) from exc

        try:
            proc.wait(timeout=self._wait_timeout)
        except psutil.TimeoutExpired:
            # Signal was delivered, the process is just slow to go away
            logger.debug("pid %d still exiting after kill", record.pid)
        except psutil.Error as exc:
            logger.debug("wait on pid %d failed: %s", record.pid, exc)

"""Memory-ranked process summary handed to the language model."""

from taskai.models import ProcessGroup, ProcessRecord
from taskai.system import ProcessTable

MAX_GROUPS = 50

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(size: int) -> str:
    """Format bytes as a human-readable string with binary units, e.g. '1.5 KB'."""
    value = float(size)
    order = 0
    while value >= 1024 and order < len(_UNITS) - 1:
        order += 1
        value /= 1024
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_UNITS[order]}"


def group_processes(records: list[ProcessRecord], limit: int = MAX_GROUPS) -> list[ProcessGroup]:
    """
    Group records by name and rank the groups by total memory.

    Groups with equal memory keep the order in which their name was first
    enumerated. At most limit groups are returned.
    """
    counts: dict[str, int] = {}
    memory: dict[str, int] = {}
    for record in records:
        if not record.name:
            continue
        counts[record.name] = counts.get(record.name, 0) + 1
        memory[record.name] = memory.get(record.name, 0) + max(record.memory_rss, 0)

    groups = [
        ProcessGroup(name=name, instance_count=count, total_memory=memory[name])
        for name, count in counts.items()
    ]
    # sorted() is stable, so ties stay in enumeration order
    groups = sorted(groups, key=lambda g: g.total_memory, reverse=True)
    return groups[:limit]


def render_summary(groups: list[ProcessGroup]) -> str:
    """Render one '<name> (<n> instances, <size>)' line per group."""
    return "".join(
        f"{g.name} ({g.instance_count} instances, {format_bytes(g.total_memory)})\n" for g in groups
    )


def capture(table: ProcessTable, limit: int = MAX_GROUPS) -> list[ProcessGroup]:
    """Enumerate the live processes and return the ranked groups."""
    return group_processes(table.list_processes(), limit=limit)

"""Icon, label and colour descriptors for every tagged value.

Each table covers every member of its enum, including ``UNKNOWN``, so a
lookup never falls through to a missing key.
"""

from dataclasses import dataclass
from enum import Enum

from .models import JobStatus, JobType, LiveSessionStatus, LogType


@dataclass(frozen=True)
class Descriptor:
    """How a tagged value is presented."""

    icon: str
    label: str
    css_class: str


LOG_TYPES: dict[LogType, Descriptor] = {
    LogType.TOOL_CALL: Descriptor(">", "Tool", "c-yellow"),
    LogType.TOOL_RESULT: Descriptor("<", "Result", "c-green"),
    LogType.THINKING: Descriptor("~", "Thinking", "c-purple"),
    LogType.RESPONSE: Descriptor("#", "Response", "c-blue"),
    LogType.SESSION: Descriptor("*", "Session", "c-muted"),
    LogType.MCP: Descriptor("@", "MCP", "c-cyan"),
    LogType.ERROR: Descriptor("!", "Error", "c-red"),
    LogType.USER: Descriptor("?", "User", "c-light"),
    LogType.COST: Descriptor("$", "Cost", "c-amber"),
    LogType.STATUS: Descriptor("=", "Status", "c-light"),
    LogType.UNKNOWN: Descriptor("-", "Other", "c-muted"),
}

JOB_TYPES: dict[JobType, Descriptor] = {
    JobType.LINEAR: Descriptor("🔧", "Linear", "c-blue"),
    JobType.UPGRADE: Descriptor("🧠", "Upgrade", "c-purple"),
    JobType.ORCHESTRATE: Descriptor("🎯", "Orchestrate", "c-yellow"),
    JobType.WRAP: Descriptor("🌙", "Wrap", "c-indigo"),
    JobType.UNKNOWN: Descriptor("?", "Job", "c-muted"),
}

JOB_STATUSES: dict[JobStatus, Descriptor] = {
    JobStatus.COMPLETED: Descriptor("", "Done", "badge-green"),
    JobStatus.SKIPPED: Descriptor("", "Skip", "badge-muted"),
    JobStatus.ERROR: Descriptor("", "Error", "badge-red"),
    JobStatus.UNKNOWN: Descriptor("", "Unknown", "badge-muted"),
}

SESSION_STATUSES: dict[LiveSessionStatus, Descriptor] = {
    LiveSessionStatus.IDLE: Descriptor("○", "Idle", "c-muted"),
    LiveSessionStatus.THINKING: Descriptor("◐", "Thinking", "c-purple"),
    LiveSessionStatus.RESPONDING: Descriptor("●", "Responding", "c-blue"),
    LiveSessionStatus.ERROR: Descriptor("✕", "Error", "c-red"),
    LiveSessionStatus.UNKNOWN: Descriptor("?", "Unknown", "c-muted"),
}

_TABLES: dict[type[Enum], dict] = {
    LogType: LOG_TYPES,
    JobType: JOB_TYPES,
    JobStatus: JOB_STATUSES,
    LiveSessionStatus: SESSION_STATUSES,
}


def describe(tag: Enum) -> Descriptor:
    """Get the descriptor for a tagged value.

    Raises:
        TypeError: If the tag's enum has no descriptor table.
    """
    table = _TABLES.get(type(tag))
    if table is None:
        raise TypeError(f"No descriptors for {type(tag).__name__}")
    return table[tag]

"""Data models for the stats snapshot served by Bill's VPS.

The stats endpoint speaks camelCase JSON. Every model here parses that
shape with ``from_dict`` and writes it back with ``to_dict``; optional
sections that are absent on the wire stay ``None`` so the render layer
can treat each of them independently.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TaggedEnum(str, Enum):
    """String enum whose unrecognised wire values map to ``UNKNOWN``."""

    @classmethod
    def parse(cls, value: Any) -> "TaggedEnum":
        """Parse a wire value, falling back to the UNKNOWN member."""
        try:
            return cls(value)
        except ValueError:
            return cls("unknown")


class LogType(TaggedEnum):
    """Kind of event emitted by the agent's execution."""

    TOOL_CALL = "tool_call"
    TOOL_RESULT = "tool_result"
    THINKING = "thinking"
    RESPONSE = "response"
    SESSION = "session"
    MCP = "mcp"
    ERROR = "error"
    USER = "user"
    COST = "cost"
    STATUS = "status"
    UNKNOWN = "unknown"


class JobType(TaggedEnum):
    """Kind of scheduled background job."""

    LINEAR = "linear"
    UPGRADE = "upgrade"
    ORCHESTRATE = "orchestrate"
    WRAP = "wrap"
    UNKNOWN = "unknown"


class JobStatus(TaggedEnum):
    """Outcome of a scheduled job run."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    ERROR = "error"
    UNKNOWN = "unknown"


class LiveSessionStatus(TaggedEnum):
    """State of a live session, driven entirely by the agent."""

    IDLE = "idle"
    THINKING = "thinking"
    RESPONDING = "responding"
    ERROR = "error"
    UNKNOWN = "unknown"

    def is_busy(self) -> bool:
        """Check if the agent is actively working in this session."""
        return self in (LiveSessionStatus.THINKING, LiveSessionStatus.RESPONDING)


class AgentStatus(TaggedEnum):
    """Connectivity of the agent as reported by the stats endpoint."""

    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


class MilestoneStatus(TaggedEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


def _to_int(value: Any, default: int = 0) -> int:
    """Coerce a JSON number (or numeric string) to int."""
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_number(value: Any) -> float:
    """Coerce a metadata value to a float, treating non-numbers as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


@dataclass
class BrainLog:
    """A single timestamped event from the agent's brain."""

    id: int
    log_type: LogType
    content: str
    timestamp: int  # epoch milliseconds
    metadata: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None

    @property
    def turns(self) -> float:
        """Number of turns recorded on a cost log (0 if missing)."""
        return _to_number(self.metadata.get("turns"))

    @property
    def cost_usd(self) -> float:
        """Cost in USD recorded on a cost log (0 if missing)."""
        return _to_number(self.metadata.get("costUsd"))

    @property
    def tool_input(self) -> Any:
        """Input passed to a tool call, if recorded."""
        return self.metadata.get("input")

    def to_dict(self) -> dict:
        """Convert to the wire shape."""
        data = {
            "id": self.id,
            "logType": self.log_type.value,
            "content": self.content,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }
        if self.session_id is not None:
            data["sessionId"] = self.session_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "BrainLog":
        """Create from the wire shape."""
        metadata = data.get("metadata")
        return cls(
            id=_to_int(data.get("id")),
            log_type=LogType.parse(data.get("logType")),
            content=str(data.get("content") or ""),
            timestamp=_to_int(data.get("timestamp")),
            metadata=metadata if isinstance(metadata, dict) else {},
            session_id=data.get("sessionId"),
        )


@dataclass
class JobLog:
    """Record of one scheduled job run."""

    id: int
    job_type: JobType
    content: str
    status: JobStatus
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "jobType": self.job_type.value,
            "content": self.content,
            "status": self.status.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobLog":
        return cls(
            id=_to_int(data.get("id")),
            job_type=JobType.parse(data.get("jobType")),
            content=str(data.get("content") or ""),
            status=JobStatus.parse(data.get("status")),
            timestamp=_to_int(data.get("timestamp")),
        )


@dataclass
class LiveSession:
    """A unit of agent work in progress, tied to a conversation or topic."""

    session_id: str
    status: LiveSessionStatus
    last_heartbeat: int
    topic_name: str | None = None
    current_request: str | None = None
    started_at: int | None = None  # present while the session is active
    current_status: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "topicName": self.topic_name,
            "status": self.status.value,
            "currentRequest": self.current_request,
            "startedAt": self.started_at,
            "lastHeartbeat": self.last_heartbeat,
            "currentStatus": self.current_status,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LiveSession":
        started_at = data.get("startedAt")
        metadata = data.get("metadata")
        return cls(
            session_id=str(data["sessionId"]),
            status=LiveSessionStatus.parse(data.get("status")),
            last_heartbeat=_to_int(data.get("lastHeartbeat")),
            topic_name=data.get("topicName") or None,
            current_request=data.get("currentRequest") or None,
            started_at=_to_int(started_at) if started_at is not None else None,
            current_status=data.get("currentStatus") or None,
            metadata=metadata if isinstance(metadata, dict) else {},
        )


@dataclass
class SystemMetrics:
    """Host metrics as percentage-like strings, e.g. ``"42%"``."""

    cpu: str
    memory: str
    disk: str

    def to_dict(self) -> dict:
        return {"cpu": self.cpu, "memory": self.memory, "disk": self.disk}

    @classmethod
    def from_dict(cls, data: dict) -> "SystemMetrics":
        return cls(
            cpu=str(data.get("cpu", "-")),
            memory=str(data.get("memory", "-")),
            disk=str(data.get("disk", "-")),
        )


@dataclass
class ScheduledJob:
    name: str
    interval: str

    def to_dict(self) -> dict:
        return {"name": self.name, "interval": self.interval}


@dataclass
class JobSchedule:
    """Summary of the agent's scheduled jobs."""

    enabled: bool
    running: bool
    last_upgrade: str | None = None
    last_orchestrate: str | None = None
    jobs: list[ScheduledJob] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "running": self.running,
            "lastUpgrade": self.last_upgrade,
            "lastOrchestrate": self.last_orchestrate,
            "list": [j.to_dict() for j in self.jobs],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JobSchedule":
        return cls(
            enabled=bool(data.get("enabled", False)),
            running=bool(data.get("running", False)),
            last_upgrade=data.get("lastUpgrade"),
            last_orchestrate=data.get("lastOrchestrate"),
            jobs=[
                ScheduledJob(name=str(j.get("name", "")), interval=str(j.get("interval", "")))
                for j in data.get("list", [])
            ],
        )


@dataclass
class Milestone:
    """Progress towards the agent's current goal."""

    name: str
    target: str
    deadline: str
    days_remaining: int
    current: float
    progress: float  # percent
    status: MilestoneStatus

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "target": self.target,
            "deadline": self.deadline,
            "daysRemaining": self.days_remaining,
            "current": self.current,
            "progress": self.progress,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Milestone":
        return cls(
            name=str(data.get("name", "")),
            target=str(data.get("target", "")),
            deadline=str(data.get("deadline", "")),
            days_remaining=_to_int(data.get("daysRemaining")),
            current=_to_number(data.get("current")),
            progress=_to_number(data.get("progress")),
            status=MilestoneStatus.parse(data.get("status")),
        )


@dataclass
class TopSender:
    name: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}


@dataclass
class GitCommit:
    """A commit to the agent's own repository."""

    hash: str
    short_hash: str
    message: str
    author: str
    date: str
    relative_date: str

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "shortHash": self.short_hash,
            "message": self.message,
            "author": self.author,
            "date": self.date,
            "relativeDate": self.relative_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GitCommit":
        commit_hash = str(data.get("hash", ""))
        return cls(
            hash=commit_hash,
            short_hash=str(data.get("shortHash") or commit_hash[:7]),
            message=str(data.get("message", "")),
            author=str(data.get("author", "")),
            date=str(data.get("date", "")),
            relative_date=str(data.get("relativeDate", "")),
        )


@dataclass
class GitContribution:
    date: str  # YYYY-MM-DD
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date, "count": self.count}


@dataclass
class GitActivity:
    """Commit history and daily contribution counts."""

    commits: list[GitCommit] = field(default_factory=list)
    contributions: list[GitContribution] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "commits": [c.to_dict() for c in self.commits],
            "contributions": [c.to_dict() for c in self.contributions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GitActivity":
        return cls(
            commits=[GitCommit.from_dict(c) for c in data.get("commits", [])],
            contributions=[
                GitContribution(date=str(c.get("date", "")), count=_to_int(c.get("count")))
                for c in data.get("contributions", [])
            ],
        )


def _optional_list(data: dict, key: str, parse) -> list | None:
    items = data.get(key)
    if items is None:
        return None
    return [parse(item) for item in items]


@dataclass(frozen=True)
class StatsSnapshot:
    """One complete poll response from the stats endpoint.

    A snapshot is replaced wholesale on every successful poll and all the
    views of one render pass are derived from a single instance.
    """

    status: AgentStatus
    uptime: str = "-"
    birthday: str = ""
    age: str = "-"
    total_messages: int = 0
    today_messages: int = 0
    total_sessions: int = 0
    total_facts: int = 0
    last_activity: str = "Unknown"
    top_senders: list[TopSender] = field(default_factory=list)
    system: SystemMetrics | None = None
    jobs: JobSchedule | None = None
    milestone: Milestone | None = None
    brain_logs: list[BrainLog] | None = None
    job_logs: list[JobLog] | None = None
    live_sessions: list[LiveSession] | None = None
    git: GitActivity | None = None
    error: str | None = None

    @property
    def is_online(self) -> bool:
        return self.status == AgentStatus.ONLINE

    @classmethod
    def offline(cls, error: str) -> "StatsSnapshot":
        """Fallback snapshot used when the VPS cannot be reached."""
        return cls(status=AgentStatus.OFFLINE, error=error)

    def to_dict(self) -> dict:
        """Convert to the wire shape, omitting absent optional sections."""
        data: dict[str, Any] = {
            "status": self.status.value,
            "uptime": self.uptime,
            "birthday": self.birthday,
            "age": self.age,
            "totalMessages": self.total_messages,
            "todayMessages": self.today_messages,
            "totalSessions": self.total_sessions,
            "totalFacts": self.total_facts,
            "lastActivity": self.last_activity,
            "topSenders": [s.to_dict() for s in self.top_senders],
        }
        if self.system is not None:
            data["system"] = self.system.to_dict()
        if self.jobs is not None:
            data["jobs"] = self.jobs.to_dict()
        if self.milestone is not None:
            data["milestone"] = self.milestone.to_dict()
        if self.brain_logs is not None:
            data["brainLogs"] = [log.to_dict() for log in self.brain_logs]
        if self.job_logs is not None:
            data["jobLogs"] = [log.to_dict() for log in self.job_logs]
        if self.live_sessions is not None:
            data["liveSessions"] = [s.to_dict() for s in self.live_sessions]
        if self.git is not None:
            data["git"] = self.git.to_dict()
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "StatsSnapshot":
        """Create from the wire shape.

        ``recentThinking`` from older agent versions is ignored; its
        content now arrives as ``brainLogs``.
        """
        system = data.get("system")
        jobs = data.get("jobs")
        milestone = data.get("milestone")
        git = data.get("git")
        return cls(
            status=AgentStatus.parse(data.get("status")),
            uptime=str(data.get("uptime", "-")),
            birthday=str(data.get("birthday", "")),
            age=str(data.get("age", "-")),
            total_messages=_to_int(data.get("totalMessages")),
            today_messages=_to_int(data.get("todayMessages")),
            total_sessions=_to_int(data.get("totalSessions")),
            total_facts=_to_int(data.get("totalFacts")),
            last_activity=str(data.get("lastActivity", "Unknown")),
            top_senders=[
                TopSender(name=str(s.get("name", "")), count=_to_int(s.get("count")))
                for s in data.get("topSenders", [])
            ],
            system=SystemMetrics.from_dict(system) if system else None,
            jobs=JobSchedule.from_dict(jobs) if jobs else None,
            milestone=Milestone.from_dict(milestone) if milestone else None,
            brain_logs=_optional_list(data, "brainLogs", BrainLog.from_dict),
            job_logs=_optional_list(data, "jobLogs", JobLog.from_dict),
            live_sessions=_optional_list(data, "liveSessions", LiveSession.from_dict),
            git=GitActivity.from_dict(git) if git else None,
            error=data.get("error"),
        )

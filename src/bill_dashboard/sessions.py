"""Classification of live sessions and attribution of brain logs.

Everything here is a pure function of one snapshot's logs and sessions
plus the current time, so it is recomputed on every render.
"""

from dataclasses import dataclass, field

from .formatting import format_duration
from .models import BrainLog, LiveSession, LiveSessionStatus, LogType

STALE_AFTER_MS = 60_000

NO_ACTIVITY_MESSAGE = "No activity yet"


def sort_logs(logs: list[BrainLog]) -> list[BrainLog]:
    """Return logs in canonical order: ascending timestamp, then id.

    The agent does not guarantee a delivery order and ids are not
    ordered across sessions, so every consumer sorts through here.
    """
    return sorted(logs, key=lambda log: (log.timestamp, log.id))


def session_logs(logs: list[BrainLog], session_id: str) -> list[BrainLog]:
    """Logs attributed to one session, preserving input order."""
    return [log for log in logs if log.session_id == session_id]


def unattributed_logs(logs: list[BrainLog]) -> list[BrainLog]:
    """Logs with no session id, shown only in the global feed."""
    return [log for log in logs if not log.session_id]


def session_display_name(session: LiveSession) -> str:
    """Human-friendly name for a session.

    Prefers the topic name; otherwise uses the last colon-delimited
    segment of the session id, with a ``topic_`` prefix shown as ``#``
    (``"telegram:123:topic_42"`` -> ``"#42"``).
    """
    if session.topic_name:
        return session.topic_name
    segment = session.session_id.rsplit(":", 1)[-1]
    if segment.startswith("topic_") and len(segment) > len("topic_"):
        return "#" + segment[len("topic_"):]
    if segment:
        return segment
    return session.session_id


def _latest_of_type(logs: list[BrainLog], log_type: LogType) -> BrainLog | None:
    for log in reversed(logs):
        if log.log_type == log_type:
            return log
    return None


def session_status_message(session: LiveSession, logs: list[BrainLog]) -> str:
    """Status line for a session.

    Priority: the agent's own ``currentStatus``, then the latest status
    log, then the latest tool call, then a default for the session state.
    ``logs`` must be the session's logs in canonical order.
    """
    if session.current_status:
        return session.current_status
    for log_type in (LogType.STATUS, LogType.TOOL_CALL):
        latest = _latest_of_type(logs, log_type)
        if latest is not None and latest.content:
            return latest.content
    if session.status == LiveSessionStatus.THINKING:
        return "Thinking..."
    if session.status == LiveSessionStatus.RESPONDING:
        return "Responding..."
    return "Waiting for messages"


def is_stale(session: LiveSession, now: int, stale_after_ms: int = STALE_AFTER_MS) -> bool:
    """Check if a session's heartbeat is too old, i.e. it may be frozen."""
    return now - session.last_heartbeat > stale_after_ms


@dataclass
class SessionView:
    """Derived, display-ready view of one live session."""

    session: LiveSession
    display_name: str
    status_message: str
    stale: bool
    logs: list[BrainLog] = field(default_factory=list)
    elapsed: str | None = None  # live duration since startedAt

    @property
    def session_id(self) -> str:
        return self.session.session_id

    @property
    def is_active(self) -> bool:
        return self.session.status.is_busy()

    @property
    def has_activity(self) -> bool:
        return bool(self.logs)

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "displayName": self.display_name,
            "status": self.session.status.value,
            "statusMessage": self.status_message,
            "stale": self.stale,
            "elapsed": self.elapsed,
            "currentRequest": self.session.current_request,
            "logIds": [log.id for log in self.logs],
        }


def classify_session(
    session: LiveSession,
    logs: list[BrainLog],
    now: int,
    stale_after_ms: int = STALE_AFTER_MS,
) -> SessionView:
    """Build the view of one session from the snapshot's full log list."""
    own_logs = session_logs(sort_logs(logs), session.session_id)
    elapsed = None
    if session.started_at is not None and session.status.is_busy():
        elapsed = format_duration((now - session.started_at) / 1000)
    return SessionView(
        session=session,
        display_name=session_display_name(session),
        status_message=session_status_message(session, own_logs),
        stale=is_stale(session, now, stale_after_ms),
        logs=own_logs,
        elapsed=elapsed,
    )


def classify_sessions(
    sessions: list[LiveSession] | None,
    logs: list[BrainLog] | None,
    now: int,
    stale_after_ms: int = STALE_AFTER_MS,
) -> list[SessionView]:
    """Classify every live session of a snapshot, active ones first."""
    ordered = sort_logs(logs or [])
    views = [
        classify_session(session, ordered, now, stale_after_ms)
        for session in sessions or []
    ]
    return sorted(views, key=lambda v: (not v.is_active, -v.session.last_heartbeat))

"""Assembly of the dashboard view from one snapshot."""

import re
from dataclasses import dataclass, field
from datetime import datetime

from .activity import ActivityReport, clamp, compute_activity
from .formatting import now_ms
from .models import BrainLog, JobLog, StatsSnapshot, TopSender
from .poller import DashboardState
from .sessions import STALE_AFTER_MS, SessionView, classify_sessions, sort_logs

NUMBER_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")

HIGH_METRIC = 80
MEDIUM_METRIC = 50
MIN_MILESTONE_WIDTH = 2


def parse_percent(value: str) -> float:
    """Leading number of a metric string like ``"42.5%"`` (0 if none)."""
    match = NUMBER_PATTERN.match(value)
    return float(match.group(1)) if match else 0.0


def metric_level(percent: float) -> str:
    """Classify a host metric as ``high``, ``medium`` or ``low`` load."""
    if percent > HIGH_METRIC:
        return "high"
    if percent > MEDIUM_METRIC:
        return "medium"
    return "low"


@dataclass
class MetricView:
    label: str
    value: str
    width: float
    level: str

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value, "width": self.width, "level": self.level}


@dataclass
class SenderBar:
    name: str
    count: int
    width: float  # percent of the top sender's count

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count, "width": self.width}


def system_metrics(snapshot: StatsSnapshot) -> list[MetricView]:
    if snapshot.system is None:
        return []
    metrics = []
    for label, value in (
        ("CPU", snapshot.system.cpu),
        ("Memory", snapshot.system.memory),
        ("Disk", snapshot.system.disk),
    ):
        percent = parse_percent(value)
        metrics.append(MetricView(label=label, value=value, width=clamp(percent), level=metric_level(percent)))
    return metrics


def sender_bars(senders: list[TopSender]) -> list[SenderBar]:
    """Bars for the ranked senders, scaled to the first (top) one."""
    if not senders:
        return []
    top = max(senders[0].count, 1)
    return [
        SenderBar(name=s.name, count=s.count, width=clamp(s.count / top * 100))
        for s in senders
    ]


@dataclass
class DashboardView:
    """Everything one render pass needs, derived from a single snapshot."""

    now: int
    snapshot: StatsSnapshot | None
    activity: ActivityReport
    sessions: list[SessionView] = field(default_factory=list)
    brain_logs: list[BrainLog] = field(default_factory=list)  # newest first
    job_logs: list[JobLog] = field(default_factory=list)  # newest first
    metrics: list[MetricView] = field(default_factory=list)
    senders: list[SenderBar] = field(default_factory=list)
    milestone_width: float | None = None
    fetch_error: str | None = None
    last_fetch: datetime | None = None

    @property
    def is_online(self) -> bool:
        return self.snapshot is not None and self.snapshot.is_online

    def to_dict(self) -> dict:
        return {
            "now": self.now,
            "snapshot": self.snapshot.to_dict() if self.snapshot else None,
            "activity": self.activity.to_dict(),
            "sessions": [s.to_dict() for s in self.sessions],
            "metrics": [m.to_dict() for m in self.metrics],
            "senders": [s.to_dict() for s in self.senders],
            "milestoneWidth": self.milestone_width,
            "fetchError": self.fetch_error,
            "lastFetch": self.last_fetch.isoformat() if self.last_fetch else None,
        }


def build_dashboard_view(
    state: DashboardState,
    now: int | None = None,
    stale_after_ms: int = STALE_AFTER_MS,
) -> DashboardView:
    """Derive the dashboard view from the state's current snapshot."""
    now = now if now is not None else now_ms()
    # Read the snapshot once; the poller may swap it while we render.
    snapshot = state.snapshot
    fetch_error = state.fetch_error
    last_fetch = state.last_fetch

    if snapshot is None:
        return DashboardView(
            now=now,
            snapshot=None,
            activity=compute_activity(None, None, now),
            fetch_error=fetch_error,
            last_fetch=last_fetch,
        )

    logs = sort_logs(snapshot.brain_logs or [])
    milestone_width = None
    if snapshot.milestone is not None:
        milestone_width = clamp(max(MIN_MILESTONE_WIDTH, snapshot.milestone.progress))

    return DashboardView(
        now=now,
        snapshot=snapshot,
        activity=compute_activity(logs, snapshot.live_sessions, now),
        sessions=classify_sessions(snapshot.live_sessions, logs, now, stale_after_ms),
        brain_logs=list(reversed(logs)),
        job_logs=sorted(snapshot.job_logs or [], key=lambda j: (j.timestamp, j.id), reverse=True),
        metrics=system_metrics(snapshot),
        senders=sender_bars(snapshot.top_senders),
        milestone_width=milestone_width,
        fetch_error=fetch_error,
        last_fetch=last_fetch,
    )

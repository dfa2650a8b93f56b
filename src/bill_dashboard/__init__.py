"""Dashboard and mailbox for Bill, an autonomous agent."""

from .activity import ActivityReport, compute_activity
from .models import BrainLog, JobLog, LiveSession, StatsSnapshot
from .poller import DashboardState, StatsPoller
from .sessions import SessionView, classify_sessions

__all__ = [
    "ActivityReport",
    "BrainLog",
    "DashboardState",
    "JobLog",
    "LiveSession",
    "SessionView",
    "StatsPoller",
    "StatsSnapshot",
    "classify_sessions",
    "compute_activity",
]

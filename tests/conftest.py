"""Shared pytest fixtures and configuration."""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from bill_dashboard.config import DashboardConfig
from bill_dashboard.mailbox import Mailbox
from bill_dashboard.models import BrainLog, LiveSession, LiveSessionStatus, LogType
from bill_dashboard.server import create_app

# Fixed "now" for time-dependent tests (epoch milliseconds)
NOW = 1_767_225_600_000


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_log():
    """Factory for brain logs, timestamped relative to NOW."""

    def _make(
        log_id: int,
        log_type: LogType = LogType.THINKING,
        age_ms: int = 1_000,
        content: str = "",
        session_id: str | None = None,
        **metadata,
    ) -> BrainLog:
        return BrainLog(
            id=log_id,
            log_type=log_type,
            content=content or f"{log_type.value} #{log_id}",
            timestamp=NOW - age_ms,
            metadata=metadata,
            session_id=session_id,
        )

    return _make


@pytest.fixture
def make_session():
    """Factory for live sessions with a fresh heartbeat."""

    def _make(
        session_id: str = "telegram:123:topic_42",
        status: LiveSessionStatus = LiveSessionStatus.IDLE,
        heartbeat_age_ms: int = 1_000,
        **kwargs,
    ) -> LiveSession:
        return LiveSession(
            session_id=session_id,
            status=status,
            last_heartbeat=NOW - heartbeat_age_ms,
            **kwargs,
        )

    return _make


@pytest.fixture
def snapshot_data():
    """A full stats payload in the wire format."""
    return {
        "status": "online",
        "uptime": "3d 4h",
        "birthday": "January 2, 2026",
        "age": "2 weeks",
        "totalMessages": 1234,
        "todayMessages": 56,
        "totalSessions": 78,
        "totalFacts": 90,
        "lastActivity": "2026-01-01T00:00:00Z",
        "topSenders": [{"name": "alice", "count": 40}, {"name": "bob", "count": 10}],
        "system": {"cpu": "12%", "memory": "64%", "disk": "91%"},
        "jobs": {
            "enabled": True,
            "running": False,
            "lastUpgrade": None,
            "lastOrchestrate": "2026-01-01T00:00:00Z",
            "list": [{"name": "orchestrate", "interval": "every 2h"}],
        },
        "milestone": {
            "name": "First $100",
            "target": "$100",
            "deadline": "March 1, 2026",
            "daysRemaining": 59,
            "current": 12.5,
            "progress": 12.5,
            "status": "in_progress",
        },
        "brainLogs": [
            {
                "id": 2,
                "logType": "tool_call",
                "content": "Read",
                "metadata": {"input": "/etc/hosts"},
                "timestamp": NOW - 2_000,
                "sessionId": "telegram:123:topic_42",
            },
            {
                "id": 1,
                "logType": "thinking",
                "content": "Pondering",
                "timestamp": NOW - 10_000,
            },
            {
                "id": 3,
                "logType": "cost",
                "content": "Run cost",
                "metadata": {"costUsd": 0.01, "turns": 3},
                "timestamp": NOW - 1_000,
            },
        ],
        "jobLogs": [
            {"id": 1, "jobType": "orchestrate", "content": "Planned day", "status": "completed", "timestamp": NOW - 60_000},
            {"id": 2, "jobType": "linear", "content": "No issues", "status": "skipped", "timestamp": NOW - 30_000},
        ],
        "liveSessions": [
            {
                "sessionId": "telegram:123:topic_42",
                "status": "thinking",
                "startedAt": NOW - 90_000,
                "lastHeartbeat": NOW - 1_000,
                "currentRequest": "Write a poem",
            }
        ],
        "git": {
            "commits": [
                {
                    "hash": "abcdef1234567",
                    "shortHash": "abcdef1",
                    "message": "feat(ui): add graph",
                    "author": "Bill",
                    "date": "2026-01-01",
                    "relativeDate": "2 days ago",
                }
            ],
            "contributions": [{"date": "2026-01-01", "count": 3}],
        },
    }


@pytest.fixture
def config(tmp_path):
    """Config pointing at a fake VPS and a temporary data directory."""
    return DashboardConfig(
        stats_url="http://vps.test",
        password="hunter2",
        secret_key="test-secret-key",
        data_dir=str(tmp_path / "data"),
        outbox_api_key="agent-key",
    )


@pytest.fixture
def mailbox(tmp_path):
    """Mailbox rooted in a temporary directory."""
    return Mailbox(tmp_path / "data")


@pytest.fixture
def stats_transport(snapshot_data):
    """Mock VPS that always serves the sample snapshot."""
    return httpx.MockTransport(lambda request: httpx.Response(200, json=snapshot_data))


@pytest.fixture
def app(config, stats_transport):
    """Dashboard app wired to the mock VPS."""
    return create_app(config, stats_client=httpx.AsyncClient(transport=stats_transport))


@pytest.fixture
async def client(app):
    """Async HTTP client for the app, not logged in."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def authed_client(client):
    """Client with a logged-in session."""
    response = await client.post("/login", data={"password": "hunter2"})
    assert response.status_code == 303
    return client

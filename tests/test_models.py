"""Tests for the stats snapshot models."""

from bill_dashboard.models import (
    AgentStatus,
    BrainLog,
    GitCommit,
    JobStatus,
    JobType,
    LiveSession,
    LiveSessionStatus,
    LogType,
    MilestoneStatus,
    StatsSnapshot,
)


class TestTaggedEnums:
    """Tests for parsing tagged wire values."""

    def test_known_values(self):
        """Test that known wire values map to their members."""
        assert LogType.parse("tool_call") == LogType.TOOL_CALL
        assert JobType.parse("wrap") == JobType.WRAP
        assert JobStatus.parse("skipped") == JobStatus.SKIPPED
        assert LiveSessionStatus.parse("responding") == LiveSessionStatus.RESPONDING
        assert MilestoneStatus.parse("in_progress") == MilestoneStatus.IN_PROGRESS

    def test_unknown_values_fall_back(self):
        """Test that unrecognised values become UNKNOWN instead of failing."""
        assert LogType.parse("telepathy") == LogType.UNKNOWN
        assert JobType.parse(None) == JobType.UNKNOWN
        assert JobStatus.parse(42) == JobStatus.UNKNOWN
        assert AgentStatus.parse("") == AgentStatus.UNKNOWN

    def test_busy_statuses(self):
        """Test which session statuses count as active."""
        assert LiveSessionStatus.THINKING.is_busy()
        assert LiveSessionStatus.RESPONDING.is_busy()
        assert not LiveSessionStatus.IDLE.is_busy()
        assert not LiveSessionStatus.ERROR.is_busy()
        assert not LiveSessionStatus.UNKNOWN.is_busy()


class TestBrainLog:
    """Tests for BrainLog parsing and metadata accessors."""

    def test_from_dict(self):
        """Test parsing a log from the wire format."""
        log = BrainLog.from_dict(
            {
                "id": 7,
                "logType": "cost",
                "content": "Run cost",
                "metadata": {"costUsd": 0.25, "turns": 4},
                "timestamp": 1000,
                "sessionId": "telegram:1",
            }
        )
        assert log.id == 7
        assert log.log_type == LogType.COST
        assert log.cost_usd == 0.25
        assert log.turns == 4
        assert log.session_id == "telegram:1"

    def test_missing_metadata_numbers_are_zero(self):
        """Test that absent or non-numeric cost fields read as 0."""
        log = BrainLog.from_dict({"id": 1, "logType": "cost", "content": "", "timestamp": 0})
        assert log.cost_usd == 0
        assert log.turns == 0

        log = BrainLog.from_dict(
            {"id": 1, "logType": "cost", "metadata": {"costUsd": "lots", "turns": True}, "timestamp": 0}
        )
        assert log.cost_usd == 0
        assert log.turns == 0

    def test_non_dict_metadata_ignored(self):
        """Test that malformed metadata becomes an empty dict."""
        log = BrainLog.from_dict({"id": 1, "logType": "mcp", "metadata": "oops", "timestamp": 5})
        assert log.metadata == {}

    def test_to_dict_omits_missing_session(self):
        """Test that logs without a session serialize without sessionId."""
        log = BrainLog(id=1, log_type=LogType.THINKING, content="hmm", timestamp=5)
        data = log.to_dict()
        assert data["logType"] == "thinking"
        assert "sessionId" not in data


class TestLiveSession:
    """Tests for LiveSession parsing."""

    def test_from_dict(self):
        """Test parsing a live session."""
        session = LiveSession.from_dict(
            {
                "sessionId": "telegram:1:topic_9",
                "topicName": "",
                "status": "thinking",
                "startedAt": 100,
                "lastHeartbeat": 200,
                "currentStatus": "Reading files",
            }
        )
        assert session.status == LiveSessionStatus.THINKING
        assert session.topic_name is None
        assert session.started_at == 100
        assert session.last_heartbeat == 200
        assert session.current_status == "Reading files"

    def test_unknown_status(self):
        """Test that a new agent status does not break parsing."""
        session = LiveSession.from_dict({"sessionId": "s", "status": "dreaming", "lastHeartbeat": 1})
        assert session.status == LiveSessionStatus.UNKNOWN
        assert session.started_at is None


class TestGitCommit:
    """Tests for GitCommit parsing."""

    def test_short_hash_defaults_to_prefix(self):
        """Test that a missing short hash is derived from the full hash."""
        commit = GitCommit.from_dict({"hash": "0123456789abcdef", "message": "fix: x"})
        assert commit.short_hash == "0123456"


class TestStatsSnapshot:
    """Tests for StatsSnapshot parsing and serialization."""

    def test_from_dict_full(self, snapshot_data):
        """Test parsing a complete payload."""
        snapshot = StatsSnapshot.from_dict(snapshot_data)

        assert snapshot.is_online
        assert snapshot.total_messages == 1234
        assert snapshot.top_senders[0].name == "alice"
        assert snapshot.system.disk == "91%"
        assert snapshot.jobs.jobs[0].name == "orchestrate"
        assert snapshot.milestone.status == MilestoneStatus.IN_PROGRESS
        assert len(snapshot.brain_logs) == 3
        assert snapshot.job_logs[0].job_type == JobType.ORCHESTRATE
        assert snapshot.live_sessions[0].status == LiveSessionStatus.THINKING
        assert snapshot.git.contributions[0].count == 3

    def test_optional_sections_absent(self):
        """Test that missing sections stay None independently."""
        snapshot = StatsSnapshot.from_dict({"status": "online", "uptime": "1h"})

        assert snapshot.system is None
        assert snapshot.jobs is None
        assert snapshot.milestone is None
        assert snapshot.brain_logs is None
        assert snapshot.job_logs is None
        assert snapshot.live_sessions is None
        assert snapshot.git is None
        assert snapshot.last_activity == "Unknown"

    def test_empty_lists_are_not_absent(self):
        """Test that an empty list is kept distinct from a missing one."""
        snapshot = StatsSnapshot.from_dict({"status": "online", "brainLogs": []})
        assert snapshot.brain_logs == []
        assert snapshot.live_sessions is None

    def test_recent_thinking_ignored(self):
        """Test that the legacy recentThinking field is ignored."""
        snapshot = StatsSnapshot.from_dict(
            {"status": "online", "recentThinking": [{"content": "old"}]}
        )
        assert snapshot.brain_logs is None
        assert "recentThinking" not in snapshot.to_dict()

    def test_offline_fallback(self):
        """Test the offline snapshot used when the VPS is unreachable."""
        snapshot = StatsSnapshot.offline("Could not connect to VPS")

        assert snapshot.status == AgentStatus.OFFLINE
        assert not snapshot.is_online
        assert snapshot.uptime == "-"
        assert snapshot.total_messages == 0
        assert snapshot.to_dict()["error"] == "Could not connect to VPS"

    def test_to_dict_omits_absent_sections(self, snapshot_data):
        """Test that to_dict writes only the sections that were present."""
        data = StatsSnapshot.from_dict({"status": "online"}).to_dict()
        for key in ("system", "jobs", "milestone", "brainLogs", "jobLogs", "liveSessions", "git"):
            assert key not in data

        full = StatsSnapshot.from_dict(snapshot_data).to_dict()
        assert full["jobs"]["list"] == [{"name": "orchestrate", "interval": "every 2h"}]
        assert full["liveSessions"][0]["sessionId"] == "telegram:123:topic_42"

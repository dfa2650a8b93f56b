"""Tests for HTML rendering."""

from bill_dashboard.contributions import build_contribution_graph, changelog_entries
from bill_dashboard.dashboard import build_dashboard_view
from bill_dashboard.models import GitCommit, GitContribution, LiveSessionStatus, LogType, StatsSnapshot
from bill_dashboard.poller import DashboardState
from bill_dashboard.render import (
    render_brain_log,
    render_changelog_page,
    render_contributions_page,
    render_dashboard_body,
    render_dashboard_page,
    render_login_page,
    render_mail_page,
    render_markdown,
    render_session,
)
from bill_dashboard.sessions import classify_session


class TestMarkdown:
    """Tests for markdown rendering of agent responses."""

    def test_formats_markdown(self):
        assert "<strong>done</strong>" in render_markdown("**done**")

    def test_escapes_html(self):
        html = render_markdown("<script>alert(1)</script>")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestLogRows:
    """Tests for brain log rows."""

    def test_tool_call_shows_input_preview(self, make_log, now):
        log = make_log(1, LogType.TOOL_CALL, content="Bash", input="x" * 200)
        html = render_brain_log(log, now)
        assert "Tool" in html
        assert "x" * 80 + "..." in html

    def test_unknown_type_renders(self, make_log, now):
        html = render_brain_log(make_log(1, LogType.parse("hologram")), now)
        assert "Other" in html

    def test_content_is_escaped(self, make_log, now):
        html = render_brain_log(make_log(1, LogType.USER, content="<b>hi</b>"), now)
        assert "&lt;b&gt;hi&lt;/b&gt;" in html


class TestSessionBlock:
    """Tests for live session blocks."""

    def test_no_activity_placeholder(self, make_session, now):
        html = render_session(classify_session(make_session(), [], now), now)
        assert "No activity yet" in html
        assert 'id="session-telegram:123:topic_42"' in html

    def test_stale_badge(self, make_session, now):
        view = classify_session(make_session(heartbeat_age_ms=5 * 60_000), [], now)
        assert "Stale" in render_session(view, now)

    def test_shows_session_logs(self, make_session, make_log, now):
        session = make_session("s1", status=LiveSessionStatus.THINKING)
        logs = [make_log(1, LogType.THINKING, content="Considering options", session_id="s1")]
        html = render_session(classify_session(session, logs, now), now)
        assert "Considering options" in html
        assert "No activity yet" not in html


class TestPages:
    """Tests for full pages."""

    def test_login_error(self):
        assert "Invalid password" in render_login_page("Invalid password")
        assert 'name="password"' in render_login_page()

    def test_dashboard_offline_without_snapshot(self, now):
        html = render_dashboard_body(build_dashboard_view(DashboardState(), now=now))
        assert "Offline" in html
        assert "Brain Command Deck" in html

    def test_dashboard_with_snapshot(self, snapshot_data, now):
        state = DashboardState()
        state.apply_snapshot(1, StatsSnapshot.from_dict(snapshot_data), None)
        state.apply_error(2, "Could not connect to Bill")

        html = render_dashboard_body(build_dashboard_view(state, now=now))

        assert "Online" in html
        assert "First $100" in html
        assert "1,234" in html
        assert "#42" in html
        assert "alice" in html
        assert 'class="error-banner"' in html
        assert "Could not connect to Bill" in html

    def test_dashboard_page_has_refresh_script(self, now):
        html = render_dashboard_page(build_dashboard_view(DashboardState(), now=now), 5.0)
        assert "/api/dashboard-html" in html
        assert "5000" in html

    def test_mail_page_empty(self):
        html = render_mail_page([], 10 * 1024 * 1024)
        assert "No files in outbox" in html
        assert "/api/inbox" in html

    def test_changelog(self):
        commits = [GitCommit.from_dict({"hash": "abcdef1234", "message": "feat: graph", "author": "Bill"})]
        html = render_changelog_page(changelog_entries(commits))
        assert "feat" in html
        assert "abcdef1" in html

    def test_changelog_empty(self):
        assert "No commits found" in render_changelog_page([])

    def test_contributions(self):
        graph = build_contribution_graph([GitContribution(date="2026-01-04", count=1)])
        html = render_contributions_page(graph)
        assert 'title="1 commit on 2026-01-04"' in html

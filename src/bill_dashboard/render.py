"""HTML rendering for the dashboard pages.

These functions only map already-derived values to markup; thresholds
and classification live in ``sessions``, ``activity`` and ``dashboard``.
"""

import html

import markdown

from .contributions import CommitEntry, ContributionGraph
from .dashboard import DashboardView
from .display import describe
from .formatting import format_clock, format_file_size, format_time_ago, truncate
from .mailbox import OutboxFile
from .models import BrainLog, JobLog, LogType
from .sessions import NO_ACTIVITY_MESSAGE, SessionView

TOOL_INPUT_PREVIEW = 80


def render_markdown(text: str) -> str:
    """Render (escaped) markdown text to HTML."""
    return markdown.markdown(
        html.escape(text, quote=False),
        extensions=["tables", "fenced_code", "nl2br"],
    )


def esc(value: object) -> str:
    return html.escape(str(value))


def get_base_styles() -> str:
    """Get the shared dark theme CSS."""
    return """
    <style>
        :root {
            color-scheme: dark;
            --bg-primary: #050505;
            --bg-card: rgba(255, 255, 255, 0.02);
            --border-color: rgba(255, 255, 255, 0.06);
            --text-primary: #fff;
            --text-secondary: rgba(255, 255, 255, 0.5);
            --text-faint: rgba(255, 255, 255, 0.25);
            --accent: #FCC800;
        }
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: Satoshi, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: var(--bg-primary);
            color: var(--text-primary);
            line-height: 1.5;
            padding: 24px 16px 64px;
            max-width: 1000px;
            margin: 0 auto;
        }
        a { color: var(--accent); text-decoration: none; }
        a:hover { text-decoration: underline; }
        .mono { font-family: ui-monospace, SFMono-Regular, Menlo, monospace; }
        .muted { color: var(--text-secondary); }
        .faint { color: var(--text-faint); font-size: 0.75em; }
        .header { display: flex; justify-content: space-between; align-items: flex-start; margin-bottom: 16px; }
        .header h1 { font-weight: 300; font-size: 2em; letter-spacing: -0.02em; }
        .card {
            background: var(--bg-card);
            border: 1px solid var(--border-color);
            border-radius: 16px;
            padding: 18px;
            margin-bottom: 14px;
        }
        .card-header {
            display: flex; justify-content: space-between; align-items: center;
            color: rgba(255, 255, 255, 0.7); font-weight: 300; margin-bottom: 12px;
        }
        .grid { display: grid; gap: 12px; margin-bottom: 14px; }
        .grid-2 { grid-template-columns: repeat(auto-fit, minmax(280px, 1fr)); }
        .grid-3 { grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); }
        .grid-4 { grid-template-columns: repeat(auto-fit, minmax(140px, 1fr)); }
        .stat { background: var(--bg-card); border: 1px solid var(--border-color); border-radius: 12px; padding: 14px; }
        .stat .label { color: var(--text-secondary); font-size: 0.75em; }
        .stat .value { font-size: 1.5em; font-weight: 300; }
        .accent { color: #34d399; }
        .bar { height: 6px; background: rgba(255, 255, 255, 0.06); border-radius: 99px; overflow: hidden; }
        .bar > div { height: 100%; border-radius: 99px; background: rgba(255, 255, 255, 0.3); transition: width 0.5s; }
        .bar .fill-accent { background: var(--accent); }
        .level-low { color: #34d399; } .bar .level-low { background: rgba(52, 211, 153, 0.7); }
        .level-medium { color: #fbbf24; } .bar .level-medium { background: rgba(251, 191, 36, 0.7); }
        .level-high { color: #f87171; } .bar .level-high { background: rgba(248, 113, 113, 0.7); }
        .row { display: flex; gap: 10px; padding: 8px 0; border-bottom: 1px solid rgba(255, 255, 255, 0.03); }
        .row:last-child { border-bottom: none; }
        .row .body { flex: 1; min-width: 0; word-wrap: break-word; }
        .scroll { max-height: 320px; overflow-y: auto; }
        .badge { padding: 1px 6px; border-radius: 4px; font-size: 0.65em; font-weight: 500; text-transform: uppercase; }
        .badge-green { background: rgba(16, 185, 129, 0.1); color: #34d399; }
        .badge-red { background: rgba(239, 68, 68, 0.1); color: #f87171; }
        .badge-blue { background: rgba(59, 130, 246, 0.1); color: #60a5fa; }
        .badge-purple { background: rgba(168, 85, 247, 0.1); color: #c084fc; }
        .badge-pink { background: rgba(236, 72, 153, 0.1); color: #f472b6; }
        .badge-amber { background: rgba(245, 158, 11, 0.1); color: #fbbf24; }
        .badge-cyan { background: rgba(6, 182, 212, 0.1); color: #22d3ee; }
        .badge-muted { background: rgba(255, 255, 255, 0.04); color: rgba(255, 255, 255, 0.4); }
        .c-yellow { color: var(--accent); } .c-green { color: #34d399; } .c-purple { color: #c084fc; }
        .c-blue { color: #60a5fa; } .c-cyan { color: #22d3ee; } .c-red { color: #f87171; }
        .c-amber { color: #fbbf24; } .c-indigo { color: #818cf8; }
        .c-muted { color: var(--text-secondary); } .c-light { color: rgba(255, 255, 255, 0.7); }
        .status-badge { display: inline-flex; align-items: center; gap: 6px; padding: 1px 8px; border-radius: 99px;
            border: 1px solid rgba(255, 255, 255, 0.1); font-size: 0.65em; color: rgba(255, 255, 255, 0.4); }
        .status-badge.online { border-color: rgba(252, 200, 0, 0.3); color: var(--accent); background: rgba(252, 200, 0, 0.1); }
        .dot { width: 6px; height: 6px; border-radius: 50%; background: currentColor; display: inline-block; }
        .error-banner { border: 1px solid rgba(239, 68, 68, 0.2); background: rgba(239, 68, 68, 0.05);
            color: rgba(248, 113, 113, 0.8); border-radius: 16px; padding: 16px; margin-bottom: 14px; }
        details.session { border: 1px solid var(--border-color); border-radius: 12px; padding: 10px 14px; margin-bottom: 8px; }
        details.session summary { cursor: pointer; display: flex; gap: 10px; align-items: center; list-style: none; }
        details.session.stale { border-color: rgba(251, 191, 36, 0.4); }
        .brain-power { font-size: 2.5em; font-weight: 300; color: var(--accent); }
        .log-content p { margin: 0; }
        .log-content pre { white-space: pre-wrap; }
        form.login { display: flex; flex-direction: column; gap: 14px; max-width: 360px; margin: 80px auto; }
        input[type=password], input[type=file] {
            padding: 14px 18px; border-radius: 16px; border: 1px solid var(--border-color);
            background: var(--bg-card); color: var(--text-primary); font-size: 1em;
        }
        button { padding: 12px; border-radius: 16px; border: none; background: #fff; color: #050505;
            font-size: 1em; font-weight: 500; cursor: pointer; }
        .contrib-grid { display: flex; gap: 2px; overflow-x: auto; }
        .contrib-week { display: flex; flex-direction: column; gap: 2px; }
        .cell { width: 11px; height: 11px; border-radius: 2px; }
        .level--1 { background: transparent; }
        .level-0 { background: rgba(255, 255, 255, 0.03); }
        .level-1 { background: rgba(252, 200, 0, 0.2); }
        .level-2 { background: rgba(252, 200, 0, 0.4); }
        .level-3 { background: rgba(252, 200, 0, 0.6); }
        .level-4 { background: rgba(252, 200, 0, 0.9); }
        footer { text-align: center; padding-top: 24px; color: var(--text-faint); font-size: 0.75em; }
        footer a { color: var(--text-faint); margin: 0 6px; }
    </style>
    """


def _page(title: str, body: str, script: str = "") -> str:
    return f"""<!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>{esc(title)}</title>
        <meta name="theme-color" content="#050505">
        {get_base_styles()}
    </head>
    <body>
        {body}
        {f"<script>{script}</script>" if script else ""}
    </body>
    </html>
    """


def _nav_footer() -> str:
    return """
    <footer>
        <a href="/">Dashboard</a>·<a href="/mail">Mailbox</a>·<a href="/changelog">Changelog</a>·<a href="/contributions">Contributions</a>
        <form method="POST" action="/logout" style="display:inline">
            <button type="submit" style="background:none;color:inherit;padding:0 6px;font-size:1em;">Log out</button>
        </form>
    </footer>
    """


def render_login_page(error: str | None = None) -> str:
    """Render the password prompt."""
    error_html = f'<p class="c-red" style="text-align:center">{esc(error)}</p>' if error else ""
    body = f"""
    <form class="login" method="POST" action="/login">
        <div style="text-align:center;margin-bottom:30px;">
            <h1 style="font-weight:300;">Bill Makes</h1>
            <p class="muted">Autonomous Agent Dashboard</p>
        </div>
        <input type="password" name="password" placeholder="Enter password" autofocus required>
        {error_html}
        <button type="submit">Enter</button>
        <p class="faint" style="text-align:center;margin-top:30px;">Leftway Labs</p>
    </form>
    """
    return _page("Bill Makes", body)


def _status_badge(online: bool) -> str:
    css = "status-badge online" if online else "status-badge"
    label = "Online" if online else "Offline"
    return f'<span class="{css}"><span class="dot"></span>{label}</span>'


def _stat_card(label: str, value: str, suffix: str = "", accent: bool = False, mono: bool = False) -> str:
    classes = "value" + (" accent" if accent else "") + (" mono" if mono else "")
    suffix_html = f' <span class="faint">{esc(suffix)}</span>' if suffix else ""
    return f"""
    <div class="stat">
        <div class="label">{esc(label)}</div>
        <div><span class="{classes}">{esc(value)}</span>{suffix_html}</div>
    </div>
    """


def render_brain_log(log: BrainLog, now: int) -> str:
    """Render one brain log row."""
    d = describe(log.log_type)
    if log.log_type == LogType.RESPONSE:
        content = render_markdown(log.content)
    else:
        content = f"<p>{esc(log.content)}</p>"
    input_html = ""
    if log.log_type == LogType.TOOL_CALL and log.tool_input:
        preview = truncate(str(log.tool_input), TOOL_INPUT_PREVIEW)
        input_html = f'<p class="faint mono">{esc(preview)}</p>'
    return f"""
    <div class="row" data-log-id="{log.id}">
        <span class="mono {d.css_class}">{esc(d.icon)}</span>
        <div class="body">
            <span class="{d.css_class}" style="font-size:0.75em;font-weight:500;">{esc(d.label)}</span>
            <span class="faint mono" title="{esc(format_time_ago(log.timestamp, now))}">{format_clock(log.timestamp)}</span>
            <div class="log-content mono muted" style="font-size:0.85em;">{content}</div>
            {input_html}
        </div>
    </div>
    """


def render_job_log(log: JobLog) -> str:
    """Render one job history row."""
    job = describe(log.job_type)
    status = describe(log.status)
    return f"""
    <div class="row">
        <span>{esc(job.icon)}</span>
        <div class="body">
            <span class="{job.css_class}" style="font-weight:500;">{esc(job.label)}</span>
            <span class="badge {status.css_class}">{esc(status.label)}</span>
            <span class="faint mono" style="float:right;">{format_clock(log.timestamp)}</span>
            <p class="mono muted" style="font-size:0.8em;">{esc(log.content)}</p>
        </div>
    </div>
    """


def render_session(view: SessionView, now: int) -> str:
    """Render one live session as an expandable block."""
    d = describe(view.session.status)
    classes = "session stale" if view.stale else "session"
    stale_html = '<span class="badge badge-amber">Stale</span>' if view.stale else ""
    elapsed_html = f'<span class="faint mono">{esc(view.elapsed)}</span>' if view.elapsed else ""
    request_html = ""
    if view.session.current_request:
        request_html = f'<p class="muted" style="font-size:0.85em;">{esc(truncate(view.session.current_request, 200))}</p>'
    if view.has_activity:
        logs_html = "".join(render_brain_log(log, now) for log in reversed(view.logs))
    else:
        logs_html = f'<p class="faint">{NO_ACTIVITY_MESSAGE}</p>'
    return f"""
    <details class="{classes}" id="session-{esc(view.session_id)}">
        <summary>
            <span class="{d.css_class}">{esc(d.icon)}</span>
            <strong>{esc(view.display_name)}</strong>
            <span class="{d.css_class}" style="font-size:0.75em;">{esc(d.label)}</span>
            {stale_html}
            {elapsed_html}
            <span class="muted" style="margin-left:auto;font-size:0.8em;">{esc(truncate(view.status_message, 80))}</span>
        </summary>
        {request_html}
        <div class="scroll">{logs_html}</div>
    </details>
    """


def _render_command_deck(view: DashboardView) -> str:
    activity = view.activity
    bars = "".join(
        f"""
        <div>
            <div style="display:flex;justify-content:space-between;font-size:0.75em;">
                <span class="muted">{esc(bar.label)}</span><span class="mono faint">{bar.value:.0f}</span>
            </div>
            <div class="bar"><div class="fill-accent" style="width:{bar.value:.0f}%"></div></div>
        </div>
        """
        for bar in activity.bars
    )
    state = "Thinking" if activity.is_actively_thinking else "Resting"
    return f"""
    <div class="card">
        <div class="card-header">
            <span>Brain Command Deck</span>
            <span class="faint mono">{esc(state)} · {activity.active_session_count} active</span>
        </div>
        <div class="grid grid-3">
            <div><div class="brain-power mono">{activity.brain_power:.0f}</div><div class="faint">brain power</div></div>
            <div><div class="mono" style="font-size:1.5em;">${activity.recent_cost:.4f}</div><div class="faint">last 5 runs</div></div>
            <div><div class="mono" style="font-size:1.5em;">{activity.total_turns:.0f}</div><div class="faint">turns</div></div>
        </div>
        <div class="grid grid-4">{bars}</div>
    </div>
    """


def render_dashboard_body(view: DashboardView) -> str:
    """Render the refreshable part of the dashboard."""
    snapshot = view.snapshot
    parts = []

    header_meta = ""
    if snapshot is not None and snapshot.birthday:
        header_meta = f'<p class="faint mono">Born {esc(snapshot.birthday)} · {esc(snapshot.age)} old</p>'
    parts.append(f"""
    <div class="header">
        <div>
            <h1>Bill Makes {_status_badge(view.is_online)}</h1>
            <p class="muted">Autonomous Agent Dashboard</p>
            {header_meta}
        </div>
    </div>
    """)

    if snapshot is not None and snapshot.milestone is not None:
        m = snapshot.milestone
        parts.append(f"""
        <div class="card">
            <div class="card-header">
                <div><p class="faint">CURRENT MILESTONE</p><h2 style="font-weight:500;">{esc(m.name)}</h2></div>
                <div style="text-align:right;"><span class="brain-power mono">{m.days_remaining}</span><p class="faint">days left</p></div>
            </div>
            <div style="display:flex;justify-content:space-between;" class="mono">
                <span>${m.current:g}</span><span class="muted">{esc(m.target)}</span>
            </div>
            <div class="bar"><div class="fill-accent" style="width:{view.milestone_width:.0f}%"></div></div>
            <p class="faint">Target: {esc(m.deadline)}</p>
        </div>
        """)

    if snapshot is not None:
        total = f"{snapshot.total_messages:,}"
        parts.append(f"""
        <div class="grid grid-4">
            {_stat_card("Uptime", snapshot.uptime, accent=view.is_online)}
            {_stat_card("Today", str(snapshot.today_messages), suffix="msgs", mono=True)}
            {_stat_card("Total", total, suffix="msgs", mono=True)}
            {_stat_card("Active", format_time_ago(snapshot.last_activity, view.now))}
        </div>
        """)

    parts.append(_render_command_deck(view))

    if view.sessions:
        sessions_html = "".join(render_session(s, view.now) for s in view.sessions)
        parts.append(f"""
        <div class="card">
            <div class="card-header"><span>Live Sessions</span><span class="faint mono">{len(view.sessions)}</span></div>
            {sessions_html}
        </div>
        """)

    if view.metrics:
        metrics_html = "".join(
            f"""
            <div class="stat">
                <div style="display:flex;justify-content:space-between;">
                    <span class="label">{esc(m.label)}</span><span class="mono level-{m.level}">{esc(m.value)}</span>
                </div>
                <div class="bar"><div class="level-{m.level}" style="width:{m.width:.0f}%"></div></div>
            </div>
            """
            for m in view.metrics
        )
        parts.append(f'<div class="grid grid-3">{metrics_html}</div>')

    columns = []
    if snapshot is not None and snapshot.jobs is not None:
        jobs = snapshot.jobs
        badge = '<span class="badge badge-green">Active</span>' if jobs.enabled else '<span class="badge badge-muted">Paused</span>'
        rows = "".join(
            f'<div class="row"><span class="body">{esc(j.name)}</span><span class="faint mono">{esc(j.interval)}</span></div>'
            for j in jobs.jobs
        )
        columns.append(f'<div class="card"><div class="card-header"><span>Scheduled Jobs</span>{badge}</div>{rows}</div>')
    if view.senders:
        rows = "".join(
            f"""
            <div class="row" style="align-items:center;">
                <span class="muted" style="width:96px;overflow:hidden;">{esc(s.name)}</span>
                <div class="bar" style="flex:1;"><div style="width:{s.width:.0f}%"></div></div>
                <span class="faint mono">{s.count}</span>
            </div>
            """
            for s in view.senders
        )
        columns.append(f'<div class="card"><div class="card-header"><span>Top Senders</span></div>{rows}</div>')
    if columns:
        parts.append(f'<div class="grid grid-2">{"".join(columns)}</div>')

    if view.job_logs:
        rows = "".join(render_job_log(log) for log in view.job_logs)
        parts.append(f"""
        <div class="card">
            <div class="card-header"><span>Job History</span><span class="faint mono">Recent runs</span></div>
            <div class="scroll">{rows}</div>
        </div>
        """)

    if view.brain_logs:
        rows = "".join(render_brain_log(log, view.now) for log in view.brain_logs)
        parts.append(f"""
        <div class="card">
            <div class="card-header"><span>Brain Activity</span><span class="faint mono">Live feed</span></div>
            <div class="scroll">{rows}</div>
        </div>
        """)

    if view.fetch_error:
        parts.append(f'<div class="error-banner">{esc(view.fetch_error)}</div>')

    if view.last_fetch is not None:
        parts.append(f'<p class="faint mono" style="text-align:center;">Updated {view.last_fetch:%H:%M:%S} UTC</p>')

    return "".join(parts)


def _get_refresh_script(interval_ms: int) -> str:
    """JavaScript that swaps in a fresh dashboard fragment on a timer.

    Open session panels are remembered across swaps; the set is kept in
    memory only, so a reload starts collapsed.
    """
    return f"""
        const REFRESH_INTERVAL = {interval_ms};
        const openPanels = new Set();

        document.addEventListener('toggle', (event) => {{
            const el = event.target;
            if (!el.id) return;
            if (el.open) openPanels.add(el.id); else openPanels.delete(el.id);
        }}, true);

        let refreshing = false;
        async function refreshDashboard() {{
            if (refreshing) return;
            refreshing = true;
            try {{
                const response = await fetch('/api/dashboard-html', {{ cache: 'no-store' }});
                if (response.status === 401) {{
                    window.location.href = '/login';
                    return;
                }}
                if (response.ok) {{
                    const container = document.getElementById('dashboard');
                    const scrollY = window.scrollY;
                    container.innerHTML = await response.text();
                    openPanels.forEach((id) => {{
                        const el = document.getElementById(id);
                        if (el) el.open = true;
                    }});
                    window.scrollTo(0, scrollY);
                }}
            }} catch (e) {{
                console.error('Failed to refresh dashboard:', e);
            }} finally {{
                refreshing = false;
            }}
        }}

        setInterval(refreshDashboard, REFRESH_INTERVAL);
    """


def render_dashboard_page(view: DashboardView, refresh_interval: float) -> str:
    """Render the full dashboard page."""
    body = f'<div id="dashboard">{render_dashboard_body(view)}</div>{_nav_footer()}'
    return _page("Bill Makes", body, _get_refresh_script(int(refresh_interval * 1000)))


def render_outbox_files(files: list[OutboxFile]) -> str:
    if not files:
        return '<p class="muted" style="text-align:center;">// No files in outbox<br>// Bill will place generated files here</p>'
    rows = []
    for f in files:
        description = f'<p class="muted" style="font-size:0.85em;">{esc(f.description)}</p>' if f.description else ""
        rows.append(f"""
        <div class="row" style="align-items:center;">
            <span>📄</span>
            <div class="body">
                <p>{esc(f.name)}</p>
                {description}
                <p class="faint">{format_file_size(f.size)} · {f.created:%b %d %H:%M}</p>
            </div>
            <a href="{esc(f.url)}" download="{esc(f.name)}">DOWNLOAD</a>
        </div>
        """)
    return "".join(rows)


def render_mail_page(files: list[OutboxFile], max_upload_bytes: int) -> str:
    """Render the mailbox page with the upload form and outbox listing."""
    body = f"""
    <div class="header"><div><h1>📬 Mailbox</h1><p class="muted">File exchange between humans and Bill</p></div></div>
    <div class="card">
        <div class="card-header"><span>📥 Inbox: upload files for Bill</span></div>
        <input type="file" id="upload" style="width:100%;">
        <p id="upload-status" class="mono" style="margin-top:8px;"></p>
        <p class="faint mono">// Max size: {format_file_size(max_upload_bytes)} per file</p>
    </div>
    <div class="card">
        <div class="card-header"><span>📤 Outbox: files from Bill</span></div>
        {render_outbox_files(files)}
    </div>
    {_nav_footer()}
    """
    script = """
        const input = document.getElementById('upload');
        const status = document.getElementById('upload-status');
        input.addEventListener('change', async () => {
            const file = input.files[0];
            if (!file) return;
            input.disabled = true;
            status.className = 'mono c-amber';
            status.textContent = '> Uploading...';
            const formData = new FormData();
            formData.append('file', file);
            try {
                const response = await fetch('/api/inbox', { method: 'POST', body: formData });
                const data = await response.json();
                if (response.ok) {
                    status.className = 'mono c-green';
                    status.textContent = '> ✓ ' + file.name + ' uploaded successfully';
                    input.value = '';
                } else {
                    status.className = 'mono c-red';
                    status.textContent = '> ✗ Upload failed: ' + (data.detail || response.statusText);
                }
            } catch (e) {
                status.className = 'mono c-red';
                status.textContent = '> ✗ Upload failed: ' + e;
            } finally {
                input.disabled = false;
            }
        });
    """
    return _page("Bill Mailbox", body, script)


def render_changelog_page(entries: list[CommitEntry]) -> str:
    """Render the commit timeline."""
    if entries:
        rows = "".join(
            f"""
            <div class="row">
                <span class="dot" style="color:var(--accent);margin-top:8px;"></span>
                <div class="body">
                    <span class="badge {e.css_class}">{esc(e.type)}</span>
                    <span class="faint mono">{esc(e.commit.relative_date)}</span>
                    <p>{esc(e.description)}</p>
                    <p class="faint"><span class="mono">{esc(e.commit.short_hash)}</span> by {esc(e.commit.author)}</p>
                </div>
            </div>
            """
            for e in entries
        )
    else:
        rows = '<p class="muted" style="text-align:center;padding:40px;">No commits found</p>'
    body = f"""
    <div class="header"><div><h1>Changelog</h1><p class="muted mono">Recent commits to bill-makes</p></div></div>
    <div class="card">{rows}</div>
    {_nav_footer()}
    """
    return _page("Changelog", body)


def render_contributions_page(graph: ContributionGraph) -> str:
    """Render the contribution heat map."""
    weeks = "".join(
        '<div class="contrib-week">'
        + "".join(
            f'<div class="cell level-{cell.level}" title="{cell.count} commit{"" if cell.count == 1 else "s"} on {esc(cell.date)}"></div>'
            if cell.date
            else f'<div class="cell level-{cell.level}"></div>'
            for cell in week
        )
        + "</div>"
        for week in graph.weeks
    )
    months = " ".join(f'<span class="faint" data-col="{m.column}">{esc(m.label)}</span>' for m in graph.months)
    legend = "".join(f'<div class="cell level-{level}"></div>' for level in range(5))
    body = f"""
    <div class="header"><div><h1>Contributions</h1><p class="muted mono">Bill's commit activity over the past year</p></div></div>
    <p><span class="c-yellow">{graph.total_commits}</span> <span class="muted">commits</span>
       <span style="margin-left:16px;">{graph.active_days}</span> <span class="muted">active days</span></p>
    <div class="card">
        <div style="margin-bottom:6px;">{months}</div>
        <div class="contrib-grid">{weeks}</div>
        <div style="display:flex;gap:2px;align-items:center;margin-top:12px;" class="faint">Less {legend} More</div>
    </div>
    {_nav_footer()}
    """
    return _page("Contributions", body)

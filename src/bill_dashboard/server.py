"""FastAPI server for Bill's dashboard and mailbox."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, Literal
from urllib.parse import quote

import httpx
from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    FastAPI,
    File,
    Form,
    Header,
    HTTPException,
    Request,
    UploadFile,
)
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from starlette.middleware.sessions import SessionMiddleware

from .auth import (
    AuthError,
    PasswordChecker,
    clear_session,
    is_authenticated,
    mark_authenticated,
    require_session,
)
from .config import DashboardConfig, load_config, persist_secret_key
from .contributions import build_contribution_graph, changelog_entries
from .dashboard import build_dashboard_view
from .mailbox import (
    FileTooLargeError,
    InvalidFileNameError,
    Mailbox,
    MailboxError,
    OutboxFileNotFoundError,
    guess_content_type,
)
from .models import StatsSnapshot
from .poller import DashboardState, StatsPoller
from .render import (
    render_changelog_page,
    render_contributions_page,
    render_dashboard_body,
    render_dashboard_page,
    render_login_page,
    render_mail_page,
)

logger = logging.getLogger(__name__)

OFFLINE_MESSAGE = "Could not connect to VPS"

router = APIRouter()


def get_config(request: Request) -> DashboardConfig:
    return request.app.state.config


def get_state(request: Request) -> DashboardState:
    return request.app.state.dashboard_state


def get_poller(request: Request) -> StatsPoller:
    return request.app.state.poller


def get_mailbox(request: Request) -> Mailbox:
    return request.app.state.mailbox


def get_password_checker(request: Request) -> PasswordChecker:
    return request.app.state.password_checker


def verify_outbox_key(
    request: Request,
    x_dashboard_api_key: Annotated[str | None, Header()] = None,
) -> bool:
    """Verify the agent's API key for outbox writes, if one is configured."""
    required_key = get_config(request).outbox_api_key
    if required_key:
        if not x_dashboard_api_key or x_dashboard_api_key != required_key:
            raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return True


def content_disposition(file_name: str) -> str:
    """Attachment header for a download, RFC 5987 encoded for non-ASCII names."""
    quoted = quote(file_name)
    if quoted != file_name:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{file_name}"'


def _login_redirect() -> RedirectResponse:
    return RedirectResponse(url="/login", status_code=303)


def _mailbox_error(e: MailboxError) -> HTTPException:
    """Map a mailbox failure to an HTTP error."""
    if isinstance(e, OutboxFileNotFoundError):
        return HTTPException(status_code=404, detail="File not found")
    return HTTPException(status_code=400, detail=str(e))


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    if is_authenticated(request):
        return RedirectResponse(url="/", status_code=303)
    return HTMLResponse(content=render_login_page())


@router.post("/login")
async def login(
    request: Request,
    background_tasks: BackgroundTasks,
    password: Annotated[str, Form()] = "",
):
    """Check the password and start a signed session on success."""
    checker = get_password_checker(request)
    try:
        accepted = await checker.check(password)
    except AuthError as e:
        logger.warning(f"Login failed: {e}")
        return HTMLResponse(content=render_login_page("Something went wrong"), status_code=502)

    if not accepted:
        return HTMLResponse(content=render_login_page("Invalid password"), status_code=401)

    mark_authenticated(request)
    logger.info("Dashboard login succeeded")
    # Fetch right away rather than waiting for the next tick
    background_tasks.add_task(get_poller(request).refresh)
    return RedirectResponse(url="/", status_code=303)


@router.post("/logout")
async def logout(request: Request):
    clear_session(request)
    return _login_redirect()


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request):
    """Main dashboard page."""
    if not is_authenticated(request):
        return _login_redirect()
    config = get_config(request)
    view = build_dashboard_view(get_state(request), stale_after_ms=config.stale_after_ms)
    return HTMLResponse(content=render_dashboard_page(view, config.poll_interval))


@router.get("/api/dashboard-html", dependencies=[Depends(require_session)])
async def api_dashboard_html(request: Request):
    """Dashboard fragment for AJAX refreshes."""
    config = get_config(request)
    view = build_dashboard_view(get_state(request), stale_after_ms=config.stale_after_ms)
    return HTMLResponse(content=render_dashboard_body(view))


@router.get("/api/dashboard", dependencies=[Depends(require_session)])
async def api_dashboard(request: Request):
    """Derived dashboard view as JSON."""
    config = get_config(request)
    view = build_dashboard_view(get_state(request), stale_after_ms=config.stale_after_ms)
    return view.to_dict()


@router.get("/api/stats", dependencies=[Depends(require_session)])
async def api_stats(request: Request):
    """Latest raw snapshot, or the offline fallback if none was fetched yet."""
    snapshot = get_state(request).snapshot
    if snapshot is None:
        snapshot = StatsSnapshot.offline(OFFLINE_MESSAGE)
    return snapshot.to_dict()


@router.post("/api/refresh", dependencies=[Depends(require_session)])
async def api_refresh(request: Request):
    """Poll the stats endpoint immediately."""
    applied = await get_poller(request).refresh()
    state = get_state(request)
    return {"status": "ok" if applied else "error", "fetchError": state.fetch_error}


@router.get("/mail", response_class=HTMLResponse)
async def mail_page(request: Request):
    if not is_authenticated(request):
        return _login_redirect()
    mailbox = get_mailbox(request)
    return HTMLResponse(content=render_mail_page(mailbox.list_outbox(), mailbox.max_upload_bytes))


@router.post("/api/inbox", dependencies=[Depends(require_session)])
async def upload_to_inbox(
    request: Request,
    file: Annotated[UploadFile | None, File()] = None,
):
    """Store a file uploaded for Bill."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    mailbox = get_mailbox(request)
    # Starlette has already spooled the body; read at most one byte past the limit
    data = await file.read(mailbox.max_upload_bytes + 1)
    try:
        stored = mailbox.save_upload(file.filename, data)
    except FileTooLargeError:
        limit_mb = mailbox.max_upload_bytes // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File too large (max {limit_mb}MB)")
    except MailboxError as e:
        raise _mailbox_error(e)

    return {"message": "File uploaded successfully", **stored.to_dict()}


@router.get("/api/outbox", dependencies=[Depends(require_session)])
async def list_outbox(request: Request):
    files = get_mailbox(request).list_outbox()
    return {"files": [f.to_dict() for f in files]}


class OutboxFileRequest(BaseModel):
    """Request body for Bill adding a file to the outbox."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(default="", alias="fileName")
    content: str = ""
    description: str | None = None
    encoding: Literal["base64", "text"] | None = None


@router.post("/api/outbox")
async def add_to_outbox(
    request: Request,
    body: OutboxFileRequest,
    _authorized: bool = Depends(verify_outbox_key),
):
    """Add a file to the outbox (called by Bill)."""
    if not body.file_name or not body.content:
        raise HTTPException(status_code=400, detail="fileName and content required")
    try:
        stored = get_mailbox(request).add_outbox_file(
            body.file_name, body.content, body.description, body.encoding
        )
    except MailboxError as e:
        raise _mailbox_error(e)
    return {
        "message": "File added to outbox successfully",
        "fileName": stored.file_name,
        "size": stored.size,
    }


@router.get("/api/outbox/download/{filename}", dependencies=[Depends(require_session)])
async def download_from_outbox(request: Request, filename: str):
    try:
        data = get_mailbox(request).read_outbox(filename)
    except (InvalidFileNameError, OutboxFileNotFoundError) as e:
        raise _mailbox_error(e)
    return Response(
        content=data,
        media_type=guess_content_type(filename),
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.get("/changelog", response_class=HTMLResponse)
async def changelog_page(request: Request):
    if not is_authenticated(request):
        return _login_redirect()
    snapshot = get_state(request).snapshot
    commits = snapshot.git.commits if snapshot and snapshot.git else []
    return HTMLResponse(content=render_changelog_page(changelog_entries(commits)))


@router.get("/contributions", response_class=HTMLResponse)
async def contributions_page(request: Request):
    if not is_authenticated(request):
        return _login_redirect()
    snapshot = get_state(request).snapshot
    contributions = snapshot.git.contributions if snapshot and snapshot.git else []
    return HTMLResponse(content=render_contributions_page(build_contribution_graph(contributions)))


def create_app(
    config: DashboardConfig | None = None,
    stats_client: httpx.AsyncClient | None = None,
    auth_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the dashboard application.

    Args:
        config: Settings. Loaded from file and environment if not given.
        stats_client: HTTP client for the stats poller (used by tests).
        auth_transport: httpx transport for the auth endpoint (used by tests).
    """
    config = config or load_config()
    state = DashboardState()
    poller = StatsPoller(
        config.stats_endpoint,
        state,
        interval=config.poll_interval,
        timeout=config.request_timeout,
        client=stats_client,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = asyncio.create_task(app.state.poller.run())
        try:
            yield
        finally:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            await app.state.poller.aclose()

    app = FastAPI(title="Bill Makes Dashboard", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.secret_key,
        session_cookie="bill_session",
        max_age=config.session_max_age,
        same_site="lax",
    )
    app.state.config = config
    app.state.dashboard_state = state
    app.state.poller = poller
    app.state.mailbox = Mailbox(Path(config.data_dir), max_upload_bytes=config.max_upload_bytes)
    app.state.password_checker = PasswordChecker(
        auth_url=config.auth_url,
        password=config.password,
        timeout=config.request_timeout,
        transport=auth_transport,
    )
    app.include_router(router)
    return app


def main():
    """Run the dashboard server."""
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="Bill Makes Dashboard")
    parser.add_argument(
        "-p", "--port", type=int, default=8080, help="Port to run the server on (default: 8080)"
    )
    parser.add_argument(
        "--host", type=str, default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (for development)"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    # Keep logins valid across restarts unless the key comes from the environment
    if "BILL_DASHBOARD_SECRET_KEY" not in os.environ and persist_secret_key(config):
        logger.info("Stored a new session signing key in the config file")

    if args.reload:
        # For reload mode, uvicorn needs an import path
        uvicorn.run(
            "bill_dashboard.server:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=True,
            reload_dirs=["src/bill_dashboard"],
        )
    else:
        uvicorn.run(create_app(config), host=args.host, port=args.port)


if __name__ == "__main__":
    main()

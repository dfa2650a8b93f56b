"""Password gate for the dashboard.

A successful login is stored as a flag in the signed session cookie
(Starlette's ``SessionMiddleware``), which expires after the configured
``session_max_age``.
"""

import hmac
import logging

import httpx
from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

SESSION_KEY = "authenticated"


class AuthError(Exception):
    """The external auth endpoint could not be reached."""


class PasswordChecker:
    """Checks a password against an external endpoint or a local secret."""

    def __init__(
        self,
        auth_url: str | None = None,
        password: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the checker.

        Args:
            auth_url: Endpoint that accepts ``{"password": ...}`` and
                answers with a 2xx status on success. Takes precedence
                over ``password``.
            password: Locally configured password.
            timeout: Request timeout for the auth endpoint.
            transport: Optional httpx transport (used by tests).
        """
        self.auth_url = auth_url
        self.password = password
        self.timeout = timeout
        self.transport = transport

    async def check(self, password: str) -> bool:
        """Return True if the password is accepted.

        Raises:
            AuthError: If the auth endpoint is unreachable.
        """
        if not password:
            return False

        if self.auth_url:
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.post(self.auth_url, json={"password": password})
            except httpx.HTTPError as e:
                raise AuthError(f"Auth endpoint unreachable: {e!r}") from e
            if not response.is_success:
                logger.warning(f"Login rejected by auth endpoint: {response.status_code}")
            return response.is_success

        if self.password is None:
            logger.warning("No password or auth endpoint configured, refusing login")
            return False
        return hmac.compare_digest(password.encode(), self.password.encode())


def is_authenticated(request: Request) -> bool:
    """Check the session cookie for a successful login."""
    return request.session.get(SESSION_KEY) is True


def mark_authenticated(request: Request) -> None:
    request.session[SESSION_KEY] = True


def clear_session(request: Request) -> None:
    request.session.clear()


def require_session(request: Request) -> bool:
    """Dependency for API routes that need a logged-in user."""
    if not is_authenticated(request):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return True

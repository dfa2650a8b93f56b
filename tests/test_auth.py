"""Tests for the password checker."""

import json

import httpx
import pytest

from bill_dashboard.auth import AuthError, PasswordChecker

AUTH_URL = "http://auth.test/verify"


def auth_endpoint(expected: str) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body.get("password") == expected:
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(401, json={"ok": False})

    return httpx.MockTransport(handler)


class TestLocalPassword:
    """Tests for checking against a configured password."""

    @pytest.mark.asyncio
    async def test_correct_password(self):
        assert await PasswordChecker(password="hunter2").check("hunter2")

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        assert not await PasswordChecker(password="hunter2").check("hunter3")

    @pytest.mark.asyncio
    async def test_empty_password_rejected(self):
        assert not await PasswordChecker(password="hunter2").check("")

    @pytest.mark.asyncio
    async def test_nothing_configured_rejects(self):
        assert not await PasswordChecker().check("anything")


class TestAuthEndpoint:
    """Tests for checking against an external auth endpoint."""

    @pytest.mark.asyncio
    async def test_accepted(self):
        checker = PasswordChecker(auth_url=AUTH_URL, transport=auth_endpoint("s3cret"))
        assert await checker.check("s3cret")

    @pytest.mark.asyncio
    async def test_rejected(self):
        checker = PasswordChecker(auth_url=AUTH_URL, transport=auth_endpoint("s3cret"))
        assert not await checker.check("guess")

    @pytest.mark.asyncio
    async def test_endpoint_takes_precedence(self):
        """Test that a local password is ignored when an endpoint is set."""
        checker = PasswordChecker(
            auth_url=AUTH_URL, password="local", transport=auth_endpoint("remote")
        )
        assert not await checker.check("local")
        assert await checker.check("remote")

    @pytest.mark.asyncio
    async def test_unreachable_endpoint(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        checker = PasswordChecker(auth_url=AUTH_URL, transport=httpx.MockTransport(handler))
        with pytest.raises(AuthError):
            await checker.check("s3cret")

"""HTTP transport and basic-auth middleware for the document server."""

from __future__ import annotations

import base64
import binascii
import secrets
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.datastructures import Headers
from starlette.responses import Response

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

    from mdserve.config import Settings

log = structlog.get_logger()

AUTH_REALM = "mdserve"


def parse_basic_credentials(auth_header: str) -> tuple[str, str] | None:
    """Decode an ``Authorization: Basic ...`` header into (username, password)."""
    scheme, _, encoded = auth_header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


class BasicAuthMiddleware:
    """Pure ASGI middleware gating every HTTP request behind basic auth.

    Requests pass straight through when auth is disabled. Credentials are
    compared in constant time.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        auth_enabled: bool,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        self.app = app
        self.auth_enabled = auth_enabled
        self.username = username or ""
        self.password = password or ""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self.auth_enabled:
            headers = Headers(scope=scope)
            credentials = parse_basic_credentials(headers.get("authorization", ""))
            if credentials is None or not self._matches(*credentials):
                await Response(
                    "Unauthorized",
                    status_code=401,
                    headers={"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'},
                )(scope, receive, send)
                return

        await self.app(scope, receive, send)

    def _matches(self, username: str, password: str) -> bool:
        # Both comparisons always run
        user_ok = secrets.compare_digest(username.encode(), self.username.encode())
        password_ok = secrets.compare_digest(password.encode(), self.password.encode())
        return user_ok and password_ok


def run_http_server(app: ASGIApp, settings: Settings) -> None:
    """Serve *app* over HTTP, behind basic auth when credentials are configured."""
    http_log = log.bind(transport="http")

    if not settings.auth.enabled:
        http_log.warning("http_auth_disabled")

    secured_app = BasicAuthMiddleware(
        app,
        auth_enabled=settings.auth.enabled,
        username=settings.auth.username,
        password=settings.auth.password,
    )

    uvicorn.run(
        secured_app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )

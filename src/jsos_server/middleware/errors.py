# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Error handling middleware for ASGI applications.

Catches exceptions raised during request processing and converts them
to plain-text HTTP responses.

Exception handling:
    - HTTPException: Returns status code with detail message
    - Exception: Logs it and returns 500 Internal Server Error

If the response has already started, the exception is re-raised and the
ASGI server drops the connection.

Config:
    debug (bool): If True, include traceback in 500 responses. Default: False.

Example::

    middleware:
      errors: on

    errors_middleware:
      debug: true
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware
from ..exceptions import HTTPException

if TYPE_CHECKING:
    from ..types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("jsos_server.errors")


class ErrorMiddleware(BaseMiddleware):
    """Error handling middleware for HTTP requests.

    Attributes:
        debug: If True, include stack traces in 500 error responses.

    Class Attributes:
        middleware_name: "errors" - identifier for config.
        middleware_order: 100 - outermost, sees every error.
        middleware_default: True - enabled by default.
    """

    middleware_name = "errors"
    middleware_order = 100
    middleware_default = True

    __slots__ = ("debug",)

    def __init__(self, app: ASGIApp, debug: bool = False, **kwargs: Any) -> None:
        super().__init__(app, **kwargs)
        self.debug = debug

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Process request with error handling; non-HTTP scopes pass through."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except HTTPException as e:
            if response_started:
                raise
            await self._send_http_error(scope, send, e)
        except Exception as e:
            logger.exception("Unhandled error on %s %s", scope.get("method"), scope.get("path"))
            if response_started:
                raise
            await self._send_server_error(send, e)

    async def _send_http_error(self, scope: Scope, send: Send, exc: HTTPException) -> None:
        """Send text/plain error response from HTTPException (empty body for HEAD)."""
        body_bytes = (exc.detail or "").encode("utf-8")

        headers: list[tuple[bytes, bytes]] = [
            (b"content-type", b"text/plain; charset=utf-8"),
            (b"content-length", str(len(body_bytes)).encode()),
        ]
        if exc.headers:
            headers.extend((k.lower().encode(), v.encode()) for k, v in exc.headers)

        await send({"type": "http.response.start", "status": exc.status_code, "headers": headers})
        if scope.get("method") == "HEAD":
            body_bytes = b""
        await send({"type": "http.response.body", "body": body_bytes})

    async def _send_server_error(self, send: Send, error: Exception) -> None:
        """Send 500 Internal Server Error response."""
        if self.debug:
            body = f"Internal Server Error\n\n{traceback.format_exc()}"
        else:
            body = "Internal Server Error"
        body_bytes = body.encode("utf-8")

        await send(
            {
                "type": "http.response.start",
                "status": 500,
                "headers": [
                    (b"content-type", b"text/plain; charset=utf-8"),
                    (b"content-length", str(len(body_bytes)).encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body_bytes})

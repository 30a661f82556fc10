# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Access log middleware, off by default.

One line when the request arrives and one when it is answered::

    <- GET /api/status from 192.168.1.1
    -> GET /api/status 200 (0.4ms)

It sits inside ErrorMiddleware, so an HTTPException passing through is
logged with its status code; any other exception gets an ERROR line.

``logging_middleware`` options: ``logger_name`` (default
"jsos_server.access"), ``level`` as a name or a number (default "INFO"),
``include_query`` (default True).
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware
from ..exceptions import HTTPException

if TYPE_CHECKING:
    from ..types import ASGIApp, Message, Receive, Scope, Send


def _log_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


class LoggingMiddleware(BaseMiddleware):
    middleware_name = "logging"
    middleware_order = 200
    middleware_default = False

    __slots__ = ("logger", "level", "include_query")

    def __init__(
        self,
        app: ASGIApp,
        logger_name: str = "jsos_server.access",
        level: str | int = "INFO",
        include_query: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(app, **kwargs)
        self.logger = logging.getLogger(logger_name)
        self.level = _log_level(level)
        self.include_query = include_query

    def _request_line(self, scope: Scope) -> str:
        line = f"{scope.get('method', '?')} {scope.get('path', '/')}"
        query = scope.get("query_string", b"")
        if self.include_query and query:
            line += "?" + query.decode("latin-1")
        return line

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_line = self._request_line(scope)
        client = scope.get("client")
        self.logger.log(
            self.level, "<- %s from %s", request_line, client[0] if client else "unknown"
        )

        started = time.perf_counter()
        status_code = 0

        def elapsed_ms() -> float:
            return (time.perf_counter() - started) * 1000

        async def send_recording_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_recording_status)
        except HTTPException as e:
            status_code = e.status_code
            raise
        except Exception as e:
            self.logger.error("-> %s ERROR: %s (%.1fms)", request_line, e, elapsed_ms())
            status_code = 0
            raise
        finally:
            if status_code:
                self.logger.log(
                    self.level, "-> %s %d (%.1fms)", request_line, status_code, elapsed_ms()
                )

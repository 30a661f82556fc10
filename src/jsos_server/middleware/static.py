# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Static Files Middleware.

Serves files from the public directory. Anything it cannot serve (wrong
method, missing file, path outside the directory, dotfiles) falls through
to the wrapped app, so routes and the not-found response stay downstream.

Config options (``static_middleware`` section):
    directory: Directory containing static files. Default: "public".
    index: File served for directory paths. Default: "index.html".
    max_age: Cache-Control max-age in seconds. Default: 0.

Conditional GETs answer 304 when If-None-Match lists the ETag or, without
If-None-Match, when If-Modified-Since is at or after Last-Modified.
"""

from __future__ import annotations

import mimetypes
from datetime import timezone
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send

mimetypes.add_type("application/javascript", ".js")
mimetypes.add_type("text/css", ".css")
mimetypes.add_type("image/svg+xml", ".svg")
mimetypes.add_type("application/json", ".json")
mimetypes.add_type("application/wasm", ".wasm")


class StaticFilesMiddleware(BaseMiddleware):
    """Serve GET/HEAD requests from a directory, fall through otherwise."""

    middleware_name = "static"
    middleware_order = 600
    middleware_default = True

    __slots__ = ("directory", "index", "max_age")

    def __init__(
        self,
        app: ASGIApp,
        directory: str | Path = "public",
        index: str = "index.html",
        max_age: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(app, **kwargs)
        self.directory = Path(directory).resolve()
        self.index = index
        self.max_age = max_age

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface - serve static files or pass through."""
        if scope["type"] != "http" or scope.get("method") not in ("GET", "HEAD"):
            await self.app(scope, receive, send)
            return

        file_path = self.resolve(scope.get("path", "/"))
        if file_path is None:
            await self.app(scope, receive, send)
            return

        await self._send_file(scope, send, file_path)

    def resolve(self, url_path: str) -> Path | None:
        """Map a URL path to a file inside the directory, or None."""
        if "\x00" in url_path:
            return None
        relative_path = url_path.lstrip("/")
        if any(part.startswith(".") for part in relative_path.split("/") if part):
            return None

        try:
            file_path = (self.directory / relative_path).resolve()
            file_path.relative_to(self.directory)
        except (ValueError, OSError):
            return None

        if file_path.is_dir():
            file_path = file_path / self.index
        if not file_path.is_file():
            return None
        return file_path

    async def _send_file(self, scope: Scope, send: Send, file_path: Path) -> None:
        """Send file content, or 304 when the client copy is current."""
        stat = file_path.stat()
        etag = f'W/"{stat.st_size:x}-{int(stat.st_mtime * 1000):x}"'
        headers: list[tuple[bytes, bytes]] = [
            (b"accept-ranges", b"bytes"),
            (b"cache-control", f"public, max-age={self.max_age}".encode()),
            (b"last-modified", formatdate(stat.st_mtime, usegmt=True).encode()),
            (b"etag", etag.encode()),
        ]

        if is_fresh(_request_headers(scope), etag, stat.st_mtime):
            await send({"type": "http.response.start", "status": 304, "headers": headers})
            await send({"type": "http.response.body", "body": b""})
            return

        content = file_path.read_bytes()
        headers.extend(
            [
                (b"content-type", self._content_type(file_path).encode()),
                (b"content-length", str(len(content)).encode()),
            ]
        )
        await send({"type": "http.response.start", "status": 200, "headers": headers})
        body = b"" if scope["method"] == "HEAD" else content
        await send({"type": "http.response.body", "body": body})

    @staticmethod
    def _content_type(file_path: Path) -> str:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            return "application/octet-stream"
        if content_type.startswith("text/") or content_type == "application/javascript":
            return f"{content_type}; charset=utf-8"
        return content_type


def _request_headers(scope: Scope) -> dict[str, str]:
    return {
        name.decode("latin-1").lower(): value.decode("latin-1")
        for name, value in scope.get("headers", [])
    }


def is_fresh(request_headers: dict[str, str], etag: str, mtime: float) -> bool:
    """True when the client's cached copy matches etag / mtime."""
    if_none_match = request_headers.get("if-none-match")
    if if_none_match:
        tags = {tag.strip() for tag in if_none_match.split(",")}
        return "*" in tags or etag in tags

    if_modified_since = request_headers.get("if-modified-since")
    if not if_modified_since:
        return False
    try:
        since = parsedate_to_datetime(if_modified_since)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    # Last-Modified has one-second resolution
    return int(mtime) <= since.timestamp()

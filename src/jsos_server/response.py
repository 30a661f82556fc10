# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
HTTP Response for route handlers.

The dispatcher calls a handler, then hands its return value to
``Response.set_result()`` which picks body encoding and content type::

    result = handler()
    response = Response()
    response.set_result(result)
    await response(scope, receive, send)

set_result(result, mime_type=None)
    - dict/list: JSON encoded with orjson (application/json)
    - bytes: application/octet-stream
    - str: text/plain
    - None: empty body
    - other: str() as text/plain

For HEAD requests the headers (content-length included) are sent unchanged
and the body is dropped.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import orjson

from .types import Receive, Scope, Send

__all__ = ["Response"]

HeadersInput = Mapping[str, str] | list[tuple[str, str]] | None


def _normalize_headers(headers: HeadersInput) -> list[tuple[str, str]]:
    """Normalize headers input to list of (name, value) tuples."""
    if headers is None:
        return []
    if isinstance(headers, list):
        return list(headers)
    return list(headers.items())


class Response:
    """
    HTTP response usable as an ASGI application.

    Attributes:
        body: Encoded response body as bytes.
        status_code: HTTP status code.

    Example:
        >>> response = Response(content="Hello", media_type="text/plain")
        >>> await response(scope, receive, send)

        >>> response = Response()
        >>> response.set_result({"status": "running"})
        >>> await response(scope, receive, send)
    """

    __slots__ = ("body", "status_code", "_media_type", "_headers")

    charset: str = "utf-8"

    def __init__(
        self,
        content: bytes | str | None = None,
        status_code: int = 200,
        headers: HeadersInput = None,
        media_type: str | None = None,
    ) -> None:
        self.status_code = status_code
        self._headers: list[tuple[str, str]] = _normalize_headers(headers)
        self._media_type = media_type
        self.body = self._encode_content(content)
        self._update_content_headers()

    def _encode_content(self, content: bytes | str | None) -> bytes:
        if content is None:
            return b""
        if isinstance(content, bytes):
            return content
        return content.encode(self.charset)

    @property
    def media_type(self) -> str | None:
        return self._media_type

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Response headers as (name, value) tuples."""
        return list(self._headers)

    def _get_content_type(self) -> str | None:
        """Get content-type header value with charset for text types."""
        if self._media_type is None:
            return None
        if self._media_type.startswith("text/") and "charset" not in self._media_type:
            return f"{self._media_type}; charset={self.charset}"
        return self._media_type

    def _build_headers(self) -> list[tuple[bytes, bytes]]:
        """Build ASGI headers list (lowercase names, latin-1 encoded)."""
        return [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in self._headers
        ]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Send http.response.start and http.response.body messages."""
        await send(
            {
                "type": "http.response.start",
                "status": self.status_code,
                "headers": self._build_headers(),
            }
        )
        body = b"" if scope.get("method") == "HEAD" else self.body
        await send({"type": "http.response.body", "body": body})

    def set_header(self, name: str, value: str) -> None:
        """Add a response header."""
        self._headers.append((name, value))

    def set_result(self, result: Any, mime_type: str | None = None) -> None:
        """Set response body from a handler result.

        Args:
            result: The handler return value.
            mime_type: Explicit content type, overrides the type-based default.
        """
        if isinstance(result, (dict, list)):
            self.body = orjson.dumps(result)
            self._media_type = mime_type or "application/json"
        elif isinstance(result, bytes):
            self.body = result
            self._media_type = mime_type or "application/octet-stream"
        elif isinstance(result, str):
            self.body = result.encode(self.charset)
            self._media_type = mime_type or "text/plain"
        elif result is None:
            self.body = b""
            self._media_type = mime_type or "text/plain"
        else:
            self.body = str(result).encode(self.charset)
            self._media_type = mime_type or "text/plain"

        self._update_content_headers()

    def _update_content_headers(self) -> None:
        """Replace content-type and content-length headers to match the body."""
        self._headers = [
            (name, value)
            for name, value in self._headers
            if name.lower() not in ("content-type", "content-length")
        ]
        content_type = self._get_content_type()
        if content_type:
            self._headers.append(("content-type", content_type))
        self._headers.append(("content-length", str(len(self.body))))

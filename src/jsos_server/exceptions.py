# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
HTTP exceptions raised while handling a request.

Handlers and the dispatcher raise these; ErrorMiddleware catches them and
turns them into a plain-text response with the matching status code.

HTTPException
-------------
Attributes:
    status_code (int): HTTP status code (expected 4xx or 5xx, not validated)
    detail (str): Error detail message, used as response body (default: "")
    headers (list[tuple[str, str]] | None): Extra response headers. Input can
        be dict[str, str] or list[tuple[str, str]], stored as list.

Example:
    >>> raise HTTPException(404, detail="Cannot GET /missing")
    >>> raise HTTPNotFound("Cannot POST /api/status")
"""

from __future__ import annotations

__all__ = ["HTTPException", "HTTPNotFound"]


class HTTPException(Exception):
    """
    HTTP exception with status code and detail.

    Attributes:
        status_code: HTTP status code
        detail: Error detail message
        headers: Response headers as list of tuples (supports duplicate names)
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        if headers is None:
            self.headers: list[tuple[str, str]] | None = None
        elif isinstance(headers, dict):
            self.headers = list(headers.items())
        else:
            self.headers = list(headers)
        super().__init__(detail)

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"{type(self).__name__}(status_code={self.status_code}, detail={self.detail!r})"


class HTTPNotFound(HTTPException):
    """404 Not Found - no static file and no route matched the request."""

    def __init__(
        self,
        detail: str = "Not Found",
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        super().__init__(404, detail=detail, headers=headers)

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Dispatcher - routes ASGI requests to handlers.

The Dispatcher is the innermost layer of the middleware chain. It:
1. Looks up (method, path) in its route table
2. Calls the handler (sync or async) without arguments
3. Sets the result on a Response via set_result()
4. Sends the ASGI response

Request flow:
    scope → routes[(method, path)] → handler()
          → response.set_result(result) → response(scope, receive, send)

A GET route also answers HEAD. No match raises HTTPNotFound, rendered
by ErrorMiddleware.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from .exceptions import HTTPNotFound
from .response import Response

if TYPE_CHECKING:
    from .types import Receive, Scope, Send

__all__ = ["Dispatcher", "Handler"]

Handler = Callable[[], Any]


class Dispatcher:
    """Routes ASGI requests to handlers registered by exact path."""

    __slots__ = ("routes",)

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}

    def add_route(
        self, path: str, handler: Handler, methods: Iterable[str] = ("GET",)
    ) -> None:
        """Register handler for path under each method (GET implies HEAD)."""
        for method in methods:
            method = method.upper()
            self.routes[(method, path)] = handler
            if method == "GET":
                self.routes.setdefault(("HEAD", path), handler)

    def route(
        self, path: str, methods: Iterable[str] = ("GET",)
    ) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""

        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, methods)
            return handler

        return decorator

    def resolve(self, method: str, path: str) -> Handler:
        """Return the handler for (method, path) or raise HTTPNotFound."""
        handler = self.routes.get((method, path))
        if handler is None:
            raise HTTPNotFound(f"Cannot {method} {path}")
        return handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface - dispatch request to handler."""
        handler = self.resolve(scope.get("method", "GET"), scope.get("path", "/"))

        result = handler()
        if inspect.isawaitable(result):
            result = await result

        if isinstance(result, Response):
            response = result
        else:
            response = Response()
            response.set_result(result)
        await response(scope, receive, send)

    def __repr__(self) -> str:
        paths = sorted({path for _, path in self.routes})
        return f"Dispatcher(routes={paths!r})"

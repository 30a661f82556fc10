# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Status endpoint - constant JSON liveness answer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .dispatcher import Dispatcher

__all__ = ["STATUS_PATH", "status", "register"]

STATUS_PATH = "/api/status"


def status() -> dict[str, Any]:
    """Return the server status, independent of the request."""
    return {"status": "running"}


def register(dispatcher: Dispatcher) -> None:
    dispatcher.add_route(STATUS_PATH, status)

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Shared fixtures: ASGI message capture and a populated public directory."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest


class MockSend:
    """Capture ASGI send messages for testing."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def start_message(self) -> dict[str, Any]:
        """Get the http.response.start message."""
        return self.messages[0]

    @property
    def status(self) -> int:
        return self.start_message["status"]

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.start_message["headers"])

    @property
    def body(self) -> bytes:
        """Complete body (concatenated from all body messages)."""
        return b"".join(
            m.get("body", b"") for m in self.messages if m["type"] == "http.response.body"
        )


async def mock_receive() -> dict[str, Any]:
    """Mock receive callable (request bodies are never read)."""
    return {"type": "http.request", "body": b""}


def http_scope(
    path: str = "/",
    method: str = "GET",
    headers: list[tuple[bytes, bytes]] | None = None,
) -> dict[str, Any]:
    """Build a minimal HTTP scope."""
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": headers or [],
        "client": ("127.0.0.1", 50000),
    }


@pytest.fixture
def send() -> MockSend:
    return MockSend()


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    """public/ with a few typical assets, plus a file outside it."""
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<html>JS-OS</html>")
    (public / "style.css").write_text("body { color: red; }")
    (public / "js").mkdir()
    (public / "js" / "app.js").write_text("console.log('boot');")
    (public / "apps").mkdir()
    (public / "apps" / "index.html").write_text("<html>apps</html>")
    (public / "logo.bin").write_bytes(b"\x00\x01\x02")
    (public / ".env").write_text("SECRET=1")
    (tmp_path / "secret.txt").write_text("outside")
    return public

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""End-to-end tests: the full JsosServer app through an HTTP test client."""

from __future__ import annotations

import logging
import socket
from pathlib import Path

import pytest
import uvicorn
from starlette.testclient import TestClient

from jsos_server import JsosServer
from jsos_server.server import AnnouncingServer
from jsos_server.middleware.errors import ErrorMiddleware
from jsos_server.middleware.logging import LoggingMiddleware


@pytest.fixture
def server(public_dir: Path) -> JsosServer:
    return JsosServer(server_dir=public_dir.parent)


@pytest.fixture
def client(server: JsosServer) -> TestClient:
    return TestClient(server)


class TestStatusEndpoint:
    def test_status_running(self, client: TestClient) -> None:
        response = client.get("/api/status")

        assert response.status_code == 200
        assert response.content == b'{"status":"running"}'
        assert response.json() == {"status": "running"}
        assert response.headers["content-type"].startswith("application/json")

    def test_repeated_requests_identical(self, client: TestClient) -> None:
        bodies = {client.get("/api/status").content for _ in range(5)}
        assert bodies == {b'{"status":"running"}'}

    def test_ignores_query_and_headers(self, client: TestClient) -> None:
        response = client.get("/api/status?verbose=1", headers={"Accept": "text/html"})
        assert response.json() == {"status": "running"}

    def test_head(self, client: TestClient) -> None:
        response = client.head("/api/status")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["content-length"] == "20"

    def test_post_not_found(self, client: TestClient) -> None:
        response = client.post("/api/status")

        assert response.status_code == 404
        assert response.text == "Cannot POST /api/status"

    def test_works_without_public_dir(self, tmp_path: Path) -> None:
        client = TestClient(JsosServer(server_dir=tmp_path))

        assert client.get("/api/status").status_code == 200
        assert client.get("/index.html").status_code == 404


class TestStaticFiles:
    def test_existing_file(self, client: TestClient) -> None:
        response = client.get("/js/app.js")

        assert response.status_code == 200
        assert response.text == "console.log('boot');"
        assert "javascript" in response.headers["content-type"]

    def test_root_is_index(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "<html>JS-OS</html>"

    def test_missing_file_not_found(self, client: TestClient) -> None:
        response = client.get("/nope.html")

        assert response.status_code == 404
        assert response.text == "Cannot GET /nope.html"
        assert response.headers["content-type"] == "text/plain; charset=utf-8"

    def test_dotfile_not_served(self, client: TestClient) -> None:
        assert client.get("/.env").status_code == 404

    def test_static_and_route_share_prefix(self, public_dir: Path, client: TestClient) -> None:
        (public_dir / "api").mkdir()
        (public_dir / "api" / "readme.txt").write_text("docs")

        assert client.get("/api/readme.txt").text == "docs"
        assert client.get("/api/status").json() == {"status": "running"}


class TestLifecycle:
    def test_lifespan_does_not_announce(
        self, server: JsosServer, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="jsos_server")

        with TestClient(server) as client:
            assert client.get("/api/status").status_code == 200
            assert server.lifespan.started is True

        assert "JS-OS server running" not in caplog.text

    @pytest.mark.asyncio
    async def test_announces_after_bind(
        self, server: JsosServer, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def bound(self, sockets=None) -> None:
            self.started = True

        monkeypatch.setattr(uvicorn.Server, "startup", bound)
        caplog.set_level(logging.INFO, logger="jsos_server")

        await AnnouncingServer(uvicorn.Config(server), server.address).startup()

        assert "JS-OS server running at http://0.0.0.0:8000" in caplog.text

    @pytest.mark.asyncio
    async def test_no_announcement_when_not_started(
        self, server: JsosServer, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        async def not_bound(self, sockets=None) -> None:
            self.should_exit = True

        monkeypatch.setattr(uvicorn.Server, "startup", not_bound)
        caplog.set_level(logging.INFO, logger="jsos_server")

        await AnnouncingServer(uvicorn.Config(server), server.address).startup()

        assert "JS-OS server running" not in caplog.text

    def test_port_in_use_exits_without_announcement(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="jsos_server")
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("0.0.0.0", 0))
            sock.listen()
            port = sock.getsockname()[1]

            with pytest.raises(SystemExit):
                JsosServer(server_dir=tmp_path, port=port).run()

        assert "JS-OS server running" not in caplog.text

    def test_run_binds_all_interfaces_port_8000(
        self, server: JsosServer, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = []

        def fake_run(self, sockets=None) -> None:
            calls.append((self.config.app, self.config.host, self.config.port, self.address))

        monkeypatch.setattr(AnnouncingServer, "run", fake_run)

        server.run()

        assert calls == [(server, "0.0.0.0", 8000, "http://0.0.0.0:8000")]

    def test_address_and_repr(self, server: JsosServer) -> None:
        assert server.address == "http://0.0.0.0:8000"
        assert "http://0.0.0.0:8000" in repr(server)

    def test_config_enables_access_log(
        self, public_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (public_dir.parent / "config.yaml").write_text("middleware:\n  logging: on\n")
        server = JsosServer(server_dir=public_dir.parent)

        assert isinstance(server.dispatcher, ErrorMiddleware)
        assert isinstance(server.dispatcher.app, LoggingMiddleware)

        caplog.set_level(logging.INFO, logger="jsos_server.access")
        TestClient(server).get("/style.css")
        assert "-> GET /style.css 200" in caplog.text


def test_main_runs_server(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    from jsos_server import __main__

    monkeypatch.chdir(tmp_path)
    started = []
    monkeypatch.setattr(JsosServer, "run", lambda self: started.append(self.address))

    assert __main__.main() == 0
    assert started == ["http://0.0.0.0:8000"]

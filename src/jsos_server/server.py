# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ASGI Server - main entry point for jsos-server.

JsosServer is the central coordinator that:
- Loads configuration (defaults, config.yaml, caller overrides)
- Registers the status route on the Dispatcher
- Builds the middleware chain (errors, logging, static)
- Handles ASGI lifespan protocol; AnnouncingServer logs the startup line

Usage:
    from jsos_server import JsosServer

    server = JsosServer()
    server.run()  # uvicorn on 0.0.0.0:8000

Architecture:
    JsosServer
        ├── config: ServerConfig
        ├── router: Dispatcher (route table)
        ├── dispatcher: Middleware chain → Dispatcher
        └── lifespan: ServerLifespan

Request flow:
    uvicorn → JsosServer.__call__
        → ErrorMiddleware → [LoggingMiddleware] → StaticFilesMiddleware
        → Dispatcher → status() → Response
"""

from __future__ import annotations

import logging
from pathlib import Path

import uvicorn

from . import status
from .dispatcher import Dispatcher
from .lifespan import ServerLifespan
from .middleware import middleware_chain
from .server_config import ServerConfig
from .types import ASGIApp, Receive, Scope, Send

__all__ = ["JsosServer", "AnnouncingServer", "STARTUP_MESSAGE"]

STARTUP_MESSAGE = "JS-OS server running at {address}"

logger = logging.getLogger("jsos_server")


class AnnouncingServer(uvicorn.Server):
    """uvicorn Server that logs the listening address once the socket is bound.

    A failed bind makes uvicorn exit during startup, before the line is logged.
    """

    def __init__(self, config: uvicorn.Config, address: str) -> None:
        super().__init__(config)
        self.address = address

    async def startup(self, sockets: list | None = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info(STARTUP_MESSAGE.format(address=self.address))


class JsosServer:
    """
    Static file server with a JSON status endpoint.

    Attributes:
        config: ServerConfig for configuration.
        router: Dispatcher holding the route table.
        dispatcher: Outermost app of the middleware chain.
        lifespan: ServerLifespan for startup/shutdown.
        logger: Server logger instance.
    """

    __slots__ = ("config", "router", "dispatcher", "lifespan", "logger")

    def __init__(
        self,
        server_dir: str | Path | None = None,
        host: str | None = None,
        port: int | None = None,
        public_dir: str | Path | None = None,
    ) -> None:
        self.config = ServerConfig(server_dir, host, port, public_dir)
        self.logger = logger
        self.router = Dispatcher()
        status.register(self.router)
        self.dispatcher: ASGIApp = middleware_chain(self.config, self.router)
        self.lifespan = ServerLifespan(self)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Handle ASGI request; lifespan events go to self.lifespan."""
        if scope["type"] == "lifespan":
            await self.lifespan(scope, receive, send)
        else:
            await self.dispatcher(scope, receive, send)

    @property
    def address(self) -> str:
        """Listening address as URL, e.g. http://0.0.0.0:8000."""
        return self.config.address

    def run(self) -> None:
        """Run the server using Uvicorn until interrupted."""
        host = self.config.server["host"]
        port = self.config.server["port"]
        self.logger.debug(f"Binding {host}:{port}")
        AnnouncingServer(uvicorn.Config(self, host=host, port=port), self.address).run()

    def __repr__(self) -> str:
        return f"JsosServer(address={self.address!r}, public_dir={str(self.config.server['public_dir'])!r})"

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
ASGI Lifespan Management.

ServerLifespan answers the ASGI lifespan protocol for JsosServer. uvicorn
runs it before binding the socket, so it only checks the public directory
(a missing one is a warning: requests then fall through to the routes).
The "running at" line is logged by AnnouncingServer after the bind.

Definition::

    class ServerLifespan:
        def __init__(self, server: JsosServer)
        async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None
        async def startup(self) -> None
        async def shutdown(self) -> None
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .types import Receive, Scope, Send

if TYPE_CHECKING:
    from .server import JsosServer

__all__ = ["ServerLifespan"]


class ServerLifespan:
    """
    ASGI Lifespan handler for JsosServer.

    Attributes:
        server: The JsosServer instance this lifespan manages.
        started: True between a completed startup and shutdown.
    """

    __slots__ = ("server", "_logger", "started")

    def __init__(self, server: JsosServer) -> None:
        self.server = server
        self._logger = logging.getLogger("jsos_server")
        self.started = False

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send  # noqa: ARG002
    ) -> None:
        """Handle ASGI lifespan protocol until shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as e:
                    self._logger.exception("Startup failed")
                    await send({
                        "type": "lifespan.startup.failed",
                        "message": str(e),
                    })
                    return

            elif msg_type == "lifespan.shutdown":
                try:
                    await self.shutdown()
                except Exception:
                    self._logger.exception("Shutdown error")
                finally:
                    await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        public_dir = self.server.config.server["public_dir"]
        if not public_dir.is_dir():
            self._logger.warning(f"Public directory not found: {public_dir}")
        self.started = True

    async def shutdown(self) -> None:
        self.started = False
        self._logger.info("JS-OS server stopped")

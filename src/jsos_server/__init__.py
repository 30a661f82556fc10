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

"""jsos-server - static file server with a JSON status endpoint.

Main components:
    JsosServer: ASGI entry point, loads config, builds the middleware chain
    Dispatcher: (method, path) route table
    Response: HTTP response with content-type detection

Middleware:
    ErrorMiddleware: Exception handling and error responses
    LoggingMiddleware: Access log (off by default)
    StaticFilesMiddleware: Serves the public directory

Usage:
    from jsos_server import JsosServer

    server = JsosServer()
    server.run()  # Starts uvicorn on 0.0.0.0:8000
"""

__version__ = "0.1.0"

from .dispatcher import Dispatcher
from .exceptions import HTTPException, HTTPNotFound
from .lifespan import ServerLifespan
from .middleware import (
    BaseMiddleware,
    ErrorMiddleware,
    LoggingMiddleware,
    StaticFilesMiddleware,
    middleware_chain,
)
from .response import Response
from .server import JsosServer
from .server_config import ServerConfig
from .types import ASGIApp, Message, Receive, Scope, Send

__all__ = [
    "JsosServer",
    "ServerConfig",
    "ServerLifespan",
    "Dispatcher",
    "Response",
    # Exceptions
    "HTTPException",
    "HTTPNotFound",
    # Middleware
    "BaseMiddleware",
    "ErrorMiddleware",
    "LoggingMiddleware",
    "StaticFilesMiddleware",
    "middleware_chain",
    # ASGI types
    "ASGIApp",
    "Message",
    "Receive",
    "Scope",
    "Send",
]

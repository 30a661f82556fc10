# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware package - the request chain in front of the Dispatcher.

Three middleware exist, wrapped outermost first:

    100  errors   ErrorMiddleware         on by default
    200  logging  LoggingMiddleware       off by default
    600  static   StaticFilesMiddleware   on by default

``middleware_chain(config, app)`` reads the on/off switches and the
per-middleware options from a ServerConfig.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..types import ASGIApp, Receive, Scope, Send

MIDDLEWARE_REGISTRY: dict[str, type["BaseMiddleware"]] = {}


class ChainConfig(Protocol):
    """What middleware_chain needs from ServerConfig."""

    @property
    def middleware(self) -> dict[str, Any]: ...

    @property
    def middleware_options(self) -> dict[str, dict[str, Any]]: ...


class BaseMiddleware(ABC):
    """Wraps the next ASGI app; subclasses register under ``middleware_name``."""

    middleware_name: str = ""
    middleware_order: int = 500
    middleware_default: bool = False

    __slots__ = ("app",)

    def __init__(self, app: ASGIApp, **kwargs: Any) -> None:
        self.app = app

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.middleware_name:
            raise TypeError(f"{cls.__name__} must set middleware_name")
        if cls.middleware_name in MIDDLEWARE_REGISTRY:
            raise ValueError(f"Middleware name '{cls.middleware_name}' already registered")
        MIDDLEWARE_REGISTRY[cls.middleware_name] = cls

    @abstractmethod
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None: ...


def is_enabled(value: Any) -> bool:
    """on/off/true/false/yes/no switch from config.yaml."""
    if isinstance(value, str):
        return value.strip().lower() in ("on", "true", "yes", "1")
    return bool(value)


def middleware_chain(config: ChainConfig, app: ASGIApp) -> ASGIApp:
    """Wrap app in every enabled middleware, lowest middleware_order outermost."""
    switches = config.middleware
    options = config.middleware_options

    enabled = sorted(
        (cls for name, cls in MIDDLEWARE_REGISTRY.items()
         if is_enabled(switches.get(name, cls.middleware_default))),
        key=lambda cls: cls.middleware_order,
        reverse=True,
    )
    for cls in enabled:
        app = cls(app, **options.get(cls.middleware_name, {}))
    return app


from .errors import ErrorMiddleware  # noqa: E402
from .logging import LoggingMiddleware  # noqa: E402
from .static import StaticFilesMiddleware  # noqa: E402

__all__ = [
    "BaseMiddleware",
    "ChainConfig",
    "MIDDLEWARE_REGISTRY",
    "is_enabled",
    "middleware_chain",
    "ErrorMiddleware",
    "LoggingMiddleware",
    "StaticFilesMiddleware",
]

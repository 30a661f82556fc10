# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Server configuration - defaults, optional config.yaml, caller overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

__all__ = ["ServerConfig", "DEFAULTS"]

DEFAULTS: dict[str, Any] = {"host": "0.0.0.0", "port": 8000, "public_dir": "public"}

CONFIG_FILENAME = "config.yaml"
MIDDLEWARE_SUFFIX = "_middleware"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from path; missing file gives an empty dict."""
    if not path.is_file():
        return {}
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


class ServerConfig:
    """Resolved server settings.

    Config precedence (later overrides earlier):
    1. Built-in DEFAULTS
    2. Project config: <server_dir>/config.yaml
    3. Explicit constructor parameters (None = not given)

    config.yaml::

        server:
          port: 8000
          public_dir: "public"

        middleware:
          logging: on

        errors_middleware:
          debug: true
    """

    __slots__ = ("_opts",)

    def __init__(
        self,
        server_dir: str | Path | None = None,
        host: str | None = None,
        port: int | None = None,
        public_dir: str | Path | None = None,
    ) -> None:
        self._opts = self._build_config(server_dir, host, port, public_dir)

    def _build_config(
        self,
        server_dir: str | Path | None,
        host: str | None,
        port: int | None,
        public_dir: str | Path | None,
    ) -> dict[str, Any]:
        resolved_server_dir = Path(server_dir or ".").resolve()
        config = _load_yaml(resolved_server_dir / CONFIG_FILENAME)

        caller_opts = {
            key: value
            for key, value in dict(host=host, port=port, public_dir=public_dir).items()
            if value is not None
        }
        server_opts = {**DEFAULTS, **(config.get("server") or {}), **caller_opts}
        server_opts["port"] = int(server_opts["port"])

        resolved_public_dir = Path(server_opts["public_dir"])
        if not resolved_public_dir.is_absolute():
            resolved_public_dir = resolved_server_dir / resolved_public_dir
        server_opts["public_dir"] = resolved_public_dir
        server_opts["server_dir"] = resolved_server_dir

        config["server"] = server_opts
        return config

    @property
    def server(self) -> dict[str, Any]:
        """Server options (host, port, public_dir, server_dir)."""
        result: dict[str, Any] = self._opts["server"]
        return result

    @property
    def middleware(self) -> dict[str, Any]:
        """Middleware on/off switches."""
        return self._opts.get("middleware") or {}

    @property
    def middleware_options(self) -> dict[str, dict[str, Any]]:
        """{name: kwargs} from every ``{name}_middleware`` section.

        The static middleware always gets the resolved public directory
        unless its section sets one; a relative one there is taken from
        server_dir, like server.public_dir.
        """
        options: dict[str, dict[str, Any]] = {}
        for key, value in self._opts.items():
            if key.endswith(MIDDLEWARE_SUFFIX):
                options[key[: -len(MIDDLEWARE_SUFFIX)]] = dict(value or {})
        static = options.setdefault("static", {})
        directory = Path(static.get("directory") or self.server["public_dir"])
        if not directory.is_absolute():
            directory = self.server["server_dir"] / directory
        static["directory"] = directory
        return options

    @property
    def address(self) -> str:
        return f"http://{self.server['host']}:{self.server['port']}"

    def __getitem__(self, name: str) -> Any:
        """Proxy bracket access to underlying opts (None when missing)."""
        return self._opts.get(name)

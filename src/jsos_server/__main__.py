# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
jsos-server CLI entry point.

Usage:
    jsos-server              # serve ./public on http://0.0.0.0:8000
    python -m jsos_server
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(levelname)s:     %(message)s"


def main() -> int:
    """Configure logging and run the server until interrupted."""
    from .server import JsosServer

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    server = JsosServer()
    try:
        server.run()
    except KeyboardInterrupt:
        logging.getLogger("jsos_server").info("Shutdown.")

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Run the leaguelo API server.

Host, port and reload come from settings (API_HOST, API_PORT, API_RELOAD)
unless overridden on the command line.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import uvicorn

from leaguelo.config import settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the leaguelo API server")
    parser.add_argument("--host", default=settings.api_host, help="Bind address")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Port")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=settings.api_reload,
        help="Auto-reload on code changes (development)",
    )
    args = parser.parse_args()

    uvicorn.run(
        "leaguelo.web.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,  # logging is configured by the app's lifespan
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
Employee Registry -- employee records behind bearer-token authentication.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (see core/config.py for the full list):
  SECRET_KEY     Token signing secret, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL   SQLAlchemy URL of the record store. Defaults to a SQLite file beside this script.
  PORT           Listen port. Defaults to 4000.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Run the employee registry API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listen port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on source changes (development only)")
    args = parser.parse_args()

    print(f"\n  Employee Registry API on http://{args.host}:{args.port}/api/v1\n")
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

#!/usr/bin/env python
"""
Run the Pawzr API server.

Usage:
    python run_api.py
    python run_api.py --reload              # Development mode
    python run_api.py --workers 4           # Multiple worker processes
    python run_api.py --log-level debug
"""

import argparse

import uvicorn

from shared.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Pawzr API server")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (single worker)")
    parser.add_argument("--host", type=str, help="Host to bind to (default: HOST setting)")
    parser.add_argument("--port", type=int, help="Port to bind to (default: PORT setting)")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--log-level", type=str, help="Override the LOG_LEVEL setting")
    return parser


def main():
    args = build_parser().parse_args()
    settings = get_settings()
    reload = args.reload or settings.reload

    uvicorn.run(
        "api.app:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=reload,
        # uvicorn ignores workers when reloading
        workers=1 if reload else args.workers,
        log_level=(args.log_level or settings.log_level).lower(),
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()

#!/usr/bin/env python
"""
Server Entry Point

Starts the dashboard API under Uvicorn.
Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py

Each worker process builds its own catalog. Set GENERATOR_SEED when
running more than one worker so every worker serves the same catalog.
"""

import argparse
import os


def run_dev_server(port: int):
    """Run development server with auto-reload."""
    import uvicorn

    uvicorn.run(
        "store_dashboard.main:app",
        host="127.0.0.1",
        port=port,
        reload=True,
        reload_dirs=["store_dashboard"],
        log_level="debug",
        access_log=True,
    )


def run_prod_server(port: int):
    """Run production server with Uvicorn directly."""
    import uvicorn

    workers = int(os.getenv("WORKERS", 1))
    if workers > 1 and not os.getenv("GENERATOR_SEED"):
        print("GENERATOR_SEED is unset: each worker will serve a different catalog")

    uvicorn.run(
        "store_dashboard.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=port,
        workers=workers,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
        date_header=True,
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Store Sales Dashboard API Server")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Run in development mode with auto-reload"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("API_PORT", 8000)),
        help="Port to run on (default: 8000)"
    )

    args = parser.parse_args()

    if args.dev:
        print("Starting development server...")
        run_dev_server(args.port)
    else:
        print("Starting production server with Uvicorn...")
        run_prod_server(args.port)

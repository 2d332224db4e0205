#!/usr/bin/env python3
"""
Bookstore API Runner

Usage:
    python run_app.py                    # Run the app (default: main)
    python run_app.py --mode dev         # Development mode with auto-reload and debug logging
    python run_app.py --mode prod        # Production mode with worker processes
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import os
import sys

def check_environment() -> bool:
    """Check that required settings are present"""
    if os.path.exists(".env"):
        print(".env file found")
    else:
        print(".env file not found, using process environment")

    if not os.environ.get("SECRET_KEY") and not os.path.exists(".env"):
        print("SECRET_KEY is not set. Export it or add it to .env.")
        return False

    return True

def run_app(host: str, port: int, mode: str, workers: int):
    """Run the FastAPI application under uvicorn"""
    import uvicorn

    options = {
        "host": host,
        "port": port,
        "log_level": "debug" if mode == "dev" else "info",
    }
    if mode == "prod":
        options["workers"] = workers
        options["proxy_headers"] = True
    else:
        options["reload"] = mode == "dev"

    print(f"Starting Bookstore API ({mode}) on {host}:{port}")
    print(f"API docs: http://{host}:{port}/api/docs")

    uvicorn.run("app.main:app", **options)

def main() -> int:
    parser = argparse.ArgumentParser(
        description="Bookstore API Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        choices=["main", "dev", "prod"],
        default="main",
        help="Server mode (default: main)"
    )
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument("--workers", type=int, default=4, help="Worker processes in prod mode (default: 4)")

    args = parser.parse_args()

    if args.mode == "dev":
        os.environ.setdefault("DEBUG", "true")

    if not check_environment():
        return 1

    run_app(args.host, args.port, args.mode, args.workers)
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)

#!/usr/bin/env python3
"""
Shopfront Runner
================

Run the Shopfront API or its email worker.

Usage:
    python run_app.py                    # Development mode with auto-reload (default)
    python run_app.py --mode prod        # Production mode with workers
    python run_app.py --mode worker      # Celery worker for the email queue
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import os
import sys

def print_banner(mode: str):
    """Print application banner"""
    print(f"\n=== Shopfront ({mode}) ===\n")

def check_environment():
    """Check if environment is properly set up"""
    if os.path.exists(".env"):
        print(".env file found")
    else:
        print(".env file not found, reading configuration from the environment")

    missing = [name for name in ("DATABASE_URL", "SECRET_KEY") if not os.environ.get(name)]
    if missing and not os.path.exists(".env"):
        print(f"Missing required settings: {', '.join(missing)}")
        return False

    return True

def run_api(host: str, port: int, reload: bool, workers: int):
    """Run the FastAPI application"""
    import uvicorn

    print(f"Starting API on {host}:{port}")
    print(f"API Docs: http://{host}:{port}/api/docs")

    uvicorn.run(
        "shopfront.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else workers,
        log_level="info"
    )

def run_worker():
    """Run a celery worker consuming the default and email queues"""
    from shopfront.core.celery_app import celery_app

    celery_app.worker_main(["worker", "--loglevel=info", "--queues=default,email"])

def main():
    parser = argparse.ArgumentParser(
        description="Shopfront Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--mode",
        choices=["dev", "prod", "worker"],
        default="dev",
        help="Run mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=4,
        help="Worker processes in prod mode (default: 4)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload in dev mode"
    )

    args = parser.parse_args()

    print_banner(args.mode)

    if not check_environment():
        return 1

    if args.mode == "worker":
        run_worker()
        return 0

    reload = args.mode == "dev" and not args.no_reload
    run_api(args.host, args.port, reload, args.workers)
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nStopped")
        sys.exit(0)

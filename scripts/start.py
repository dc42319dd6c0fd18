#!/usr/bin/env python3
"""
Production startup script.

1. Runs migrations (release.py) unless --skip-release is given
2. Starts gunicorn (replaces this process via os.execvp)

Usage:
    python scripts/start.py [--port 8080] [--workers 2] [--skip-release]

PORT from the environment is used when --port is not given.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def parse_port(raw: str | None) -> int:
    """Validate a port string; raises ValueError outside 1-65535."""
    port = int((raw or "").strip() or "8080")
    if port < 1 or port > 65535:
        raise ValueError("Port out of range")
    return port


def gunicorn_argv(port: int, workers: int) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{port}",
        "--workers", str(workers),
        "--timeout", "60",
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run migrations and start the customer service")
    parser.add_argument("--port", help="Port to bind (default: $PORT or 8080)")
    parser.add_argument("--workers", type=int, default=2, help="Gunicorn worker processes")
    parser.add_argument("--skip-release", action="store_true", help="Do not run migrations before boot")
    args = parser.parse_args(argv)

    raw_port = args.port or os.environ.get("PORT", "")
    if not raw_port.strip():
        print("WARNING: PORT not set, using default 8080", flush=True)
    try:
        port = parse_port(raw_port)
    except ValueError:
        print(f"ERROR: Invalid PORT value '{raw_port}'. Must be integer 1-65535.", flush=True)
        sys.exit(1)

    print(f"PORT={port} validated", flush=True)

    if not args.skip_release:
        print("=== Running release phase ===", flush=True)
        from scripts.release import run_release
        try:
            run_release()
        except Exception as e:
            print(f"Release failed: {e}", flush=True)
            sys.exit(1)

    print("=== Starting gunicorn ===", flush=True)
    print(f"Gunicorn binding to 0.0.0.0:{port}", flush=True)

    # exec so gunicorn becomes PID 1 and receives signals directly
    os.execvp("gunicorn", gunicorn_argv(port, args.workers))


if __name__ == "__main__":
    main()

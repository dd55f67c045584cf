#!/usr/bin/env python3
"""
Start the Post-Translator API.

Usage:
    python scripts/run_api.py [--host HOST] [--port PORT] [--reload]
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn
from rich.console import Console
from rich.panel import Panel

from post_translator.config import (
    API_HOST,
    API_PORT,
    APP_NAME,
    APP_VERSION,
    CALLBACK_PUBLIC_BASE_URL,
    POLLING_ENABLED,
    POLL_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
)


console = Console()


def main():
    parser = argparse.ArgumentParser(description=f"{APP_NAME} API server")
    parser.add_argument("--host", default=API_HOST)
    parser.add_argument("--port", type=int, default=API_PORT)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    args = parser.parse_args()

    polling = (
        f"every {POLL_INTERVAL_SECONDS}s, {POLL_MAX_ATTEMPTS} checks" if POLLING_ENABLED else "[yellow]disabled[/yellow]"
    )
    callbacks = CALLBACK_PUBLIC_BASE_URL or "[yellow]not configured (polling only)[/yellow]"
    console.print(Panel(
        f"API:       http://{args.host}:{args.port}\n"
        f"Docs:      http://{args.host}:{args.port}/docs\n"
        f"Polling:   {polling}\n"
        f"Callbacks: {callbacks}",
        title=f"{APP_NAME} v{APP_VERSION}",
        border_style="cyan",
    ))

    uvicorn.run(
        "post_translator.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
API entrypoint - serves the user sync REST API with uvicorn.
"""

import argparse
import sys
from pathlib import Path

import dotenv
dotenv.load_dotenv()

sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from usersync.core.config import API_HOST, API_PORT, DEBUG, validate_config


def main():
    parser = argparse.ArgumentParser(description="Run the user sync API server")
    parser.add_argument("--host", default=API_HOST, help=f"Bind address (default: {API_HOST})")
    parser.add_argument("--port", type=int, default=API_PORT, help=f"Port to listen on (default: {API_PORT})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    for issue in validate_config():
        print(f"Config warning: {issue}")

    print(f"User sync API listening on http://{args.host}:{args.port}/api")
    uvicorn.run(
        "usersync.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if DEBUG else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

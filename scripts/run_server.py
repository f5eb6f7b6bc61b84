"""
Run the Meta audience relay HTTP server.
"""

from __future__ import annotations

import argparse

import uvicorn

from app.config import get_server_settings


def main() -> int:
    settings = get_server_settings()
    parser = argparse.ArgumentParser(description="Serve the Meta audience relay API.")
    parser.add_argument("--host", default=settings.host, help="Bind address.")
    parser.add_argument("--port", type=int, default=settings.port, help="Bind port.")
    args = parser.parse_args()

    print(f"Server running at http://{args.host}:{args.port}")
    uvicorn.run("app.main:create_app", factory=True, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

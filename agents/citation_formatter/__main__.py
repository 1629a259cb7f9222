"""
Run the citation formatter API

Usage:
  python -m agents.citation_formatter
  python -m agents.citation_formatter --port 3001 --host 127.0.0.1
"""

import argparse

from .config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the Citation Formatter API")
    parser.add_argument("--host", default=settings.host, help="Bind host")
    parser.add_argument("--port", type=int, default=settings.port, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Enable reload (dev)")
    args = parser.parse_args()

    import uvicorn

    uvicorn.run(
        "agents.citation_formatter.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Command-line entrypoint that serves the API with uvicorn."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

import uvicorn

from src.api.api_config import get_api_config
from src.common.logging import configure_logging
from src.common.settings import get_settings


def build_parser() -> argparse.ArgumentParser:
    config = get_api_config()
    parser = argparse.ArgumentParser(description=f"Run the {config.api_name}.")
    parser.add_argument("--host", default=config.host)
    parser.add_argument("--port", type=int, default=config.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    uvicorn.run(
        "src.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=get_settings().LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

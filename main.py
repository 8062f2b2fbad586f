"""Command-line entrypoint for the range video streaming server.

Loads the configuration once, validates it, and runs the FastAPI app under
uvicorn. Invalid configuration aborts startup with a non-zero exit code.

Usage:
    uv run python main.py [--host HOST] [--port PORT] [--video PATH]
"""

from __future__ import annotations

import argparse

import uvicorn
from loguru import logger


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve a video with HTTP Range support")
    parser.add_argument("--host", help="Bind address (overrides HOST)")
    parser.add_argument("--port", type=int, help="Bind port (overrides PORT)")
    parser.add_argument("--video", help="Video file to serve (overrides VIDEO_PATH)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for the streaming server."""
    args = _parse_args(argv)

    # Settings are validated on import; keep the failure inside this handler.
    from core.errors import ConfigurationInvalid

    try:
        from config import load_settings

        overrides = {
            key: value
            for key, value in (
                ("host", args.host),
                ("port", args.port),
                ("video_path", args.video),
            )
            if value is not None
        }
        app_settings = load_settings(**overrides)

        from api.server import create_app

        app = create_app(app_settings)
    except ConfigurationInvalid as exc:
        logger.error(f"Startup aborted: {exc.message}")
        raise SystemExit(1) from exc

    uvicorn.run(app, host=app_settings.host, port=app_settings.port, log_config=None)


if __name__ == "__main__":
    main()

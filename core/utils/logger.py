"""Logging configuration and utilities."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger

from config import settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
component_ctx: ContextVar[str | None] = ContextVar("component", default=None)


class InterceptHandler(logging.Handler):
    """Redirects standard logging into Loguru while preserving correct caller info."""

    def emit(self, record: logging.LogRecord) -> None:
        """Log the specified logging record."""
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _base_logger().opt(depth=depth, exception=record.exc_info).log(
            level,
            record.getMessage(),
        )


def setup_logger() -> None:
    """Configure Loguru for console and file logging.

    Features:
    - Human-friendly console logs
    - Structured JSON file logs
    - Full interception of stdlib logging (uvicorn included)
    """
    logger.remove()

    def _patcher(record):
        record["extra"].setdefault("request_id", request_id_ctx.get())
        record["extra"].setdefault("component", component_ctx.get())

    # Ensure request_id always exists to prevent KeyErrors in format string
    logger.configure(patcher=_patcher)

    logger.add(
        sys.stderr,
        level=settings.log_level,
        colorize=True,
        backtrace=True,
        diagnose=False,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level:<8}</level> | "
            "req=<cyan>{extra[request_id]}</cyan> "
            "comp=<cyan>{extra[component]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
    )

    if settings.log_to_file:
        log_dir: Path = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_dir / "app.log"),
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            serialize=True,
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    logging.basicConfig(
        handlers=[InterceptHandler()],
        level=0,
        force=True,
    )

    for noisy in (
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "asyncio",
    ):
        _logger = logging.getLogger(noisy)
        _logger.handlers = [InterceptHandler()]
        _logger.propagate = False


def bind_context(
    *,
    request_id: str | None = None,
    component: str | None = None,
) -> None:
    """Bind context vars for the current request (used by middleware)."""
    if request_id is not None:
        request_id_ctx.set(request_id)
    if component is not None:
        component_ctx.set(component)


def clear_context() -> None:
    """Clear all context variables."""
    request_id_ctx.set(None)
    component_ctx.set(None)


def _base_logger(extra: dict[str, Any] | None = None):
    return logger.bind(
        request_id=request_id_ctx.get(),
        component=component_ctx.get(),
        **(extra or {}),
    )


def _handle_uncaught(exc_type, exc, tb):
    _base_logger().opt(exception=(exc_type, exc, tb)).critical("Unhandled exception")


sys.excepthook = _handle_uncaught

setup_logger()

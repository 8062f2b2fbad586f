"""FastAPI server configuration and routes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routes import media, system
from api.security import STATIC_SECURITY_HEADERS, build_csp, generate_nonce
from config import Settings, settings
from core.errors import VideoStreamError
from core.utils.html_cache import HTMLCache
from core.utils.logger import bind_context, clear_context, logger
from core.video_stream import VideoStreamService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    service: VideoStreamService = app.state.stream_service
    logger.info(
        f"startup: serving {service.video_path} "
        f"(chunk_size={service.chunk_size}, range_index={service.max_ranges_index})"
    )
    if not service.video_path.is_file():
        logger.warning(f"Video file {service.video_path} does not exist yet")

    yield

    logger.info("shutdown")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Raises:
        ConfigurationInvalid: If the streaming configuration is unusable.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Range Video Streamer",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.stream_service = VideoStreamService.from_settings(app_settings)
    app.state.html_cache = HTMLCache(app_settings.html_path)

    @app.exception_handler(VideoStreamError)
    async def video_stream_error_handler(
        request: Request, exc: VideoStreamError
    ) -> JSONResponse:
        """Single place that renders client-visible error bodies."""
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id", uuid4().hex)
        bind_context(request_id=request_id, component="api")

        nonce = generate_nonce()
        request.state.csp_nonce = nonce
        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers["Content-Security-Policy"] = build_csp(nonce)
        for name, value in STATIC_SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(system.router)
    app.include_router(media.router)

    return app


app = create_app()

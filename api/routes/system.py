"""Landing page and health check routes."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from api.deps import get_html_cache, get_stream_service
from api.security import apply_nonce
from core.utils.html_cache import HTMLCache
from core.video_stream import VideoStreamService

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    html_cache: Annotated[HTMLCache, Depends(get_html_cache)],
) -> HTMLResponse:
    """Serve the player page with the request's CSP nonce on inline tags."""
    html = await html_cache.get_html()
    nonce = getattr(request.state, "csp_nonce", None)
    if nonce:
        html = apply_nonce(html, nonce)
    return HTMLResponse(content=html)


@router.get("/health")
async def health(
    service: Annotated[VideoStreamService, Depends(get_stream_service)],
) -> dict:
    """Health check endpoint."""
    available = await asyncio.to_thread(service.video_path.is_file)
    return {
        "status": "ok",
        "video": "available" if available else "missing",
    }

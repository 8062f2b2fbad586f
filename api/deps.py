"""API dependency injection components."""

from fastapi import Request

from core.utils.html_cache import HTMLCache
from core.video_stream import VideoStreamService


def get_stream_service(request: Request) -> VideoStreamService:
    """Retrieve the video streaming service from app state."""
    return request.app.state.stream_service


def get_html_cache(request: Request) -> HTMLCache:
    """Retrieve the landing page cache from app state."""
    return request.app.state.html_cache

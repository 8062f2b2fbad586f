"""API routes for video streaming."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from api.deps import get_stream_service
from core.video_stream import VIDEO_CONTENT_TYPE, ResponseContext, VideoStreamService

router = APIRouter()


@router.get("/video-streaming", response_model=None)
async def stream_video(
    request: Request,
    service: Annotated[VideoStreamService, Depends(get_stream_service)],
) -> StreamingResponse:
    """Streams one byte range of the configured video for seeking.

    Args:
        request: The incoming HTTP request containing the Range header.
        service: The video streaming service instance.

    Returns:
        A 206 StreamingResponse bounded to the resolved range.

    Raises:
        ResourceNotFound: If the video file is missing (404).
        RangeNotSatisfiable: If the Range header is missing or invalid (416).
    """
    content = await service.create_stream(request.headers.get("range"), ResponseContext())

    return StreamingResponse(
        content.body,
        status_code=content.status_code,
        headers=content.headers,
        media_type=VIDEO_CONTENT_TYPE,
    )

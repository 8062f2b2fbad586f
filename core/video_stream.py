"""Partial-content video streaming service.

Turns a ``Range`` header into a bounded byte stream over the configured video:
existence and size lookup, range resolution, window selection and clamping,
header computation and wiring of mid-stream I/O errors.

Only one range is ever served. When the client asks for several, the one at
``max_ranges - 1`` is used and the rest are discarded (no multipart replies).
The size read by ``stat`` is not re-checked when the file is opened, so a
file that shrinks between the two shows up as a mid-stream ``StreamFailure``.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from config import Settings
from core.errors import (
    ConfigurationInvalid,
    RangeNotSatisfiable,
    ResourceNotFound,
    StreamFailure,
    VideoStreamError,
)
from core.range_request import ByteRange, resolve_range
from core.utils.logger import logger
from core.utils.streaming import range_generator

VIDEO_CONTENT_TYPE = "video/mp4"
DEFAULT_STATUS_CODE = 200
PARTIAL_CONTENT = 206


class StreamState(str, Enum):
    """Per-request progress of a range request."""

    START = "start"
    RESOURCE_CHECKED = "resource_checked"
    RANGE_RESOLVED = "range_resolved"
    WINDOW_COMPUTED = "window_computed"
    HEADERS_SENT = "headers_sent"
    STREAMING = "streaming"
    COMPLETE = "complete"
    STREAM_ERROR = "stream_error"


@dataclass
class ResponseContext:
    """Status and outcome of one request, filled in by the service."""

    status_code: int = DEFAULT_STATUS_CODE
    state: StreamState = StreamState.START
    failure: StreamFailure | None = None
    bytes_sent: int = 0

    @property
    def status_unset(self) -> bool:
        return self.status_code == DEFAULT_STATUS_CODE


@dataclass(frozen=True)
class ServingWindow:
    """Inclusive byte span actually served for one request."""

    start: int
    end: int
    size: int

    @classmethod
    def from_range(cls, byte_range: ByteRange, size: int, chunk_size: int) -> ServingWindow:
        """Clamp a requested range to the chunk size and the resource end."""
        start = byte_range.start
        requested_end = (
            byte_range.end if byte_range.end is not None else start + chunk_size - 1
        )
        # Never past the last valid byte offset.
        end = min(requested_end, size - 1)
        return cls(start=start, end=end, size=size)

    @property
    def content_length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.size}"

    def headers(self) -> dict[str, str]:
        """Complete header set for the 206 response."""
        return {
            "Accept-Ranges": "bytes",
            "Content-Range": self.content_range,
            "Content-Length": str(self.content_length),
            "Content-Type": VIDEO_CONTENT_TYPE,
            "Server-Timing": f'range;desc="{self.content_range}"',
        }


@dataclass
class PartialContent:
    """A resolved 206 response: window, headers and body stream."""

    window: ServingWindow
    body: AsyncIterator[bytes] = field(repr=False)
    status_code: int = PARTIAL_CONTENT

    @property
    def headers(self) -> dict[str, str]:
        return self.window.headers()


class VideoStreamService:
    """Serves byte ranges of a single video file."""

    def __init__(
        self,
        video_path: str | Path,
        chunk_size: int,
        max_ranges: int = 1,
        read_block_size: int = 64 * 1024,
    ):
        """Initialize the video streaming service.

        Raises:
            ConfigurationInvalid: If the configuration cannot be used.
        """
        self._validate_config(video_path, chunk_size, max_ranges, read_block_size)

        self.video_path = Path(video_path)
        self.chunk_size = chunk_size
        self.max_ranges_index = max_ranges - 1
        self.read_block_size = read_block_size

    @classmethod
    def from_settings(cls, settings: Settings) -> VideoStreamService:
        return cls(
            video_path=settings.video_path,
            chunk_size=settings.chunk_size,
            max_ranges=settings.max_ranges,
            read_block_size=settings.read_block_size,
        )

    @staticmethod
    def _validate_config(
        video_path: str | Path | None,
        chunk_size: int,
        max_ranges: int,
        read_block_size: int,
    ) -> None:
        if not video_path or not str(video_path).strip():
            raise ConfigurationInvalid("Video path is required in configuration")
        if chunk_size <= 0:
            raise ConfigurationInvalid("Chunk size must be greater than 0")
        if max_ranges <= 0:
            raise ConfigurationInvalid("Max ranges must be greater than 0")
        if read_block_size <= 0:
            raise ConfigurationInvalid("Read block size must be greater than 0")

    async def create_stream(
        self,
        range_header: str | None,
        context: ResponseContext | None = None,
    ) -> PartialContent:
        """Create a video stream for the requested range.

        Args:
            range_header: Raw ``Range`` header value, None if absent.
            context: Per-request status holder, updated as the request
                progresses.

        Returns:
            The 206 response parts: window, headers and a bounded byte stream.

        Raises:
            ResourceNotFound: If the video file is missing.
            RangeNotSatisfiable: If the range is missing, malformed or
                outside the file.
            StreamFailure: If anything else fails before streaming starts.
        """
        context = context if context is not None else ResponseContext()
        try:
            if not await asyncio.to_thread(self.video_path.is_file):
                context.status_code = ResourceNotFound.status_code
                raise ResourceNotFound(context={"path": str(self.video_path)})
            context.state = StreamState.RESOURCE_CHECKED

            video_size = (await asyncio.to_thread(self.video_path.stat)).st_size
            spec = resolve_range(range_header, video_size)

            logger.info(f"Received range request: {spec}")

            if spec is None or self.max_ranges_index >= len(spec.ranges):
                context.status_code = RangeNotSatisfiable.status_code
                raise RangeNotSatisfiable(
                    context={"range": range_header, "size": video_size}
                )
            context.state = StreamState.RANGE_RESOLVED

            window = ServingWindow.from_range(
                spec.ranges[self.max_ranges_index], video_size, self.chunk_size
            )
            context.state = StreamState.WINDOW_COMPUTED

            context.status_code = PARTIAL_CONTENT
            context.state = StreamState.HEADERS_SENT
            return PartialContent(window=window, body=self._stream(window, context))
        except VideoStreamError as exc:
            logger.error(f"{exc.name}: {exc.message} {exc.context}")
            raise
        except Exception as exc:
            logger.error(f"Video stream setup failed for {self.video_path}: {exc}")
            if context.status_unset:
                context.status_code = StreamFailure.status_code
            raise StreamFailure(
                f"Video stream setup failed: {exc}",
                original_error=exc,
                context={"path": str(self.video_path)},
            ) from exc

    async def _stream(
        self, window: ServingWindow, context: ResponseContext
    ) -> AsyncIterator[bytes]:
        chunks = range_generator(
            self.video_path, window.start, window.end, self.read_block_size
        )
        try:
            async with aclosing(chunks):
                async for chunk in chunks:
                    context.state = StreamState.STREAMING
                    context.bytes_sent += len(chunk)
                    yield chunk
        except OSError as exc:
            failure = StreamFailure(
                f"Stream failed for {window.content_range}: {exc}",
                original_error=exc,
                context={
                    "path": str(self.video_path),
                    "bytes_sent": context.bytes_sent,
                },
            )
            logger.error(f"{failure.message} after {context.bytes_sent} bytes")
            context.failure = failure
            context.state = StreamState.STREAM_ERROR
            # Headers already on the wire keep their status.
            if context.status_unset:
                context.status_code = StreamFailure.status_code
            raise failure from exc

        context.state = StreamState.COMPLETE

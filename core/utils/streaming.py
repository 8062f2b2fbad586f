"""Utilities for streaming file content with Range support."""

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path


async def range_generator(
    path: Path, start: int, end: int, chunk_size: int = 64 * 1024
) -> AsyncIterator[bytes]:
    """Yield file chunks for a range request without blocking the event loop.

    The file handle is closed when the generator finishes, fails or is
    closed early (client disconnect).

    Args:
        path: File to read.
        start: Start byte position.
        end: End byte position (inclusive).
        chunk_size: Chunk size in bytes.

    Yields:
        Bytes chunks, ``end - start + 1`` bytes in total.

    Raises:
        OSError: If the file cannot be read or ends before ``end``.
    """
    file_obj = await asyncio.to_thread(open, path, "rb")
    try:
        await asyncio.to_thread(file_obj.seek, start)
        bytes_to_read = end - start + 1

        while bytes_to_read > 0:
            read_size = min(chunk_size, bytes_to_read)
            data = await asyncio.to_thread(file_obj.read, read_size)

            if not data:
                raise OSError(
                    f"Unexpected end of file at byte {end - bytes_to_read + 1} "
                    f"(expected through byte {end})"
                )

            yield data
            bytes_to_read -= len(data)
    finally:
        file_obj.close()

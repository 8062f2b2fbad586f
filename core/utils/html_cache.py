"""Cache manager for the HTML landing page."""

from __future__ import annotations

import asyncio
from pathlib import Path

from core.errors import HTMLUnavailable
from core.utils.logger import logger


class HTMLCache:
    """Keeps the landing page in memory until the file's mtime changes.

    Reduces I/O by having the HTML ready to be served from memory while still
    picking up edits without a restart.
    """

    def __init__(self, html_path: str | Path):
        self.html_path = Path(html_path)
        self._cache: str | None = None
        self._last_modified: int | None = None

    async def get_html(self) -> str:
        """Gets HTML content from cache or file system.

        Raises:
            HTMLUnavailable: If the file cannot be read.
        """
        try:
            stats = await asyncio.to_thread(self.html_path.stat)
            current_modified = stats.st_mtime_ns

            if self._cache is None or current_modified != self._last_modified:
                self._cache = await asyncio.to_thread(
                    self.html_path.read_text, encoding="utf-8"
                )
                self._last_modified = current_modified
                logger.debug(f"Reloaded landing page from {self.html_path}")

            return self._cache
        except OSError as exc:
            raise HTMLUnavailable(
                f"Failed to read HTML file: {exc}",
                original_error=exc,
                context={"path": str(self.html_path)},
            ) from exc

    def clear_cache(self) -> None:
        self._cache = None
        self._last_modified = None

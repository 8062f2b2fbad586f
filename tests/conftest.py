import pytest
from pathlib import Path
from fastapi.testclient import TestClient
from loguru import logger

from api.server import create_app
from config import load_settings
from core.video_stream import VideoStreamService

VIDEO_SIZE = 100_000

# Test Data & Media Fixtures

@pytest.fixture
def video_bytes() -> bytes:
    """Deterministic payload so every byte offset is recognisable."""
    return bytes(i % 251 for i in range(VIDEO_SIZE))


@pytest.fixture
def video_file(tmp_path, video_bytes) -> Path:
    path = tmp_path / "video.mp4"
    path.write_bytes(video_bytes)
    return path


@pytest.fixture
def html_file(tmp_path) -> Path:
    path = tmp_path / "index.html"
    path.write_text(
        "<!DOCTYPE html>\n<html>\n  <head>\n"
        "    <style>body { color: black; }</style>\n"
        "  </head>\n  <body>\n"
        "    <script>console.log('test');</script>\n"
        "  </body>\n</html>",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def service(video_file) -> VideoStreamService:
    return VideoStreamService(video_file, chunk_size=4 * 1_000_000, max_ranges=1)


# App & Client

@pytest.fixture
def app_settings(video_file, html_file):
    return load_settings(video_path=video_file, html_path=html_file)


@pytest.fixture
def client(app_settings):
    return TestClient(create_app(app_settings))


# Logging

@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)

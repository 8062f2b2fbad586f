"""Pytest configuration for root."""

import os

# Settings and the logger are built at import time; keep test runs out of the
# project's log directory.
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

"""API route definitions and exports."""
from api.routes import media, system

__all__ = ["media", "system"]

"""Custom Exception Hierarchy for the video streaming server.

Every error carries a ``name``, a ``message`` and an HTTP ``status_code`` so
that a single handler at the API boundary can render the client-visible body
without branching on the error type. All custom exceptions inherit from
`VideoStreamError`.
"""


class VideoStreamError(Exception):
    """Base exception for all streaming errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = context or {}

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        """Uniform JSON error body."""
        return {
            "error": self.name,
            "message": self.message,
            "statusCode": self.status_code,
        }


class ResourceNotFound(VideoStreamError):
    """Raised when the configured video file is absent at request time."""

    status_code = 404

    def __init__(self, message: str = "Video file not found!", **kwargs):
        super().__init__(message, **kwargs)


class RangeNotSatisfiable(VideoStreamError):
    """Raised when the Range header is missing, malformed or out of bounds."""

    status_code = 416

    def __init__(self, message: str = "Range not satisfiable!", **kwargs):
        super().__init__(message, **kwargs)


class StreamFailure(VideoStreamError):
    """Raised when reading the video fails after the window was established."""

    status_code = 500


class HTMLUnavailable(VideoStreamError):
    """Raised when the landing page cannot be read."""

    status_code = 500


class ConfigurationInvalid(VideoStreamError):
    """Raised at startup when the configuration cannot be used."""

    status_code = 500

"""Configuration settings for the video streaming server."""

from pathlib import Path

from pydantic import Field, ValidationError, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationInvalid


class Settings(BaseSettings):
    """Server, media and logging configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @staticmethod
    def project_root(start: Path | None = None) -> Path:
        """Find the project root directory."""
        start = start or Path(__file__).resolve()
        for parent in start.parents:
            if (parent / ".git").exists() or (parent / "pyproject.toml").exists():
                return parent
        return Path(__file__).resolve().parent

    #  Media
    video_path: Path = Field(default=Path("./video.mp4"), description="Served video file")
    chunk_size: int = Field(
        default=4 * 1_000_000,
        gt=0,
        description="Max bytes served when the client omits the range end",
    )
    max_ranges: int = Field(
        default=1,
        gt=0,
        description="1-based index of the requested range that gets served",
    )
    read_block_size: int = Field(default=64 * 1024, gt=0)

    #  Landing page
    html_path: Path = Field(default=Path("./index.html"))

    #  Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    #  Logging
    log_level: str = "INFO"
    log_to_file: bool = True

    @field_validator("video_path", mode="before")
    @classmethod
    def _require_path(cls, value):
        if value is None or not str(value).strip():
            raise ValueError("Video path is required in configuration")
        return value

    @computed_field
    @property
    def log_dir(self) -> Path:
        """Path to project_root/logs."""
        return self.project_root() / "logs"


def load_settings(**overrides) -> Settings:
    """Load settings from the environment, failing fast on invalid values.

    Raises:
        ConfigurationInvalid: If any value fails validation.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationInvalid(
            f"Invalid configuration: {problems}", original_error=exc
        ) from exc


settings = load_settings()

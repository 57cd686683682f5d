"""Configuration for Sakuin.

Settings are validated once at startup and never mutated afterwards.
An invalid data directory raises ``pydantic.ValidationError`` so the
server refuses to start.
"""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_PREFIX = "/"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

ENV_PREFIX = "SAKUIN_"


class Settings(BaseModel):
    """Server configuration."""
    model_config = ConfigDict(frozen=True)

    data_dir: str = Field(description="Directory exposed by the server (absolute)")
    host: str = Field(DEFAULT_HOST, description="Address to listen on")
    port: int = Field(DEFAULT_PORT, ge=1, le=65535, description="Port to listen on")
    prefix: str = Field(
        "",
        description="URL prefix of the data route ('' when served from /)"
    )
    log_level: str = Field("INFO", description="Logging level")

    @field_validator("data_dir", mode="before")
    @classmethod
    def check_data_dir(cls, value: str | Path | None) -> str:
        if value is None or str(value).strip() == "":
            raise ValueError("data directory is not set")
        path = Path(value).expanduser().absolute()
        if not path.exists():
            raise ValueError(f"data directory {str(path)!r} does not exist")
        if not path.is_dir():
            raise ValueError(f"data directory {str(path)!r} is not a directory")
        return os.path.normpath(str(path))

    @field_validator("prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, value: str | None) -> str:
        # "/", "" and "/files/" become "", "" and "/files"
        segments = [s for s in (value or "").split("/") if s]
        return "/" + "/".join(segments) if segments else ""

    @field_validator("log_level", mode="before")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def env_default(name: str, default: str | None = None) -> str | None:
    """Get a SAKUIN_* environment variable, falling back to ``default``."""
    return os.environ.get(ENV_PREFIX + name, default)

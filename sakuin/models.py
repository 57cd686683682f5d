"""Pydantic models for Sakuin."""

from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field


# Resolution
class TargetKind(str, Enum):
    """What a request path points at on disk."""
    MISSING = "missing"
    DIRECTORY = "directory"
    FILE = "file"


class ResolvedTarget(BaseModel):
    """A request path mapped onto the data directory.

    Built fresh for every request and never shared.
    """
    kind: TargetKind = Field(description="Missing, directory or regular file")
    path: str = Field(description="Absolute filesystem path, confined to the data directory")
    display_path: str = Field(
        description="Path relative to the data directory ('' for the root, '/a/b' below it)"
    )
    size: int | None = Field(None, description="File size in bytes (files only)")
    regular: bool = Field(
        False,
        description="True for regular files; FIFOs, sockets and devices are not streamed"
    )
    modified: datetime | None = Field(
        None,
        description="Last modification time (files and directories)"
    )

    @property
    def name(self) -> str:
        """Base name of the target on disk."""
        return self.display_path.rsplit("/", 1)[-1]


# View model
class Breadcrumb(BaseModel):
    """One ancestor segment of the current directory."""
    name: str = Field(description="Segment name")
    path: str = Field(description="Cumulative path from the root up to this segment")


class FileItem(BaseModel):
    """A directory listing row."""
    name: str = Field(description="Entry name")
    size: str = Field(description="Human-readable size (e.g., '1.5 KiB')")
    date: str = Field(description="Human-readable modification time (e.g., '3 days ago')")
    is_dir: bool = Field(description="True if the entry is a directory")
    path: str = Field(description="Link path of the entry, relative to the data route")


class ViewModel(BaseModel):
    """Everything the directory template renders."""
    breadcrumbs: list[Breadcrumb] = Field(
        default_factory=list,
        description="Breadcrumbs ordered root to leaf"
    )
    files: list[FileItem] = Field(
        default_factory=list,
        description="Entries in directory enumeration order"
    )


# Assets
class Asset(NamedTuple):
    """A bundled asset read from the asset store."""
    name: str
    content: bytes
    media_type: str

"""Domain models for the profile photo pipeline."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class StoredBlob:
    """Binary object kept in the local blob store."""

    data: bytes
    media_type: str


class PhotoStatus(Enum):
    """Display states of the profile photo."""

    DEFAULT = "default"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class PhotoView:
    """What the page should currently render for the profile photo."""

    status: PhotoStatus
    display_ref: str | None = None
    error: str | None = None

    def source(self, default_image: str) -> str:
        """Return the image source to render, falling back to the default."""
        return self.display_ref or default_image

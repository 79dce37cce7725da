"""Domain models for hosted photo uploads."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PhotoUpload:
    """An image file received from a client."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class PhotoUploadResult:
    """Outcome of uploading an image to the hosting provider."""

    url: str | None = None
    public_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class PhotoDeletionResult:
    """Outcome of removing an image from the hosting provider."""

    error: str | None = None

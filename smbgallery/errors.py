"""
Errors - Typed failures raised by the gallery core.
"""

from typing import Optional


class GalleryError(Exception):
    """Base class for every failure the gallery surfaces to callers."""
    pass


class RemoteError(GalleryError):
    """Raised when the SMB share cannot satisfy a request."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class RemoteUnavailable(RemoteError):
    """The share could not be reached, or failed for an unclassified reason."""
    pass


class RemotePermission(RemoteError):
    """The configured account is not allowed to access the path."""
    pass


class RemoteNotFound(RemoteError):
    """The path does not exist on the share."""
    pass


class ResizeError(GalleryError):
    """Raised when source bytes cannot be turned into a thumbnail."""
    pass


class UnsupportedFormat(ResizeError):
    """The source is not a raster format the generator can write."""
    pass


class CorruptImage(ResizeError):
    """The source claims a supported format but cannot be decoded."""
    pass


class ImageNotFound(GalleryError):
    """The identifier is not in the image index."""

    def __init__(self, image_id: str):
        super().__init__(f"Image not found: {image_id}")
        self.image_id = image_id


class StorageIO(GalleryError):
    """A thumbnail could not be written to the local cache directory."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

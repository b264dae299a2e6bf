"""
smbgallery - Browse images on an SMB share over HTTP.

Startup walks the share once and builds an immutable image index. Requests
then list the index, stream originals straight from the share, or fetch
thumbnails from a generate-on-miss cache on local disk.
"""

__version__ = "1.0.0"

from .errors import (
    GalleryError,
    RemoteError,
    RemoteUnavailable,
    RemotePermission,
    RemoteNotFound,
    ResizeError,
    UnsupportedFormat,
    CorruptImage,
    ImageNotFound,
    StorageIO,
)
from .smb_config import SMBConfig
from .smb_client import SMBClient, DirectoryEntry, RemoteStat
from .thumbnail_generator import ThumbnailGenerator
from .indexer import Indexer, WalkStats
from .image_index import ImageEntry, ImageIndex
from .thumbnail_cache import ThumbnailCache, CacheStats
from .gallery import Gallery
from .warmer import Warmer, WarmStats

__all__ = [
    "GalleryError",
    "RemoteError",
    "RemoteUnavailable",
    "RemotePermission",
    "RemoteNotFound",
    "ResizeError",
    "UnsupportedFormat",
    "CorruptImage",
    "ImageNotFound",
    "StorageIO",
    "SMBConfig",
    "SMBClient",
    "DirectoryEntry",
    "RemoteStat",
    "ThumbnailGenerator",
    "Indexer",
    "WalkStats",
    "ImageEntry",
    "ImageIndex",
    "ThumbnailCache",
    "CacheStats",
    "Gallery",
    "Warmer",
    "WarmStats",
]

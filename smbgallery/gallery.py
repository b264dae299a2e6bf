"""
Gallery - The index, the original passthrough and the thumbnail cache behind the HTTP API.
"""

import logging
from mimetypes import guess_type
from typing import List, Optional

from .errors import RemoteError
from .image_index import ImageIndex
from .indexer import Indexer
from .smb_client import SMBClient
from .smb_config import SMBConfig
from .thumbnail_cache import ThumbnailCache
from .thumbnail_generator import ThumbnailGenerator


class Gallery:
    """
    Everything a request needs, built once at startup.

    Originals are read from the share on every request; only thumbnails
    are cached.
    """

    def __init__(
        self,
        index: ImageIndex,
        client: SMBClient,
        cache: ThumbnailCache,
        logger: Optional[logging.Logger] = None,
        index_error: Optional[RemoteError] = None
    ):
        self.index = index
        self.client = client
        self.cache = cache
        # Why the startup index is empty, if indexing failed
        self.index_error = index_error
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def build(
        cls,
        config: SMBConfig,
        cache_dir: str,
        thumbnail_height: int = 400,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ) -> 'Gallery':
        """
        Connect to the share, walk it and assemble a ready gallery.

        Blocks until indexing is finished. If the share cannot be reached or
        the root cannot be listed the index stays empty for the lifetime of
        the process.
        """
        logger = logger or logging.getLogger(__name__)
        client = SMBClient(config, logger)
        index = ImageIndex()
        index_error = None
        try:
            client.connect()
            paths = Indexer(client, logger).walk(config.root)
            index = ImageIndex.from_paths(paths, config.root, logger)
            logger.info(f"Found {len(index)} images.")
        except RemoteError as e:
            logger.error(f"Failed to connect to SMB share or index images on startup: {e}")
            index_error = e

        generator = ThumbnailGenerator(height=thumbnail_height, quality=quality, logger=logger)
        cache = ThumbnailCache(index, client, generator, cache_dir, logger)
        return cls(index, client, cache, logger, index_error)

    def list_images(self) -> List[str]:
        """Identifiers of all indexed images, in index order."""
        return self.index.list()

    def get_original(self, image_id: str) -> bytes:
        """
        Return the unmodified bytes of an image, read from the share.

        Raises:
            ImageNotFound: identifier is not in the index (no remote I/O)
            RemoteError: the file could not be read
        """
        entry = self.index.lookup(image_id)
        return self.client.read_file(entry.remote_path)

    def get_thumbnail(self, image_id: str) -> bytes:
        """Return the cached or freshly generated thumbnail of an image."""
        return self.cache.get_thumbnail(image_id)

    @staticmethod
    def content_type(image_id: str) -> str:
        """MIME type derived from the identifier's extension."""
        mime, _ = guess_type(image_id)
        return mime or 'application/octet-stream'

"""
ThumbnailCache - Generate-on-miss thumbnail cache persisted on local disk.
"""

import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import GalleryError, StorageIO
from .image_index import ImageEntry, ImageIndex
from .smb_client import SMBClient
from .thumbnail_generator import ThumbnailGenerator

TEMP_SUFFIX = '.part'


def cache_name(image_id: str) -> str:
    """
    File name of the cached thumbnail for an identifier.

    Plain filenames map to themselves; '%', '/' and '\\' are percent-escaped
    so path-derived identifiers stay in one flat directory.
    """
    return image_id.replace('%', '%25').replace('/', '%2F').replace('\\', '%5C')


@dataclass
class CacheStats:
    """
    Counters for thumbnail requests.

    Attributes:
        hits: Served from a persisted thumbnail
        misses: Not on disk when requested
        generated: Thumbnails generated and persisted
        errors: Generations that failed
        bytes_generated: Total bytes of thumbnails written
    """
    hits: int = 0
    misses: int = 0
    generated: int = 0
    errors: int = 0
    bytes_generated: int = 0


class ThumbnailCache:
    """
    Serves thumbnails from a flat directory, generating them on first request.

    At most one generation runs per identifier at a time: later requests for
    the same identifier wait on its lock and then read the persisted file.
    Files are written to a temporary name and renamed into place.
    """

    def __init__(
        self,
        index: ImageIndex,
        client: SMBClient,
        generator: ThumbnailGenerator,
        cache_dir: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the cache and prepare its directory.

        Args:
            index: Image index used to resolve identifiers
            client: Remote store client for reading originals
            generator: Thumbnail generator
            cache_dir: Local directory holding the cached thumbnails
            logger: Optional logger instance
        """
        self.index = index
        self.client = client
        self.generator = generator
        self.cache_dir = cache_dir
        self.logger = logger or logging.getLogger(__name__)
        self.stats = CacheStats()

        self._stats_lock = threading.Lock()
        self._locks_lock = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

        self.make_cache_folder()

    def make_cache_folder(self) -> None:
        """Create the cache folder and clean out interrupted writes."""
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            names = os.listdir(self.cache_dir)
        except OSError as e:
            raise StorageIO(f"Cannot prepare cache directory: {e}", self.cache_dir) from e

        for name in names:
            if not name.endswith(TEMP_SUFFIX):
                continue
            path = os.path.join(self.cache_dir, name)
            try:
                os.remove(path)
                self.logger.info(f"Removed stale temp file {path}")
            except OSError as e:
                self.logger.warning(f"Could not delete {path}: {e}")

    def cache_path(self, image_id: str) -> str:
        """Local path of the cached thumbnail for a canonical identifier."""
        return os.path.join(self.cache_dir, cache_name(image_id))

    def is_cached(self, image_id: str) -> bool:
        """True if a thumbnail for the identifier has been persisted."""
        entry = self.index.lookup(image_id)
        return os.path.isfile(self.cache_path(entry.id))

    def get_thumbnail(self, image_id: str) -> bytes:
        """
        Return the thumbnail for an identifier, generating it on a miss.

        Raises:
            ImageNotFound: identifier is not in the index (no remote I/O)
            RemoteError: the original could not be read
            ResizeError: the original could not be resized
            StorageIO: the thumbnail could not be written
        """
        entry = self.index.lookup(image_id)
        path = self.cache_path(entry.id)

        data = self._read_cached(path)
        if data is not None:
            self._count(hits=1)
            return data

        with self._lock_for(entry.id):
            # Another request may have generated it while we waited
            data = self._read_cached(path)
            if data is not None:
                self._count(hits=1)
                return data

            self._count(misses=1)
            try:
                data = self._generate(entry)
                self._persist(path, data)
            except GalleryError:
                self._count(errors=1)
                raise

        self._count(generated=1, bytes_generated=len(data))
        self.logger.info(f"Generated thumbnail: {entry.id} ({len(data)} bytes)")
        return data

    def _lock_for(self, image_id: str) -> threading.Lock:
        # Bounded by the index size, which never changes
        with self._locks_lock:
            lock = self._locks.get(image_id)
            if lock is None:
                lock = self._locks[image_id] = threading.Lock()
            return lock

    def _read_cached(self, path: str) -> Optional[bytes]:
        try:
            with open(path, 'rb') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageIO(f"Could not read thumbnail {path}: {e}", path) from e

    def _generate(self, entry: ImageEntry) -> bytes:
        self.logger.debug(f"Downloading: {entry.remote_path}")
        image_data = self.client.read_file(entry.remote_path)
        self.logger.debug(f"Generating thumbnail: {entry.id}")
        return self.generator.generate(image_data, entry.extension)

    def _persist(self, path: str, data: bytes) -> None:
        """Write data to path atomically."""
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, prefix='.', suffix=TEMP_SUFFIX)
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError as cleanup_error:
                    self.logger.warning(f"Could not delete {tmp_path}: {cleanup_error}")
            raise StorageIO(f"Could not write thumbnail {path}: {e}", path) from e

    def _count(self, **deltas: int) -> None:
        with self._stats_lock:
            for name, delta in deltas.items():
                setattr(self.stats, name, getattr(self.stats, name) + delta)

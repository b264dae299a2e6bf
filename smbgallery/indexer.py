"""
Indexer - Walks the SMB share and collects the paths of image files.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import RemoteError
from .smb_client import SMBClient, normalize_root

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}


def is_image_name(name: str) -> bool:
    """True if the name carries a supported raster image extension."""
    dot = name.rfind('.')
    if dot <= 0:
        return False
    return name[dot:].lower() in IMAGE_EXTENSIONS


@dataclass
class WalkStats:
    """
    Statistics for one walk of the share.

    Attributes:
        directories_listed: Directories successfully listed
        directories_failed: Directories whose listing failed (subtree skipped)
        entries_skipped: Non-image entries that were files or failed to stat
        images_found: Image paths collected
        start_time: Start timestamp
        end_time: End timestamp, None while walking
    """
    directories_listed: int = 0
    directories_failed: int = 0
    entries_skipped: int = 0
    images_found: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return (self.end_time or time.time()) - self.start_time


class Indexer:
    """
    Depth-first walk of a remote directory tree.

    Entries with an image extension are trusted to be files and collected
    without a stat call. Everything else is stat'd and recursed into when it
    is a directory.
    """

    LOG_INTERVAL = 1000

    def __init__(self, client: SMBClient, logger: Optional[logging.Logger] = None):
        """
        Initialize indexer.

        Args:
            client: Remote store client (SMBClient or anything with the same interface)
            logger: Optional logger instance
        """
        self.client = client
        self.logger = logger or logging.getLogger(__name__)
        self.stats = WalkStats()

    def walk(self, root: str) -> List[str]:
        """
        Collect image paths below root.

        Args:
            root: Share-relative directory to start from

        Returns:
            Remote paths of images in listing order

        Raises:
            RemoteError: the root directory itself could not be listed
        """
        self.stats = WalkStats()
        root = normalize_root(root)
        self.logger.info(f"Indexing images under '{root or '/'}'")

        entries = self.client.list_directory(root)
        self.stats.directories_listed += 1

        images: List[str] = []
        self._collect(entries, images)

        self.stats.end_time = time.time()
        self.logger.info(
            f"Indexing complete: {self.stats.images_found} images in "
            f"{self.stats.directories_listed} directories, "
            f"{self.stats.directories_failed} unreadable "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )
        return images

    def _walk_directory(self, directory: str, images: List[str]) -> None:
        """Walk a directory below the root; listing failures skip the subtree."""
        try:
            entries = self.client.list_directory(directory)
        except RemoteError as e:
            self.stats.directories_failed += 1
            self.logger.warning(f"Skipping unreadable directory {directory}: {e}")
            return
        self.stats.directories_listed += 1
        self._collect(entries, images)

    def _collect(self, entries, images: List[str]) -> None:
        for entry in entries:
            if is_image_name(entry.name):
                images.append(entry.path)
                self.stats.images_found += 1
                if self.stats.images_found % self.LOG_INTERVAL == 0:
                    self.logger.info(f"  Found {self.stats.images_found:,} images...")
                continue

            try:
                is_directory = self.client.stat(entry.path).is_directory
            except RemoteError as e:
                self.stats.entries_skipped += 1
                self.logger.debug(f"Could not stat {entry.path}: {e}")
                continue

            if is_directory:
                self._walk_directory(entry.path, images)
            else:
                self.stats.entries_skipped += 1

"""
Warmer - Pre-generates thumbnails for every indexed image.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import GalleryError
from .image_index import ImageIndex
from .thumbnail_cache import ThumbnailCache


@dataclass
class WarmStats:
    """
    Statistics for a warm run.

    Attributes:
        total: Images considered
        generated: Thumbnails generated in this run
        skipped: Images whose thumbnail was already cached
        errors: Images whose thumbnail could not be generated
        bytes_generated: Total bytes of thumbnails generated
        start_time: Start timestamp
        error_details: One message per failed image
    """
    total: int = 0
    generated: int = 0
    skipped: int = 0
    errors: int = 0
    bytes_generated: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        return time.time() - self.start_time

    @property
    def rate_per_minute(self) -> float:
        """Generated thumbnails per minute."""
        elapsed = self.elapsed_seconds
        if elapsed > 0:
            return self.generated / elapsed * 60
        return 0.0

    @property
    def completed_count(self) -> int:
        return self.generated + self.skipped + self.errors

    @property
    def remaining_count(self) -> int:
        return self.total - self.completed_count


class Warmer:
    """
    Walks the index in order and fills the thumbnail cache.

    Generation goes through ThumbnailCache.get_thumbnail, so a warm run can
    overlap with live requests.
    """

    def __init__(
        self,
        cache: ThumbnailCache,
        cadence: float = 0.0,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize warmer.

        Args:
            cache: Thumbnail cache to fill
            cadence: Seconds to sleep after each generated thumbnail
            dry_run: If True, only report what would be generated
            logger: Optional logger instance
        """
        self.cache = cache
        self.cadence = cadence
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)
        self.stats = WarmStats()
        self._stop_requested = False

    def stop(self) -> None:
        """Request the warmer to stop after the current image."""
        self._stop_requested = True

    def warm(self, index: ImageIndex, limit: Optional[int] = None) -> WarmStats:
        """
        Generate missing thumbnails.

        Args:
            index: Image index to warm
            limit: Optional limit on the number of thumbnails to generate

        Returns:
            WarmStats with results
        """
        self.stats = WarmStats(total=len(index))
        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(f"Warming thumbnails for {len(index)} images{mode_str}")

        for entry in index:
            if self._stop_requested:
                self.logger.info("Stop requested, halting warm run")
                break
            if limit and self.stats.generated >= limit:
                self.logger.info(f"Stopping at limit ({limit})")
                break

            if self.cache.is_cached(entry.id):
                self.stats.skipped += 1
                continue

            if self.dry_run:
                self.logger.info(f"[DRY RUN] Would generate: {entry.id}")
                self.stats.generated += 1
                continue

            try:
                data = self.cache.get_thumbnail(entry.id)
            except GalleryError as e:
                error_msg = f"Error processing {entry.id}: {e}"
                self.logger.error(error_msg)
                self.stats.errors += 1
                self.stats.error_details.append(error_msg)
                continue

            self.stats.generated += 1
            self.stats.bytes_generated += len(data)
            if self.cadence > 0:
                time.sleep(self.cadence)

        self.logger.info(
            f"Warm complete: {self.stats.generated} generated, "
            f"{self.stats.skipped} already cached, {self.stats.errors} errors "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )
        return self.stats

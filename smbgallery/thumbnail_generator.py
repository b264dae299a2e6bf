"""
ThumbnailGenerator - Resizes source images to a fixed thumbnail height.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import CorruptImage, UnsupportedFormat


class ThumbnailGenerator:
    """
    Generates thumbnails from original images using Pillow.

    Thumbnails have a fixed height and a proportional width, and keep the
    format implied by the source extension.
    """

    CONTENT_TYPES = {
        '.jpg': 'image/jpeg',
        '.jpeg': 'image/jpeg',
        '.png': 'image/png',
        '.gif': 'image/gif',
    }

    FORMATS = {
        '.jpg': 'JPEG',
        '.jpeg': 'JPEG',
        '.png': 'PNG',
        '.gif': 'GIF',
    }

    def __init__(
        self,
        height: int = 400,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            height: Target height for thumbnails in pixels (default: 400)
            quality: JPEG quality for output (default: 85)
            logger: Optional logger instance
        """
        if height <= 0:
            raise ValueError(f"Thumbnail height must be positive: {height}")
        self.height = height
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def generate(self, image_data: bytes, original_extension: str) -> bytes:
        """
        Generate a thumbnail from image data.

        Args:
            image_data: Original image as bytes
            original_extension: Original file extension (e.g., '.jpg')

        Returns:
            Encoded thumbnail bytes

        Raises:
            UnsupportedFormat: extension or data is not a supported raster format
            CorruptImage: data could not be decoded
        """
        output_format = self.FORMATS.get(original_extension.lower())
        if output_format is None:
            raise UnsupportedFormat(f"Unsupported image extension: {original_extension!r}")

        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
        except UnidentifiedImageError as e:
            raise UnsupportedFormat(f"Unrecognized image data: {e}") from e
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise CorruptImage(f"Could not decode image: {e}") from e

        try:
            img = self._convert_color_mode(img, output_format)
            img = img.resize(self._target_size(img.size), Image.Resampling.LANCZOS)

            output = io.BytesIO()
            if output_format == 'JPEG':
                img.save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == 'PNG':
                img.save(output, format='PNG', optimize=True)
            else:
                img.save(output, format='GIF')
            return output.getvalue()
        except (OSError, ValueError) as e:
            self.logger.error(f"Error generating thumbnail: {e}")
            raise CorruptImage(f"Could not resize image: {e}") from e

    def _target_size(self, size: Tuple[int, int]) -> Tuple[int, int]:
        """Proportional width for the configured height."""
        width, height = size
        if height <= 0:
            raise ValueError(f"Image has no height: {size}")
        new_width = max(1, round(width * self.height / height))
        return new_width, self.height

    def _convert_color_mode(self, img: Image.Image, output_format: str) -> Image.Image:
        """Convert image to a color mode the output format can hold."""
        if output_format == 'JPEG':
            if img.mode in ('RGBA', 'LA', 'P'):
                img = img.convert('RGBA')
                background = Image.new('RGB', img.size, (255, 255, 255))
                background.paste(img, mask=img.split()[-1])
                return background
            if img.mode != 'RGB':
                return img.convert('RGB')
            return img
        # Palette images resize poorly; GIF output is re-quantized on save
        if img.mode in ('P', '1', 'LA'):
            return img.convert('RGBA')
        if img.mode not in ('RGB', 'RGBA', 'L'):
            return img.convert('RGB')
        return img

    def get_content_type(self, extension: str) -> str:
        """Get content type for a file extension."""
        return self.CONTENT_TYPES.get(extension.lower(), 'application/octet-stream')

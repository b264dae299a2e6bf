#!/usr/bin/env python3

import json
import logging
import sys
import threading

from bottle import Bottle, response

import settings
from smbgallery.errors import GalleryError, ImageNotFound
from smbgallery.gallery import Gallery
from smbgallery.smb_config import SMBConfig

app = application = Bottle()

# Configure logging
logging.basicConfig(
    filename=settings.LOG_FILE,
    level=logging.getLevelName(settings.LOG_LEVEL),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
)
logger = logging.getLogger('smbgallery.server')

_gallery = None
_gallery_lock = threading.Lock()


def log(msg):
    logger.debug(msg)


def get_gallery(config=None):
    """Return the process-wide gallery, building it on first use.

    config defaults to the SMB_* environment and is ignored once built.

    Building walks the whole share, so callers block until the index is
    complete rather than ever seeing a partial one.
    """
    global _gallery
    with _gallery_lock:
        if _gallery is None:
            logger.info("Connecting to SMB share and indexing images...")
            _gallery = Gallery.build(
                config or SMBConfig.from_env(),
                settings.CACHE_DIR,
                thumbnail_height=settings.THUMBNAIL_HEIGHT,
                quality=settings.JPEG_QUALITY,
                logger=logging.getLogger('smbgallery'),
            )
        return _gallery


def text_response(status, body):
    """Set a plain text error status on the current response."""
    response.content_type = 'text/plain; charset=utf-8'
    response.status = status
    return body


@app.route('/api/images')
def list_images():
    """Return the identifiers of all indexed images as a JSON array."""
    response.content_type = 'application/json'
    return json.dumps(get_gallery().list_images())


@app.route('/api/image/<image_id:path>')
def get_image(image_id):
    """Return the original image bytes, read from the share on every call."""
    log(f"image {image_id}")
    try:
        data = get_gallery().get_original(image_id)
    except ImageNotFound:
        return text_response(404, 'Image not found')
    except GalleryError as e:
        logger.error(f"Error serving full image {image_id}: {e}")
        return text_response(500, 'Error reading image file from SMB share')

    response.content_type = Gallery.content_type(image_id)
    return data


@app.route('/api/thumbnail/<image_id:path>')
def get_thumbnail(image_id):
    """Return the thumbnail, generating and caching it on first request."""
    log(f"thumbnail {image_id}")
    try:
        data = get_gallery().get_thumbnail(image_id)
    except ImageNotFound:
        return text_response(404, 'Image not found')
    except GalleryError as e:
        logger.error(f"Error generating thumbnail {image_id}: {e}")
        return text_response(500, 'Error generating thumbnail')

    response.content_type = Gallery.content_type(image_id)
    return data


@app.route('/')
def main_page():
    log("Hit root")
    response.content_type = 'text/plain; charset=utf-8'
    return 'SMB gallery server'


def main(config=None):
    from bottle import run

    config = config or SMBConfig.from_env()
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    # Index before accepting requests
    gallery = get_gallery(config)
    logger.info(f"Backend server listening on port {settings.PORT} ({len(gallery.index)} images)")

    run(app=application,
        host=settings.HOST,
        port=settings.PORT,
        server=settings.SERVER,
        debug=settings.DEBUG_APP,
        quiet=not settings.DEBUG_APP,
        )

    logger.info("Exiting.")
    return 0


if __name__ == '__main__':
    sys.exit(main())

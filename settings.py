"""Server settings, read from the environment."""
import os

from smbgallery.smb_config import str2bool

HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', '3000'))

# Bottle server adapter; use a threaded one (paste, waitress, ...) or uwsgi
# with threads for overlapping requests
SERVER = os.getenv('SERVER', 'wsgiref')

DEBUG_APP = str2bool(os.getenv('DEBUG_APP'), default=False)

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.getenv('LOG_FILE') or None

# Flat directory of generated thumbnails, never evicted
CACHE_DIR = os.getenv('CACHE_DIR', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'cache'))

THUMBNAIL_HEIGHT = int(os.getenv('THUMBNAIL_HEIGHT', '400'))
JPEG_QUALITY = int(os.getenv('JPEG_QUALITY', '85'))

"""
Pytest fixtures for smbgallery tests.
"""

import io
import threading
import time

import pytest

from smbgallery.errors import RemoteNotFound, RemotePermission, RemoteUnavailable
from smbgallery.smb_client import DirectoryEntry, RemoteStat, join_path


class FakeRemoteStore:
    """
    In-memory stand-in for SMBClient.

    Files are given as share-relative paths with '\\' separators; parent
    directories are created implicitly and listed in insertion order.
    Every call is recorded so tests can assert on remote I/O.
    """

    def __init__(self, files=None, directories=()):
        self.files = {}
        self.children = {'': []}
        self.unreadable = set()
        self.unstatable = set()
        self.failing_reads = set()
        self.read_delay = 0.0
        self.reads = []
        self.listings = []
        self.stat_calls = []
        self._lock = threading.Lock()
        for directory in directories:
            self.add_directory(directory)
        for path, data in (files or {}).items():
            self.add_file(path, data)

    def add_directory(self, path):
        if path in self.children:
            return
        parent, _, name = path.rpartition('\\')
        self.add_directory(parent)
        self.children[parent].append(name)
        self.children[path] = []

    def add_file(self, path, data):
        parent, _, name = path.rpartition('\\')
        self.add_directory(parent)
        self.children[parent].append(name)
        self.files[path] = data

    def list_directory(self, path):
        with self._lock:
            self.listings.append(path)
        if path in self.unreadable:
            raise RemotePermission(f"{path}: access denied", path)
        if path not in self.children:
            raise RemoteNotFound(f"{path}: no such directory", path)
        return [DirectoryEntry(name=name, path=join_path(path, name)) for name in self.children[path]]

    def stat(self, path):
        with self._lock:
            self.stat_calls.append(path)
        if path in self.unstatable:
            raise RemoteUnavailable(f"{path}: stat failed", path)
        if path in self.children:
            return RemoteStat(is_directory=True)
        if path in self.files:
            return RemoteStat(is_directory=False)
        raise RemoteNotFound(f"{path}: not found", path)

    def read_file(self, path):
        with self._lock:
            self.reads.append(path)
        if self.read_delay:
            time.sleep(self.read_delay)
        if path in self.failing_reads:
            raise RemoteUnavailable(f"{path}: connection reset", path)
        if path not in self.files:
            raise RemoteNotFound(f"{path}: not found", path)
        return self.files[path]

    @property
    def io_count(self):
        return len(self.reads) + len(self.listings) + len(self.stat_calls)


def make_image_bytes(size=(100, 100), fmt='JPEG', mode='RGB', color='red'):
    from PIL import Image

    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_store():
    """Fixture providing a factory for fake remote stores."""
    return FakeRemoteStore


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return make_image_bytes(size=(200, 100))


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return make_image_bytes(size=(100, 100), fmt='PNG', mode='RGBA', color=(255, 0, 0, 128))


@pytest.fixture
def sample_gif_bytes():
    """Fixture providing sample GIF image bytes."""
    return make_image_bytes(size=(60, 30), fmt='GIF', mode='P', color=1)


@pytest.fixture
def photo_store(make_store, sample_image_bytes, sample_png_bytes):
    """Fixture providing a share with photos\\x.jpg and photos\\sub\\y.png."""
    return make_store({
        'photos\\x.jpg': sample_image_bytes,
        'photos\\sub\\y.png': sample_png_bytes,
    })


@pytest.fixture
def cache_dir(tmp_path):
    """Fixture providing an empty thumbnail cache directory."""
    return str(tmp_path / 'cache')


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')

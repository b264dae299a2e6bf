"""
SMBClient - SMB share operations for listing directories, stat and reading files.
"""

import errno
import logging
import ntpath
import stat as stat_module
from dataclasses import dataclass
from typing import List, Optional

import smbclient
from retrying import retry
from smbprotocol.exceptions import SMBAuthenticationError, SMBException

from .errors import RemoteError, RemoteNotFound, RemotePermission, RemoteUnavailable
from .smb_config import SMBConfig

SEPARATOR = '\\'

_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR}
_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM}


@dataclass(frozen=True)
class DirectoryEntry:
    """One entry of a remote directory listing."""
    name: str
    path: str


@dataclass(frozen=True)
class RemoteStat:
    """The part of a remote stat result the indexer needs."""
    is_directory: bool


def normalize_root(root: Optional[str]) -> str:
    """
    Normalize a configured directory into a share-relative remote path.

    '/photos/2019/', 'photos\\2019' and '\\photos\\2019' all become
    'photos\\2019'. '/' and '' become '' (the share root).
    """
    if not root:
        return ''
    parts = [p for p in root.replace('/', SEPARATOR).split(SEPARATOR) if p and p != '.']
    return SEPARATOR.join(parts)


def join_path(directory: str, name: str) -> str:
    """Join a share-relative directory and an entry name."""
    if not directory:
        return name
    return ntpath.join(directory, name)


def translate_error(err: BaseException, path: str) -> RemoteError:
    """Map an smbprotocol/OS failure onto the remote error taxonomy."""
    message = f"{path}: {err}"
    if isinstance(err, SMBAuthenticationError):
        return RemotePermission(message, path)
    if isinstance(err, OSError):
        if err.errno in _NOT_FOUND_ERRNOS or isinstance(err, FileNotFoundError):
            return RemoteNotFound(message, path)
        if err.errno in _PERMISSION_ERRNOS or isinstance(err, PermissionError):
            return RemotePermission(message, path)
    return RemoteUnavailable(message, path)


class SMBClient:
    """
    Wrapper for the smbclient high level API.

    Paths passed to and returned from this class are share-relative and use
    the SMB separator; the UNC form is only built here.
    """

    def __init__(self, config: SMBConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize SMB client.

        Args:
            config: SMB configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def unc(self, path: str) -> str:
        """Return the UNC path for a share-relative remote path."""
        path = normalize_root(path)
        if not path:
            return self.config.share_path
        return f"{self.config.share_path}{SEPARATOR}{path}"

    def _session_options(self) -> dict:
        """Connection settings smbclient needs on every call to reuse or re-open the session."""
        return {
            'username': self.config.account,
            'password': self.config.password,
            'port': self.config.port,
            'encrypt': self.config.encrypt,
            'connection_timeout': self.config.connection_timeout,
        }

    @retry(retry_on_exception=lambda e: isinstance(e, RemoteUnavailable),
           stop_max_attempt_number=3, wait_exponential_multiplier=1000)
    def connect(self) -> None:
        """Register the session used by every later call."""
        self.logger.info(f"Connecting to {self.config.share_path} as {self.config.account or 'guest'}")
        try:
            smbclient.register_session(self.config.server, **self._session_options())
        except (SMBException, OSError, ValueError) as e:
            error = translate_error(e, self.config.share_path)
            self.logger.warning(f"SMB connection failed: {error}")
            raise error from e

    def close(self) -> None:
        """Drop cached connections to the server."""
        smbclient.reset_connection_cache()

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        """
        List a remote directory.

        Args:
            path: Share-relative directory path ('' for the share root)

        Returns:
            Entries in the order the server returned them
        """
        try:
            names = smbclient.listdir(self.unc(path), **self._session_options())
        except (SMBException, OSError, ValueError) as e:
            raise translate_error(e, path) from e
        return [DirectoryEntry(name=name, path=join_path(path, name)) for name in names]

    def stat(self, path: str) -> RemoteStat:
        """Return whether the remote path is a directory."""
        try:
            result = smbclient.stat(self.unc(path), **self._session_options())
        except (SMBException, OSError, ValueError) as e:
            raise translate_error(e, path) from e
        return RemoteStat(is_directory=stat_module.S_ISDIR(result.st_mode))

    def read_file(self, path: str) -> bytes:
        """Read the full contents of a remote file."""
        self.logger.debug(f"Reading {path}")
        try:
            with smbclient.open_file(self.unc(path), mode='rb', **self._session_options()) as fd:
                return fd.read()
        except (SMBException, OSError, ValueError) as e:
            raise translate_error(e, path) from e

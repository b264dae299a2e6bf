"""
SMBConfig - Connection settings for the SMB share holding the images.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


def str2bool(value, default: Optional[bool] = None) -> Optional[bool]:
    """Convert diverse string values into True or False, or default."""
    true_set = {'yes', 'true', 't', 'y', '1'}
    false_set = {'no', 'false', 'f', 'n', '0'}

    if isinstance(value, str):
        value = value.strip().lower()
        if value in true_set:
            return True
        if value in false_set:
            return False
    return default


@dataclass
class SMBConfig:
    """
    SMB share configuration.

    Attributes:
        server: Host name or IP address of the SMB server
        share: Share name on the server
        username: Account used to authenticate
        password: Password for the account
        domain: Windows domain or workgroup of the account
        root: Directory within the share to index ('/' is the share root)
        port: TCP port of the SMB service
        connection_timeout: Seconds to wait when opening the connection
        encrypt: Force (True) or refuse (False) SMB encryption, None for server default
    """
    server: Optional[str] = None
    share: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    domain: str = 'WORKGROUP'
    root: str = '/'
    port: int = 445
    connection_timeout: int = 60
    encrypt: Optional[bool] = None

    @classmethod
    def from_env(cls) -> 'SMBConfig':
        """Build a configuration from SMB_* environment variables."""
        return cls(
            server=os.getenv('SMB_SERVER_IP'),
            share=os.getenv('SMB_SHARE_NAME'),
            username=os.getenv('SMB_USERNAME'),
            password=os.getenv('SMB_PASSWORD'),
            domain=os.getenv('SMB_DOMAIN', 'WORKGROUP'),
            root=os.getenv('SMB_DIRECTORY_PATH') or '/',
            port=int(os.getenv('SMB_PORT', '445')),
            connection_timeout=int(os.getenv('SMB_CONNECTION_TIMEOUT', '60')),
            encrypt=str2bool(os.getenv('SMB_ENCRYPT')),
        )

    @property
    def share_path(self) -> str:
        """UNC path of the share root, e.g. \\\\server\\share."""
        return f"\\\\{self.server}\\{self.share}"

    @property
    def account(self) -> Optional[str]:
        """Username qualified with the domain, as SMB expects it."""
        if not self.username:
            return None
        if self.domain and '\\' not in self.username and '@' not in self.username:
            return f"{self.domain}\\{self.username}"
        return self.username

    def validate(self) -> List[str]:
        """
        Check the configuration for missing or invalid values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        if not self.server:
            errors.append("SMB server is required (SMB_SERVER_IP)")
        if not self.share:
            errors.append("SMB share name is required (SMB_SHARE_NAME)")
        if self.share and any(c in self.share for c in '\\/'):
            errors.append(f"SMB share name must not contain path separators: {self.share}")
        if self.username and self.password is None:
            errors.append("SMB password is required when a username is set (SMB_PASSWORD)")
        if not 0 < self.port < 65536:
            errors.append(f"SMB port out of range: {self.port}")
        if self.connection_timeout <= 0:
            errors.append(f"SMB connection timeout must be positive: {self.connection_timeout}")
        return errors

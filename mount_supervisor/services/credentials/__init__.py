"""
Credential stores resolving a credential reference to share credentials.

- CredentialStore: interface used by MountSupervisor
- EnvCredentialStore: <prefix><REF>_USERNAME / _PASSWORD / _DOMAIN variables
- FileCredentialStore: mount.cifs style credential files in one directory
"""

from .base_store import CredentialStore
from .env_store import EnvCredentialStore
from .file_store import FileCredentialStore, parse_credentials_file

__all__ = [
    "CredentialStore",
    "EnvCredentialStore",
    "FileCredentialStore",
    "parse_credentials_file",
]

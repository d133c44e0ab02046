"""htpasswd-store: ordered credential store with bcrypt htpasswd persistence."""

from htpasswd_store.codec import parse, read_from_path, render, write_to_path
from htpasswd_store.config import HtpasswdConfig, get_config
from htpasswd_store.errors import (
    HashingError,
    HtpasswdError,
    HtpasswdIOError,
    HtpasswdNotFoundError,
    HtpasswdReadError,
    HtpasswdWriteError,
    InvalidHashError,
    InvalidUsernameError,
    MalformedLineError,
    UnsupportedSchemeError,
)
from htpasswd_store.models import BcryptHash, LegacyHash, LegacyScheme, StoredHash
from htpasswd_store.store import CredentialStore

__all__ = [
    "BcryptHash",
    "CredentialStore",
    "HashingError",
    "HtpasswdConfig",
    "HtpasswdError",
    "HtpasswdIOError",
    "HtpasswdNotFoundError",
    "HtpasswdReadError",
    "HtpasswdWriteError",
    "InvalidHashError",
    "InvalidUsernameError",
    "LegacyHash",
    "LegacyScheme",
    "MalformedLineError",
    "StoredHash",
    "UnsupportedSchemeError",
    "get_config",
    "parse",
    "read_from_path",
    "render",
    "write_to_path",
]

"""Custom exceptions for htpasswd operations."""

from __future__ import annotations

from pathlib import Path


class HtpasswdError(Exception):
    """Base exception for all htpasswd operations."""


class InvalidUsernameError(HtpasswdError, ValueError):
    """Username is empty, contains a field/record delimiter, or starts like a comment."""

    def __init__(self, username: str):
        super().__init__(
            f"Invalid username {username!r}: must be non-empty, contain no ':' or newline, and not start with '#'"
        )
        self.username = username


class InvalidHashError(HtpasswdError, ValueError):
    """Pre-computed hash text cannot be stored as-is."""

    def __init__(self, username: str, reason: str):
        super().__init__(f"Invalid hash for {username!r}: {reason}")
        self.username = username


class HashingError(HtpasswdError):
    """The bcrypt primitive refused to hash the password."""


class UnsupportedSchemeError(HtpasswdError):
    """Password verification was requested for a preserved legacy hash."""

    def __init__(self, username: str, scheme: str):
        super().__init__(f"Cannot verify {username!r}: {scheme} hashes are preserved, not verified")
        self.username = username
        self.scheme = scheme


class MalformedLineError(HtpasswdError):
    """A non-comment line does not have the ``username:hash`` shape."""

    def __init__(self, line_number: int, reason: str = "expected 'username:hash'", *, path: Path | None = None):
        self.line_number = line_number
        self.reason = reason
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"{self.path}:{self.line_number}" if self.path else f"line {self.line_number}"
        return f"Malformed htpasswd entry at {where}: {self.reason}"

    def with_path(self, path: Path) -> MalformedLineError:
        return MalformedLineError(self.line_number, self.reason, path=path)


class HtpasswdIOError(HtpasswdError):
    """Filesystem failure while reading or writing an htpasswd file."""

    def __init__(self, message: str, *, path: Path, cause: BaseException | None = None):
        super().__init__(message)
        self.path = path
        self.cause = cause


class HtpasswdWriteError(HtpasswdIOError):
    """Writing failed; the target file was left untouched."""


class HtpasswdReadError(HtpasswdIOError):
    """Reading an existing htpasswd file failed."""


class HtpasswdNotFoundError(HtpasswdReadError):
    """The htpasswd file does not exist."""

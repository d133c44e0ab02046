"""Shared constants for htpasswd reading and writing."""

from typing import Literal

# bcrypt
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
BcryptIdent = Literal["2a", "2b"]
BCRYPT_MIN_ROUNDS = 4
BCRYPT_MAX_ROUNDS = 31
BCRYPT_MAX_PASSWORD_BYTES = 72

# Defaults (overridable via HtpasswdConfig / env vars)
DEFAULT_BCRYPT_ROUNDS = 12
DEFAULT_BCRYPT_IDENT = "2b"
DEFAULT_FILE_MODE = 0o644

# File format
FIELD_SEPARATOR = ":"
COMMENT_PREFIX = "#"
USERNAME_FORBIDDEN_CHARS = (":", "\n", "\r")
ENCODING = "utf-8"

# Environment
ENV_BCRYPT_ROUNDS = "HTPASSWD_BCRYPT_ROUNDS"
ENV_BCRYPT_IDENT = "HTPASSWD_BCRYPT_IDENT"
ENV_FILE_MODE = "HTPASSWD_FILE_MODE"

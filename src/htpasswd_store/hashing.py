"""bcrypt hashing, hash classification and username rules."""

from __future__ import annotations

import re

import bcrypt

from htpasswd_store.constants import (
    BCRYPT_MAX_PASSWORD_BYTES,
    BCRYPT_PREFIXES,
    COMMENT_PREFIX,
    ENCODING,
    USERNAME_FORBIDDEN_CHARS,
)
from htpasswd_store.errors import HashingError, InvalidUsernameError
from htpasswd_store.models import BcryptHash, LegacyHash, LegacyScheme, StoredHash

_DES_CRYPT = re.compile(r"[./0-9A-Za-z]{13}")


def validate_username(username: str) -> str:
    """Return ``username`` unchanged, or raise InvalidUsernameError."""
    if not isinstance(username, str) or not username:
        raise InvalidUsernameError(username)
    if any(ch in username for ch in USERNAME_FORBIDDEN_CHARS):
        raise InvalidUsernameError(username)
    # parse() would read such a line as a comment
    if username.lstrip().startswith(COMMENT_PREFIX):
        raise InvalidUsernameError(username)
    return username


def hash_password(password: str | bytes, *, rounds: int, ident: str) -> BcryptHash:
    """Generate a bcrypt hash suitable for NGINX/Apache htpasswd files."""
    if isinstance(password, str):
        password = password.encode(ENCODING)
    if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
        raise HashingError(
            f"Password is {len(password)} bytes; bcrypt accepts at most {BCRYPT_MAX_PASSWORD_BYTES}"
        )
    try:
        salt = bcrypt.gensalt(rounds=rounds, prefix=ident.encode("ascii"))
        hashed = bcrypt.hashpw(password, salt)
    except (ValueError, TypeError) as exc:
        raise HashingError(f"bcrypt failed: {exc}") from exc
    return BcryptHash(hash_text=hashed.decode("ascii"))


def legacy_scheme(hash_text: str) -> LegacyScheme:
    """Identify a non-bcrypt scheme from its prefix (or shape, for DES crypt)."""
    for scheme in (
        LegacyScheme.APR1,
        LegacyScheme.SHA1,
        LegacyScheme.MD5_CRYPT,
        LegacyScheme.SHA256_CRYPT,
        LegacyScheme.SHA512_CRYPT,
    ):
        if hash_text.startswith(scheme.prefix):
            return scheme
    if _DES_CRYPT.fullmatch(hash_text):
        return LegacyScheme.DES_CRYPT
    return LegacyScheme.UNKNOWN


def classify_hash(hash_text: str) -> StoredHash:
    """Tag existing hash text without re-deriving or validating it."""
    if hash_text.startswith(BCRYPT_PREFIXES):
        return BcryptHash(hash_text=hash_text)
    return LegacyHash(hash_text=hash_text, scheme=legacy_scheme(hash_text))

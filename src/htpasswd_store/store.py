"""Insertion-ordered username -> hash store."""

from __future__ import annotations

from typing import Iterator

from htpasswd_store.config import HtpasswdConfig, get_config
from htpasswd_store.errors import InvalidHashError, UnsupportedSchemeError
from htpasswd_store.hashing import classify_hash, hash_password, validate_username
from htpasswd_store.models import BcryptHash, StoredHash


class CredentialStore:
    """Ordered mapping of usernames to stored hashes.

    Order is insertion order; replacing an entry keeps its position, so an
    unchanged store always renders to the same bytes. Not thread-safe: callers
    serialize access themselves.
    """

    def __init__(self, config: HtpasswdConfig | None = None) -> None:
        self._config = config
        self._entries: dict[str, StoredHash] = {}

    @property
    def config(self) -> HtpasswdConfig:
        return self._config if self._config is not None else get_config()

    def set(self, username: str, password: str | bytes, *, rounds: int | None = None) -> bool:
        """Hash ``password`` with bcrypt and store it for ``username``.

        Returns True if an existing entry was replaced, False if one was added.
        The store is unchanged if validation or hashing fails.
        """
        validate_username(username)
        cfg = self.config
        hashed = hash_password(
            password,
            rounds=cfg.bcrypt_rounds if rounds is None else rounds,
            ident=cfg.bcrypt_ident,
        )
        return self._put(username, hashed)

    def set_hash(self, username: str, hash_text: str) -> bool:
        """Store pre-computed hash text for ``username`` without re-hashing."""
        validate_username(username)
        if not hash_text:
            raise InvalidHashError(username, "hash text is empty")
        if "\n" in hash_text or "\r" in hash_text:
            raise InvalidHashError(username, "hash text contains a newline")
        return self._put(username, classify_hash(hash_text))

    def _put(self, username: str, stored: StoredHash) -> bool:
        existing = username in self._entries
        self._entries[username] = stored
        return existing

    def remove(self, username: str) -> bool:
        """Delete ``username`` if present. Returns whether anything was removed."""
        return self._entries.pop(username, None) is not None

    def get(self, username: str) -> StoredHash | None:
        return self._entries.get(username)

    def iter(self) -> Iterator[tuple[str, StoredHash]]:
        """Iterate ``(username, hash)`` pairs over a snapshot taken now."""
        return iter(list(self._entries.items()))

    def usernames(self) -> list[str]:
        return list(self._entries)

    def verify(self, username: str, password: str | bytes) -> bool:
        """Check a password against a bcrypt entry. Unknown users never verify."""
        stored = self._entries.get(username)
        if stored is None:
            return False
        if not isinstance(stored, BcryptHash):
            raise UnsupportedSchemeError(username, stored.scheme.value)
        return stored.verify(password)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, username: object) -> bool:
        return username in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CredentialStore):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CredentialStore(users={list(self._entries)!r})"

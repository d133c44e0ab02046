"""htpasswd text rendering, parsing and crash-safe persistence."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Generator

from htpasswd_store.config import HtpasswdConfig
from htpasswd_store.constants import COMMENT_PREFIX, ENCODING, FIELD_SEPARATOR
from htpasswd_store.errors import (
    HtpasswdNotFoundError,
    HtpasswdReadError,
    HtpasswdWriteError,
    InvalidHashError,
    InvalidUsernameError,
    MalformedLineError,
)
from htpasswd_store.store import CredentialStore

log = logging.getLogger(__name__)


def render(store: CredentialStore) -> str:
    """Return one ``username:hash`` line per entry, in store order."""
    return "".join(f"{user}{FIELD_SEPARATOR}{stored.hash_text}\n" for user, stored in store.iter())


def _decode_line(raw: str | bytes, line_number: int) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode(ENCODING)
    except UnicodeDecodeError as exc:
        raise MalformedLineError(line_number, f"not valid {ENCODING}") from exc


def parse(text: str | bytes, *, config: HtpasswdConfig | None = None) -> CredentialStore:
    """Build a CredentialStore from htpasswd text.

    Blank lines and ``#`` comments are skipped. Hashes are kept verbatim; only
    their scheme is identified. When a username repeats, the last hash wins and
    keeps the position of the first occurrence.
    """
    lines = text.split(b"\n") if isinstance(text, bytes) else text.split("\n")
    store = CredentialStore(config)
    first_seen: dict[str, int] = {}

    for line_number, raw in enumerate(lines, start=1):
        line = _decode_line(raw, line_number).removesuffix("\r")
        stripped = line.lstrip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue

        username, sep, hash_text = line.partition(FIELD_SEPARATOR)
        if not sep:
            raise MalformedLineError(line_number)
        if not username:
            raise MalformedLineError(line_number, "empty username")
        if not hash_text:
            raise MalformedLineError(line_number, "empty hash")

        if username in first_seen:
            log.warning(
                "Duplicate username %r at line %d (first seen at line %d); keeping the later hash",
                username,
                line_number,
                first_seen[username],
            )
        else:
            first_seen[username] = line_number

        try:
            store.set_hash(username, hash_text)
        except (InvalidUsernameError, InvalidHashError) as exc:
            raise MalformedLineError(line_number, str(exc)) from exc

    return store


def _target_mode(target: Path, default: int) -> int:
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return default


@contextmanager
def _atomic_replace(target: Path, mode: int) -> Generator[BinaryIO, None, None]:
    """Yield a temp file beside ``target``; rename it over ``target`` on clean exit.

    The temp file is removed on every path that does not end in the rename.
    """
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    committed = False
    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
        committed = True
    finally:
        if not committed:
            tmp_path.unlink(missing_ok=True)


def _fsync_dir(directory: Path) -> None:
    # Best effort: the rename already happened, so failures here are not errors.
    try:
        dir_fd = os.open(directory, os.O_RDONLY)
    except OSError as exc:
        log.debug("Could not open %s for fsync: %s", directory, exc)
        return
    try:
        os.fsync(dir_fd)
    except OSError as exc:
        log.debug("Could not fsync %s: %s", directory, exc)
    finally:
        os.close(dir_fd)


def write_to_path(
    store: CredentialStore,
    path: str | os.PathLike[str],
    *,
    config: HtpasswdConfig | None = None,
) -> None:
    """Atomically replace ``path`` with the rendered store.

    Readers of ``path`` see either the old file or the complete new one. On
    failure the target is untouched, the temp file is removed and
    HtpasswdWriteError is raised. Concurrent writers must be serialized by
    the caller.
    """
    target = Path(path)
    try:
        cfg = config if config is not None else store.config
        data = render(store).encode(ENCODING)
        mode = _target_mode(target, cfg.file_mode)
        with _atomic_replace(target, mode) as fh:
            fh.write(data)
    except Exception as exc:
        raise HtpasswdWriteError(
            f"Failed to write htpasswd file {target}: {exc}", path=target, cause=exc
        ) from exc

    _fsync_dir(target.parent)
    log.debug("Wrote %d entries to %s", len(store), target)


def read_from_path(
    path: str | os.PathLike[str],
    *,
    config: HtpasswdConfig | None = None,
) -> CredentialStore:
    """Load and parse an existing htpasswd file."""
    target = Path(path)
    try:
        data = target.read_bytes()
    except FileNotFoundError as exc:
        raise HtpasswdNotFoundError(f"htpasswd file not found: {target}", path=target, cause=exc) from exc
    except OSError as exc:
        raise HtpasswdReadError(
            f"Failed to read htpasswd file {target}: {exc}", path=target, cause=exc
        ) from exc

    try:
        store = parse(data, config=config)
    except MalformedLineError as exc:
        raise exc.with_path(target) from exc.__cause__

    log.debug("Loaded %d entries from %s", len(store), target)
    return store

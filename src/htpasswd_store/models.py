"""Stored hash models: a closed union of bcrypt and preserved legacy entries."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

import bcrypt
from pydantic import BaseModel, Field

from htpasswd_store.constants import ENCODING


class LegacyScheme(str, Enum):
    """Hash schemes recognized by prefix when reading existing files."""

    APR1 = "apr1"
    SHA1 = "sha1"
    MD5_CRYPT = "md5-crypt"
    SHA256_CRYPT = "sha256-crypt"
    SHA512_CRYPT = "sha512-crypt"
    DES_CRYPT = "des-crypt"
    UNKNOWN = "unknown"

    @property
    def prefix(self) -> str:
        return _LEGACY_PREFIXES.get(self, "")


_LEGACY_PREFIXES = {
    LegacyScheme.APR1: "$apr1$",
    LegacyScheme.SHA1: "{SHA}",
    LegacyScheme.MD5_CRYPT: "$1$",
    LegacyScheme.SHA256_CRYPT: "$5$",
    LegacyScheme.SHA512_CRYPT: "$6$",
}


class BcryptHash(BaseModel):
    """A bcrypt hash in modular crypt format (``$2[aby]$<cost>$<salt+digest>``)."""

    model_config = {"frozen": True}

    kind: Literal["bcrypt"] = "bcrypt"
    hash_text: str

    @property
    def ident(self) -> str:
        return self.hash_text[1:3]

    @property
    def rounds(self) -> int | None:
        parts = self.hash_text.split("$")
        if len(parts) < 4 or len(parts[2]) != 2 or not parts[2].isdigit():
            return None
        return int(parts[2])

    def verify(self, password: str | bytes) -> bool:
        """Check ``password`` against this hash. Malformed hash text never verifies."""
        if isinstance(password, str):
            password = password.encode(ENCODING)
        try:
            return bcrypt.checkpw(password, self.hash_text.encode(ENCODING))
        except ValueError:
            return False


class LegacyHash(BaseModel):
    """Any non-bcrypt hash read from a file, kept verbatim."""

    model_config = {"frozen": True}

    kind: Literal["legacy"] = "legacy"
    hash_text: str
    scheme: LegacyScheme = LegacyScheme.UNKNOWN

    @property
    def prefix(self) -> str:
        return self.scheme.prefix


StoredHash = Annotated[Union[BcryptHash, LegacyHash], Field(discriminator="kind")]

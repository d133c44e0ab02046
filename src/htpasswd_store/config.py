"""Runtime configuration for bcrypt cost and file permissions."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator

from htpasswd_store.constants import (
    BCRYPT_MAX_ROUNDS,
    BCRYPT_MIN_ROUNDS,
    DEFAULT_BCRYPT_IDENT,
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_FILE_MODE,
    ENV_BCRYPT_IDENT,
    ENV_BCRYPT_ROUNDS,
    ENV_FILE_MODE,
    BcryptIdent,
)


class HtpasswdConfig(BaseModel):
    """Hashing and persistence settings, resolved from the environment by default."""

    # Env-derived defaults are strings; validate them like explicit values.
    model_config = {"frozen": True, "validate_default": True}

    bcrypt_rounds: int = Field(
        default_factory=lambda: os.environ.get(ENV_BCRYPT_ROUNDS, DEFAULT_BCRYPT_ROUNDS),
        ge=BCRYPT_MIN_ROUNDS,
        le=BCRYPT_MAX_ROUNDS,
    )
    bcrypt_ident: BcryptIdent = Field(
        default_factory=lambda: os.environ.get(ENV_BCRYPT_IDENT, DEFAULT_BCRYPT_IDENT),
    )
    file_mode: int = Field(
        default_factory=lambda: os.environ.get(ENV_FILE_MODE, DEFAULT_FILE_MODE),
        ge=0,
        le=0o777,
    )

    @field_validator("file_mode", mode="before")
    @classmethod
    def _parse_octal_mode(cls, value: object) -> object:
        # "640" and "0o640" both mean rw-r-----
        if isinstance(value, str):
            text = value.strip().lower().removeprefix("0o")
            try:
                return int(text, 8)
            except ValueError:
                raise ValueError(f"file_mode must be an octal string, got {value!r}") from None
        return value


@lru_cache(maxsize=1)
def get_config() -> HtpasswdConfig:
    """Return the global HtpasswdConfig (resolved once, cached)."""
    return HtpasswdConfig()

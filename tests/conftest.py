"""Shared test fixtures."""

from __future__ import annotations

import pytest

from htpasswd_store import CredentialStore, HtpasswdConfig
from htpasswd_store.config import get_config
from htpasswd_store.constants import BCRYPT_MIN_ROUNDS


@pytest.fixture
def fast_config() -> HtpasswdConfig:
    """Return an HtpasswdConfig with the cheapest bcrypt cost."""
    return HtpasswdConfig(bcrypt_rounds=BCRYPT_MIN_ROUNDS, bcrypt_ident="2b", file_mode=0o644)


@pytest.fixture
def store(fast_config: HtpasswdConfig) -> CredentialStore:
    return CredentialStore(fast_config)


@pytest.fixture(autouse=True)
def _reset_config_cache():
    get_config.cache_clear()
    yield
    get_config.cache_clear()

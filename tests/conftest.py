from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from preemptive.auth import AuthCache, AuthScope, CredentialStore, Credentials

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_logger() -> Mock:
    """Create a mock logger for testing log calls."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def request_get() -> httpx.Request:
    """Create a GET request for testing."""
    return httpx.Request("GET", "https://repo.example.com/api/build")


@pytest.fixture
def credential_store() -> CredentialStore:
    """Create a credential store holding an anonymous wildcard
    credential."""
    store = CredentialStore()
    store.set_credentials(AuthScope.ANY, Credentials("anonymous", ""))
    return store


@pytest.fixture
def auth_cache() -> AuthCache:
    """Create an empty auth cache."""
    return AuthCache()

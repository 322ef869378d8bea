"""Pytest configuration and shared fixtures for openapi-client-auth tests."""

import pytest

from openapi_client_auth.auth.models import AuthenticationContext, ServiceSettings, TokenCache
from openapi_client_auth.testing import FakeIdentityClient, ManualClock


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents test pollution when testing setting resolution.
    """
    import os

    test_prefixes = ("TEST_", "API_", "CLIENT_", "OPENAPI_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def clock():
    """Manually advanced UTC clock."""
    return ManualClock()


@pytest.fixture
def identity_client():
    """Fake identity authority with no queued tokens."""
    return FakeIdentityClient()


@pytest.fixture
def context(identity_client):
    """Authentication context for a test tenant backed by the fake identity client."""
    return AuthenticationContext.for_domain(
        "contoso.onmicrosoft.com",
        ServiceSettings.AZURE,
        identity_client,
        TokenCache(),
    )

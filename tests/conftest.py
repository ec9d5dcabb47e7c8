"""
Pytest configuration and shared fixtures for config-masking tests.

Provides fresh engines (so resolver caches never leak between tests) and an
environment free of connector secrets.
"""

import os
import sys

import pytest

# Add parent directory to path for package imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from masking import AttributeResolver, MaskingEngine  # noqa: E402

SECRET_ENV_VARS = [
    "SENSITIVE_PASSWORD",
    "SSL_TRUSTSTORE_PASSWORD",
    "KAFKA_SSL_TRUSTSTORE_PASSWORD",
    "SASL_JAAS_CONFIG",
    "SSL_KEYSTORE_PASSWORD",
]


@pytest.fixture(autouse=True)
def clear_secret_env(monkeypatch):
    """
    Remove secret environment variables before each test.
    This runs automatically before each test.
    """
    for name in SECRET_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def resolver():
    """Provide a resolver with the default sources and an empty cache."""
    return AttributeResolver()


@pytest.fixture
def engine(resolver):
    """Provide a MaskingEngine backed by a fresh resolver."""
    return MaskingEngine(resolver)

"""
Shared fixtures for the verifier test-suite.
"""

import pytest

from idtoken_shared.metrics import MetricsCollector
from idtoken_shared.test_helpers import (
    FakeClock,
    MockCertsEndpoint,
    SigningKeyPair,
    create_key_set_document,
)
from idtoken_verifier.certs.models import KeySet


@pytest.fixture(scope="session")
def signing_keys():
    """Two RSA key pairs, like Google's published set."""
    return [
        SigningKeyPair.generate("6a8ba5652a7044121d4fedac8f14d14c54e4895b"),
        SigningKeyPair.generate("0b0bf186743471a1edca2e38793e4528d5a5d3c3"),
    ]


@pytest.fixture(scope="session")
def key_set_document(signing_keys):
    """Key set document for the two signing keys."""
    return create_key_set_document(signing_keys)


@pytest.fixture
def key_set(key_set_document):
    """Parsed key set."""
    return KeySet.from_json(key_set_document)


@pytest.fixture
def clock():
    """Fake clock shared by providers, verifiers and the mock endpoint."""
    return FakeClock()


@pytest.fixture
def metrics():
    """Metrics collector on a private registry."""
    return MetricsCollector()


@pytest.fixture
def certs_endpoint(key_set_document, clock):
    """Mock certs endpoint serving the key set document."""
    return MockCertsEndpoint(key_set_document, clock=clock)

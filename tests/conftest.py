"""Shared test fixtures for kube-cert-init tests."""

from unittest.mock import MagicMock, patch

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from kubernetes import client

from kube_cert_init.core.cluster import Cluster
from kube_cert_init.models import SigningRequestStatus
from kube_cert_init.retry import WaitPolicy


class FakeClock:
    """Monotonic clock advanced by its own sleep function."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    """Clock whose sleep returns immediately."""
    return FakeClock()


@pytest.fixture
def wait_policy(fake_clock):
    """Unbounded wait policy that never blocks."""
    return WaitPolicy(interval=5.0, sleep=fake_clock.sleep, clock=fake_clock)


@pytest.fixture
def fake_cluster():
    """Cluster gateway double with no API behind it."""
    cluster = MagicMock(spec=Cluster)
    cluster.delete_signing_request.return_value = True
    return cluster


@pytest.fixture(scope="session")
def rsa_key():
    """Small RSA key shared across tests to keep key generation fast."""
    return rsa.generate_private_key(public_exponent=65537, key_size=1024)


@pytest.fixture
def mock_incluster_config():
    """Mock in-cluster config loading."""
    with patch("kubernetes.config.load_incluster_config") as mock:
        yield mock


@pytest.fixture
def mock_kube_contexts():
    """Mock kubernetes config contexts."""
    with patch("kubernetes.config.list_kube_config_contexts") as mock:
        mock.return_value = ([{"name": "test-context"}], {"name": "test-context"})
        yield mock


@pytest.fixture
def mock_kube_config():
    """Mock kubernetes config loading."""
    with patch("kubernetes.config.load_kube_config") as mock:
        yield mock


@pytest.fixture
def mock_certificates_api():
    """Mock CertificatesV1Api."""
    with patch("kubernetes.client.CertificatesV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def mock_core_v1_api():
    """Mock CoreV1Api."""
    with patch("kubernetes.client.CoreV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def cluster_mocks(mock_incluster_config, mock_certificates_api, mock_core_v1_api):
    """Combined fixture for creating a Cluster instance without a cluster."""
    return {
        "incluster": mock_incluster_config,
        "certificates_api": mock_certificates_api,
        "core_api": mock_core_v1_api,
    }


def make_secret(name="tls-secret", namespace="default", data=None):
    """Build a V1Secret with the given data."""
    return client.V1Secret(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        data=data,
    )


def approved(name="app-ns1", certificate=b"CERT"):
    """Status of an approved, signed request."""
    return SigningRequestStatus(name=name, condition_types=("Approved",), certificate=certificate)


def pending(name="app-ns1"):
    """Status of a request nobody has acted on yet."""
    return SigningRequestStatus(name=name)


def load_private_key(pem_data):
    """Load an RSA private key from PEM bytes in either encoding."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    assert isinstance(key, rsa.RSAPrivateKey)
    return key


def request_matches_key(pem_data, key):
    """Check that a PEM certificate request is signed by the given key."""
    csr = x509.load_pem_x509_csr(pem_data)
    if not csr.is_signature_valid:
        return False
    return csr.public_key().public_numbers() == key.public_key().public_numbers()

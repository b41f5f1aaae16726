"""Secret output.

Merges the private key, the issued certificate and the cluster CA bundle
into an existing Secret. Nothing is written to disk in this mode.
"""

from pathlib import Path

from kubernetes import client

from kube_cert_init import console
from kube_cert_init.core.cluster import Cluster
from kube_cert_init.exceptions import ClusterError, OutputError
from kube_cert_init.models import CA_CRT, TLS_CRT, TLS_KEY, IssuedCertificate, KeyMaterial


class SecretSink:
    """Delivers credentials into the ``tls.key``, ``tls.crt`` and ``ca.crt`` fields of a secret.

    Attributes:
        cluster: Gateway to the Kubernetes API.
        secret: The secret fetched by the preflight check.
        ca_file: Local CA bundle copied into ``ca.crt``.

    """

    def __init__(self, cluster: Cluster, secret: client.V1Secret, ca_file: Path) -> None:
        self.cluster = cluster
        self.secret = secret
        self.ca_file = Path(ca_file)

    def _read_ca_bundle(self) -> str:
        try:
            return self.ca_file.read_text()
        except OSError as err:
            raise OutputError(f"Unable to read CA bundle {self.ca_file}: {err.strerror or err}") from err

    def stage(self, key: KeyMaterial, request: bytes) -> None:
        """Nothing is persisted before the certificate is issued."""

    def deliver(self, key: KeyMaterial, request: bytes, certificate: IssuedCertificate) -> None:  # noqa: ARG002
        """Merge the credentials into the secret and persist it.

        Raises:
            OutputError: If the CA bundle cannot be read or the update fails.

        """
        ca_bundle = self._read_ca_bundle()

        string_data = dict(self.secret.string_data or {})
        string_data[TLS_KEY] = key.pem.decode()
        string_data[TLS_CRT] = certificate.certificate.decode()
        string_data[CA_CRT] = ca_bundle
        self.secret.string_data = string_data

        try:
            self.cluster.update_secret(self.secret)
        except ClusterError as err:
            raise OutputError(f"Unable to store credentials in secret {self.describe()}: {err}") from err

        console.success(f"Stored credentials in secret ({console.highlight(self.describe())})")

    def describe(self) -> str:
        """Human-readable target for the summary."""
        return f"{self.secret.metadata.namespace}/{self.secret.metadata.name}"

"""Data models for kube-cert-init.

This module provides the immutable values passed between the components:
the workload identity, the names derived from it, the generated key, the
signing request and the issued certificate, plus the run configuration.
"""

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from kube_cert_init.retry import WaitPolicy

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

DEFAULT_CERT_DIR = Path("/etc/tls")
DEFAULT_CA_FILE = Path("/var/run/secrets/kubernetes.io/serviceaccount/ca.crt")
DEFAULT_SIGNER_NAME = "kube-cert-init.io/serving"

SIGNING_REQUEST_GROUPS = ("system:authenticated",)
SIGNING_REQUEST_USAGES = ("digital signature", "key encipherment", "server auth", "client auth")

# Field names shared by the filesystem layout and the secret data
TLS_KEY = "tls.key"
TLS_CSR = "tls.csr"
TLS_CRT = "tls.crt"
CA_CRT = "ca.crt"


class KeyFormat(str, Enum):
    """Private key encodings.

    Inherits from str to allow direct use in string contexts
    (e.g., console output).
    """

    PKCS1 = "pkcs1"
    PKCS8 = "pkcs8"

    @property
    def pem_type(self) -> str:
        """The PEM block type written for this encoding."""
        return "PRIVATE KEY" if self is KeyFormat.PKCS8 else "RSA PRIVATE KEY"


@dataclass(frozen=True, slots=True)
class WorkloadIdentity:
    """Immutable description of the workload requesting a certificate.

    Attributes:
        pod_ip: IP address as defined by pod.status.podIP.
        pod_name: Name as defined by pod.metadata.name.
        namespace: Namespace as defined by pod.metadata.namespace.
        cluster_domain: Kubernetes cluster domain.
        hostname: Hostname as defined by pod.spec.hostname.
        subdomain: Subdomain as defined by pod.spec.subdomain.
        service_names: Services that resolve to this pod.
        service_ips: Service IP addresses that resolve to this pod.
        additional_dns_names: Extra DNS names added verbatim.
        headless_name_as_cn: Use the headless domain name as the Common Name.

    """

    pod_ip: str
    pod_name: str
    namespace: str = "default"
    cluster_domain: str = "cluster.local"
    hostname: str = ""
    subdomain: str = ""
    service_names: tuple[str, ...] = ()
    service_ips: tuple[str, ...] = ()
    additional_dns_names: tuple[str, ...] = ()
    headless_name_as_cn: bool = False


@dataclass(frozen=True, slots=True)
class SubjectAltNames:
    """Names the certificate is valid for.

    Attributes:
        dns_names: DNS names in order; the first one is the Common Name.
        ip_addresses: IP addresses, pod IP first.

    """

    dns_names: tuple[str, ...]
    ip_addresses: tuple[IPAddress, ...]

    @property
    def common_name(self) -> str:
        """The Common Name, always the first DNS name."""
        return self.dns_names[0]


@dataclass(frozen=True, slots=True)
class SubjectFields:
    """Optional Subject attributes for the certificate request."""

    countries: tuple[str, ...] = ()
    organizations: tuple[str, ...] = ()
    organizational_units: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """A generated RSA private key and its PEM encoding.

    Attributes:
        private_key: The cryptography RSA private key object.
        key_format: Encoding used for the PEM form.
        pem: PEM-encoded private key.

    """

    private_key: object = field(repr=False)
    key_format: KeyFormat
    pem: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class SigningRequest:
    """A CertificateSigningRequest as submitted to the control plane.

    Attributes:
        name: Deterministic object name, ``<pod-name>-<namespace>``.
        request: PEM-encoded PKCS#10 certificate request.
        labels: Labels attached to the object.
        signer_name: Value for spec.signerName.
        groups: Groups recorded on the request.
        usages: Key usages requested.

    """

    name: str
    request: bytes = field(repr=False)
    labels: dict[str, str] = field(default_factory=dict)
    signer_name: str = DEFAULT_SIGNER_NAME
    groups: tuple[str, ...] = SIGNING_REQUEST_GROUPS
    usages: tuple[str, ...] = SIGNING_REQUEST_USAGES


@dataclass(frozen=True, slots=True)
class SigningRequestStatus:
    """The observed state of a CertificateSigningRequest.

    Attributes:
        name: Object name.
        condition_types: Condition types in the order reported by the API.
        certificate: Issued certificate bytes, empty until signed.

    """

    name: str
    condition_types: tuple[str, ...] = ()
    certificate: bytes = b""

    @property
    def approved(self) -> bool:
        """True when the first condition reported is Approved."""
        return bool(self.condition_types) and self.condition_types[0] == "Approved"


@dataclass(frozen=True, slots=True)
class IssuedCertificate:
    """A signed leaf certificate returned by the control plane."""

    certificate: bytes
    condition: str = "Approved"


@dataclass(frozen=True, slots=True)
class ProvisionConfig:
    """Complete configuration for one run, built once by the CLI.

    Attributes:
        identity: The workload identity facts.
        key_size: RSA modulus length in bits.
        key_format: Private key encoding.
        subject: Optional Subject attributes.
        labels: Labels for the signing request object.
        signer_name: spec.signerName of the signing request.
        cert_dir: Filesystem sink target, None when writing to a secret.
        secret_name: Secret sink target, None when writing files.
        ca_file: CA bundle copied into the secret.
        wait: Wait policy for every retry loop.

    """

    identity: WorkloadIdentity
    key_size: int = 2048
    key_format: KeyFormat = KeyFormat.PKCS1
    subject: SubjectFields = field(default_factory=SubjectFields)
    labels: dict[str, str] = field(default_factory=dict)
    signer_name: str = DEFAULT_SIGNER_NAME
    cert_dir: Path | None = DEFAULT_CERT_DIR
    secret_name: str | None = None
    ca_file: Path = DEFAULT_CA_FILE
    wait: WaitPolicy = field(default_factory=WaitPolicy)

    @property
    def uses_secret(self) -> bool:
        """True when the credentials are delivered to a secret."""
        return bool(self.secret_name)

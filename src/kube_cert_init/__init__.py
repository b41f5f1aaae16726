"""kube-cert-init: Kubernetes serving certificates for pods.

This package generates a private key for a pod, submits a
CertificateSigningRequest covering the pod's DNS names and IP addresses,
waits for it to be approved, and writes the resulting credentials to a
directory or into a Secret.

Example usage:
    from kube_cert_init import Provisioner, build_config

    config = build_config(pod_ip="10.0.0.5", pod_name="app", namespace="ns1")
    result = Provisioner(config).run()
"""

__version__ = "0.1.0"

from kube_cert_init.cli import cli
from kube_cert_init.config import build_config
from kube_cert_init.core.cluster import Cluster
from kube_cert_init.core.provisioner import Provisioner
from kube_cert_init.exceptions import (
    CertInitError,
    ClusterConnectionError,
    ClusterError,
    ConfigurationError,
    KeyMaterialError,
    OutputError,
    SigningRequestError,
    WaitCancelledError,
)

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Configuration
    "build_config",
    # Classes
    "Cluster",
    "Provisioner",
    # Exceptions
    "CertInitError",
    "ClusterConnectionError",
    "ClusterError",
    "ConfigurationError",
    "KeyMaterialError",
    "OutputError",
    "SigningRequestError",
    "WaitCancelledError",
]

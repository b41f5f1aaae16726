"""Core infrastructure subpackage.

This package contains the Provisioner facade along with the cluster
gateway and the signing request client.
"""

from kube_cert_init.core.cluster import Cluster
from kube_cert_init.core.provisioner import Outcome, ProvisionResult, Provisioner
from kube_cert_init.core.signing import SigningRequestClient

__all__ = [
    "Cluster",
    "Outcome",
    "ProvisionResult",
    "Provisioner",
    "SigningRequestClient",
]
